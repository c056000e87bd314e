"""Rich-based terminal report renderer with JSON support."""

from __future__ import annotations

import io
import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import OrgReport


def _format_number(n: int) -> str:
    return f"{n:,}"


def _write_to_file(content: str, output_file: str) -> None:
    """Write content to a file and print confirmation."""
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(content)
    Console().print(f"Saved to {output_file}")


def render_report(report: OrgReport, output_file: str | None = None) -> None:
    """Render an OrgReport to the terminal using rich."""
    if output_file:
        string_io = io.StringIO()
        console = Console(file=string_io, force_terminal=False, width=120)
    else:
        console = Console()

    org = report.organization
    console.print(Panel(
        Text(f"org-stats: {org.name or org.login}", justify="center"),
        style="bold cyan",
    ))

    info = Table(show_header=False, box=None, padding=(0, 2))
    info.add_column("label", style="dim")
    info.add_column("value")
    info.add_row("Name", org.name or "-")
    info.add_row("Description", org.description or "-")
    info.add_row("Link", org.blog or org.html_url or "-")
    console.print(info)
    console.print()

    if report.failed_pages:
        console.print(
            f"[bold yellow]Warning:[/bold yellow] Failed to fetch repository "
            f"page(s): {', '.join(str(p) for p in report.failed_pages)}"
        )
        console.print()

    if report.repos:
        console.print("[bold]Repositories[/bold]")
        repo_table = Table(show_header=True, header_style="bold")
        repo_table.add_column("Repository")
        repo_table.add_column("Open Issues", justify="right")
        repo_table.add_column("Issues", justify="right")
        repo_table.add_column("Commits", justify="right")
        for r in report.repos:
            repo_table.add_row(
                r.name,
                _format_number(r.open_issues),
                _format_number(r.issue_count),
                _format_number(r.commit_count),
            )
        console.print(repo_table)
        console.print()

    totals = report.totals
    console.print("[bold]Total[/bold]")
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="dim")
    summary.add_column("value", style="bold")
    summary.add_row("Repositories", _format_number(totals.total_repos))
    summary.add_row("Open Issues", _format_number(totals.total_open_issues))
    summary.add_row("Issues", _format_number(totals.total_issues))
    summary.add_row("Commits", _format_number(totals.total_commits))
    console.print(summary)

    if output_file:
        _write_to_file(string_io.getvalue(), output_file)


def report_to_dict(report: OrgReport) -> dict[str, Any]:
    org = report.organization
    return {
        "organization": {
            "login": org.login,
            "name": org.name,
            "description": org.description,
            "blog": org.blog,
            "html_url": org.html_url,
        },
        "repos": [
            {
                "name": r.name,
                "open_issues": r.open_issues,
                "issues": r.issue_count,
                "commits": r.commit_count,
                "unavailable": r.unavailable,
            }
            for r in report.repos
        ],
        "totals": {
            "repos": report.totals.total_repos,
            "open_issues": report.totals.total_open_issues,
            "issues": report.totals.total_issues,
            "commits": report.totals.total_commits,
        },
        "failed_pages": report.failed_pages,
    }


def render_json(report: OrgReport, output_file: str | None = None) -> None:
    """Render an OrgReport as JSON."""
    content = json.dumps(report_to_dict(report), indent=2, ensure_ascii=False)
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content)
