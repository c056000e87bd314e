"""Orchestrator: wires together client, aggregator, and renderer."""

from __future__ import annotations

from .aggregator import aggregate_org_report
from .github.client import GitHubClient
from .models import OrgReport
from .renderer import render_json, render_report


async def run(
    org: str,
    token: str | None = None,
    output_format: str = "table",
    page_size: int = 100,
    concurrency: int = 10,
    timeout: float = 30.0,
    exclude_repos: list[str] | None = None,
    output_file: str | None = None,
    api_url: str | None = None,
    verify_ssl: bool = True,
    progress: bool = True,
) -> OrgReport:
    """Main pipeline: fetch data, aggregate, render."""
    async with GitHubClient(
        token=token,
        concurrency=concurrency,
        base_url=api_url,
        timeout=timeout,
        verify_ssl=verify_ssl,
    ) as client:
        report = await aggregate_org_report(
            client,
            org,
            page_size=page_size,
            exclude_repos=exclude_repos,
            progress=progress,
        )

    if output_format == "json":
        render_json(report, output_file=output_file)
    else:
        render_report(report, output_file=output_file)
    return report
