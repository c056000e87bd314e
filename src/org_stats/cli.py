"""CLI entrypoint for org-stats."""

from __future__ import annotations

import asyncio
import logging
import sys

import click
import httpx
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .github.client import OrganizationNotFound


def _parse_org(value: str) -> str:
    """Accept a bare login or a URL ending in it (https://github.com/myorg/)."""
    return value.strip().rstrip("/").split("/")[-1]


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@click.command()
@click.argument("organization")
@click.option(
    "--token",
    envvar="GITHUB_TOKEN",
    default=None,
    show_envvar=True,
    help="GitHub personal access token (unauthenticated if omitted)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    show_default=True,
    help="Output format",
)
@click.option(
    "--page-size",
    type=click.IntRange(1, 100),
    default=100,
    show_default=True,
    help="Repositories per listing page",
)
@click.option(
    "--concurrency",
    type=click.IntRange(min=1),
    default=10,
    show_default=True,
    help="Maximum number of in-flight requests",
)
@click.option(
    "--timeout",
    type=float,
    default=30.0,
    show_default=True,
    help="HTTP timeout in seconds",
)
@click.option(
    "--exclude-repo",
    multiple=True,
    help="Exclude repo by name (repeatable)",
)
@click.option(
    "--output",
    "output_file",
    default=None,
    type=click.Path(),
    help="Save output to file instead of stdout",
)
@click.option(
    "--api-url",
    envvar="GITHUB_API_URL",
    default=None,
    help="GitHub Enterprise API base URL",
)
@click.option(
    "--no-ssl-verify",
    is_flag=True,
    default=False,
    help="Disable SSL verification (self-signed certs)",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Debug logging")
@click.version_option(version=__version__)
def main(
    organization: str,
    token: str | None,
    output_format: str,
    page_size: int,
    concurrency: int,
    timeout: float,
    exclude_repo: tuple[str, ...],
    output_file: str | None,
    api_url: str | None,
    no_ssl_verify: bool,
    verbose: bool,
) -> None:
    """Show issue and commit totals for every repository of an organization.

    \b
    ORGANIZATION can be:
      - An org name:   org-stats myorg
      - An org URL:    org-stats https://github.com/myorg

    \b
    Examples:
      org-stats myorg --token $GITHUB_TOKEN
      org-stats myorg --format json --output report.json
      org-stats myorg --concurrency 4 --exclude-repo archive
    """
    _setup_logging(verbose)
    org = _parse_org(organization)

    from .orchestrator import run

    try:
        asyncio.run(
            run(
                org=org,
                token=token or None,
                output_format=output_format,
                page_size=page_size,
                concurrency=concurrency,
                timeout=timeout,
                exclude_repos=list(exclude_repo),
                output_file=output_file,
                api_url=api_url,
                verify_ssl=not no_ssl_verify,
                progress=output_format == "table",
            )
        )
    except OrganizationNotFound:
        click.echo(f"Error: organization '{organization}' not found.", err=True)
        sys.exit(1)
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        if status in (401, 403):
            click.echo(
                "Error: Authentication failed or rate limit exceeded. "
                "Check your --token or $GITHUB_TOKEN.",
                err=True,
            )
        else:
            click.echo(f"Error: GitHub API returned {status}.", err=True)
        sys.exit(1)
    except (httpx.ConnectError, httpx.ConnectTimeout) as exc:
        click.echo(f"Error: Could not connect to GitHub API. {exc}", err=True)
        sys.exit(1)
    except Exception as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
