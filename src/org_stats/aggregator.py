"""Data aggregation: resolve per-repo stats and produce an OrgReport."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from rich.progress import Progress, SpinnerColumn, TextColumn

from .github.client import GitHubClient, RepositoryPages
from .models import (
    Metric,
    Organization,
    OrgReport,
    RepositoryRef,
    RepositoryStats,
    Resolved,
    Unavailable,
    fold_totals,
)

logger = logging.getLogger(__name__)


def flatten_repositories(pages: RepositoryPages) -> list[RepositoryRef]:
    """Flatten raw listing pages into repository references."""
    repos: list[RepositoryRef] = []
    for page in pages.pages:
        for data in page:
            if isinstance(data, dict) and data.get("name"):
                repos.append(RepositoryRef.from_api(data))
    return repos


def _to_metric(
    result: Any, label: str, owner: str, repo_name: str
) -> Metric:
    if isinstance(result, BaseException):
        logger.warning("%s/%s: error fetching %s: %s", owner, repo_name, label, result)
        return Unavailable(f"{type(result).__name__}: {result}")
    if result is None:
        logger.warning(
            "%s/%s: %s count not inferable from pagination", owner, repo_name, label
        )
        return Unavailable("missing last relation in Link header")
    return Resolved(result)


async def resolve_repo_stats(
    client: GitHubClient, owner: str, repo: RepositoryRef
) -> RepositoryStats:
    """Resolve issue and commit counts for a single repository."""
    issues, commits = await asyncio.gather(
        client.get_latest_issue_number(owner, repo.name),
        client.count_commits(owner, repo.name),
        return_exceptions=True,
    )
    return RepositoryStats(
        name=repo.name,
        issues=_to_metric(issues, "issues", owner, repo.name),
        commits=_to_metric(commits, "commits", owner, repo.name),
        open_issues=repo.open_issues,
    )


async def _resolve_all(
    client: GitHubClient,
    owner: str,
    repos: list[RepositoryRef],
    progress: Progress | None,
) -> list[RepositoryStats]:
    task = None
    if progress is not None:
        task = progress.add_task(
            f"Collecting stats for {len(repos)} repos...", total=len(repos)
        )

    async def resolve_and_update(repo: RepositoryRef) -> RepositoryStats:
        try:
            return await resolve_repo_stats(client, owner, repo)
        finally:
            if progress is not None and task is not None:
                progress.advance(task)

    return list(await asyncio.gather(*(resolve_and_update(r) for r in repos)))


async def aggregate_org_report(
    client: GitHubClient,
    org: str,
    page_size: int = 100,
    exclude_repos: list[str] | None = None,
    progress: bool = True,
) -> OrgReport:
    """Aggregate issue and commit totals for all repos in an organization."""
    organization = Organization.from_api(await client.get_organization(org))
    owner = organization.login

    pages = await client.fetch_repository_pages(owner, page_size=page_size)
    repos = flatten_repositories(pages)
    logger.info(
        "%s: %d repositories across %d page(s)", owner, len(repos), pages.total_pages
    )

    if exclude_repos:
        excluded = set(exclude_repos)
        repos = [r for r in repos if r.name not in excluded]

    if progress:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as bar:
            repo_stats = await _resolve_all(client, owner, repos, bar)
    else:
        repo_stats = await _resolve_all(client, owner, repos, None)

    return OrgReport(
        organization=organization,
        totals=fold_totals(repo_stats),
        repos=repo_stats,
        failed_pages=sorted(pages.failed),
    )
