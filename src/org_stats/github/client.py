"""GitHub REST API client."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from .pagination import parse_link_header, resolve_page_count

logger = logging.getLogger(__name__)

BASE_URL = "https://api.github.com"
MAX_PAGE_SIZE = 100


class OrgStatsError(Exception):
    """Base class for errors raised by org-stats."""


class OrganizationNotFound(OrgStatsError):
    """Raised when the organization does not exist or the name is malformed."""

    def __init__(self, org: str) -> None:
        super().__init__(f"organization '{org}' not found")
        self.org = org


@dataclass
class RepositoryPages:
    """Raw repository listing pages of an organization."""

    pages: list[list[dict[str, Any]]] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)
    total_pages: int = 1


class GitHubClient:
    """Async GitHub REST API client with a bounded number of in-flight requests."""

    def __init__(
        self,
        token: str | None = None,
        concurrency: int = 10,
        base_url: str | None = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url or BASE_URL,
            headers=headers,
            timeout=timeout,
            verify=verify_ssl,
            follow_redirects=True,
        )
        self._semaphore = asyncio.Semaphore(concurrency)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def _get(
        self, url: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        async with self._semaphore:
            logger.debug("GET %s %s", url, params or "")
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            return response

    async def get_organization(self, org: str) -> dict[str, Any]:
        """Fetch organization metadata."""
        if not org:
            raise OrganizationNotFound(org)
        try:
            response = await self._get(f"/orgs/{org}")
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                raise OrganizationNotFound(org) from exc
            raise
        data = response.json()
        if not isinstance(data, dict) or "login" not in data:
            raise OrganizationNotFound(org)
        return data

    async def _get_repository_page(
        self, org: str, page: int, page_size: int
    ) -> list[dict[str, Any]]:
        response = await self._get(
            f"/orgs/{org}/repos", params={"per_page": page_size, "page": page}
        )
        data = response.json()
        return data if isinstance(data, list) else []

    async def fetch_repository_pages(
        self, org: str, page_size: int = MAX_PAGE_SIZE
    ) -> RepositoryPages:
        """Fetch every page of the organization's repository listing.

        Page 1 is fetched first and its ``Link`` header gives the page
        count; the remaining pages are then requested concurrently. A page
        that fails contributes an empty page instead of aborting the batch.
        """
        page_size = max(1, min(page_size, MAX_PAGE_SIZE))
        result = RepositoryPages()

        try:
            response = await self._get(
                f"/orgs/{org}/repos", params={"per_page": page_size, "page": 1}
            )
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("%s: failed to fetch repository page 1: %s", org, exc)
            result.pages.append([])
            result.failed.append(1)
            return result

        result.pages.append(data if isinstance(data, list) else [])
        result.total_pages = max(resolve_page_count(response.headers.get("Link")), 1)
        if result.total_pages == 1:
            return result

        async def fetch_page(page: int) -> list[dict[str, Any]]:
            try:
                return await self._get_repository_page(org, page, page_size)
            # ValueError covers a 2xx body that is not valid JSON
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning(
                    "%s: failed to fetch repository page %d: %s", org, page, exc
                )
                result.failed.append(page)
                return []

        pages = await asyncio.gather(
            *(fetch_page(p) for p in range(2, result.total_pages + 1))
        )
        result.pages.extend(pages)
        return result

    async def get_latest_issue_number(self, owner: str, repo: str) -> int:
        """Number of the newest open issue or pull request, or 0 if there are none.

        Issue numbers are assigned sequentially, so the first element of the
        listing sorted by creation date descending carries the count.
        """
        response = await self._get(
            f"/repos/{owner}/{repo}/issues",
            params={
                "state": "open",
                "sort": "created",
                "direction": "desc",
                "per_page": 1,
            },
        )
        data = response.json()
        if isinstance(data, list) and data:
            return int(data[0].get("number", 0))
        return 0

    async def count_commits(self, owner: str, repo: str) -> int | None:
        """Count commits on the default branch from a one-per-page listing.

        Returns None when a ``Link`` header is present but has no usable
        ``last`` relation.
        """
        try:
            response = await self._get(
                f"/repos/{owner}/{repo}/commits", params={"per_page": 1}
            )
        except httpx.HTTPStatusError as exc:
            # empty repository
            if exc.response.status_code == 409:
                return 0
            raise

        link_header = response.headers.get("Link")
        if not link_header:
            data = response.json()
            return len(data) if isinstance(data, list) else 0

        count = resolve_page_count(link_header)
        if count:
            return count
        logger.debug(
            "%s/%s: no last relation in Link header: %s",
            owner,
            repo,
            sorted(parse_link_header(link_header)),
        )
        return None
