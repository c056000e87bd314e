"""Data models for org-stats."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Union


@dataclass(frozen=True)
class Organization:
    login: str
    name: str | None = None
    description: str | None = None
    blog: str | None = None
    html_url: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Organization:
        return cls(
            login=data["login"],
            name=data.get("name"),
            description=data.get("description"),
            blog=data.get("blog"),
            html_url=data.get("html_url"),
        )


@dataclass(frozen=True)
class RepositoryRef:
    name: str
    open_issues: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> RepositoryRef:
        return cls(name=data["name"], open_issues=data.get("open_issues_count") or 0)


@dataclass(frozen=True)
class Resolved:
    """A metric whose value was inferred from the API."""

    value: int


@dataclass(frozen=True)
class Unavailable:
    """A metric that could not be inferred; counts as 0 in totals."""

    reason: str


Metric = Union[Resolved, Unavailable]


def metric_value(metric: Metric) -> int:
    """Apply the totals policy: resolved values count, unavailable ones are 0."""
    if isinstance(metric, Resolved):
        return metric.value
    return 0


@dataclass(frozen=True)
class RepositoryStats:
    name: str
    issues: Metric
    commits: Metric
    open_issues: int = 0

    @property
    def issue_count(self) -> int:
        return metric_value(self.issues)

    @property
    def commit_count(self) -> int:
        return metric_value(self.commits)

    @property
    def unavailable(self) -> list[str]:
        """Names of the metrics that could not be resolved."""
        missing = []
        if isinstance(self.issues, Unavailable):
            missing.append("issues")
        if isinstance(self.commits, Unavailable):
            missing.append("commits")
        return missing


@dataclass(frozen=True)
class AggregateTotals:
    total_repos: int = 0
    total_issues: int = 0
    total_commits: int = 0
    total_open_issues: int = 0


def fold_totals(stats: Iterable[RepositoryStats]) -> AggregateTotals:
    """Sum per-repository results into organization-wide totals."""
    stats = list(stats)
    return AggregateTotals(
        total_repos=len(stats),
        total_issues=sum(s.issue_count for s in stats),
        total_commits=sum(s.commit_count for s in stats),
        total_open_issues=sum(s.open_issues for s in stats),
    )


@dataclass
class OrgReport:
    organization: Organization
    totals: AggregateTotals
    repos: list[RepositoryStats] = field(default_factory=list)
    failed_pages: list[int] = field(default_factory=list)
