"""Tests for data models."""

import dataclasses

import pytest

from org_stats.models import (
    AggregateTotals,
    Organization,
    RepositoryRef,
    RepositoryStats,
    Resolved,
    Unavailable,
    fold_totals,
    metric_value,
)


def test_organization_from_api():
    org = Organization.from_api(
        {
            "login": "acme",
            "name": "Acme Corp",
            "description": "Widgets",
            "blog": "https://acme.dev",
            "html_url": "https://github.com/acme",
            "public_repos": 12,
        }
    )
    assert org.login == "acme"
    assert org.name == "Acme Corp"
    assert org.blog == "https://acme.dev"


def test_organization_from_api_missing_fields():
    org = Organization.from_api({"login": "acme"})
    assert org.name is None
    assert org.description is None


def test_repository_ref_from_api():
    ref = RepositoryRef.from_api({"name": "widgets", "open_issues_count": 4})
    assert ref == RepositoryRef("widgets", 4)
    assert RepositoryRef.from_api({"name": "x", "open_issues_count": None}).open_issues == 0


def test_metric_value_policy():
    assert metric_value(Resolved(5)) == 5
    assert metric_value(Unavailable("timeout")) == 0


def test_repository_stats_is_immutable():
    stats = RepositoryStats("r", Resolved(1), Resolved(2))
    with pytest.raises(dataclasses.FrozenInstanceError):
        stats.name = "other"


def test_fold_totals():
    stats = [
        RepositoryStats("a", Resolved(42), Resolved(88), open_issues=3),
        RepositoryStats("b", Resolved(7), Unavailable("connection refused"), open_issues=1),
        RepositoryStats("c", Unavailable("502"), Resolved(10)),
    ]
    assert fold_totals(stats) == AggregateTotals(
        total_repos=3, total_issues=49, total_commits=98, total_open_issues=4
    )


def test_fold_totals_empty():
    assert fold_totals([]) == AggregateTotals()
