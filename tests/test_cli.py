"""Tests for the CLI entrypoint."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from click.testing import CliRunner

from org_stats import __version__
from org_stats.cli import _parse_org, main
from org_stats.github.client import OrganizationNotFound


@pytest.mark.parametrize(
    "value, expected",
    [
        ("acme", "acme"),
        ("https://github.com/acme", "acme"),
        ("https://github.com/acme/", "acme"),
        ("  acme  ", "acme"),
    ],
)
def test_parse_org(value, expected):
    assert _parse_org(value) == expected


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_main_passes_options():
    run = AsyncMock()
    with patch("org_stats.orchestrator.run", run):
        result = CliRunner().invoke(
            main,
            [
                "https://github.com/acme",
                "--token", "secret",
                "--format", "json",
                "--concurrency", "4",
                "--exclude-repo", "old",
            ],
            env={"GITHUB_TOKEN": None},
        )
    assert result.exit_code == 0, result.output
    kwargs = run.call_args.kwargs
    assert kwargs["org"] == "acme"
    assert kwargs["token"] == "secret"
    assert kwargs["output_format"] == "json"
    assert kwargs["concurrency"] == 4
    assert kwargs["exclude_repos"] == ["old"]
    assert kwargs["progress"] is False


def test_main_token_optional():
    run = AsyncMock()
    with patch("org_stats.orchestrator.run", run):
        result = CliRunner().invoke(main, ["acme"], env={"GITHUB_TOKEN": None})
    assert result.exit_code == 0, result.output
    assert run.call_args.kwargs["token"] is None


def test_main_token_from_env():
    run = AsyncMock()
    with patch("org_stats.orchestrator.run", run):
        result = CliRunner().invoke(main, ["acme"], env={"GITHUB_TOKEN": "from-env"})
    assert result.exit_code == 0, result.output
    assert run.call_args.kwargs["token"] == "from-env"


def test_main_rejects_page_size_over_100():
    result = CliRunner().invoke(main, ["acme", "--page-size", "101"])
    assert result.exit_code != 0


def test_main_organization_not_found():
    run = AsyncMock(side_effect=OrganizationNotFound("ghost"))
    with patch("org_stats.orchestrator.run", run):
        result = CliRunner().invoke(main, ["ghost"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_main_auth_failure():
    resp = MagicMock(spec=httpx.Response)
    resp.status_code = 401
    error = httpx.HTTPStatusError("401", request=MagicMock(), response=resp)
    with patch("org_stats.orchestrator.run", AsyncMock(side_effect=error)):
        result = CliRunner().invoke(main, ["acme"])
    assert result.exit_code == 1
    assert "Authentication failed" in result.output


def test_main_connect_error():
    error = httpx.ConnectError("name resolution failed")
    with patch("org_stats.orchestrator.run", AsyncMock(side_effect=error)):
        result = CliRunner().invoke(main, ["acme"])
    assert result.exit_code == 1
    assert "Could not connect" in result.output


def test_main_read_timeout():
    error = httpx.ReadTimeout("timed out")
    with patch("org_stats.orchestrator.run", AsyncMock(side_effect=error)):
        result = CliRunner().invoke(main, ["acme"])
    assert result.exit_code == 1
    assert "Error: timed out" in result.output
    assert "Traceback" not in result.output
