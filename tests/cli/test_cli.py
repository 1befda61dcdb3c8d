"""
Tests for the treefetch command line.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from treefetch.interfaces import config_file
from treefetch.interfaces.cli import app
from treefetch.infrastructure.error_handler import RateLimitExceededError
from treefetch.models import DownloadMode, DownloadResult, TransferStats


runner = CliRunner()


def make_result(mode=DownloadMode.DIRECTORY, completed=2, skipped=()):
    stats = TransferStats(expected_total=completed, completed=completed, is_traversal_done=True)
    result = DownloadResult(repository="acme/widgets@main", mode=mode, stats=stats,
                            skipped_entries=list(skipped))
    result.mark_completed()
    return result


@pytest.fixture(autouse=True)
def no_user_config(tmp_path, monkeypatch):
    monkeypatch.setattr(config_file, "DEFAULT_CONFIG_PATH", tmp_path / "absent.json")


@pytest.fixture
def mock_fetcher():
    with patch("treefetch.interfaces.cli.GitHubFetcher") as fetcher_cls:
        fetcher = fetcher_cls.from_options.return_value
        fetcher.fetch_options = AsyncMock(return_value=make_result())
        yield fetcher_cls


def passed_options(fetcher_cls):
    return fetcher_cls.from_options.call_args.args[0]


def test_success_prints_summary(mock_fetcher, tmp_path):
    result = runner.invoke(app, ["https://github.com/acme/widgets/tree/main/docs", "--out", str(tmp_path)])

    assert result.exit_code == 0
    assert "Downloaded 2 file(s) from acme/widgets@main" in result.output
    options = passed_options(mock_fetcher)
    assert options.url == "https://github.com/acme/widgets/tree/main/docs"
    assert options.out == tmp_path
    assert options.progress_callback is not None


def test_archive_summary(mock_fetcher):
    mock_fetcher.from_options.return_value.fetch_options.return_value = make_result(DownloadMode.ARCHIVE, 1)

    result = runner.invoke(app, ["https://github.com/acme/widgets"])

    assert result.exit_code == 0
    assert "archive of acme/widgets@main" in result.output


def test_options_are_forwarded(mock_fetcher):
    result = runner.invoke(app, [
        "https://github.com/acme/widgets/tree/main/docs",
        "--auth", "octocat:token",
        "--always-use-auth",
        "--timeout", "3000",
        "--file-name", "manual",
        "--root-directory", "false",
        "--force-per-file",
        "--verbose",
    ])

    assert result.exit_code == 0
    options = passed_options(mock_fetcher)
    assert options.auth == "octocat:token"
    assert options.always_use_auth is True
    assert options.timeout == 3000
    assert options.file_name == "manual"
    assert options.root_directory == "false"
    assert options.force_per_file is True
    assert options.verbose is True


def test_config_file_fills_missing_options(mock_fetcher, tmp_path):
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"auth": "cfg:secret", "timeout": 7000, "alwaysUseAuth": True}))

    result = runner.invoke(app, [
        "https://github.com/acme/widgets", "--config", str(cfg), "--timeout", "1000"
    ])

    assert result.exit_code == 0
    options = passed_options(mock_fetcher)
    assert options.auth == "cfg:secret"
    assert options.always_use_auth is True
    assert options.timeout == 1000


def test_bad_config_file_exits_non_zero(mock_fetcher, tmp_path):
    cfg = tmp_path / "cfg.json"
    cfg.write_text("{broken")

    result = runner.invoke(app, ["https://github.com/acme/widgets", "--config", str(cfg)])

    assert result.exit_code == 1
    assert "Cannot read config file" in result.output
    mock_fetcher.from_options.assert_not_called()


def test_fatal_error_prints_message_and_exits_non_zero(mock_fetcher):
    mock_fetcher.from_options.return_value.fetch_options.side_effect = RateLimitExceededError(
        "API rate limit exceeded."
    )

    result = runner.invoke(app, ["https://github.com/acme/widgets/tree/main/docs"])

    assert result.exit_code == 1
    assert "API rate limit exceeded." in result.output


def test_skipped_entries_are_listed(mock_fetcher):
    mock_fetcher.from_options.return_value.fetch_options.return_value = make_result(
        skipped=["lib/vendor"]
    )

    result = runner.invoke(app, ["https://github.com/acme/widgets/tree/main/lib"])

    assert result.exit_code == 0
    assert "Skipped lib/vendor" in result.output


def test_invalid_url_exits_non_zero(tmp_path):
    result = runner.invoke(app, ["https://example.com/acme/widgets", "--out", str(tmp_path)])

    assert result.exit_code == 1
    assert "Invalid URL" in result.output
