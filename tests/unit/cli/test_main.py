"""
Tests for CLI main functionality.
"""

from __future__ import annotations

from typer.testing import CliRunner

from viewtrail import __version__
from viewtrail.cli.main import app


def test_cli_version(runner: CliRunner) -> None:
    """Test version flag."""
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"viewtrail v{__version__}" in result.stdout


def test_cli_help(runner: CliRunner) -> None:
    """Test help command."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "YouTube watch history analytics" in result.stdout


def test_cli_version_command(runner: CliRunner) -> None:
    """Test explicit version command."""
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "viewtrail" in result.stdout
    assert "Version" in result.stdout


def test_cli_no_subcommand_shows_help(runner: CliRunner) -> None:
    """Test that no args shows help due to no_args_is_help=True."""
    result = runner.invoke(app, [])
    # Exit code varies by typer version
    assert "YouTube watch history analytics" in result.stdout


def test_cli_invalid_subcommand(runner: CliRunner) -> None:
    """Test an unknown subcommand is rejected."""
    result = runner.invoke(app, ["invalid-command"])
    assert result.exit_code != 0


def test_analytics_help_lists_commands(runner: CliRunner) -> None:
    """Test analytics group lists its commands."""
    result = runner.invoke(app, ["analytics", "--help"])
    assert result.exit_code == 0
    for command in ("kpis", "trend", "channels", "topics", "sessions"):
        assert command in result.stdout
