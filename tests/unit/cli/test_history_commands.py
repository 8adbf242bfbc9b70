"""
Tests for the import and summary commands.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from viewtrail.cli.errors import EXIT_NO_RECORDS, EXIT_USER_ERROR
from viewtrail.cli.main import app
from viewtrail.storage.history_store import HistoryStore

pytestmark = pytest.mark.unit


class TestImportCommand:
    """Tests for 'viewtrail import'."""

    def test_import_sample(
        self, runner: CliRunner, sample_takeout_file: Path, history_path: Path
    ) -> None:
        """Importing a Takeout file stores its records."""
        result = runner.invoke(app, ["import", str(sample_takeout_file), "-f", str(history_path)])

        assert result.exit_code == 0, result.output
        assert "Import complete" in result.stdout
        stored = HistoryStore(history_path).load()
        assert len(stored.records) == 4
        assert stored.imports[0].source_filename == "watch-history.html"
        assert stored.imports[0].records_added == 4

    def test_reimport_adds_nothing(
        self, runner: CliRunner, sample_takeout_file: Path, history_path: Path
    ) -> None:
        """A second import of the same file is a no-op for records."""
        args = ["import", str(sample_takeout_file), "-f", str(history_path)]
        runner.invoke(app, args)
        result = runner.invoke(app, args)

        assert result.exit_code == 0, result.output
        stored = HistoryStore(history_path).load()
        assert len(stored.records) == 4
        assert [m.records_added for m in stored.imports] == [4, 0]

    def test_dry_run(
        self, runner: CliRunner, sample_takeout_file: Path, history_path: Path
    ) -> None:
        """Dry runs do not write the history."""
        result = runner.invoke(
            app, ["import", str(sample_takeout_file), "-f", str(history_path), "--dry-run"]
        )
        assert result.exit_code == 0, result.output
        assert "Dry run" in result.stdout
        assert not history_path.exists()

    def test_no_records(self, runner: CliRunner, tmp_path: Path, history_path: Path) -> None:
        """An HTML file without watch history exits with the no-records code."""
        page = tmp_path / "notes.html"
        page.write_text("<html><body><p>Shopping list</p></body></html>", encoding="utf-8")
        result = runner.invoke(app, ["import", str(page), "-f", str(history_path)])

        assert result.exit_code == EXIT_NO_RECORDS
        assert "No Records" in result.stdout
        assert not history_path.exists()

    def test_not_html(self, runner: CliRunner, tmp_path: Path, history_path: Path) -> None:
        """Undecodable input exits with a parse error."""
        blob = tmp_path / "watch-history.html"
        blob.write_bytes(b"\xff\xfe\x00\x01")
        result = runner.invoke(app, ["import", str(blob), "-f", str(history_path)])
        assert result.exit_code == EXIT_USER_ERROR

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """A missing input file is a usage error."""
        result = runner.invoke(app, ["import", str(tmp_path / "nope.html")])
        assert result.exit_code != 0


class TestSummaryCommand:
    """Tests for 'viewtrail summary'."""

    def test_summary_after_import(
        self, runner: CliRunner, sample_takeout_file: Path, history_path: Path
    ) -> None:
        """The summary reflects the stored history."""
        runner.invoke(app, ["import", str(sample_takeout_file), "-f", str(history_path)])
        result = runner.invoke(app, ["summary", "-f", str(history_path)])

        assert result.exit_code == 0, result.output
        assert "Stored watch history" in result.stdout
        assert "1 imports recorded" in result.stdout

    def test_summary_without_history(self, runner: CliRunner, history_path: Path) -> None:
        """An empty store says so."""
        result = runner.invoke(app, ["summary", "-f", str(history_path)])
        assert result.exit_code == 0
        assert "No watch history stored" in result.stdout

    def test_summary_corrupt_history(self, runner: CliRunner, history_path: Path) -> None:
        """A corrupt history file is a storage error."""
        history_path.parent.mkdir(parents=True)
        history_path.write_text("not json", encoding="utf-8")
        result = runner.invoke(app, ["summary", "-f", str(history_path)])
        assert result.exit_code == EXIT_USER_ERROR
        assert "Storage" in result.stdout
