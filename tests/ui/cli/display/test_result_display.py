"""Tests for the run summary display."""

from io import StringIO

from rich.console import Console

from catalogsync.features.sync.usecases import RunResult, RunStatus
from catalogsync.ui.cli.display import ResultDisplay


def _display() -> tuple[ResultDisplay, StringIO]:
    buffer = StringIO()
    return ResultDisplay(Console(file=buffer, width=120, color_system=None)), buffer


def test_shows_counts_and_duration() -> None:
    display, buffer = _display()
    result = RunResult(
        status=RunStatus.SUCCEEDED,
        added=3,
        updated=2,
        removed=1,
        art_added=1,
        started_at=10.0,
        finished_at=12.5,
    )

    display.show_result(result)

    output = buffer.getvalue()
    assert "Sync succeeded" in output
    assert "Added" in output and "3" in output
    assert "Duration: 2.50s" in output


def test_quiet_hides_successful_runs() -> None:
    display, buffer = _display()

    display.show_result(RunResult(status=RunStatus.SUCCEEDED), quiet=True)

    assert buffer.getvalue() == ""


def test_failed_run_is_shown_even_when_quiet() -> None:
    display, buffer = _display()
    result = RunResult(status=RunStatus.FAILED, error=RuntimeError("catalog [locked]"))

    display.show_result(result, quiet=True)

    output = buffer.getvalue()
    assert "Sync failed" in output
    assert "catalog [locked]" in output


def test_warning_preview_is_truncated() -> None:
    display, buffer = _display()
    warnings = [f"Skipped /music/{index}.mp3: bad header" for index in range(12)]

    display.show_result(RunResult(status=RunStatus.SUCCEEDED, skipped=12, warnings=warnings))

    output = buffer.getvalue()
    assert "Warnings: 12" in output
    assert "/music/9.mp3" in output
    assert "/music/10.mp3" not in output
    assert "...and 2 more." in output
