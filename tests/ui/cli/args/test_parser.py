"""Tests for command line argument parser."""

import logging
from argparse import Namespace
from pathlib import Path

import pytest

from catalogsync.platform.logging import SyncRichHandler, logger
from catalogsync.ui.cli.args import ArgumentParser, SyncArgs, WatchArgs


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    library = tmp_path / "library"
    library.mkdir()
    path = tmp_path / "config.toml"
    _ = path.write_text(
        "\n".join(
            [
                f'library_roots = ["{library}"]',
                f'log_file = "{tmp_path / "logs" / "catalogsync.log"}"',
                "sync_interval_seconds = 45",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    return path


def _console_level() -> int:
    (handler,) = [h for h in logger.handlers if isinstance(h, SyncRichHandler)]
    return handler.level


def test_create_parser() -> None:
    """Argument parser should expose both subcommands and their options."""

    parser = ArgumentParser.create_parser()

    sync_args: Namespace = parser.parse_args(["sync", "--full-rescan", "--verbose"])
    assert sync_args.command == "sync"
    assert sync_args.full_rescan and sync_args.verbose
    assert sync_args.config is None

    watch_args: Namespace = parser.parse_args(["watch", "--interval", "2.5", "--quiet"])
    assert watch_args.command == "watch"
    assert watch_args.interval == 2.5
    assert watch_args.quiet


def test_command_is_required() -> None:
    with pytest.raises(SystemExit):
        _ = ArgumentParser.create_parser().parse_args([])


def test_process_sync_args(config_file: Path, tmp_path: Path) -> None:
    args = ArgumentParser.process_args(["sync", "--config", str(config_file), "--full-rescan"])

    assert isinstance(args, SyncArgs)
    assert args.full_rescan
    assert args.config.library_roots == [tmp_path / "library"]
    assert _console_level() == logging.INFO
    assert (tmp_path / "logs" / "catalogsync.log").exists()


def test_process_watch_args_uses_configured_interval(config_file: Path) -> None:
    args = ArgumentParser.process_args(["watch", "--config", str(config_file), "--quiet"])

    assert isinstance(args, WatchArgs)
    assert args.interval == 45.0
    assert _console_level() == logging.ERROR


def test_explicit_interval_overrides_config(config_file: Path) -> None:
    args = ArgumentParser.process_args(
        ["watch", "--config", str(config_file), "--interval", "5", "--verbose"]
    )

    assert isinstance(args, WatchArgs)
    assert args.interval == 5.0
    assert _console_level() == logging.DEBUG


def test_non_positive_interval_exits(config_file: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _ = ArgumentParser.process_args(["watch", "--config", str(config_file), "--interval", "0"])

    assert excinfo.value.code == 1


def test_missing_config_writes_template_and_exits(tmp_path: Path) -> None:
    target = tmp_path / "fresh" / "config.toml"

    with pytest.raises(SystemExit) as excinfo:
        _ = ArgumentParser.process_args(["sync", "--config", str(target)])

    assert excinfo.value.code == 1
    assert target.exists()
