"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from PIL import Image

from catalogsync.features.catalog.adapters import SqliteCatalogStore
from catalogsync.platform.db.db_manager import DatabaseManager
from catalogsync.platform.logging import logger


@pytest.fixture
def repo_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Force the portable repo root to a temporary directory for isolation."""

    _ = (tmp_path / "pyproject.toml").write_text("[project]\nname='tmp'\n")

    import catalogsync.config.paths as paths

    def _fake_detect_repo_root(_start: Path | None = None) -> Path:
        return tmp_path

    monkeypatch.setattr(paths, "_detect_repo_root", _fake_detect_repo_root, raising=True)
    monkeypatch.delenv("CATALOGSYNC_DATA_DIR", raising=False)
    return tmp_path


@pytest.fixture
def db_manager() -> Iterator[DatabaseManager]:
    """Create a database manager with an in-memory database."""

    manager = DatabaseManager(":memory:")
    _ = manager.connect()
    yield manager
    manager.close()


@pytest.fixture
def catalog(db_manager: DatabaseManager) -> SqliteCatalogStore:
    assert db_manager.conn is not None
    return SqliteCatalogStore(db_manager.conn)


@pytest.fixture(autouse=True)
def _reset_logger_handlers() -> Iterator[None]:
    """Drop handlers installed by ``setup_logger`` so log files are closed between tests."""

    yield
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


ImageWriter = Callable[..., Path]


@pytest.fixture
def write_image() -> ImageWriter:
    """Return a helper writing a solid-colour image for artwork tests."""

    def _write(path: Path, width: int, height: int, color: str = "red", fmt: str = "JPEG") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", (width, height), color).save(path, fmt)
        return path

    return _write
