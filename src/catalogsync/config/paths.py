"""Default on-disk locations for the synchronizer.

Everything lives beside the checkout so a clone is self-contained:

- ``config/config.toml`` holds the user configuration.
- ``.data/`` holds the catalog database and artwork renditions. Set
  ``CATALOGSYNC_DATA_DIR`` to move it, e.g. onto a larger volume.
- ``logs/`` holds the rotating log file.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Callable, Final

_ENV_DATA_DIR: Final[str] = "CATALOGSYNC_DATA_DIR"
_ROOT_MARKERS: Final[tuple[str, ...]] = ("pyproject.toml", ".git")


def resolve_overridable_path(
    *,
    explicit_path: Path | str | None,
    env: Mapping[str, str] | None,
    env_var: str | None,
    default_factory: Callable[[], Path],
) -> Path:
    """Pick the explicit path, then a non-blank environment value, then the default."""

    if explicit_path is not None:
        chosen = Path(explicit_path)
    else:
        source = os.environ if env is None else env
        raw = source.get(env_var, "").strip() if env_var else ""
        chosen = Path(raw) if raw else default_factory()
    return chosen.expanduser().resolve()


def _detect_repo_root(start: Path | None = None) -> Path:
    """Return the nearest ancestor carrying a project marker, else the working directory."""

    origin = (start or Path(__file__).resolve()).parent
    return next(
        (
            candidate
            for candidate in (origin, *origin.parents)
            if any((candidate / marker).exists() for marker in _ROOT_MARKERS)
        ),
        Path.cwd(),
    )


def _under_repo(*parts: str) -> Path:
    return _detect_repo_root().joinpath(*parts).resolve()


def default_config_path() -> Path:
    return _under_repo("config", "config.toml")


def default_data_dir(env: Mapping[str, str] | None = None) -> Path:
    """Directory holding the catalog database and renditions."""

    return resolve_overridable_path(
        explicit_path=None,
        env=env,
        env_var=_ENV_DATA_DIR,
        default_factory=lambda: _under_repo(".data"),
    )


def default_database_path() -> Path:
    return default_data_dir() / "catalog.db"


def default_artwork_dir() -> Path:
    return default_data_dir() / "artwork"


def default_log_dir() -> Path:
    return _under_repo("logs")


def default_log_file() -> Path:
    return default_log_dir() / "catalogsync.log"


__all__ = [
    "default_artwork_dir",
    "default_config_path",
    "default_data_dir",
    "default_database_path",
    "default_log_dir",
    "default_log_file",
    "resolve_overridable_path",
]
