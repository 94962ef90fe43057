"""Logger configuration bootstrap.

Where: platform/logging/config.py
What: Configure handlers for the shared application logger.
Why: Separate handler formatting from setup so configuration stays concise.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Final

from rich.console import Console

from catalogsync.config.paths import default_log_file
from catalogsync.platform.filesystem import ensure_parent_directory

from .handlers import SyncRichHandler

LOGGER_NAME: Final[str] = "catalogsync"
DEFAULT_LOG_FILE: Final[Path] = default_log_file()


def setup_logger(
    log_file: Path | None = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    console: Console | None = None,
) -> logging.Logger:
    """Set up and configure the application logger.

    Calling this again replaces the previously installed handlers.

    Args:
        log_file: Path to the log file. If None, only console logging is enabled.
        console_level: Logging level for console output. Defaults to INFO.
        file_level: Logging level for file output. Defaults to DEBUG.
        console: Rich console to render to. A stderr console is created when omitted.

    Returns:
        logging.Logger: Configured logger instance.
    """
    configured = logging.getLogger(LOGGER_NAME)
    configured.setLevel(logging.DEBUG)

    for handler in list(configured.handlers):
        handler.close()
    configured.handlers.clear()

    file_formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console_handler = SyncRichHandler(console=console or Console(stderr=True, soft_wrap=True))
    console_handler.setLevel(console_level)
    configured.addHandler(console_handler)

    if log_file is not None:
        resolved_log_file = ensure_parent_directory(Path(log_file).expanduser().resolve())

        file_handler = logging.handlers.RotatingFileHandler(
            resolved_log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(file_formatter)
        configured.addHandler(file_handler)

    return configured


# Handlers are installed by ``setup_logger``; importing this module only names the logger.
logger: Final[logging.Logger] = logging.getLogger(LOGGER_NAME)


__all__ = ["DEFAULT_LOG_FILE", "LOGGER_NAME", "logger", "setup_logger"]
