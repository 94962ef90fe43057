"""Configuration management for catalogsync."""

import tomllib
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Final

from catalogsync.config.paths import (
    default_artwork_dir,
    default_config_path,
    default_database_path,
)
from catalogsync.features.artwork.usecases.rendition_ladder import RENDITION_EXTENSIONS
from catalogsync.platform.filesystem import ensure_parent_directory
from catalogsync.platform.logging import logger
from catalogsync.shared.errors import ConfigError

DEFAULT_MIME_TYPES: Final[dict[str, str]] = {
    "mp3": "audio/mpeg",
    "flac": "audio/flac",
    "m4a": "audio/mp4",
    "ogg": "audio/ogg",
    "opus": "audio/ogg",
    "dsf": "audio/x-dsf",
}
DEFAULT_ARTWORK_FILE_NAMES: Final[tuple[str, ...]] = (
    "cover.jpg",
    "cover.png",
    "folder.jpg",
    "folder.png",
    "front.jpg",
    "album.jpg",
)
DEFAULT_THUMBNAIL_SIZES: Final[tuple[int, ...]] = (192, 384)
BATCH_SIZE_DEFAULT: Final[int] = 2048
SYNC_INTERVAL_SECONDS_DEFAULT: Final[int] = 120
RENDITION_FORMATS: Final[dict[str, str]] = RENDITION_EXTENSIONS


def _path_field(default: Path | None = None) -> Any:
    """Create a field for Path objects with proper conversion.

    Args:
        default: Default value for the field.

    Returns:
        Field with proper metadata for path handling.
    """
    return field(default=default, metadata={"path": True})


def normalize_extension(extension: str) -> str:
    """Trim leading dots and lower-case a configured file extension."""

    return extension.strip().lstrip(".").lower()


@dataclass
class Config:
    """Application configuration."""

    # Absolute library root directories
    library_roots: list[Path] = field(default_factory=list)

    # Extension (without dot) -> MIME type; the keys double as the scan patterns
    mime_types: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_MIME_TYPES))

    # Candidate artwork names, first match wins per directory
    artwork_file_names: list[str] = field(default_factory=lambda: list(DEFAULT_ARTWORK_FILE_NAMES))

    # Ascending rendition ladder (long edge in pixels)
    thumbnail_sizes: list[int] = field(default_factory=lambda: list(DEFAULT_THUMBNAIL_SIZES))

    artwork_dir: Path | None = _path_field()
    database_path: Path | None = _path_field()
    log_file: Path | None = _path_field()

    batch_size: int = BATCH_SIZE_DEFAULT
    rendition_format: str = "jpeg"
    sync_interval_seconds: int = SYNC_INTERVAL_SECONDS_DEFAULT
    watermark_grace_seconds: float = 0.0

    def __post_init__(self) -> None:
        """Convert string paths to ``Path`` objects and normalise extensions.

        Only fields flagged with ``metadata={"path": True}`` are converted, so
        plain string settings are left alone.
        """
        for f in fields(self):
            if not f.metadata.get("path", False):
                continue
            value = getattr(self, f.name)
            if isinstance(value, str):
                setattr(self, f.name, Path(value).expanduser() if value else None)

        self.library_roots = [Path(root).expanduser() for root in self.library_roots]
        self.mime_types = {
            normalize_extension(extension): mime_type
            for extension, mime_type in self.mime_types.items()
        }
        self.rendition_format = self.rendition_format.lower()

    @property
    def extensions(self) -> frozenset[str]:
        """Recognised file suffixes including the leading dot (``.mp3``)."""

        return frozenset(f".{extension}" for extension in self.mime_types)

    @property
    def rendition_extension(self) -> str:
        return RENDITION_FORMATS[self.rendition_format]

    def resolved_artwork_dir(self) -> Path:
        return self.artwork_dir if self.artwork_dir is not None else default_artwork_dir()

    def resolved_database_path(self) -> Path:
        return self.database_path if self.database_path is not None else default_database_path()

    def validate(self) -> None:
        """Check the configuration and raise ``ConfigError`` listing every problem."""

        problems: list[str] = []

        if not self.library_roots:
            problems.append("library_roots must list at least one directory")
        for root in self.library_roots:
            if not root.is_absolute():
                problems.append(f"library root must be absolute: {root}")
            elif not root.is_dir():
                logger.warning("Library root does not exist (yet): %s", root)

        if not self.mime_types:
            problems.append("mime_types must map at least one extension")
        if any(not extension for extension in self.mime_types):
            problems.append("mime_types contains an empty extension")

        if not self.artwork_file_names:
            problems.append("artwork_file_names must list at least one file name")

        if not self.thumbnail_sizes:
            problems.append("thumbnail_sizes must list at least one size")
        if any(size <= 0 for size in self.thumbnail_sizes):
            problems.append("thumbnail_sizes must be positive")
        if any(a >= b for a, b in zip(self.thumbnail_sizes, self.thumbnail_sizes[1:])):
            problems.append("thumbnail_sizes must be strictly ascending")

        if self.batch_size <= 0:
            problems.append("batch_size must be positive")
        if self.rendition_format not in RENDITION_FORMATS:
            problems.append(
                f"rendition_format must be one of {', '.join(sorted(RENDITION_FORMATS))}"
            )
        if self.sync_interval_seconds <= 0:
            problems.append("sync_interval_seconds must be positive")
        if self.watermark_grace_seconds < 0:
            problems.append("watermark_grace_seconds must not be negative")

        if problems:
            raise ConfigError("Invalid configuration: " + "; ".join(problems))

    def save(self, path: Path | None = None) -> Path:
        """Save configuration to ``path`` (default location when omitted)."""
        config_dict = asdict(self)

        try:
            target = path or default_config_path()
            content = self._render_toml(config_dict)
            _ = ensure_parent_directory(target).write_text(content, encoding="utf-8")
            logger.info("Configuration saved to %s", target)
            return target
        except OSError as e:
            logger.error("Failed to save configuration: %s", e)
            raise

    def _render_toml(self, config: dict[str, Any]) -> str:
        """Render configuration as TOML with inline guidance."""

        lines: list[str] = []

        lines.append("# catalogsync configuration file")
        lines.append("")

        lines.append("# Absolute paths of the library directories to keep in sync")
        lines.append('# Example: library_roots = ["/srv/music"]')
        lines.append(f"library_roots = {self._format_toml_value(config['library_roots'])}")
        lines.append("")

        lines.append("# Artwork file names, highest priority first (case-insensitive)")
        lines.append(f"artwork_file_names = {self._format_toml_value(config['artwork_file_names'])}")
        lines.append("")

        lines.append("# Rendition ladder: ascending long-edge sizes in pixels")
        lines.append(f"thumbnail_sizes = {self._format_toml_value(config['thumbnail_sizes'])}")
        lines.append("")

        lines.append("# Rendition encoder: jpeg, png or webp")
        lines.append(f"rendition_format = {self._format_toml_value(config['rendition_format'])}")
        lines.append("")

        lines.append("# Optional locations (defaults live under the data directory)")
        for key in ("artwork_dir", "database_path", "log_file"):
            if config[key] is not None:
                lines.append(f"{key} = {self._format_toml_value(config[key])}")
            else:
                lines.append(f'# {key} = "/path/to/{key}"')
        lines.append("")

        lines.append("# Rows per catalog transaction")
        lines.append(f"batch_size = {self._format_toml_value(config['batch_size'])}")
        lines.append("")

        lines.append("# Seconds between runs for the watch command")
        lines.append(
            f"sync_interval_seconds = {self._format_toml_value(config['sync_interval_seconds'])}"
        )
        lines.append("")

        lines.append("# Seconds subtracted from the watermark to re-examine files touched during a scan")
        lines.append(
            f"watermark_grace_seconds = {self._format_toml_value(config['watermark_grace_seconds'])}"
        )
        lines.append("")

        lines.append("# Recognised extensions and the MIME type used to stream them")
        lines.append("[mime_types]")
        for extension, mime_type in config["mime_types"].items():
            lines.append(f"{extension} = {self._format_toml_value(mime_type)}")
        lines.append("")

        return "\n".join(lines)

    def _format_toml_value(self, value: Any) -> str:
        """Format a value for TOML serialization.

        Args:
            value: Value to format

        Returns:
            str: Formatted value
        """
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, Path)):
            escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        if isinstance(value, (list, tuple)):
            return "[" + ", ".join(self._format_toml_value(item) for item in value) + "]"
        return str(value)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Build a configuration from parsed TOML data.

        Raises:
            ConfigError: If unknown keys are present or values have the wrong shape.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        values = dict(data)
        for key in ("artwork_dir", "database_path", "log_file"):
            raw = values.get(key)
            if isinstance(raw, str) and raw.strip() == "":
                values[key] = None

        try:
            return cls(**values)
        except (TypeError, AttributeError) as exc:
            raise ConfigError(f"Malformed configuration: {exc}") from exc

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load and validate configuration from file.

        When the file does not exist a commented default file is written so the
        operator has something to edit, and ``ConfigError`` is raised because
        the defaults contain no library roots.

        Args:
            path: Configuration file. Defaults to ``default_config_path()``.

        Returns:
            Config: Loaded configuration object.
        """
        config_file = path or default_config_path()

        if not config_file.exists():
            _ = cls().save(config_file)
            raise ConfigError(
                f"Configuration file not found; wrote defaults to {config_file}, "
                "set library_roots and run again"
            )

        try:
            with open(config_file, "rb") as f:
                config_dict = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.error("Failed to load configuration: %s", e)
            raise ConfigError(f"Cannot read configuration {config_file}: {e}") from e

        instance = cls.from_dict(config_dict)
        instance.validate()
        logger.info("Configuration loaded from %s", config_file)
        return instance


__all__ = [
    "BATCH_SIZE_DEFAULT",
    "Config",
    "DEFAULT_ARTWORK_FILE_NAMES",
    "DEFAULT_MIME_TYPES",
    "DEFAULT_THUMBNAIL_SIZES",
    "RENDITION_FORMATS",
    "SYNC_INTERVAL_SECONDS_DEFAULT",
    "normalize_extension",
]
