"""
Summary: Pick one artwork file per directory and render its thumbnail ladder.
Why: Clients fetch small renditions by art identifier instead of decoding full-size covers.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from catalogsync.platform.filesystem import ensure_directory
from catalogsync.platform.logging import SyncEvent, log_event, logger
from catalogsync.shared.cancellation import CancellationToken, ProgressCallback
from catalogsync.shared.catalog import ArtDelta, ArtRecord, new_identifier, split_path
from catalogsync.shared.errors import ImageDecodeError

from .ports import ArtLookupPort, ImageCodecPort
from .rendition_ladder import (
    RENDITION_EXTENSIONS,
    expected_dimensions,
    plan_renditions,
    remove_renditions,
    rendition_file_name,
)


@dataclass
class ArtBuildResult:
    """Art deltas for one run.

    ``winners`` holds the source path chosen for every directory that has
    artwork, including untouched ones, so stale records can be told apart.
    """

    deltas: list[ArtDelta] = field(default_factory=list)
    winners: set[Path] = field(default_factory=set)
    added: int = 0
    updated: int = 0
    unchanged: int = 0
    skipped: int = 0
    failures: list[tuple[Path, str]] = field(default_factory=list)
    failed_directories: set[Path] = field(default_factory=set)


class ArtPipeline:
    """Locate, decode and render directory artwork."""

    def __init__(
        self,
        codec: ImageCodecPort,
        catalog: ArtLookupPort,
        artwork_dir: Path,
        candidate_names: Sequence[str],
        ladder: Sequence[int],
        rendition_format: str = "jpeg",
    ) -> None:
        if rendition_format not in RENDITION_EXTENSIONS:
            raise ValueError(f"Unsupported rendition format: {rendition_format}")
        self._codec: ImageCodecPort = codec
        self._catalog: ArtLookupPort = catalog
        self._artwork_dir: Path = artwork_dir
        self._candidate_names: list[str] = [name.lower() for name in candidate_names]
        self._ladder: list[int] = sorted(ladder)
        self._rendition_format: str = rendition_format
        self._extension: str = RENDITION_EXTENSIONS[rendition_format]

    def find_artwork(self, directory: Path) -> Path | None:
        """Return the highest-priority artwork file in ``directory``.

        Names are matched case-insensitively.

        Raises:
            OSError: If the directory cannot be listed.
        """
        by_name: dict[str, Path] = {}
        for entry in sorted(directory.iterdir()):
            if entry.is_file():
                _ = by_name.setdefault(entry.name.lower(), entry)
        for candidate in self._candidate_names:
            match = by_name.get(candidate)
            if match is not None:
                return match
        return None

    def run(
        self,
        directories: Iterable[Path],
        watermark: float | None,
        *,
        cancel: CancellationToken | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ArtBuildResult:
        """Render artwork for ``directories`` and return the resulting deltas.

        A catalogued source that was not modified since ``watermark`` and whose
        renditions are all on disk is left alone. Otherwise its renditions are
        rewritten under the existing identifier, or a new identifier for an
        uncatalogued source.

        Raises:
            SyncCancelledError: If cancellation was requested.
        """
        result = ArtBuildResult()

        sources: list[Path] = []
        for directory in sorted(directories):
            if cancel is not None:
                cancel.raise_if_cancelled()
            try:
                winner = self.find_artwork(directory)
            except OSError as e:
                result.failed_directories.add(directory)
                self._log_failure(directory, e.strerror or str(e))
                continue
            if winner is not None:
                sources.append(winner)

        result.winners = set(sources)
        if not sources:
            return result

        stored = self._catalog.lookup_art_by_path(sources)
        _ = ensure_directory(self._artwork_dir)

        total = len(sources)
        for index, source in enumerate(sources, start=1):
            if cancel is not None:
                cancel.raise_if_cancelled()

            existing = stored.get(source)
            try:
                if existing is not None and not self._needs_render(existing, watermark):
                    result.unchanged += 1
                    continue
                art_id = existing.art_id if existing is not None else new_identifier()
                delta = self._render(source, art_id, is_new=existing is None)
            except ImageDecodeError as e:
                result.skipped += 1
                result.failures.append((source, e.reason))
                self._log_failure(source, e.reason)
                continue
            except OSError as e:
                reason = e.strerror or str(e)
                result.skipped += 1
                result.failures.append((source, reason))
                self._log_failure(source, reason)
                continue
            finally:
                if on_progress is not None:
                    on_progress(index, total)

            result.deltas.append(delta)
            if delta.is_new:
                result.added += 1
            else:
                result.updated += 1

        return result

    def _needs_render(self, existing: ArtRecord, watermark: float | None) -> bool:
        if watermark is None or existing.path.stat().st_mtime > watermark:
            return True
        for dimension in expected_dimensions(existing.original_dimension, self._ladder):
            name = rendition_file_name(existing.art_id, dimension, self._extension)
            if not (self._artwork_dir / name).is_file():
                return True
        return False

    def _render(self, source: Path, art_id: str, *, is_new: bool) -> ArtDelta:
        image = self._codec.decode(source)
        try:
            specs = plan_renditions(image.width, image.height, self._ladder)
            _ = remove_renditions(self._artwork_dir, art_id)
            written: list[Path] = []
            for spec in specs:
                destination = self._artwork_dir / rendition_file_name(art_id, spec.dimension, self._extension)
                image.save_rendition(spec.width, spec.height, destination, self._rendition_format)
                written.append(destination)
            original_dimension = max(image.width, image.height)
        finally:
            image.close()

        directory, file_name = split_path(source)
        log_event(
            logger,
            logging.DEBUG,
            SyncEvent.ART_RENDERED,
            "Rendered %d renditions for %s",
            len(written),
            source,
            path=source,
            renditions=len(written),
        )
        return ArtDelta(
            record=ArtRecord(
                art_id=art_id,
                directory=directory,
                file_name=file_name,
                original_dimension=original_dimension,
            ),
            is_new=is_new,
            renditions=tuple(written),
        )

    @staticmethod
    def _log_failure(path: Path, reason: str) -> None:
        log_event(
            logger,
            logging.WARNING,
            SyncEvent.ART_ERROR,
            "Skipping artwork %s: %s",
            path,
            reason,
            path=path,
            error_message=reason,
        )


__all__ = ["ArtBuildResult", "ArtPipeline"]
