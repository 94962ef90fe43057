"""Tests for rendition planning and naming."""

from pathlib import Path

import pytest

from catalogsync.features.artwork.usecases import (
    expected_dimensions,
    iter_renditions,
    parse_rendition_file_name,
    plan_renditions,
    remove_renditions,
    rendition_file_name,
)


@pytest.mark.parametrize(
    ("size", "ladder", "expected"),
    [
        ((400, 400), [192, 384], [(192, 192, 192), (384, 384, 384)]),
        ((400, 400), [192, 384, 1024], [(192, 192, 192), (384, 384, 384)]),
        ((300, 600), [192, 384], [(192, 96, 192), (384, 192, 384)]),
        ((600, 300), [192, 384], [(192, 192, 96), (384, 384, 192)]),
        ((100, 100), [192, 384], []),
        ((384, 200), [192, 384, 768], [(192, 192, 100), (384, 384, 200)]),
    ],
)
def test_plan_renditions(
    size: tuple[int, int], ladder: list[int], expected: list[tuple[int, int, int]]
) -> None:
    specs = plan_renditions(size[0], size[1], ladder)

    assert [(spec.dimension, spec.width, spec.height) for spec in specs] == expected


def test_plan_stops_at_first_oversized_rung() -> None:
    assert [spec.dimension for spec in plan_renditions(500, 500, [100, 600, 200])] == [100]


def test_expected_dimensions() -> None:
    assert expected_dimensions(400, [192, 384, 768]) == [192, 384]
    assert expected_dimensions(100, [192]) == []


def test_rendition_file_names() -> None:
    name = rendition_file_name("abc123", 192, "jpg")

    assert name == "abc123_192.jpg"
    assert parse_rendition_file_name(name) == ("abc123", 192)
    assert parse_rendition_file_name("abc123.jpg") is None
    assert parse_rendition_file_name("notes.txt") is None


def test_iter_and_remove_renditions(tmp_path: Path) -> None:
    for name in ("a1_192.jpg", "a1_384.jpg", "b2_192.jpg", "readme.txt"):
        _ = (tmp_path / name).write_bytes(b"x")

    assert sorted(art_id for _, art_id in iter_renditions(tmp_path)) == ["a1", "a1", "b2"]
    assert remove_renditions(tmp_path, "a1") == 2
    assert sorted(path.name for path in tmp_path.iterdir()) == ["b2_192.jpg", "readme.txt"]
    assert list(iter_renditions(tmp_path / "missing")) == []
