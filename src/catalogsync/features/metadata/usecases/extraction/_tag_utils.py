"""Tag utility helpers.

Where: catalogsync/features/metadata/usecases/extraction/_tag_utils.py
What: Pure helpers for parsing numeric and date tag values.
Why: Each format stores track numbers and dates differently; parsing stays in one place.
"""

from __future__ import annotations

__all__ = [
    "first_text",
    "parse_slash_separated",
    "parse_tuple_numbers",
    "parse_year",
]


def first_text(value: object) -> str | None:
    """Return the first non-empty string held by a tag value.

    Mutagen returns lists for Vorbis comments and EasyID3, plain strings for
    some containers, and frame objects with a ``text`` attribute for raw ID3.
    """
    if value is None:
        return None
    text = getattr(value, "text", value)
    if isinstance(text, (list, tuple)):
        text = text[0] if text else None
    if text is None:
        return None
    result = str(text).strip()
    return result or None


def parse_slash_separated(value: str) -> tuple[int | None, int | None]:
    """Parse a string in 'number/total' format.

    Returns a tuple (number, total) or (None, None) if conversion fails.
    """
    parts: list[str] = [part.strip() for part in value.split(sep="/")] if value else []
    num: int | None = int(parts[0]) if parts and parts[0].isdigit() else None
    total: int | None = int(parts[1]) if len(parts) > 1 and parts[1].isdigit() else None
    return num, total


def parse_tuple_numbers(data: list[tuple[int, int]] | None) -> tuple[int | None, int | None]:
    """Return the first (number, total) tuple with zeros converted to None."""
    if data:
        first: tuple[int, int] = data[0]
        num: int | None = first[0] if first[0] != 0 else None
        total: int | None = first[1] if first[1] != 0 else None
        return num, total
    return None, None


def parse_year(date_str: str | None) -> int | None:
    """Parse a year from a string (expects the first 4 characters to be digits)."""
    if not date_str:
        return None
    candidate = date_str.strip()[:4]
    return int(candidate) if len(candidate) == 4 and candidate.isdigit() else None
