"""
Content Splitter

Oversized body text is split into fixed-size chunks so that each chunk fits
in one search record.

The split is a raw fixed-width slice of the tag-stripped text. It is not
word aware: chunk boundaries must stay at exact character offsets so that
existing indexes and front-end highlighting keep matching.
"""

from __future__ import annotations

from typing import Dict, List

from ..content.markup import strip_tags

CHAR_LIMIT = 1000


def split_content(
    field_name: str,
    text: str | None,
    limit: int = CHAR_LIMIT,
) -> List[Dict[str, str]]:
    """
    Split text into chunk maps of at most `limit` characters.

    Parameters
    ----------
    field_name : str
        Attribute name each chunk is stored under.

    text : str | None
        Raw text, may contain markup.

    limit : int
        Maximum characters per chunk.

    Returns
    -------
    List[Dict[str, str]]
        `[{field_name: chunk}, ...]` in text order. Empty text yields a
        single empty chunk so that every item produces at least one record.
    """
    if limit < 1:
        raise ValueError("Chunk limit must be a positive integer.")

    stripped = strip_tags(text)
    chunks = [stripped[i : i + limit] for i in range(0, len(stripped), limit)]

    if not chunks:
        chunks = [""]

    return [{field_name: chunk} for chunk in chunks]
