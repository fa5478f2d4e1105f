"""
Markup Helpers

Tag stripping with the rules of PHP's strip_tags(): tags and HTML comments
are removed, entities are left alone, and a `<` followed by whitespace is
text, not the start of a tag.
"""

from __future__ import annotations

import re

_TAG_RE = re.compile(r"<!--.*?(?:-->|$)|<(?=[^\s<])[^>]*(?:>|$)", re.DOTALL)


def strip_tags(text: str | None) -> str:
    """Remove markup from text, keeping the text content."""
    if not text:
        return ""
    return _TAG_RE.sub("", text)
