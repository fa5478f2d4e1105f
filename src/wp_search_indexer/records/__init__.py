"""
Search Records

Turning content items into the records stored in the search indexes.
"""

from .models import SearchRecord
from .splitter import split_content, strip_tags, CHAR_LIMIT
from .assembler import assemble, default_attributes, record_key
from .registry import TransformerRegistry
from .transformers import default_registry

__all__ = [
    "SearchRecord",
    "split_content",
    "strip_tags",
    "CHAR_LIMIT",
    "assemble",
    "default_attributes",
    "record_key",
    "TransformerRegistry",
    "default_registry",
]
