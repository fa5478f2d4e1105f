"""
WordPress Content Access

Read-only models and the REST client for the content store.
"""

from .models import ContentItem, ContentType, Term, STATUS_PUBLISH, STATUS_TRASH
from .client import WordPressClient

__all__ = [
    "ContentItem",
    "ContentType",
    "Term",
    "STATUS_PUBLISH",
    "STATUS_TRASH",
    "WordPressClient",
]
