"""
Indexing Pipeline

Incremental updates and full reindexing of the search indexes.
"""

from .upsert import upsert_records, remove_records, ContentSync, SyncResult
from .reindex import Reindexer, ReindexReport

__all__ = [
    "upsert_records",
    "remove_records",
    "ContentSync",
    "SyncResult",
    "Reindexer",
    "ReindexReport",
]
