"""
Batch Upserter

Replaces the records of one content item in an index, and reacts to content
being saved in WordPress.

Workflow
--------
1. Delete every record sharing the item's distinct_key (this also removes
   chunks that no longer exist because the body got shorter).
2. Save the new records.

Between the two calls the item has no visible record. Running the same
upsert twice leaves the index as running it once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from .eligibility import searchable_types
from ..config import Settings
from ..content.client import WordPressClient
from ..content.models import ContentItem, STATUS_PUBLISH, STATUS_TRASH
from ..core.errors import ContentStoreError, UpstreamWriteError
from ..records.assembler import record_key
from ..records.models import SearchRecord
from ..records.registry import TransformerRegistry
from ..search.client import SearchClient, SearchIndex
from ..search.naming import GLOBAL_INDEX, PEOPLE_INDEX, index_name
from ..tenants import Tenant

logger = logging.getLogger("indexer.upsert")


# ---------------------------------------------------------------------
# Record-level operations
# ---------------------------------------------------------------------

def distinct_key_filter(distinct_key: str) -> str:
    return f'distinct_key:"{distinct_key}"'


def remove_records(index: SearchIndex, distinct_key: str) -> None:
    """
    Delete every record of one content item.
    """
    index.delete_by(distinct_key_filter(distinct_key))


def upsert_records(index: SearchIndex, records: Sequence[SearchRecord]) -> int:
    """
    Replace the records of one content item.

    All records must share one distinct_key; the first one is used to find
    the records to delete.

    Returns
    -------
    int
        Number of records saved.

    Raises
    ------
    UpstreamWriteError
        If the deletion or the save fails.
    """
    if not records:
        return 0

    distinct_key = records[0].distinct_key
    if any(record.distinct_key != distinct_key for record in records):
        raise ValueError("All records of an upsert must share one distinct_key.")

    remove_records(index, distinct_key)
    return index.save_objects(record.to_payload() for record in records)


# ---------------------------------------------------------------------
# Incremental sync
# ---------------------------------------------------------------------

@dataclass
class SyncResult:
    status: str
    count: int = 0
    details: Dict[str, Any] = field(default_factory=dict)


class ContentSync:
    """
    Keeps the indexes in step with single content items as they are saved.
    """

    def __init__(
        self,
        search_client: SearchClient,
        content_client: WordPressClient,
        registry: TransformerRegistry,
        settings: Settings,
    ) -> None:
        self._search = search_client
        self._content = content_client
        self._registry = registry
        self._settings = settings

    def _index(self, logical_name: str) -> SearchIndex:
        return self._search.init_index(
            index_name(
                logical_name,
                self._settings.algolia_index_prefix,
                self._settings.wp_table_prefix,
            )
        )

    def _target_indexes(self, type_tag: str) -> List[str]:
        targets = [GLOBAL_INDEX]
        if type_tag in self._settings.people_content_types:
            targets.append(PEOPLE_INDEX)
        return targets

    def on_content_saved(
        self,
        tenant: Tenant,
        item: ContentItem,
        is_revision: bool = False,
        is_autosave: bool = False,
    ) -> SyncResult:
        """
        Update the indexes after a content item was saved.

        Only published items are indexed. Trashed items have their records
        removed. Revisions, autosaves and other statuses are ignored.

        Errors are logged and reported in the result, never raised.
        """
        if is_revision or is_autosave or item.status not in (STATUS_PUBLISH, STATUS_TRASH):
            return SyncResult(status="skipped", details={"reason": "ignored_status"})

        try:
            eligible = searchable_types(
                self._content, tenant, self._settings.excluded_content_types
            )
        except ContentStoreError as exc:
            logger.error("Cannot list content types of site %d: %s", tenant.id, exc)
            return SyncResult(status="failed", details={"reason": "content_store_error"})

        if item.type not in eligible:
            return SyncResult(status="skipped", details={"reason": "not_searchable"})

        if self._registry.lookup(item.type) is None:
            logger.info("No record transformer for %s, update of %d skipped", item.type, item.id)
            return SyncResult(status="skipped", details={"reason": "no_transformer"})

        targets = self._target_indexes(item.type)

        try:
            if item.status == STATUS_TRASH:
                return self._remove(tenant, item, targets)

            try:
                records = self._registry.transform(item, tenant)
            except Exception:
                logger.exception("Failed to transform %s %d", item.type, item.id)
                return SyncResult(status="failed", details={"reason": "transform_error"})

            if not records:
                return self._remove(tenant, item, targets, reason="no_records")

            for logical_name in targets:
                upsert_records(self._index(logical_name), records)

        except UpstreamWriteError as exc:
            logger.error(
                "Search service update of %s %d failed: %s",
                item.type,
                item.id,
                exc,
            )
            return SyncResult(status="failed", details={"reason": "upstream_write_error"})

        logger.info("Indexed %s %d as %d record(s)", item.type, item.id, len(records))
        return SyncResult(
            status="updated",
            count=len(records),
            details={"indexes": targets},
        )

    def _remove(
        self,
        tenant: Tenant,
        item: ContentItem,
        targets: List[str],
        reason: str = "trashed",
    ) -> SyncResult:
        distinct_key = record_key(tenant.id, item.type, item.id)
        for logical_name in targets:
            remove_records(self._index(logical_name), distinct_key)

        logger.info("Removed records of %s from %s", distinct_key, ", ".join(targets))
        return SyncResult(
            status="deleted",
            details={"reason": reason, "indexes": targets},
        )
