"""
Full Reindex

Rebuilds the global and people indexes from every published content item of
every site.

Phases (always in this order)
-----------------------------
1. GLOBAL: clear the global index, then for each site and each searchable
   type, page through the content store and save one batch per page.
2. PEOPLE: clear the people index, then do the same for the person-like
   types of the primary site only (people content is not replicated per
   site).

Failure Policy
--------------
Failures are logged, counted in the report and skipped; they never abort the
run. A failed save loses that page only. A failed fetch ends the content type
it happened in, since pagination cannot move past it. There is no retry and
no checkpoint: an interrupted run leaves a partly rebuilt index and must be
started again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .eligibility import people_types, searchable_types
from ..config import Settings
from ..content.client import WordPressClient
from ..core.errors import (
    ContentStoreError,
    InvalidArgumentError,
    SearchServiceError,
    UpstreamWriteError,
)
from ..records.models import SearchRecord
from ..records.registry import TransformerRegistry
from ..search.client import SearchClient, SearchIndex
from ..search.naming import GLOBAL_INDEX, PEOPLE_INDEX, index_name
from ..tenants import Tenant

logger = logging.getLogger("indexer.reindex")


@dataclass
class ReindexReport:
    items_indexed: int = 0
    records_indexed: int = 0
    batches_saved: int = 0
    batches_failed: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class Reindexer:
    """
    Full reindex of both indexes.

    Parameters
    ----------
    search_client : SearchClient
        Shared search service client.

    content_client : WordPressClient
        Shared content store client.

    registry : TransformerRegistry
        Record transformers by content type.

    settings : Settings
        Sites, index prefixes and type lists.

    echo : Optional[Callable[[str], None]]
        Receives operator progress lines. Defaults to the module logger.

    verbose : bool
        Also report every item and batch.
    """

    def __init__(
        self,
        search_client: SearchClient,
        content_client: WordPressClient,
        registry: TransformerRegistry,
        settings: Settings,
        echo: Optional[Callable[[str], None]] = None,
        verbose: bool = False,
    ) -> None:
        self._search = search_client
        self._content = content_client
        self._registry = registry
        self._settings = settings
        self._echo = echo or logger.info
        self._verbose = verbose

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve_types(self, type_filter: Optional[str] = None) -> List[str]:
        """
        Return the content types to index.

        Raises
        ------
        InvalidArgumentError
            If `type_filter` is not a searchable type.
        """
        types = searchable_types(
            self._content,
            self._settings.primary_tenant,
            self._settings.excluded_content_types,
        )

        if type_filter is None:
            return types

        if type_filter not in types:
            raise InvalidArgumentError(f"{type_filter} is not a valid post type!")

        return [type_filter]

    def run(self, type_filter: Optional[str] = None) -> ReindexReport:
        """
        Reindex everything, or only one content type.

        With a type filter the indexes are not cleared first; the records of
        that type are overwritten in place.

        Raises
        ------
        InvalidArgumentError
            If `type_filter` is invalid. Nothing has been modified then.
        """
        types = self.resolve_types(type_filter)
        clear = type_filter is None
        report = ReindexReport()

        # -------------------------------------------------------------
        # Phase 1: global index
        # -------------------------------------------------------------
        global_index = self._index(GLOBAL_INDEX)
        if clear:
            self._clear(global_index, report)

        for tenant in self._settings.wp_sites:
            self._echo(f"Indexing posts from Blog {tenant.id}")
            for type_tag in types:
                self._index_type(global_index, tenant, type_tag, report)

        # -------------------------------------------------------------
        # Phase 2: people index
        # -------------------------------------------------------------
        people_index = self._index(PEOPLE_INDEX)
        if clear:
            self._clear(people_index, report)

        primary = self._settings.primary_tenant
        for type_tag in people_types(types, self._settings.people_content_types):
            self._index_type(people_index, primary, type_tag, report)

        logger.info(
            "Reindex finished: %d records from %d items, %d batch(es) failed",
            report.records_indexed,
            report.items_indexed,
            report.batches_failed,
        )
        return report

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _index(self, logical_name: str) -> SearchIndex:
        return self._search.init_index(
            index_name(
                logical_name,
                self._settings.algolia_index_prefix,
                self._settings.wp_table_prefix,
            )
        )

    def _clear(self, index: SearchIndex, report: ReindexReport) -> None:
        self._echo(f"Clearing all records from index: {index.name}")
        try:
            index.clear_objects(wait=True)
        except SearchServiceError as exc:
            # Covers the clear request and the task status polls after it
            logger.error("Failed to clear %s: %s", index.name, exc)
            report.errors.append(f"clear {index.name}: {exc}")

    def _index_type(
        self,
        index: SearchIndex,
        tenant: Tenant,
        type_tag: str,
        report: ReindexReport,
    ) -> int:
        """
        Page through one content type of one site and save it page by page.

        Returns the number of items indexed.
        """
        transform_fn = self._registry.lookup(type_tag)
        if transform_fn is None:
            logger.warning("No record transformer for %s, skipped on site %d", type_tag, tenant.id)
            return 0

        page_size = self._settings.reindex_page_size
        page = 1
        count = 0

        while True:
            try:
                items = self._content.fetch_page(tenant, type_tag, page, page_size)
            except ContentStoreError as exc:
                logger.error(
                    "Fetching %s page %d from site %d failed: %s",
                    type_tag,
                    page,
                    tenant.id,
                    exc,
                )
                report.errors.append(f"fetch {type_tag} page {page} site {tenant.id}: {exc}")
                return count

            if not items:
                break

            records: List[SearchRecord] = []
            batch_items = 0

            for item in items:
                if self._verbose:
                    self._echo(f"Serializing [{item.type}] {item.title}")
                try:
                    records.extend(transform_fn(item, tenant) or [])
                except Exception as exc:
                    logger.exception("Failed to transform %s %d", type_tag, item.id)
                    report.errors.append(f"transform {type_tag} {item.id}: {exc}")
                    continue
                batch_items += 1

            if self._verbose:
                self._echo("Sending batch...")

            try:
                saved = index.save_objects(record.to_payload() for record in records)
            except UpstreamWriteError as exc:
                logger.error(
                    "Saving batch %d of %s (%d records) to %s failed: %s",
                    page,
                    type_tag,
                    len(records),
                    index.name,
                    exc,
                )
                report.batches_failed += 1
                report.errors.append(f"save {type_tag} batch {page} to {index.name}: {exc}")
            else:
                count += batch_items
                report.batches_saved += 1
                report.items_indexed += batch_items
                report.records_indexed += saved
                self._echo(f"{count} {type_tag} records indexed")

            page += 1

        return count
