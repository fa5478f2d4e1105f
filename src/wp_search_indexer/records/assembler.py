"""
Record Assembler

Merges the default identity attributes of a content item, its type-specific
attributes and its body chunks into final search records.
"""

from __future__ import annotations

from datetime import timezone
from typing import Any, Dict, List, Mapping, Optional

from .models import SearchRecord
from .splitter import split_content
from ..content.models import ContentItem
from ..tenants import Tenant

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONTENT_FIELD = "content"


def record_key(tenant_id: int, type_tag: str, item_id: int, *parts: Any) -> str:
    """
    Build a `#`-joined record key, e.g. `1#page#7` or `1#page#7#0`.
    """
    return "#".join(str(p) for p in (tenant_id, type_tag, item_id, *parts))


def item_timestamp(item: ContentItem) -> int:
    """
    UNIX timestamp of the item's publication date.

    The GMT date is used when the API provides it; otherwise the site-local
    date is read as UTC.
    """
    moment = item.date_gmt or item.date
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp())


def default_attributes(item: ContentItem, tenant: Tenant) -> Dict[str, Any]:
    key = record_key(tenant.id, item.type, item.id)
    return {
        "objectID": key,
        "distinct_key": key,
        "blog_id": tenant.id,
        "type": item.type,
        "title": item.title,
        "date": item.date.strftime(DATE_FORMAT),
        "timestamp": item_timestamp(item),
        "url": item.link,
    }


def assemble(
    item: ContentItem,
    tenant: Tenant,
    attrs: Optional[Mapping[str, Any]] = None,
) -> List[SearchRecord]:
    """
    Build the records of one content item.

    The body is split into chunks; each chunk gets the default attributes,
    then `attrs`, then its chunk text, and an `objectID` suffixed with the
    chunk index. `distinct_key` is the same on every record.

    Returns
    -------
    List[SearchRecord]
        One record per chunk, never empty.
    """
    defaults = default_attributes(item, tenant)
    attrs = dict(attrs or {})

    records: List[SearchRecord] = []
    for index, chunk in enumerate(split_content(CONTENT_FIELD, item.content)):
        merged = {
            **defaults,
            **attrs,
            **chunk,
            "objectID": record_key(tenant.id, item.type, item.id, index),
        }
        records.append(SearchRecord.model_validate(merged))

    return records
