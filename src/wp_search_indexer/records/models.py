"""
Search Record Model

This module defines the unit of storage in the search indexes.

Each instance corresponds to ONE stored object and at most ONE chunk of a
content item's body. All records derived from one content item share the
same `distinct_key`; their `object_id`s differ.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ConfigDict


class SearchRecord(BaseModel):
    """
    A single search record.

    Field aliases are the attribute names stored in the index
    (`objectID`, `blog_id`). Type-specific attributes are kept as extras.
    """

    object_id: str = Field(
        ...,
        alias="objectID",
        min_length=1,
        description="Unique id of this record in the index.",
    )

    distinct_key: str = Field(
        ...,
        min_length=1,
        description="Shared by every record of one content item.",
    )

    tenant_id: int = Field(
        ...,
        alias="blog_id",
        ge=1,
        description="Blog id of the site the content item belongs to.",
    )

    type: str = Field(..., min_length=1)
    title: Optional[str] = ""
    date: str = ""
    timestamp: Optional[int] = None
    url: str = ""

    content: Optional[str] = Field(
        default=None,
        description="One chunk of the stripped body text.",
    )

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        frozen=True,
    )

    def to_payload(self) -> Dict[str, Any]:
        """
        Return the JSON object sent to the search service.
        """
        return self.model_dump(by_alias=True)
