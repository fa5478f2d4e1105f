"""
Content Data Models

This module defines the read-only view of WordPress content used by the
record transformers. Instances are parsed from the WordPress REST API
response shape (`/wp-json/wp/v2/<rest_base>?_embed=1`).

Nothing here is ever written back to the content store.
"""

from __future__ import annotations

import html
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ConfigDict

from .markup import strip_tags


STATUS_PUBLISH = "publish"
STATUS_TRASH = "trash"

# Core types that are registered but never public
_INTERNAL_TYPE_PREFIXES = ("wp_",)
_INTERNAL_TYPES = {"nav_menu_item", "revision", "custom_css", "customize_changeset", "oembed_cache"}


def _rendered(value: Any) -> str:
    """
    Return the raw text of a REST `{raw, rendered}` object.

    `raw` is only present in the edit context. `rendered` is HTML with its
    entities encoded: tags are stripped first, then entities decoded, so an
    encoded `&lt;` stays text.
    """
    if isinstance(value, dict):
        if value.get("raw") is not None:
            return value["raw"]
        return html.unescape(strip_tags(value.get("rendered")))
    if value is None:
        return ""
    return str(value)


class Term(BaseModel):
    """
    A taxonomy term attached to a content item.
    """

    id: int = 0
    name: str
    slug: str = ""
    taxonomy: str
    meta: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_rest(cls, payload: Dict[str, Any]) -> "Term":
        meta = payload.get("acf") or payload.get("meta") or {}
        return cls(
            id=payload.get("id", 0),
            name=html.unescape(payload.get("name", "")),
            slug=payload.get("slug", ""),
            taxonomy=payload.get("taxonomy", ""),
            meta=meta if isinstance(meta, dict) else {},
        )


class ContentType(BaseModel):
    """
    A registered post type of one site.

    `public` and `exclude_from_search` mirror the register_post_type()
    arguments. The stock REST API does not expose them, so they default from
    the type slug unless a site adds them to the response.
    """

    slug: str = Field(..., min_length=1)
    rest_base: str = Field(..., min_length=1)
    name: str = ""
    public: bool = True
    exclude_from_search: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def searchable(self) -> bool:
        return self.public and not self.exclude_from_search

    @classmethod
    def from_rest(cls, payload: Dict[str, Any]) -> "ContentType":
        slug = payload["slug"]
        internal = slug in _INTERNAL_TYPES or slug.startswith(_INTERNAL_TYPE_PREFIXES)
        return cls(
            slug=slug,
            rest_base=payload.get("rest_base") or slug,
            name=payload.get("name", ""),
            public=payload.get("public", not internal),
            exclude_from_search=payload.get("exclude_from_search", False),
        )


class ContentItem(BaseModel):
    """
    A single post, page or custom post type entry.
    """

    id: int = Field(..., ge=1)
    type: str = Field(..., min_length=1)
    status: str = STATUS_PUBLISH
    title: str = ""
    content: str = ""
    date: datetime
    date_gmt: Optional[datetime] = None
    modified: Optional[datetime] = None
    link: str = ""
    featured_image: Optional[str] = None

    # Custom fields (ACF) keyed by field name
    fields: Dict[str, Any] = Field(default_factory=dict)

    # Embedded terms keyed by taxonomy
    terms: Dict[str, List[Term]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    # ------------------------------------------------------------------
    # Accessors used by transformers
    # ------------------------------------------------------------------

    def field(self, name: str, default: Any = None) -> Any:
        value = self.fields.get(name)
        return default if value is None else value

    def term_names(self, taxonomy: str) -> List[str]:
        return [term.name for term in self.terms.get(taxonomy, [])]

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    @classmethod
    def from_rest(cls, payload: Dict[str, Any]) -> "ContentItem":
        """
        Build a ContentItem from a REST API post object.
        """
        embedded = payload.get("_embedded") or {}

        terms: Dict[str, List[Term]] = {}
        for group in embedded.get("wp:term") or []:
            for raw_term in group or []:
                if not isinstance(raw_term, dict) or "taxonomy" not in raw_term:
                    continue
                term = Term.from_rest(raw_term)
                terms.setdefault(term.taxonomy, []).append(term)

        featured_image = None
        media = embedded.get("wp:featuredmedia") or []
        if media and isinstance(media[0], dict):
            featured_image = media[0].get("source_url")

        fields = payload.get("acf") or {}

        return cls(
            id=payload["id"],
            type=payload["type"],
            status=payload.get("status", STATUS_PUBLISH),
            title=_rendered(payload.get("title")),
            content=_rendered(payload.get("content")),
            date=payload["date"],
            date_gmt=payload.get("date_gmt"),
            modified=payload.get("modified"),
            link=payload.get("link", ""),
            featured_image=featured_image,
            fields=fields if isinstance(fields, dict) else {},
            terms=terms,
        )
