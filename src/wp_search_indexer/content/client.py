"""
WordPress REST API Client

This module provides the paginated, read-only access to site content that
the indexing pipeline needs.

Design Goals
------------
- One shared httpx.Client for the whole run, injected by the caller
- The site (tenant) is an explicit argument of every call
- End of data is an empty page, never an exception
- Transport and HTTP failures surface as ContentStoreError
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from .models import ContentItem, ContentType, STATUS_PUBLISH
from ..core.errors import ContentStoreError
from ..tenants import Tenant

logger = logging.getLogger("indexer.content")

DEFAULT_PAGE_SIZE = 100

# Returned by WordPress when `page` is past the last page
_INVALID_PAGE_CODE = "rest_post_invalid_page_number"


class WordPressClient:
    """
    Synchronous client for the WordPress REST API of every site in the network.
    """

    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Parameters
        ----------
        username, password : Optional[str]
            Application password credentials. Anonymous access only sees
            published content.

        timeout : float
            HTTP timeout for each request.

        transport : Optional[httpx.BaseTransport]
            Transport override, used by tests.
        """
        auth = (username, password) if username and password else None
        self._http = httpx.Client(timeout=timeout, auth=auth, transport=transport)
        # Authenticated callers can read raw post fields
        self._edit_context = auth is not None
        self._types: Dict[int, Dict[str, ContentType]] = {}

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "WordPressClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get(self, tenant: Tenant, path: str, params: Dict[str, Any]) -> httpx.Response:
        url = f"{tenant.rest_root}/wp/v2/{path}"
        try:
            return self._http.get(url, params=params)
        except httpx.HTTPError as exc:
            logger.error(
                "Content store request failed (%s): site=%d path=%s",
                type(exc).__name__,
                tenant.id,
                path,
            )
            raise ContentStoreError(
                f"Request to site {tenant.id} failed: {type(exc).__name__}"
            ) from exc

    @staticmethod
    def _raise_for_status(resp: httpx.Response, tenant: Tenant) -> None:
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ContentStoreError(
                f"Site {tenant.id} answered {resp.status_code} for {resp.request.url}"
            ) from exc

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def list_content_types(self, tenant: Tenant) -> List[ContentType]:
        """
        Return the post types registered on a site (cached per site).
        """
        cached = self._types.get(tenant.id)
        if cached is None:
            resp = self._get(tenant, "types", {})
            self._raise_for_status(resp, tenant)

            data = resp.json()
            if not isinstance(data, dict):
                raise ContentStoreError(f"Unexpected /types payload from site {tenant.id}")

            cached = {}
            for slug, raw in data.items():
                raw = dict(raw)
                raw.setdefault("slug", slug)
                cached[slug] = ContentType.from_rest(raw)
            self._types[tenant.id] = cached

        return list(cached.values())

    def get_content_type(self, tenant: Tenant, type_tag: str) -> Optional[ContentType]:
        for content_type in self.list_content_types(tenant):
            if content_type.slug == type_tag:
                return content_type
        return None

    def fetch_page(
        self,
        tenant: Tenant,
        type_tag: str,
        page: int,
        page_size: int = DEFAULT_PAGE_SIZE,
        status: str = STATUS_PUBLISH,
    ) -> List[ContentItem]:
        """
        Fetch one page of content items of a type.

        Parameters
        ----------
        tenant : Tenant
            Site to query.

        type_tag : str
            Post type slug (e.g. "page", "faculty").

        page : int
            1-based page number.

        page_size : int
            Items per page.

        status : str
            Publication status filter.

        Returns
        -------
        List[ContentItem]
            The items of that page. An empty list marks the end of data, and
            is also returned for a type the site does not register.

        Raises
        ------
        ContentStoreError
            If the request fails or the response is malformed.
        """
        if page < 1:
            raise ValueError("page numbers start at 1")

        content_type = self.get_content_type(tenant, type_tag)
        if content_type is None:
            logger.debug("Type %s is not registered on site %d", type_tag, tenant.id)
            return []

        params = {
            "page": page,
            "per_page": page_size,
            "status": status,
            "_embed": 1,
        }
        if self._edit_context:
            params["context"] = "edit"
        resp = self._get(tenant, content_type.rest_base, params)

        if resp.status_code == 400 and _error_code(resp) == _INVALID_PAGE_CODE:
            return []
        self._raise_for_status(resp, tenant)

        data = resp.json()
        if not isinstance(data, list):
            raise ContentStoreError(
                f"Unexpected payload for {type_tag} page {page} from site {tenant.id}"
            )

        return [ContentItem.from_rest(raw) for raw in data]


def _error_code(resp: httpx.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("code")
    return None
