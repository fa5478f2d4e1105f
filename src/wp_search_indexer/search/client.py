"""
Search Service Client

This module implements a small synchronous client for the Algolia REST API,
covering only the calls the indexing pipeline makes.

Design Goals
------------
- One client (and one HTTP connection pool) per process, injected into
  every component that talks to the search service
- Writes fail with UpstreamWriteError, reads with SearchServiceError
- No retries; callers decide what a failure means
- Fully testable through an httpx transport override
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional
from urllib.parse import quote, urlencode

import httpx

from ..core.errors import SearchServiceError, UpstreamWriteError

logger = logging.getLogger("indexer.search")

# Objects per batch request
BATCH_SIZE = 1000

# Synonyms and rules per browse page
BROWSE_PAGE_SIZE = 1000


class SearchIndex:
    """
    Handle on one physical index.

    Obtained from SearchClient.init_index(); holds no state beyond its name.
    """

    def __init__(self, client: "SearchClient", name: str) -> None:
        self._client = client
        self.name = name

    def _path(self, suffix: str = "") -> str:
        return f"/1/indexes/{quote(self.name, safe='')}{suffix}"

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def wait_task(self, task_id: int) -> None:
        """
        Block until an indexing task has been published.
        """
        while True:
            data = self._client.request("GET", self._path(f"/task/{task_id}"), write=False)
            if data.get("status") == "published":
                return
            self._client.sleep(self._client.poll_interval)

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def clear_objects(self, wait: bool = True) -> int:
        """
        Delete every record of the index, keeping its configuration.

        Returns the task id. With `wait`, returns only once the task is done.
        """
        data = self._client.request("POST", self._path("/clear"))
        task_id = data["taskID"]
        if wait:
            self.wait_task(task_id)
        return task_id

    def delete_by(self, filters: str) -> int:
        """
        Delete every record matching a filter expression.

        Tasks of one index are applied in the order they are received, so a
        save issued after this call returns is applied after the deletion.
        """
        if not filters:
            raise ValueError("delete_by requires a non-empty filter.")

        body = {"params": urlencode({"filters": filters})}
        data = self._client.request("POST", self._path("/deleteByQuery"), json=body)
        return data["taskID"]

    def save_objects(self, records: Iterable[Mapping[str, Any]]) -> int:
        """
        Add or replace records, in batches of BATCH_SIZE.

        Every record must carry an `objectID`. Returns the number of
        records sent.
        """
        objects = [dict(record) for record in records]
        for i, obj in enumerate(objects):
            if not obj.get("objectID"):
                raise UpstreamWriteError(f"Record at position {i} has no objectID.")

        for start in range(0, len(objects), BATCH_SIZE):
            batch = objects[start : start + BATCH_SIZE]
            body = {
                "requests": [
                    {"action": "updateObject", "body": obj} for obj in batch
                ]
            }
            self._client.request("POST", self._path("/batch"), json=body)

        return len(objects)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def exists(self) -> bool:
        try:
            self.get_settings()
        except SearchServiceError as exc:
            if exc.status_code == 404:
                return False
            raise
        return True

    def get_settings(self) -> Dict[str, Any]:
        return self._client.request("GET", self._path("/settings"), write=False)

    def set_settings(self, settings: Mapping[str, Any]) -> int:
        data = self._client.request("PUT", self._path("/settings"), json=dict(settings))
        return data["taskID"]

    def browse_synonyms(self) -> Iterator[Dict[str, Any]]:
        yield from self._browse("/synonyms/search")

    def replace_all_synonyms(self, synonyms: List[Mapping[str, Any]]) -> int:
        data = self._client.request(
            "POST",
            self._path("/synonyms/batch"),
            params={"replaceExistingSynonyms": "true"},
            json=list(synonyms),
        )
        return data["taskID"]

    def search_rules(self) -> Iterator[Dict[str, Any]]:
        yield from self._browse("/rules/search")

    def replace_all_rules(self, rules: List[Mapping[str, Any]]) -> int:
        data = self._client.request(
            "POST",
            self._path("/rules/batch"),
            params={"clearExistingRules": "true"},
            json=list(rules),
        )
        return data["taskID"]

    def _browse(self, suffix: str) -> Iterator[Dict[str, Any]]:
        page = 0
        while True:
            body = {"query": "", "page": page, "hitsPerPage": BROWSE_PAGE_SIZE}
            data = self._client.request("POST", self._path(suffix), json=body, write=False)
            hits = data.get("hits") or []
            for hit in hits:
                hit = dict(hit)
                hit.pop("_highlightResult", None)
                yield hit
            if len(hits) < BROWSE_PAGE_SIZE:
                return
            page += 1


class SearchClient:
    """
    Synchronous Algolia REST client.
    """

    def __init__(
        self,
        app_id: str,
        api_key: str,
        timeout: float = 30.0,
        poll_interval: float = 0.5,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Parameters
        ----------
        app_id : str
            Search application id.

        api_key : str
            Admin API key (write access is required).

        timeout : float
            HTTP timeout for each request.

        poll_interval : float
            Seconds between task status checks.

        transport : Optional[httpx.BaseTransport]
            Transport override, used by tests.
        """
        if not app_id or not api_key:
            raise SearchServiceError("Search application id and API key are required.")

        self.poll_interval = poll_interval
        self.sleep = sleep
        self._http = httpx.Client(
            base_url=f"https://{app_id}.algolia.net",
            headers={
                "X-Algolia-Application-Id": app_id,
                "X-Algolia-API-Key": api_key,
            },
            timeout=timeout,
            transport=transport,
        )

    def init_index(self, name: str) -> SearchIndex:
        return SearchIndex(self, name)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "SearchClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        write: bool = True,
    ) -> Dict[str, Any]:
        """
        Issue one API call and return its JSON body.

        Raises
        ------
        UpstreamWriteError
            If a write call fails.

        SearchServiceError
            If a read call fails.
        """
        error_cls = UpstreamWriteError if write else SearchServiceError

        try:
            resp = self._http.request(method, path, json=json, params=params)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            status_code = exc.response.status_code if isinstance(exc, httpx.HTTPStatusError) else None
            logger.error(
                "Search service call failed (%s): %s %s status=%s",
                type(exc).__name__,
                method,
                path,
                status_code,
            )
            raise error_cls(
                f"{method} {path} failed: {type(exc).__name__}",
                status_code=status_code,
            ) from exc

        return resp.json()
