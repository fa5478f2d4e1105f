import os
import re
from datetime import datetime
from typing import Dict, List, Optional, Tuple

import pytest

os.environ.setdefault("ALGOLIA_APPLICATION_ID", "test-app")
os.environ.setdefault("ALGOLIA_ADMIN_API_KEY", "test-admin-key")

from wp_search_indexer.config import Settings
from wp_search_indexer.content.models import ContentItem, ContentType
from wp_search_indexer.core.errors import ContentStoreError, UpstreamWriteError
from wp_search_indexer.tenants import Tenant

TEST_WEBHOOK_SECRET = "test-webhook-secret-must-be-long-enough-32chars"

_DISTINCT_FILTER = re.compile(r'^distinct_key:"(?P<key>.+)"$')


# ---------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------

def make_item(
    item_id: int,
    type_tag: str = "page",
    title: str = "Untitled",
    content: str = "",
    status: str = "publish",
    **kwargs,
) -> ContentItem:
    kwargs.setdefault("date", datetime(2023, 1, 1, 7, 0, 0))
    kwargs.setdefault("date_gmt", datetime(2023, 1, 1, 12, 0, 0))
    kwargs.setdefault("link", f"https://example.org/{type_tag}/{item_id}/")
    return ContentItem(
        id=item_id,
        type=type_tag,
        title=title,
        content=content,
        status=status,
        **kwargs,
    )


def make_settings(**overrides) -> Settings:
    values = dict(
        algolia_application_id="test-app",
        algolia_admin_api_key="test-admin-key",
        algolia_index_prefix="local",
        wp_table_prefix="wp_",
        wp_sites=[
            {"id": 1, "base_url": "https://example.org", "name": "Example", "front_page_id": 2},
            {"id": 2, "base_url": "https://example.org/news"},
        ],
        wp_primary_site_id=1,
        webhook_jwt_secret=TEST_WEBHOOK_SECRET,
    )
    values.update(overrides)
    return Settings(**values)


# ---------------------------------------------------------------------
# In-memory fakes
# ---------------------------------------------------------------------

class FakeIndex:
    """Search index kept in a dict keyed by objectID."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.objects: Dict[str, dict] = {}
        self.calls: List[Tuple] = []
        self.present = True
        self.fail_saves: set = set()
        self.fail_clear = False
        self._saves = 0

    def clear_objects(self, wait: bool = True) -> int:
        self.calls.append(("clear",))
        if self.fail_clear:
            raise UpstreamWriteError("clear failed", status_code=503)
        self.objects.clear()
        return 1

    def delete_by(self, filters: str) -> int:
        self.calls.append(("delete_by", filters))
        key = _DISTINCT_FILTER.match(filters).group("key")
        self.objects = {
            object_id: obj
            for object_id, obj in self.objects.items()
            if obj["distinct_key"] != key
        }
        return 2

    def save_objects(self, records) -> int:
        records = list(records)
        self._saves += 1
        self.calls.append(("save", [r["objectID"] for r in records]))
        if self._saves in self.fail_saves:
            raise UpstreamWriteError("save failed", status_code=500)
        for record in records:
            self.objects[record["objectID"]] = record
        return len(records)

    def exists(self) -> bool:
        return self.present

    def get_settings(self) -> dict:
        return {"distinct": True}

    def browse_synonyms(self):
        return iter([{"objectID": "syn-1", "type": "synonym", "synonyms": ["a", "b"]}])

    def search_rules(self):
        return iter([])

    def set_settings(self, settings) -> int:
        self.calls.append(("set_settings", settings))
        return 3


class FakeSearchClient:
    def __init__(self) -> None:
        self.indexes: Dict[str, FakeIndex] = {}

    def init_index(self, name: str) -> FakeIndex:
        return self.indexes.setdefault(name, FakeIndex(name))


class FakeContentClient:
    """Content store holding items per (site id, type)."""

    def __init__(self, types: Optional[List[str]] = None) -> None:
        self.types = types or [
            "post", "page", "attachment", "student", "faculty", "person",
            "project", "dialogue", "resource", "program", "job_listing",
        ]
        self.items: Dict[Tuple[int, str], List[ContentItem]] = {}
        self.fetches: List[Tuple[int, str, int]] = []
        self.failing: set = set()

    def add(self, tenant_id: int, item: ContentItem) -> ContentItem:
        self.items.setdefault((tenant_id, item.type), []).append(item)
        return item

    def list_content_types(self, tenant: Tenant) -> List[ContentType]:
        return [ContentType(slug=t, rest_base=t) for t in self.types]

    def fetch_page(self, tenant, type_tag, page, page_size=100, status="publish"):
        self.fetches.append((tenant.id, type_tag, page))
        if (tenant.id, type_tag) in self.failing:
            raise ContentStoreError("content store unavailable")
        matching = [
            item for item in self.items.get((tenant.id, type_tag), [])
            if item.status == status
        ]
        start = (page - 1) * page_size
        return matching[start : start + page_size]


# ---------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------

@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def tenant(settings):
    return settings.primary_tenant


@pytest.fixture
def search_client():
    return FakeSearchClient()


@pytest.fixture
def content_client():
    return FakeContentClient()
