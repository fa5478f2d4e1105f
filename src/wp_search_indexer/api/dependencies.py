from functools import lru_cache

from fastapi import Depends

from ..config import Settings, get_settings
from ..content.client import WordPressClient
from ..indexing.upsert import ContentSync
from ..records.registry import TransformerRegistry
from ..records.transformers import default_registry
from ..search.client import SearchClient


@lru_cache
def get_search_client() -> SearchClient:
    settings = get_settings()
    return SearchClient(
        settings.algolia_application_id,
        settings.algolia_admin_api_key.get_secret_value(),
        timeout=settings.http_timeout,
        poll_interval=settings.task_poll_interval,
    )


@lru_cache
def get_content_client() -> WordPressClient:
    settings = get_settings()
    password = settings.wp_api_password.get_secret_value() if settings.wp_api_password else None
    return WordPressClient(
        username=settings.wp_api_username,
        password=password,
        timeout=settings.http_timeout,
    )


@lru_cache
def get_registry() -> TransformerRegistry:
    return default_registry()


def get_content_sync(
    search_client: SearchClient = Depends(get_search_client),
    content_client: WordPressClient = Depends(get_content_client),
    registry: TransformerRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
) -> ContentSync:
    return ContentSync(search_client, content_client, registry, settings)
