from functools import lru_cache
from typing import List, Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .tenants import Tenant, find_tenant


class Settings(BaseSettings):
    algolia_application_id: str
    algolia_admin_api_key: SecretStr
    algolia_search_only_api_key: str = ""

    # local, dev, stage, prod, etc.
    algolia_index_prefix: str = ""

    # WordPress base table prefix, shared by every site of the network
    wp_table_prefix: str = "wp_"

    # JSON list, e.g. [{"id": 1, "base_url": "https://example.org"}]
    wp_sites: List[Tenant] = []
    wp_primary_site_id: int = 1

    # Optional application password for the REST API
    wp_api_username: Optional[str] = None
    wp_api_password: Optional[SecretStr] = None

    search_config_dir: str = "algolia-json"

    excluded_content_types: List[str] = ["job_listing"]
    people_content_types: List[str] = ["student", "faculty", "person"]

    reindex_page_size: int = 100

    http_timeout: float = 30.0
    task_poll_interval: float = 0.5

    # Shared secret for webhook JWTs signed by the WordPress plugin
    webhook_jwt_secret: Optional[SecretStr] = None
    jwt_algo: str = "HS256"

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

    @property
    def primary_tenant(self) -> Tenant:
        """
        The main site of the network.

        Raises InvalidTenantError when wp_primary_site_id is not in wp_sites.
        """
        return find_tenant(self.wp_sites, self.wp_primary_site_id)


@lru_cache
def get_settings() -> Settings:
    return Settings()
