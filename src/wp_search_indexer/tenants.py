"""
Multi-Site Tenants

This module describes the sites of a WordPress multisite network that feed
the search indexes.

Architecture
------------
- Each site is identified by its numeric blog id (e.g. 1 for the main site)
- Each site exposes its own REST API under {base_url}/wp-json/
- Tenants are passed explicitly to every fetch and transform call; there is
  no ambient "current blog"
- People content lives on the primary site only
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator

from .core.errors import IndexerError


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class InvalidTenantError(IndexerError, ValueError):
    """Raised when a site definition is missing or malformed."""


# ---------------------------------------------------------------------
# Tenant Model
# ---------------------------------------------------------------------

class Tenant(BaseModel):
    """
    One site of the multisite network.
    """

    id: int = Field(
        ...,
        ge=1,
        description="WordPress blog id of the site.",
    )

    base_url: str = Field(
        ...,
        min_length=1,
        description="Public root URL of the site, without /wp-json.",
    )

    name: Optional[str] = Field(
        default=None,
        description="Site name, used as the title of the front page record.",
    )

    front_page_id: Optional[int] = Field(
        default=None,
        description="Post id of the static front page (page_on_front).",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    @field_validator("base_url", mode="before")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """
        Require an absolute http(s) URL and drop any trailing slash.
        """
        if not v or not isinstance(v, str):
            raise InvalidTenantError("base_url is required")

        v = v.strip()

        if not v.startswith(("http://", "https://")):
            raise InvalidTenantError(
                f"Invalid base_url '{v}': must be an absolute http(s) URL"
            )

        return v.rstrip("/")

    @property
    def rest_root(self) -> str:
        return f"{self.base_url}/wp-json"


def find_tenant(tenants, tenant_id: int) -> Tenant:
    """
    Return the configured site with the given blog id.

    Raises
    ------
    InvalidTenantError
        If no such site is configured.
    """
    for tenant in tenants:
        if tenant.id == tenant_id:
            return tenant
    raise InvalidTenantError(f"Unknown site id: {tenant_id}")
