"""
Authentication Models

This module defines the caller identity produced by webhook JWT verification.
"""

from typing import List
from pydantic import BaseModel, Field, ConfigDict


class CallerContext(BaseModel):
    """
    Authenticated caller derived from a verified webhook JWT.
    """

    client_id: str = Field(
        ...,
        min_length=1,
        description="Client that signed the token (e.g. the WordPress plugin).",
    )

    scopes: List[str] = Field(
        default_factory=list,
        description="Scopes granted to the caller.",
    )

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=False,
        extra="forbid",
    )
