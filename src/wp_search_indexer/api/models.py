"""
API Models

Request and response models of the webhook API.
"""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, Field, ConfigDict


class ContentSavedEvent(BaseModel):
    """
    Sent by WordPress after a post has been saved.

    `post` is the REST API representation of the post (with `_embed`).
    """

    tenant_id: int = Field(..., ge=1, description="Blog id of the site.")
    post: Dict[str, Any] = Field(..., description="REST API post object.")
    is_revision: bool = False
    is_autosave: bool = False

    model_config = ConfigDict(extra="forbid")


class OperationResult(BaseModel):
    """
    Outcome of a content update.
    """
    status: Literal["updated", "deleted", "skipped", "failed"]
    count: Optional[int] = Field(default=None, ge=0)
    details: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="forbid")
