"""
Content Routes

Endpoints called by the WordPress plugin to keep the search indexes in step
with content as it is saved.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from pydantic import ValidationError

from .models import ContentSavedEvent, OperationResult
from .dependencies import get_content_sync
from ..auth.models import CallerContext
from ..auth.security import require_scopes
from ..config import Settings, get_settings
from ..content.models import ContentItem
from ..indexing.upsert import ContentSync
from ..tenants import InvalidTenantError, find_tenant

logger = logging.getLogger("indexer.api")

router = APIRouter(prefix="/content", tags=["content"])


@router.post(
    "/saved",
    summary="Reindex a saved content item",
    response_model=OperationResult,
)
def content_saved(
    event: ContentSavedEvent,
    caller: Annotated[CallerContext, Depends(require_scopes("index_write"))],
    sync: Annotated[ContentSync, Depends(get_content_sync)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> OperationResult:
    """
    Update the search records of one content item.

    Workflow
    --------
    1. Resolve the site the item belongs to.
    2. Parse the REST API post object.
    3. Replace (published) or remove (trashed) the item's records.

    Failures of the search service are reported in the result body; the
    call itself still succeeds.
    """
    try:
        tenant = find_tenant(settings.wp_sites, event.tenant_id)
    except InvalidTenantError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))

    try:
        item = ContentItem.from_rest(event.post)
    except (KeyError, ValidationError) as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Malformed post object: {type(exc).__name__}",
        )

    logger.info(
        "Content saved by %s: %s %d on site %d (%s)",
        caller.client_id,
        item.type,
        item.id,
        tenant.id,
        item.status,
    )

    result = sync.on_content_saved(
        tenant,
        item,
        is_revision=event.is_revision,
        is_autosave=event.is_autosave,
    )

    return OperationResult(
        status=result.status,
        count=result.count,
        details=result.details or None,
    )
