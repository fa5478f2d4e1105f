from fastapi import APIRouter, Depends

from ..config import Settings, get_settings
from ..search.naming import GLOBAL_INDEX, PEOPLE_INDEX, index_name

router = APIRouter(tags=["health"])


@router.get("/health")
def health(settings: Settings = Depends(get_settings)):
    prefix = (settings.algolia_index_prefix, settings.wp_table_prefix)
    return {
        "status": "ok",
        "indexes": [index_name(GLOBAL_INDEX, *prefix), index_name(PEOPLE_INDEX, *prefix)],
    }
