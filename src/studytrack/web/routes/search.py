"""Content search endpoint."""

from fastapi import APIRouter, Depends, Query

from studytrack.config.app_config import AppConfig
from studytrack.db.database import Database
from studytrack.db.search_repository import search_content
from studytrack.web.auth import get_current_user_id
from studytrack.web.dependencies import get_config, get_database
from studytrack.web.errors import ERROR_RESPONSES
from studytrack.web.schemas import SearchResponse

router = APIRouter(prefix="/api/search", tags=["search"], responses=ERROR_RESPONSES)


@router.get("", response_model=SearchResponse)
def search(
    q: str = Query(default=""),
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
    config: AppConfig = Depends(get_config),
) -> SearchResponse:
    """Search articles, topics and questions by case-insensitive substring."""
    with db.connect() as conn:
        results = search_content(conn, q, user_id, limit=config.api.search_limit)
    return SearchResponse.model_validate(results)
