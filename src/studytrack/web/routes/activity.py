"""Activity feed endpoint."""

from fastapi import APIRouter, Depends, Query

from studytrack.config.app_config import AppConfig
from studytrack.db.activity_repository import get_user_activity
from studytrack.db.database import Database
from studytrack.web.auth import get_current_user_id
from studytrack.web.dependencies import get_config, get_database
from studytrack.web.errors import ERROR_RESPONSES
from studytrack.web.schemas import ActivityResponse

router = APIRouter(prefix="/api/activity", tags=["activity"], responses=ERROR_RESPONSES)


@router.get("", response_model=list[ActivityResponse])
def list_activity(
    limit: int | None = Query(default=None, ge=0),
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
    config: AppConfig = Depends(get_config),
) -> list[ActivityResponse]:
    """List the caller's recent activity, newest first."""
    page_size = config.api.default_page_size if limit is None else limit
    page_size = min(page_size, config.api.max_page_size)

    with db.connect() as conn:
        entries = get_user_activity(conn, user_id, limit=page_size)
    return [ActivityResponse.model_validate(e) for e in entries]
