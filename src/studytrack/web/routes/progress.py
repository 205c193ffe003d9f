"""Study progress endpoints."""

from fastapi import APIRouter, Depends

from studytrack.core.stats import get_progress_stats
from studytrack.core.study import record_study_session
from studytrack.db.database import Database
from studytrack.db.progress_repository import get_user_progress
from studytrack.web.auth import get_current_user_id
from studytrack.web.dependencies import get_database
from studytrack.web.errors import ERROR_RESPONSES
from studytrack.web.schemas import ProgressResponse, ProgressUpdate, StatsResponse

router = APIRouter(prefix="/api/progress", tags=["progress"], responses=ERROR_RESPONSES)


@router.get("", response_model=list[ProgressResponse])
def list_progress(
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> list[ProgressResponse]:
    """List the caller's progress rows, most recently studied first."""
    with db.connect() as conn:
        rows = get_user_progress(conn, user_id)
    return [ProgressResponse.model_validate(p) for p in rows]


@router.get("/stats", response_model=StatsResponse)
def read_stats(
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> StatsResponse:
    """Aggregated quiz, study-time and activity statistics."""
    return StatsResponse.model_validate(get_progress_stats(db, user_id))


@router.put("/{topic_id}", response_model=ProgressResponse)
def put_progress(
    topic_id: str,
    body: ProgressUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> ProgressResponse:
    """Record a study session on a topic.

    Sets the completion percentage, adds the minutes to the topic total
    and to the user's overall study time.
    """
    progress = record_study_session(
        db, user_id, topic_id, body.completion_percentage, body.time_spent
    )
    return ProgressResponse.model_validate(progress)
