"""Quiz attempt endpoints."""

from fastapi import APIRouter, Depends, Query, status

from studytrack.config.app_config import AppConfig
from studytrack.core.study import submit_quiz_attempt
from studytrack.db.database import Database
from studytrack.db.quiz_repository import get_user_quiz_attempts
from studytrack.web.auth import get_current_user_id
from studytrack.web.dependencies import get_config, get_database
from studytrack.web.errors import ERROR_RESPONSES
from studytrack.web.schemas import QuizAttemptCreate, QuizAttemptResponse

router = APIRouter(prefix="/api/quiz", tags=["quiz"], responses=ERROR_RESPONSES)


@router.post(
    "/attempt", response_model=QuizAttemptResponse, status_code=status.HTTP_201_CREATED
)
def post_quiz_attempt(
    body: QuizAttemptCreate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> QuizAttemptResponse:
    """Record a finished quiz."""
    attempt = submit_quiz_attempt(
        db,
        user_id,
        question_ids=body.question_ids,
        answers=body.answers,
        score=body.score,
        total_questions=body.total_questions,
        difficulty=body.difficulty,
        subjects=body.subjects,
    )
    return QuizAttemptResponse.model_validate(attempt)


@router.get("/attempts", response_model=list[QuizAttemptResponse])
def list_quiz_attempts(
    limit: int | None = Query(default=None, ge=0),
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
    config: AppConfig = Depends(get_config),
) -> list[QuizAttemptResponse]:
    """List the caller's quiz attempts, most recent first."""
    page_size = config.api.default_page_size if limit is None else limit
    page_size = min(page_size, config.api.max_page_size)

    with db.connect() as conn:
        attempts = get_user_quiz_attempts(conn, user_id, limit=page_size)
    return [QuizAttemptResponse.model_validate(a) for a in attempts]
