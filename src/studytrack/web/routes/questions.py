"""Question endpoints."""

import structlog
from fastapi import APIRouter, Depends, status

from studytrack.config.app_config import AppConfig
from studytrack.core.errors import NotFoundError
from studytrack.db.database import Database
from studytrack.db.questions_repository import (
    create_question,
    get_question,
    get_random_questions,
)
from studytrack.web.auth import get_current_user_id
from studytrack.web.dependencies import get_config, get_database
from studytrack.web.errors import ERROR_RESPONSES
from studytrack.web.schemas import QuestionCreate, QuestionResponse, RandomQuestionsRequest

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/questions", tags=["questions"], responses=ERROR_RESPONSES)


@router.post("/random", response_model=list[QuestionResponse])
def draw_random_questions(
    body: RandomQuestionsRequest,
    db: Database = Depends(get_database),
    config: AppConfig = Depends(get_config),
) -> list[QuestionResponse]:
    """Draw a random practice set without repeats."""
    limit = min(body.limit, config.api.max_quiz_questions)

    with db.connect() as conn:
        questions = get_random_questions(conn, body.topic_ids, body.difficulty, limit)
    return [QuestionResponse.model_validate(q) for q in questions]


@router.get("/{question_id}", response_model=QuestionResponse)
def read_question(
    question_id: str, db: Database = Depends(get_database)
) -> QuestionResponse:
    """Get a question by ID."""
    with db.connect() as conn:
        question = get_question(conn, question_id)

    if question is None:
        raise NotFoundError("Question", question_id)
    return QuestionResponse.model_validate(question)


@router.post("", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED)
def post_question(
    body: QuestionCreate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> QuestionResponse:
    """Create a multiple-choice question."""
    with db.transaction() as conn:
        question = create_question(
            conn,
            topic_id=body.topic_id,
            question=body.question,
            options=body.options,
            correct_option_index=body.correct_option_index,
            explanation=body.explanation,
            difficulty=body.difficulty,
            is_from_current_affairs=body.is_from_current_affairs,
        )

    logger.info("api.question_created", question_id=question.id, user_id=user_id)
    return QuestionResponse.model_validate(question)
