"""Topic endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Query, status

from studytrack.core.enums import Difficulty
from studytrack.core.errors import NotFoundError
from studytrack.db.articles_repository import get_articles_by_topic
from studytrack.db.database import Database
from studytrack.db.questions_repository import get_questions_by_topic
from studytrack.db.syllabus_repository import create_topic, get_topic, set_topic_parent
from studytrack.web.auth import get_current_user_id
from studytrack.web.dependencies import get_database
from studytrack.web.errors import ERROR_RESPONSES
from studytrack.web.schemas import (
    ArticleResponse,
    QuestionResponse,
    TopicCreate,
    TopicParentUpdate,
    TopicResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/topics", tags=["topics"], responses=ERROR_RESPONSES)


@router.get("/{topic_id}", response_model=TopicResponse)
def read_topic(topic_id: str, db: Database = Depends(get_database)) -> TopicResponse:
    """Get a topic by ID."""
    with db.connect() as conn:
        topic = get_topic(conn, topic_id)

    if topic is None:
        raise NotFoundError("Topic", topic_id)
    return TopicResponse.model_validate(topic)


@router.post("", response_model=TopicResponse, status_code=status.HTTP_201_CREATED)
def post_topic(
    body: TopicCreate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> TopicResponse:
    """Create a topic, optionally under a parent topic of the same subject."""
    with db.transaction() as conn:
        topic = create_topic(
            conn,
            subject_id=body.subject_id,
            title=body.title,
            order_index=body.order_index,
            parent_topic_id=body.parent_topic_id,
            description=body.description,
            content=body.content,
            estimated_read_time=body.estimated_read_time,
            difficulty=body.difficulty,
        )

    logger.info("api.topic_created", topic_id=topic.id, user_id=user_id)
    return TopicResponse.model_validate(topic)


@router.patch("/{topic_id}/parent", response_model=TopicResponse)
def patch_topic_parent(
    topic_id: str,
    body: TopicParentUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> TopicResponse:
    """Move a topic under another parent, refusing moves that form a cycle."""
    with db.transaction() as conn:
        topic = set_topic_parent(conn, topic_id, body.parent_topic_id)
    return TopicResponse.model_validate(topic)


@router.get("/{topic_id}/articles", response_model=list[ArticleResponse])
def list_topic_articles(
    topic_id: str, db: Database = Depends(get_database)
) -> list[ArticleResponse]:
    """List the articles linked to a topic."""
    with db.connect() as conn:
        articles = get_articles_by_topic(conn, topic_id)
    return [ArticleResponse.model_validate(a) for a in articles]


@router.get("/{topic_id}/questions", response_model=list[QuestionResponse])
def list_topic_questions(
    topic_id: str,
    difficulty: Difficulty | None = Query(default=None),
    db: Database = Depends(get_database),
) -> list[QuestionResponse]:
    """List a topic's questions, optionally of one difficulty."""
    with db.connect() as conn:
        questions = get_questions_by_topic(conn, topic_id, difficulty)
    return [QuestionResponse.model_validate(q) for q in questions]
