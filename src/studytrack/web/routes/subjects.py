"""Subject endpoints."""

import structlog
from fastapi import APIRouter, Depends, status

from studytrack.db.database import Database
from studytrack.db.syllabus_repository import create_subject, get_subjects, get_topics_by_subject
from studytrack.web.auth import get_current_user_id
from studytrack.web.dependencies import get_database
from studytrack.web.errors import ERROR_RESPONSES
from studytrack.web.schemas import SubjectCreate, SubjectResponse, TopicResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/subjects", tags=["subjects"], responses=ERROR_RESPONSES)


@router.get("", response_model=list[SubjectResponse])
def list_subjects(db: Database = Depends(get_database)) -> list[SubjectResponse]:
    """List all subjects in display order."""
    with db.connect() as conn:
        subjects = get_subjects(conn)
    return [SubjectResponse.model_validate(s) for s in subjects]


@router.post("", response_model=SubjectResponse, status_code=status.HTTP_201_CREATED)
def post_subject(
    body: SubjectCreate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> SubjectResponse:
    """Create a subject."""
    with db.transaction() as conn:
        subject = create_subject(
            conn,
            name=body.name,
            icon=body.icon,
            color=body.color,
            order_index=body.order_index,
            description=body.description,
        )

    logger.info("api.subject_created", subject_id=subject.id, user_id=user_id)
    return SubjectResponse.model_validate(subject)


@router.get("/{subject_id}/topics", response_model=list[TopicResponse])
def list_subject_topics(
    subject_id: str, db: Database = Depends(get_database)
) -> list[TopicResponse]:
    """List a subject's topics in display order."""
    with db.connect() as conn:
        topics = get_topics_by_subject(conn, subject_id)
    return [TopicResponse.model_validate(t) for t in topics]
