"""Pydantic schemas for the Web API.

Request bodies check shape and types only; range rules (percentages,
non-negative minutes, score bounds) are enforced by the store so every
caller gets the same answer.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, model_validator

from studytrack.core.enums import Difficulty, ResourceType

# Largest integer accepted in a request body
MAX_INT = 2**31 - 1


# =============================================================================
# USER SCHEMAS
# =============================================================================


class UserResponse(BaseModel):
    """Response for a user."""

    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    streak_days: int
    total_study_minutes: int
    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


# =============================================================================
# SYLLABUS SCHEMAS
# =============================================================================


class SubjectCreate(BaseModel):
    """Request body for creating a subject."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    icon: str = Field(..., min_length=1, max_length=100)
    color: str = Field(..., min_length=1, max_length=50)
    order_index: int = Field(..., ge=-MAX_INT, le=MAX_INT)


class SubjectResponse(BaseModel):
    """Response for a subject."""

    id: str
    name: str
    description: str | None = None
    icon: str
    color: str
    order_index: int = Field(..., ge=-MAX_INT, le=MAX_INT)
    created_at: str

    model_config = {"from_attributes": True}


class TopicCreate(BaseModel):
    """Request body for creating a topic."""

    subject_id: str
    parent_topic_id: str | None = None
    title: str = Field(..., min_length=1, max_length=300)
    description: str | None = None
    content: str | None = None
    order_index: int = Field(..., ge=-MAX_INT, le=MAX_INT)
    estimated_read_time: int | None = Field(default=None, ge=0, le=MAX_INT)
    difficulty: Difficulty = Difficulty.BASIC


class TopicParentUpdate(BaseModel):
    """Request body for moving a topic; null moves it to the top level."""

    parent_topic_id: str | None


class TopicResponse(BaseModel):
    """Response for a topic."""

    id: str
    subject_id: str
    parent_topic_id: str | None = None
    title: str
    description: str | None = None
    content: str | None = None
    order_index: int
    estimated_read_time: int | None = None
    difficulty: Difficulty
    created_at: str

    model_config = {"from_attributes": True}


# =============================================================================
# ARTICLE SCHEMAS
# =============================================================================


class ArticleCreate(BaseModel):
    """Request body for creating an article."""

    title: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)
    summary: str = Field(..., min_length=1)
    image_url: str | None = None
    source: str | None = None
    published_at: datetime
    read_time: int = Field(..., ge=0, le=MAX_INT)
    is_featured: bool = False
    topic_ids: list[str] = Field(default_factory=list)


class ArticleResponse(BaseModel):
    """Response for an article."""

    id: str
    title: str
    content: str
    summary: str
    image_url: str | None = None
    source: str | None = None
    published_at: str
    read_time: int
    is_featured: bool
    created_at: str

    model_config = {"from_attributes": True}


class ArticleDetail(ArticleResponse):
    """Article with the topics it is linked to."""

    topic_ids: list[str] = Field(default_factory=list)


# =============================================================================
# QUESTION SCHEMAS
# =============================================================================


class QuestionCreate(BaseModel):
    """Request body for creating a question."""

    topic_id: str
    question: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=2)
    correct_option_index: int = Field(..., ge=0, le=MAX_INT)
    explanation: str
    difficulty: Difficulty = Difficulty.BASIC
    is_from_current_affairs: bool = False

    @model_validator(mode="after")
    def _answer_in_options(self) -> "QuestionCreate":
        if self.correct_option_index >= len(self.options):
            raise ValueError("correct_option_index must point into options")
        return self


class RandomQuestionsRequest(BaseModel):
    """Request body for drawing a random practice set."""

    topic_ids: list[str] = Field(..., min_length=1)
    difficulty: Difficulty
    limit: int = Field(..., ge=1, le=MAX_INT)


class QuestionResponse(BaseModel):
    """Response for a question."""

    id: str
    topic_id: str
    question: str
    options: list[str]
    correct_option_index: int
    explanation: str
    difficulty: Difficulty
    is_from_current_affairs: bool
    created_at: str

    model_config = {"from_attributes": True}


# =============================================================================
# BOOKMARK & NOTE SCHEMAS
# =============================================================================


class BookmarkCreate(BaseModel):
    """Request body for bookmarking a resource."""

    resource_type: ResourceType
    resource_id: str = Field(..., min_length=1)


class BookmarkResponse(BaseModel):
    """Response for a bookmark."""

    id: str
    user_id: str
    resource_type: ResourceType
    resource_id: str
    created_at: str

    model_config = {"from_attributes": True}


class BookmarkStatusResponse(BaseModel):
    """Whether the caller has bookmarked a resource."""

    is_bookmarked: bool


class NoteCreate(BaseModel):
    """Request body for creating a note."""

    resource_type: ResourceType
    resource_id: str = Field(..., min_length=1)
    title: str | None = Field(default=None, max_length=300)
    content: str = Field(..., min_length=1)


class NoteUpdate(BaseModel):
    """Request body for editing a note. A missing title keeps the old one."""

    content: str = Field(..., min_length=1)
    title: str | None = Field(default=None, max_length=300)


class NoteResponse(BaseModel):
    """Response for a note."""

    id: str
    user_id: str
    resource_type: ResourceType
    resource_id: str
    title: str | None = None
    content: str
    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


# =============================================================================
# PROGRESS SCHEMAS
# =============================================================================


class ProgressUpdate(BaseModel):
    """Request body for recording a study session on a topic."""

    completion_percentage: float
    time_spent: int = Field(..., ge=-MAX_INT, le=MAX_INT)


class ProgressResponse(BaseModel):
    """Response for a topic progress row."""

    id: str
    user_id: str
    topic_id: str
    completion_percentage: float
    total_time_spent: int
    last_studied_at: str | None = None
    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


class SubjectCompletionResponse(BaseModel):
    """Average completion of one subject."""

    subject_id: str
    subject_name: str
    topic_count: int
    completion_percentage: float

    model_config = {"from_attributes": True}


class StatsResponse(BaseModel):
    """Aggregated study statistics."""

    total_attempts: int
    total_questions: int
    correct_answers: int
    average_score: int
    best_score: int
    study_streak: int
    total_study_minutes: int
    bookmark_count: int
    note_count: int
    subjects: list[SubjectCompletionResponse]
    weekly_activity: list[int]

    model_config = {"from_attributes": True}


# =============================================================================
# QUIZ SCHEMAS
# =============================================================================


class QuizAttemptCreate(BaseModel):
    """Request body for submitting a finished quiz."""

    question_ids: list[str]
    answers: list[int | None]
    score: int = Field(..., ge=-MAX_INT, le=MAX_INT)
    total_questions: int = Field(..., ge=-MAX_INT, le=MAX_INT)
    difficulty: Difficulty
    subjects: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _answers_match_questions(self) -> "QuizAttemptCreate":
        if len(self.question_ids) != len(self.answers):
            raise ValueError("question_ids and answers must have the same length")
        return self


class QuizAttemptResponse(BaseModel):
    """Response for a quiz attempt."""

    id: str
    user_id: str
    question_ids: list[str]
    answers: list[int | None]
    score: int
    total_questions: int
    difficulty: Difficulty
    subjects: list[str]
    completed_at: str

    model_config = {"from_attributes": True}


# =============================================================================
# ACTIVITY & SEARCH SCHEMAS
# =============================================================================


class ActivityResponse(BaseModel):
    """Response for an activity log entry."""

    id: str
    user_id: str
    activity_type: str
    resource_type: str | None = None
    resource_id: str | None = None
    metadata: dict[str, Any] | None = None
    created_at: str

    model_config = {"from_attributes": True}


class SearchResponse(BaseModel):
    """Search matches grouped by kind."""

    articles: list[ArticleResponse]
    topics: list[TopicResponse]
    questions: list[QuestionResponse]

    model_config = {"from_attributes": True}


# =============================================================================
# HEALTH & ERROR SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )


class ErrorResponse(BaseModel):
    """Body of every error response."""

    kind: str
    message: str
