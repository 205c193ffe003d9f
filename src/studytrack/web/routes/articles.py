"""Article endpoints."""

import structlog
from fastapi import APIRouter, Depends, Query, status

from studytrack.config.app_config import AppConfig
from studytrack.core.errors import NotFoundError
from studytrack.db.articles_repository import (
    create_article,
    get_article,
    get_article_topic_ids,
    get_articles,
    get_featured_articles,
)
from studytrack.db.database import Database
from studytrack.web.auth import get_current_user_id
from studytrack.web.dependencies import get_config, get_database
from studytrack.web.errors import ERROR_RESPONSES
from studytrack.web.schemas import ArticleCreate, ArticleDetail, ArticleResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/articles", tags=["articles"], responses=ERROR_RESPONSES)


@router.get("", response_model=list[ArticleResponse])
def list_articles(
    limit: int | None = Query(default=None, ge=0),
    offset: int = Query(default=0, ge=0),
    db: Database = Depends(get_database),
    config: AppConfig = Depends(get_config),
) -> list[ArticleResponse]:
    """List articles, newest first."""
    page_size = config.api.default_page_size if limit is None else limit
    page_size = min(page_size, config.api.max_page_size)

    with db.connect() as conn:
        articles = get_articles(conn, limit=page_size, offset=offset)
    return [ArticleResponse.model_validate(a) for a in articles]


# Declared before /{article_id} so "featured" is not read as an id
@router.get("/featured", response_model=list[ArticleResponse])
def list_featured_articles(
    db: Database = Depends(get_database),
    config: AppConfig = Depends(get_config),
) -> list[ArticleResponse]:
    """List the most recent featured articles."""
    with db.connect() as conn:
        articles = get_featured_articles(conn, limit=config.api.featured_limit)
    return [ArticleResponse.model_validate(a) for a in articles]


@router.get("/{article_id}", response_model=ArticleDetail)
def read_article(article_id: str, db: Database = Depends(get_database)) -> ArticleDetail:
    """Get an article with the topics it is linked to."""
    with db.connect() as conn:
        article = get_article(conn, article_id)
        if article is None:
            raise NotFoundError("Article", article_id)
        topic_ids = get_article_topic_ids(conn, article_id)

    detail = ArticleDetail.model_validate(article)
    detail.topic_ids = topic_ids
    return detail


@router.post("", response_model=ArticleDetail, status_code=status.HTTP_201_CREATED)
def post_article(
    body: ArticleCreate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> ArticleDetail:
    """Create an article linked to zero or more topics."""
    with db.transaction() as conn:
        article = create_article(
            conn,
            title=body.title,
            content=body.content,
            summary=body.summary,
            published_at=body.published_at,
            read_time=body.read_time,
            image_url=body.image_url,
            source=body.source,
            is_featured=body.is_featured,
            topic_ids=body.topic_ids,
        )
        topic_ids = get_article_topic_ids(conn, article.id)

    logger.info("api.article_created", article_id=article.id, user_id=user_id)

    detail = ArticleDetail.model_validate(article)
    detail.topic_ids = topic_ids
    return detail
