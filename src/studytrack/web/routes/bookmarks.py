"""Bookmark endpoints. All routes act on the caller's own bookmarks."""

from fastapi import APIRouter, Depends, Response, status

from studytrack.core.enums import ResourceType
from studytrack.core.study import add_bookmark, drop_bookmark
from studytrack.db.bookmarks_repository import get_user_bookmarks, is_bookmarked
from studytrack.db.database import Database
from studytrack.web.auth import get_current_user_id
from studytrack.web.dependencies import get_database
from studytrack.web.errors import ERROR_RESPONSES
from studytrack.web.schemas import BookmarkCreate, BookmarkResponse, BookmarkStatusResponse

router = APIRouter(prefix="/api/bookmarks", tags=["bookmarks"], responses=ERROR_RESPONSES)


@router.get("", response_model=list[BookmarkResponse])
def list_bookmarks(
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> list[BookmarkResponse]:
    """List the caller's bookmarks, newest first."""
    with db.connect() as conn:
        bookmarks = get_user_bookmarks(conn, user_id)
    return [BookmarkResponse.model_validate(b) for b in bookmarks]


@router.post("", response_model=BookmarkResponse, status_code=status.HTTP_201_CREATED)
def post_bookmark(
    body: BookmarkCreate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> BookmarkResponse:
    """Bookmark a resource. Bookmarking it again returns the same bookmark."""
    bookmark = add_bookmark(db, user_id, body.resource_type, body.resource_id)
    return BookmarkResponse.model_validate(bookmark)


@router.delete(
    "/{resource_type}/{resource_id}", status_code=status.HTTP_204_NO_CONTENT
)
def delete_bookmark(
    resource_type: ResourceType,
    resource_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> Response:
    """Remove a bookmark. Removing a missing bookmark also succeeds."""
    drop_bookmark(db, user_id, resource_type, resource_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{resource_type}/{resource_id}/check", response_model=BookmarkStatusResponse)
def check_bookmark(
    resource_type: ResourceType,
    resource_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> BookmarkStatusResponse:
    """Tell whether the caller has bookmarked a resource."""
    with db.connect() as conn:
        found = is_bookmarked(conn, user_id, resource_type, resource_id)
    return BookmarkStatusResponse(is_bookmarked=found)
