"""Current-user endpoint."""

from fastapi import APIRouter, Depends

from studytrack.core.errors import UnauthorizedError
from studytrack.db.database import Database
from studytrack.db.users_repository import get_user
from studytrack.web.auth import get_current_user_id
from studytrack.web.dependencies import get_database
from studytrack.web.errors import ERROR_RESPONSES
from studytrack.web.schemas import UserResponse

router = APIRouter(prefix="/api/auth", tags=["auth"], responses=ERROR_RESPONSES)


@router.get("/user", response_model=UserResponse)
def get_auth_user(
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> UserResponse:
    """Get the profile of the authenticated user."""
    with db.connect() as conn:
        user = get_user(conn, user_id)

    # Deleted between token check and read
    if user is None:
        raise UnauthorizedError("User not found")

    return UserResponse.model_validate(user)
