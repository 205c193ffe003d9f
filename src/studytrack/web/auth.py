"""Bearer-token identity for personal-data routes.

Tokens are HS256 JWTs whose ``sub`` claim is the user id. They are minted
by the CLI (``studytrack issue-token``); the API only verifies them.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from studytrack.config.app_config import AuthConfig
from studytrack.core.errors import UnauthorizedError
from studytrack.db.database import Database
from studytrack.db.users_repository import user_exists
from studytrack.web.dependencies import get_config, get_database

logger = structlog.get_logger(__name__)

bearer = HTTPBearer(auto_error=False)


def create_access_token(
    user_id: str, auth: AuthConfig, now: datetime | None = None
) -> str:
    """Create a signed access token for a user."""
    now = now or datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=auth.token_ttl_minutes)).timestamp()),
    }
    return jwt.encode(payload, auth.get_secret(), algorithm=auth.algorithm)


def decode_access_token(token: str, auth: AuthConfig) -> str:
    """Verify a token and return its user id.

    Raises:
        UnauthorizedError: Expired, malformed or badly signed token
    """
    try:
        payload = jwt.decode(token, auth.get_secret(), algorithms=[auth.algorithm])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired") from None
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid token") from None

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise UnauthorizedError("Invalid token")
    return user_id


def get_current_user_id(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Database = Depends(get_database),
    config=Depends(get_config),
) -> str:
    """FastAPI dependency resolving the caller's verified user id.

    Raises:
        UnauthorizedError: Missing token, invalid token or unknown user
    """
    if creds is None:
        raise UnauthorizedError("Missing or invalid Authorization header")

    user_id = decode_access_token(creds.credentials, config.auth)

    with db.connect() as conn:
        if not user_exists(conn, user_id):
            logger.info("auth.unknown_user", user_id=user_id)
            raise UnauthorizedError("User not found")

    return user_id
