"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from pawprint.core.errors import Unauthorized
from pawprint.core.security import decode_access_token
from pawprint.db.session import get_db
from pawprint.models import User
from pawprint.services.fanout import FanoutNotifier, get_fanout_notifier
from pawprint.services.media import (
    ContentModerator,
    ImageStore,
    get_content_moderator,
    get_image_store,
)

# HTTP Bearer scheme; missing credentials are reported as 401 by get_current_user.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def get_current_user(credentials: CredentialsDep, db: SessionDep) -> User:
    """Resolve the authenticated user from the bearer token.

    Raises:
        Unauthorized: If the token is missing, invalid or names no user.
    """
    if credentials is None:
        raise Unauthorized()
    user_id = decode_access_token(credentials.credentials)
    user = db.get(User, user_id)
    if user is None:
        raise Unauthorized("User not found.")
    return user


# Type aliases for common dependencies
CurrentUserDep = Annotated[User, Depends(get_current_user)]
ImageStoreDep = Annotated[ImageStore, Depends(get_image_store)]
ModeratorDep = Annotated[ContentModerator, Depends(get_content_moderator)]
FanoutDep = Annotated[FanoutNotifier, Depends(get_fanout_notifier)]
