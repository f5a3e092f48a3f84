from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session

from ..crud import TaskStore
from ..db.session import get_session
from ..errors import AuthorizationError
from ..models import User
from ..services.session import ACCESS_TOKEN_COOKIE, decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)


def get_optional_user(
    request: Request,
    bearer_token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_session),
) -> Optional[User]:
    """Resolve the caller from a bearer header or the session cookie.

    Returns None when no credentials were sent at all.
    """
    token = bearer_token or request.cookies.get(ACCESS_TOKEN_COOKIE)
    if not token:
        return None
    user = db.get(User, decode_access_token(token))
    if user is None:
        raise AuthorizationError("User no longer exists")
    return user


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Require an authenticated caller. The owner scope always comes from here."""
    if user is None:
        raise AuthorizationError()
    return user


def get_task_store(db: Session = Depends(get_session)) -> TaskStore:
    return TaskStore(db)
