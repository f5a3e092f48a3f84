"""Authentication endpoints.

Tokens are returned in the response body for API clients and also set as
an HttpOnly cookie so the browser pages and tasks.js are authenticated.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from ..config import get_settings
from ..db.session import get_session
from ..dependencies.auth import get_current_user
from ..errors import AuthorizationError
from ..models import User
from ..schemas.user import Token, UserCreate, UserOut
from ..services.session import (
    ACCESS_TOKEN_COOKIE,
    authenticate_user,
    create_access_token,
    register_user,
)

router = APIRouter()


def set_auth_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def register(payload: UserCreate, db: Session = Depends(get_session)):
    user = register_user(db, payload.username, payload.password)
    return UserOut(id=user.id, username=user.username, created_at=user.created_at)


@router.post("/token", response_model=Token)
async def login(payload: UserCreate, response: Response, db: Session = Depends(get_session)):
    user = authenticate_user(db, payload.username, payload.password)
    if not user:
        raise AuthorizationError("Incorrect username or password")
    token = create_access_token(user.id)
    set_auth_cookie(response, token)
    return Token(access_token=token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response):
    response.delete_cookie(ACCESS_TOKEN_COOKIE)


@router.get("/me", response_model=UserOut)
async def me(user: User = Depends(get_current_user)):
    return UserOut(id=user.id, username=user.username, created_at=user.created_at)
