"""Server-rendered pages and HTML fragments."""

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlmodel import Session

from ..config import get_settings
from ..crud import TaskStore
from ..db.session import get_session
from ..dependencies.auth import get_current_user, get_optional_user, get_task_store
from ..errors import AuthorizationError, ConflictError, ValidationError
from ..models import User
from ..services.session import (
    ACCESS_TOKEN_COOKIE,
    authenticate_user,
    create_access_token,
    register_user,
)
from ..services.validation import validate_image, validate_task_fields
from .auth import set_auth_cookie

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=TEMPLATES_DIR)

router = APIRouter()


def get_page_user(
    request: Request,
    db: Session = Depends(get_session),
) -> Optional[User]:
    """Like get_optional_user, but a stale cookie just means "logged out"."""
    try:
        return get_optional_user(request, None, db)
    except AuthorizationError:
        return None


def _login_redirect() -> RedirectResponse:
    response = RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return response


@router.get("/", response_class=HTMLResponse)
def index(
    request: Request,
    user: Optional[User] = Depends(get_page_user),
    store: TaskStore = Depends(get_task_store),
):
    """Render the task list in persisted order."""
    if user is None:
        return _login_redirect()
    return templates.TemplateResponse(
        request,
        "index.html",
        {"user": user, "tasks": store.list_for_owner(user.id), "errors": []},
    )


@router.post("/tasks/new", response_class=HTMLResponse)
async def create_task_form(
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    image: Optional[UploadFile] = File(None),
    user: Optional[User] = Depends(get_page_user),
    store: TaskStore = Depends(get_task_store),
):
    """Create a task from the HTML form, optionally with an image."""
    if user is None:
        return _login_redirect()

    image_data = await image.read() if image is not None and image.filename else b""
    try:
        fields = validate_task_fields(title=title, description=description)
        content_type = None
        if image_data:
            content_type = validate_image(image.content_type, image_data, get_settings().max_image_bytes)
    except ValidationError as e:
        return templates.TemplateResponse(
            request,
            "index.html",
            {"user": user, "tasks": store.list_for_owner(user.id), "errors": e.errors},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    store.add_task(
        user.id,
        fields["title"],
        fields["description"],
        image=image_data or None,
        image_content_type=content_type,
    )
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/tasks/{task_id}/detail", response_class=HTMLResponse)
def task_detail(
    request: Request,
    task_id: int,
    user: User = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
):
    """HTML fragment loaded into the detail panel when a card is clicked."""
    task = store.get_for_owner(user.id, task_id)
    return templates.TemplateResponse(request, "_task_detail.html", {"task": task})


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {"mode": "login", "errors": []})


@router.post("/login", response_class=HTMLResponse)
def login_form(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_session),
):
    user = authenticate_user(db, username, password)
    if not user:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"mode": "login", "errors": [{"field": "username", "message": "Incorrect username or password"}]},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    set_auth_cookie(response, create_access_token(user.id))
    return response


@router.get("/register", response_class=HTMLResponse)
def register_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {"mode": "register", "errors": []})


@router.post("/register", response_class=HTMLResponse)
def register_form(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_session),
):
    try:
        user = register_user(db, username, password)
    except ValidationError as e:
        errors, code = e.errors, status.HTTP_400_BAD_REQUEST
    except ConflictError as e:
        errors, code = [{"field": "username", "message": e.message}], status.HTTP_409_CONFLICT
    else:
        response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
        set_auth_cookie(response, create_access_token(user.id))
        return response
    return templates.TemplateResponse(
        request, "login.html", {"mode": "register", "errors": errors}, status_code=code
    )


@router.post("/logout")
def logout_form():
    return _login_redirect()
