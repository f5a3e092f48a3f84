import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile, status

from ..config import get_settings
from ..crud import TaskStore
from ..dependencies.auth import get_current_user, get_task_store
from ..models import User
from ..schemas.task import ReorderResult, TaskCreate, TaskRead, TaskUpdate
from ..services.validation import parse_order_payload, validate_image, validate_task_fields

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[TaskRead])
async def list_tasks(
    user: User = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
):
    """Get the caller's tasks in display order."""
    return [TaskRead.from_task(task) for task in store.list_for_owner(user.id)]


@router.post("/", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    task: TaskCreate,
    user: User = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
):
    fields = validate_task_fields(title=task.title, description=task.description)
    created = store.add_task(user.id, fields["title"], fields["description"])
    return TaskRead.from_task(created)


@router.post("/reorder", response_model=ReorderResult)
async def reorder_tasks(
    request: Request,
    user: User = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
):
    """Persist a new top-to-bottom order for the caller's tasks.

    The body is a JSON array of task ids, e.g. ``[3, 1, 2]``. Ids that are
    unknown or belong to another user are ignored. An empty array is a no-op.
    """
    task_ids = parse_order_payload(await request.body())
    logger.info(f"Reorder request from user {user.id} with {len(task_ids)} ids")
    updated = store.apply_order(user.id, task_ids)
    return ReorderResult(updated=updated)


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: int,
    user: User = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
):
    return TaskRead.from_task(store.get_for_owner(user.id, task_id))


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: int,
    task_update: TaskUpdate,
    user: User = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
):
    changes = task_update.model_dump(exclude_unset=True)
    text_fields = {k: changes[k] for k in ("title", "description") if k in changes}
    updates = validate_task_fields(**text_fields)
    if changes.get("is_completed") is not None:
        updates["is_completed"] = changes["is_completed"]
    return TaskRead.from_task(store.update_task(user.id, task_id, **updates))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    user: User = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
):
    store.delete_task(user.id, task_id)


@router.patch("/{task_id}/toggle-complete", response_model=TaskRead)
async def toggle_task_complete(
    task_id: int,
    user: User = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
):
    return TaskRead.from_task(store.toggle_complete(user.id, task_id))


@router.put("/{task_id}/image", response_model=TaskRead)
async def upload_task_image(
    task_id: int,
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
):
    # Ownership first, so a foreign id is a 404 rather than an upload error.
    store.get_for_owner(user.id, task_id)
    data = await file.read()
    content_type = validate_image(file.content_type, data, get_settings().max_image_bytes)
    return TaskRead.from_task(store.set_image(user.id, task_id, data, content_type))


@router.get("/{task_id}/image")
async def get_task_image(
    task_id: int,
    user: User = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
):
    task = store.get_for_owner(user.id, task_id)
    if not task.has_image:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task has no image"
        )
    return Response(content=task.image, media_type=task.image_content_type)


@router.delete("/{task_id}/image", response_model=TaskRead)
async def delete_task_image(
    task_id: int,
    user: User = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
):
    return TaskRead.from_task(store.clear_image(user.id, task_id))
