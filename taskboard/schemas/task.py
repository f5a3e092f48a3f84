from datetime import datetime
from typing import Optional

from pydantic import BaseModel

# Field limits are enforced by services.validation so that every violated
# field is reported at once. user_id is never part of a request payload.


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    is_completed: Optional[bool] = None


class TaskRead(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    is_completed: bool
    order: int
    has_image: bool
    image_content_type: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_task(cls, task) -> "TaskRead":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            is_completed=task.is_completed,
            order=task.order,
            has_image=task.has_image,
            image_content_type=task.image_content_type,
            created_at=task.created_at,
        )


class ReorderResult(BaseModel):
    success: bool = True
    updated: int
