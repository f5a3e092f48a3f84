from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, LargeBinary
from sqlmodel import Field, SQLModel


class Task(SQLModel, table=True):
    """A single to-do item owned by one user.

    Attributes:
        id: Unique identifier for the task
        user_id: Owner; always taken from the authenticated session
        title: Task title (required, at most 200 characters)
        description: Optional detailed description (at most 1000 characters)
        is_completed: Whether the task is completed
        order: Display rank among the owner's tasks (ascending)
        image: Optional attached image bytes
        image_content_type: MIME type of ``image``
        created_at: Timestamp when the task was created
    """
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    title: str = Field(max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    is_completed: bool = Field(default=False)
    order: int = Field(default=0, index=True)
    image: Optional[bytes] = Field(default=None, sa_column=Column(LargeBinary, nullable=True))
    image_content_type: Optional[str] = Field(default=None, max_length=100)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def has_image(self) -> bool:
        return self.image is not None
