"""Storage layer for a user's tasks."""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .errors import PersistenceError, TaskNotFoundError
from .models import Task

logger = logging.getLogger(__name__)

# Ids outside a signed 64-bit INTEGER cannot name a row and are never bound.
MIN_TASK_ID = -(2 ** 63)
MAX_TASK_ID = 2 ** 63 - 1


class TaskStore:
    """Owner-scoped access to tasks.

    Every method takes the owner id explicitly; a task that belongs to a
    different owner is treated exactly like a missing one.

    Attributes:
        db: The SQLModel session used for reads and writes
    """

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, action: str) -> None:
        """Commit the pending unit of work or roll all of it back."""
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Rolled back {action}: {e}")
            raise PersistenceError(f"Could not {action}") from e

    def list_for_owner(self, owner_id: int) -> List[Task]:
        """Get an owner's tasks in display order.

        Sorted by order value ascending, ties broken by creation time and
        then id so the result is deterministic.
        """
        statement = (
            select(Task)
            .where(Task.user_id == owner_id)
            .order_by(Task.order, Task.created_at, Task.id)
        )
        return list(self.db.exec(statement).all())

    def get_for_owner(self, owner_id: int, task_id: int) -> Task:
        """Get one task of an owner.

        Raises:
            TaskNotFoundError: If the task is missing or owned by someone else
        """
        if not MIN_TASK_ID <= task_id <= MAX_TASK_ID:
            raise TaskNotFoundError(task_id)
        task = self.db.get(Task, task_id)
        if task is None or task.user_id != owner_id:
            raise TaskNotFoundError(task_id)
        return task

    def next_order(self, owner_id: int) -> int:
        """Order value that places a new task after the owner's existing ones."""
        statement = select(func.max(Task.order)).where(Task.user_id == owner_id)
        current_max = self.db.exec(statement).one()
        return 0 if current_max is None else current_max + 1

    def add_task(
        self,
        owner_id: int,
        title: str,
        description: Optional[str] = None,
        image: Optional[bytes] = None,
        image_content_type: Optional[str] = None,
    ) -> Task:
        """Create a task at the end of the owner's list in a single commit.

        Args:
            owner_id: The authenticated owner
            title: Validated task title
            description: Optional validated description
            image: Optional validated image bytes
            image_content_type: MIME type of ``image``

        Returns:
            The newly created Task
        """
        task = Task(
            user_id=owner_id,
            title=title,
            description=description,
            order=self.next_order(owner_id),
            image=image,
            image_content_type=image_content_type if image is not None else None,
        )
        self.db.add(task)
        self._commit("create task")
        self.db.refresh(task)
        logger.info(f"Created task {task.id} for user {owner_id} at order {task.order}")
        return task

    def update_task(self, owner_id: int, task_id: int, **updates) -> Task:
        """Update a task's editable fields.

        Only title, description and is_completed may change here; order has
        its own operation and the owner never changes.
        """
        task = self.get_for_owner(owner_id, task_id)
        for field in ("title", "description", "is_completed"):
            if field in updates:
                setattr(task, field, updates[field])
        self.db.add(task)
        self._commit("update task")
        self.db.refresh(task)
        logger.info(f"Updated task {task_id} for user {owner_id}: {sorted(updates)}")
        return task

    def toggle_complete(self, owner_id: int, task_id: int) -> Task:
        task = self.get_for_owner(owner_id, task_id)
        task.is_completed = not task.is_completed
        self.db.add(task)
        self._commit("toggle task")
        self.db.refresh(task)
        return task

    def delete_task(self, owner_id: int, task_id: int) -> None:
        """Delete a task. Siblings are not renumbered; gaps are fine."""
        task = self.get_for_owner(owner_id, task_id)
        self.db.delete(task)
        self._commit("delete task")
        logger.info(f"Deleted task {task_id} for user {owner_id}")

    def set_image(self, owner_id: int, task_id: int, data: bytes, content_type: str) -> Task:
        task = self.get_for_owner(owner_id, task_id)
        task.image = data
        task.image_content_type = content_type
        self.db.add(task)
        self._commit("store image")
        self.db.refresh(task)
        return task

    def clear_image(self, owner_id: int, task_id: int) -> Task:
        task = self.get_for_owner(owner_id, task_id)
        task.image = None
        task.image_content_type = None
        self.db.add(task)
        self._commit("remove image")
        self.db.refresh(task)
        return task

    def apply_order(self, owner_id: int, ordered_ids: Iterable[int]) -> int:
        """Rewrite order values from a top-to-bottom list of task ids.

        Ids that are unknown or belong to another owner are skipped. Each
        accepted id gets its zero-based rank among the accepted ids, and a
        repeated id keeps its first position, so the result depends only on
        the input sequence and applying it twice changes nothing.

        All updates are committed together; on failure nothing is written.

        Args:
            owner_id: The authenticated owner
            ordered_ids: Task ids in the desired display order

        Returns:
            Number of tasks whose order was written

        Raises:
            PersistenceError: If the commit fails (the update is rolled back)
        """
        ordered_ids = list(ordered_ids)
        if not ordered_ids:
            return 0

        storable = {task_id for task_id in ordered_ids if MIN_TASK_ID <= task_id <= MAX_TASK_ID}
        statement = select(Task).where(Task.user_id == owner_id, Task.id.in_(storable))
        owned = {task.id: task for task in self.db.exec(statement).all()}

        rank = 0
        seen = set()
        for task_id in ordered_ids:
            if task_id in seen:
                continue
            seen.add(task_id)
            task = owned.get(task_id)
            if task is None:
                logger.debug(f"Skipping task {task_id} in reorder for user {owner_id}")
                continue
            task.order = rank
            self.db.add(task)
            rank += 1

        self._commit("reorder tasks")
        logger.info(f"Reordered {rank} tasks for user {owner_id}")
        return rank
