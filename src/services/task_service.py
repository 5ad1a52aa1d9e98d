"""
Task service - ownership-scoped CRUD and filtered listing of tasks.

Every query carries ``Task.user_id == user_id``. A task owned by somebody
else is reported exactly like a missing one (NotFoundError), so callers
cannot probe for other users' task ids.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from Data.database import utcnow
from Data.models import Task, TaskPriority, User
from services.errors import NotFoundError, store_errors

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100

_UPDATABLE = ("title", "description", "completed", "priority", "due_date")
_NULLABLE = ("description", "due_date")


def create_task(
    db: Session,
    user_id: int,
    title: str,
    description: str | None = None,
    priority: str = "medium",
    due_date: datetime | None = None,
) -> dict:
    """Create a new task for a user."""
    with store_errors(db):
        owner = db.query(User.id).filter(User.id == user_id).first()
    if not owner:
        raise NotFoundError("User not found")

    now = utcnow()
    task = Task(
        user_id=user_id,
        title=title,
        description=description,
        priority=TaskPriority(priority),
        due_date=_to_utc_naive(due_date),
        created_at=now,
        updated_at=now,
    )
    with store_errors(db):
        db.add(task)
        db.commit()
        db.refresh(task)
    logger.info("User %s created task %s", user_id, task.id)
    return _task_to_dict(task)


def list_tasks(
    db: Session,
    user_id: int,
    completed: bool | None = None,
    priority: str | None = None,
    due_before: datetime | None = None,
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
) -> list:
    """List a user's tasks, newest first, optionally filtered and paged.

    Filters are ANDed. ``due_before`` is inclusive and never matches tasks
    without a due date. Ties on ``created_at`` fall back to ``id`` so that
    consecutive pages never overlap.
    """
    limit, offset = _clamp_page(limit, offset)

    query = db.query(Task).filter(Task.user_id == user_id)
    if completed is not None:
        query = query.filter(Task.completed == completed)
    if priority is not None:
        query = query.filter(Task.priority == TaskPriority(priority))
    if due_before is not None:
        query = query.filter(
            Task.due_date.isnot(None),
            Task.due_date <= _to_utc_naive(due_before),
        )
    query = query.order_by(Task.created_at.desc(), Task.id.desc())

    with store_errors(db):
        tasks = query.limit(limit).offset(offset).all()
    return [_task_to_dict(t) for t in tasks]


def get_task(db: Session, task_id: int, user_id: int) -> dict:
    """Get a single task."""
    return _task_to_dict(_owned_task(db, task_id, user_id))


def update_task(db: Session, task_id: int, user_id: int,
                changes: dict) -> dict:
    """Update a task. Only keys present in ``changes`` are applied.

    ``description`` and ``due_date`` may be cleared by passing None; None for
    any other field is ignored.
    """
    task = _owned_task(db, task_id, user_id)
    for field in _UPDATABLE:
        if field not in changes:
            continue
        value = changes[field]
        if value is None and field not in _NULLABLE:
            continue
        if field == "priority":
            value = TaskPriority(value)
        elif field == "due_date":
            value = _to_utc_naive(value)
        setattr(task, field, value)
    task.updated_at = utcnow()

    with store_errors(db):
        db.commit()
        db.refresh(task)
    logger.info("User %s updated task %s", user_id, task.id)
    return _task_to_dict(task)


def delete_task(db: Session, task_id: int, user_id: int) -> None:
    """Delete a task."""
    task = _owned_task(db, task_id, user_id)
    with store_errors(db):
        db.delete(task)
        db.commit()
    logger.info("User %s deleted task %s", user_id, task_id)


def _owned_task(db: Session, task_id: int, user_id: int) -> Task:
    with store_errors(db):
        task = db.query(Task).filter(Task.id == task_id,
                                     Task.user_id == user_id).first()
    if not task:
        raise NotFoundError("Task not found")
    return task


def _clamp_page(limit: int, offset: int) -> tuple[int, int]:
    clamped = (min(max(int(limit), 1), MAX_PAGE_SIZE), max(int(offset), 0))
    if clamped != (limit, offset):
        logger.warning("Clamped pagination limit=%s offset=%s to %s",
                       limit, offset, clamped)
    return clamped


def _to_utc_naive(value: datetime | None) -> datetime | None:
    # Timestamps are stored as naive UTC
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _task_to_dict(task: Task) -> dict:
    return {
        "id": task.id,
        "user_id": task.user_id,
        "title": task.title,
        "description": task.description,
        "completed": bool(task.completed),
        "priority": task.priority.value if task.priority else "medium",
        "due_date": task.due_date.isoformat() if task.due_date else None,
        "created_at": task.created_at.isoformat() if task.created_at else None,
        "updated_at": task.updated_at.isoformat() if task.updated_at else None,
    }
