"""Task API - ownership-scoped CRUD and listing endpoints for tasks."""

from datetime import datetime
from typing import Literal
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from Data.database import get_db
from services import task_service

router = APIRouter()

Priority = Literal["low", "medium", "high"]


class TaskCreate(BaseModel):
    user_id: int
    title: str = Field(min_length=1)
    description: str | None = None
    priority: Priority = "medium"
    due_date: datetime | None = None


class TaskUpdate(BaseModel):
    user_id: int
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    completed: bool | None = None
    priority: Priority | None = None
    due_date: datetime | None = None


class TaskOut(BaseModel):
    id: int
    user_id: int
    title: str
    description: str | None
    completed: bool
    priority: Priority
    due_date: datetime | None
    created_at: datetime
    updated_at: datetime


@router.post("/", response_model=TaskOut)
async def create_task(body: TaskCreate, db: Session = Depends(get_db)):
    """Create a new task."""
    return task_service.create_task(
        db,
        body.user_id,
        title=body.title,
        description=body.description,
        priority=body.priority,
        due_date=body.due_date,
    )


@router.get("/", response_model=list[TaskOut])
async def list_tasks(
    user_id: int = Query(...),
    completed: bool | None = Query(None),
    priority: Priority | None = Query(None),
    due_before: datetime | None = Query(None),
    limit: int = Query(task_service.DEFAULT_PAGE_SIZE, ge=1,
                       le=task_service.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """List tasks, newest first, optionally filtered and paginated."""
    return task_service.list_tasks(
        db,
        user_id,
        completed=completed,
        priority=priority,
        due_before=due_before,
        limit=limit,
        offset=offset,
    )


@router.get("/{task_id}", response_model=TaskOut)
async def get_task(
    task_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    """Get a single task."""
    return task_service.get_task(db, task_id, user_id)


@router.patch("/{task_id}", response_model=TaskOut)
async def update_task(
    task_id: int,
    body: TaskUpdate,
    db: Session = Depends(get_db),
):
    """Update a task. Fields left out of the body are unchanged."""
    changes = body.model_dump(exclude_unset=True, exclude={"user_id"})
    return task_service.update_task(db, task_id, body.user_id, changes)


@router.delete("/{task_id}")
async def delete_task(
    task_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    """Delete a task."""
    task_service.delete_task(db, task_id, user_id)
    return {"success": True}
