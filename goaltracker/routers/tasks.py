from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from goaltracker.config import get_settings
from goaltracker.services.database_service import get_db
from goaltracker.services.task_service import TaskService
from goaltracker.middleware.auth_middleware import get_current_user_required
from goaltracker.models.schemas import (
    TaskUpdateRequest,
    TaskEnvelope,
    TodayTaskListEnvelope,
    DeleteEnvelope,
)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("/today", response_model=TodayTaskListEnvelope)
async def get_today_tasks(
    tz: Optional[str] = Query(None, description="IANA timezone of the caller, e.g. Europe/Berlin"),
    current_user: dict = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Get the current user's tasks due today, highest priority first."""
    tz_name = tz or get_settings().DEFAULT_TIMEZONE
    tasks = TaskService(db).list_today_tasks(current_user["id"], tz_name)
    return {"success": True, "count": len(tasks), "data": tasks}


@router.put("/{task_id}", response_model=TaskEnvelope)
async def update_task(
    task_id: str,
    request: TaskUpdateRequest,
    current_user: dict = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    task = TaskService(db).update_task(task_id, current_user["id"], request)
    return {"success": True, "data": task}


@router.patch("/{task_id}", response_model=TaskEnvelope)
async def toggle_task(
    task_id: str,
    current_user: dict = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Flip the completion state of a task."""
    task = TaskService(db).toggle_task_completion(task_id, current_user["id"])
    return {"success": True, "data": task}


@router.delete("/{task_id}", response_model=DeleteEnvelope)
async def delete_task(
    task_id: str,
    current_user: dict = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    TaskService(db).delete_task(task_id, current_user["id"])
    return {"success": True, "data": {}}
