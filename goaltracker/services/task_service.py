"""
Task service: ownership-scoped task CRUD.

Every mutation that can change which tasks of a goal are completed is
followed by an explicit call into the progress reconciler.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from goaltracker.database.models import Task
from goaltracker.exceptions import ForbiddenError, NotFoundError
from goaltracker.models.schemas import PRIORITY_RANK, TaskCreateRequest, TaskUpdateRequest
from goaltracker.services.goal_service import GoalService, to_column_values
from goaltracker.services.progress_service import ProgressService
from goaltracker.utils.datetime_utils import local_day_bounds
from goaltracker.utils.logger import get_logger

logger = get_logger(__name__)


class TaskService:
    """Service for task lifecycle operations."""

    def __init__(self, db: Session, progress_service: Optional[ProgressService] = None):
        self.db = db
        self.goal_service = GoalService(db)
        self.progress_service = progress_service or ProgressService(db)

    def get_owned_task(self, task_id: str, user_id: str) -> Task:
        """Load a task and check that ``user_id`` owns it."""
        task = self.db.query(Task).filter(Task.id == str(task_id)).first()
        if task is None:
            raise NotFoundError("Task not found", context={"task_id": task_id})
        if task.user_id != str(user_id):
            logger.warning(f"User {user_id} attempted to access task {task_id}")
            raise ForbiddenError("Not authorized to access this task", context={"task_id": task_id})
        return task

    def create_task(self, goal_id: str, user_id: str, data: TaskCreateRequest) -> Task:
        goal = self.goal_service.get_owned_goal(goal_id, user_id)
        task = Task(
            goal_id=goal.id,
            user_id=goal.user_id,
            is_completed=False,
            **to_column_values(data.model_dump())
        )
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        logger.info(f"Task created: {task.id} for goal {goal.id}")

        self.progress_service.reconcile(goal.id)
        return task

    def list_tasks_for_goal(self, goal_id: str, user_id: str) -> List[Task]:
        goal = self.goal_service.get_owned_goal(goal_id, user_id)
        return (
            self.db.query(Task)
            .filter(Task.goal_id == goal.id)
            .order_by(Task.due_date.asc())
            .all()
        )

    def list_today_tasks(self, user_id: str, tz_name: str, now: Optional[datetime] = None) -> List[Task]:
        """
        Tasks of ``user_id`` due today in ``tz_name``, High priority first.

        Ties keep due-date order.
        """
        start, end = local_day_bounds(tz_name, now)
        tasks = (
            self.db.query(Task)
            .options(joinedload(Task.goal))
            .filter(
                Task.user_id == str(user_id),
                Task.due_date >= start,
                Task.due_date <= end,
            )
            .order_by(Task.due_date.asc())
            .all()
        )
        return sorted(tasks, key=lambda task: PRIORITY_RANK.get(task.priority, 0), reverse=True)

    def update_task(self, task_id: str, user_id: str, data: TaskUpdateRequest) -> Task:
        task = self.get_owned_task(task_id, user_id)
        for key, value in to_column_values(data.model_dump(exclude_unset=True)).items():
            setattr(task, key, value)
        self.db.commit()
        self.db.refresh(task)
        logger.info(f"Task updated: {task.id}")

        self.progress_service.reconcile(task.goal_id)
        return task

    def delete_task(self, task_id: str, user_id: str) -> None:
        task = self.get_owned_task(task_id, user_id)
        goal_id = task.goal_id
        self.db.delete(task)
        self.db.commit()
        logger.info(f"Task deleted: {task_id}")

        self.progress_service.reconcile(goal_id)

    def toggle_task_completion(self, task_id: str, user_id: str) -> Task:
        task = self.get_owned_task(task_id, user_id)
        task.is_completed = not task.is_completed
        self.db.commit()
        self.db.refresh(task)
        logger.info(f"Task {task.id} completion toggled to {task.is_completed}")

        self.progress_service.reconcile(task.goal_id)
        return task
