"""
Goal service: ownership-scoped goal CRUD.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List
from sqlalchemy.orm import Session
from goaltracker.database.models import Goal, Task
from goaltracker.exceptions import ForbiddenError, NotFoundError
from goaltracker.models.schemas import GoalCreateRequest, GoalUpdateRequest
from goaltracker.utils.datetime_utils import to_naive_utc
from goaltracker.utils.logger import get_logger

logger = get_logger(__name__)

# Columns that may not be cleared with an explicit null
NON_NULLABLE_FIELDS = {"title", "category", "target_date", "priority", "due_date", "is_completed"}


def to_column_values(updates: Dict[str, Any]) -> Dict[str, Any]:
    """Turn request values into column values: enums to strings, datetimes to naive UTC."""
    values = {}
    for key, value in updates.items():
        if value is None and key in NON_NULLABLE_FIELDS:
            continue
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, datetime):
            value = to_naive_utc(value)
        values[key] = value
    return values


class GoalService:
    """Service for goal lifecycle operations."""

    def __init__(self, db: Session):
        self.db = db

    def get_owned_goal(self, goal_id: str, user_id: str) -> Goal:
        """Load a goal and check that ``user_id`` owns it."""
        goal = self.db.query(Goal).filter(Goal.id == str(goal_id)).first()
        if goal is None:
            raise NotFoundError("Goal not found", context={"goal_id": goal_id})
        if goal.user_id != str(user_id):
            logger.warning(f"User {user_id} attempted to access goal {goal_id}")
            raise ForbiddenError("Not authorized to access this goal", context={"goal_id": goal_id})
        return goal

    def list_goals(self, user_id: str) -> List[Goal]:
        return (
            self.db.query(Goal)
            .filter(Goal.user_id == str(user_id))
            .order_by(Goal.created_at.desc())
            .all()
        )

    def create_goal(self, user_id: str, data: GoalCreateRequest) -> Goal:
        values = to_column_values(data.model_dump())
        goal = Goal(
            user_id=str(user_id),
            progress=0,
            is_completed=False,
            **values
        )
        self.db.add(goal)
        self.db.commit()
        self.db.refresh(goal)

        logger.info(f"Goal created: {goal.id} for user {user_id}")
        return goal

    def get_goal(self, goal_id: str, user_id: str) -> Goal:
        return self.get_owned_goal(goal_id, user_id)

    def update_goal(self, goal_id: str, user_id: str, data: GoalUpdateRequest) -> Goal:
        goal = self.get_owned_goal(goal_id, user_id)
        for key, value in to_column_values(data.model_dump(exclude_unset=True)).items():
            setattr(goal, key, value)
        self.db.commit()
        self.db.refresh(goal)

        logger.info(f"Goal updated: {goal.id}")
        return goal

    def delete_goal(self, goal_id: str, user_id: str) -> None:
        """Delete a goal and every task bound to it."""
        goal = self.get_owned_goal(goal_id, user_id)
        deleted_tasks = (
            self.db.query(Task)
            .filter(Task.goal_id == goal.id)
            .delete()
        )
        self.db.delete(goal)
        self.db.commit()

        logger.info(f"Goal deleted: {goal_id} (with {deleted_tasks} tasks)")

    def complete_goal(self, goal_id: str, user_id: str) -> Goal:
        """
        Mark a goal and all of its tasks as done.

        This is a manual override: progress is forced to 100 without going
        through task-derived reconciliation.
        """
        goal = self.get_owned_goal(goal_id, user_id)
        (
            self.db.query(Task)
            .filter(Task.goal_id == goal.id)
            .update({Task.is_completed: True})
        )
        goal.is_completed = True
        goal.progress = 100
        self.db.commit()
        self.db.refresh(goal)

        logger.info(f"Goal completed: {goal.id}")
        return goal
