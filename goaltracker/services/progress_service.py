"""
Progress reconciliation between a goal and its tasks.

A goal's ``progress`` is the share of its tasks that are completed, as a
whole percentage rounded half up, and ``is_completed`` holds exactly when the
goal has at least one task and every task is done. The task service calls
``reconcile`` explicitly after each task create, update, delete or toggle.
"""
from typing import Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from goaltracker.database.models import Goal, Task
from goaltracker.utils.logger import get_logger

logger = get_logger(__name__)


def compute_progress(total: int, completed: int) -> Tuple[int, bool]:
    """Return ``(progress, is_completed)`` for ``completed`` done tasks out of ``total``."""
    if total <= 0:
        return 0, False
    # integer half-up rounding of 100 * completed / total
    progress = (200 * completed + total) // (2 * total)
    return progress, progress == 100


class ProgressService:
    """Recomputes derived goal state from task completion."""

    def __init__(self, db: Session):
        self.db = db

    def count_tasks(self, goal_id: str) -> Tuple[int, int]:
        total = self.db.query(func.count(Task.id)).filter(Task.goal_id == goal_id).scalar()
        completed = (
            self.db.query(func.count(Task.id))
            .filter(Task.goal_id == goal_id, Task.is_completed.is_(True))
            .scalar()
        )
        return int(total or 0), int(completed or 0)

    def reconcile(self, goal_id: str) -> Optional[Goal]:
        """
        Recompute and persist ``progress`` and ``is_completed`` for a goal.

        A goal that no longer exists is skipped silently and ``None`` returned.
        """
        goal = self.db.query(Goal).filter(Goal.id == goal_id).first()
        if goal is None:
            logger.debug(f"Skipping progress reconciliation for missing goal {goal_id}")
            return None

        total, completed = self.count_tasks(goal_id)
        goal.progress, goal.is_completed = compute_progress(total, completed)
        self.db.commit()
        self.db.refresh(goal)

        logger.info(f"Goal {goal_id} progress: {completed}/{total} tasks -> {goal.progress}%")
        return goal
