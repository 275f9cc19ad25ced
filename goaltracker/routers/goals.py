from datetime import datetime
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from goaltracker.services.database_service import get_db
from goaltracker.services.goal_service import GoalService
from goaltracker.services.task_service import TaskService
from goaltracker.services import planner
from goaltracker.middleware.auth_middleware import get_current_user_required
from goaltracker.models.schemas import (
    GoalCreateRequest,
    GoalUpdateRequest,
    GeneratePlanRequest,
    TaskCreateRequest,
    GoalEnvelope,
    GoalListEnvelope,
    TaskEnvelope,
    TaskListEnvelope,
    PlanEnvelope,
    PlanResponse,
    SuggestedTaskListEnvelope,
    DeleteEnvelope,
)
from goaltracker.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api/goals", tags=["goals"])


def _timeframe(target_date: datetime) -> str:
    return f"until {target_date.date().isoformat()}"


@router.get("", response_model=GoalListEnvelope)
async def list_goals(
    current_user: dict = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Get all goals of the current user, newest first."""
    goals = GoalService(db).list_goals(current_user["id"])
    return {"success": True, "count": len(goals), "data": goals}


@router.post("", response_model=GoalEnvelope, status_code=status.HTTP_201_CREATED)
async def create_goal(
    request: GoalCreateRequest,
    current_user: dict = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Create a goal owned by the current user."""
    goal = GoalService(db).create_goal(current_user["id"], request)
    return {"success": True, "data": goal}


@router.post("/generate-plan", response_model=PlanEnvelope)
async def generate_plan(
    request: GeneratePlanRequest,
    http_request: Request,
    current_user: dict = Depends(get_current_user_required)
):
    """Suggest a four-milestone plan for a prospective goal. Nothing is stored."""
    plan = planner.generate_plan(
        title=request.title,
        description=request.description,
        target_date=request.target_date,
        category=request.category.value,
    )

    ai_client = getattr(http_request.app.state, "ai_client", None)
    if ai_client is not None:
        plan["ai_plan"] = await ai_client.generate_plan_text(request.title, _timeframe(request.target_date))

    return {"success": True, "data": PlanResponse(**plan)}


@router.get("/{goal_id}", response_model=GoalEnvelope)
async def get_goal(
    goal_id: str,
    current_user: dict = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    goal = GoalService(db).get_goal(goal_id, current_user["id"])
    return {"success": True, "data": goal}


@router.put("/{goal_id}", response_model=GoalEnvelope)
async def update_goal(
    goal_id: str,
    request: GoalUpdateRequest,
    current_user: dict = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Update editable goal fields. Progress and completion are derived and ignored here."""
    goal = GoalService(db).update_goal(goal_id, current_user["id"], request)
    return {"success": True, "data": goal}


@router.delete("/{goal_id}", response_model=DeleteEnvelope)
async def delete_goal(
    goal_id: str,
    current_user: dict = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Delete a goal together with all of its tasks."""
    GoalService(db).delete_goal(goal_id, current_user["id"])
    return {"success": True, "data": {}}


@router.patch("/{goal_id}/complete", response_model=GoalEnvelope)
async def complete_goal(
    goal_id: str,
    current_user: dict = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Mark a goal and every one of its tasks as completed."""
    goal = GoalService(db).complete_goal(goal_id, current_user["id"])
    return {"success": True, "data": goal}


@router.get("/{goal_id}/tasks", response_model=TaskListEnvelope)
async def list_goal_tasks(
    goal_id: str,
    current_user: dict = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Get the tasks of a goal ordered by due date."""
    tasks = TaskService(db).list_tasks_for_goal(goal_id, current_user["id"])
    return {"success": True, "count": len(tasks), "data": tasks}


@router.post("/{goal_id}/tasks", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
async def create_goal_task(
    goal_id: str,
    request: TaskCreateRequest,
    current_user: dict = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    task = TaskService(db).create_task(goal_id, current_user["id"], request)
    return {"success": True, "data": task}


@router.post("/{goal_id}/generate-tasks", response_model=SuggestedTaskListEnvelope)
async def generate_goal_tasks(
    goal_id: str,
    current_user: dict = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Suggest three tasks spread between now and the goal's target date. Nothing is stored."""
    goal = GoalService(db).get_goal(goal_id, current_user["id"])
    suggestions = planner.suggest_tasks(goal)
    return {"success": True, "count": len(suggestions), "data": suggestions}
