# Models package for Pydantic schemas

from .schemas import (
    GoalCategory, Priority, GoalCreateRequest, GoalUpdateRequest, GeneratePlanRequest,
    TaskCreateRequest, TaskUpdateRequest, GoalResponse, TaskResponse, TodayTaskResponse,
    SuggestedTask, PlanResponse
)
from .auth import (
    UserRegisterRequest, UserLoginRequest, UserUpdateRequest, PasswordResetRequest,
    TokenResponse, UserResponse, TokenPayload
)

__all__ = [
    "GoalCategory", "Priority", "GoalCreateRequest", "GoalUpdateRequest", "GeneratePlanRequest",
    "TaskCreateRequest", "TaskUpdateRequest", "GoalResponse", "TaskResponse", "TodayTaskResponse",
    "SuggestedTask", "PlanResponse",
    "UserRegisterRequest", "UserLoginRequest", "UserUpdateRequest", "PasswordResetRequest",
    "TokenResponse", "UserResponse", "TokenPayload"
]
