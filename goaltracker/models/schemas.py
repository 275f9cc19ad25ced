from pydantic import BaseModel, Field, validator
from typing import List, Optional, Dict, Any
from datetime import datetime
from enum import Enum
from goaltracker.utils.datetime_utils import as_utc


class GoalCategory(str, Enum):
    PERSONAL = "Personal"
    PROFESSIONAL = "Professional"
    HEALTH = "Health"
    FINANCIAL = "Financial"
    EDUCATIONAL = "Educational"
    OTHER = "Other"


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


# Sort key for "High first" ordering
PRIORITY_RANK = {
    Priority.HIGH.value: 3,
    Priority.MEDIUM.value: 2,
    Priority.LOW.value: 1,
}


def _strip_title(v):
    if v is None:
        return v
    if not v.strip():
        raise ValueError('Title cannot be empty')
    return v.strip()


# Request Models
class GoalCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200, description="Goal title")
    description: Optional[str] = Field(None, max_length=5000, description="Goal description")
    category: GoalCategory = Field(GoalCategory.OTHER, description="Goal category")
    target_date: datetime = Field(..., description="Date the goal should be reached by")
    priority: Priority = Field(Priority.MEDIUM, description="Goal priority")

    @validator('title')
    def validate_title(cls, v):
        return _strip_title(v)


class GoalUpdateRequest(BaseModel):
    """Editable goal fields. progress and is_completed are derived and not accepted here."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    category: Optional[GoalCategory] = None
    target_date: Optional[datetime] = None
    priority: Optional[Priority] = None

    @validator('title')
    def validate_title(cls, v):
        return _strip_title(v)


class GeneratePlanRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    target_date: datetime = Field(..., alias="targetDate")
    category: GoalCategory = GoalCategory.OTHER

    class Config:
        populate_by_name = True


class TaskCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200, description="Task title")
    description: Optional[str] = Field(None, max_length=5000, description="Task description")
    due_date: datetime = Field(..., description="Task due date")
    priority: Priority = Field(Priority.MEDIUM, description="Task priority")

    @validator('title')
    def validate_title(cls, v):
        return _strip_title(v)


class TaskUpdateRequest(BaseModel):
    """Editable task fields. goal_id is immutable and not accepted here."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    due_date: Optional[datetime] = None
    priority: Optional[Priority] = None
    is_completed: Optional[bool] = None

    @validator('title')
    def validate_title(cls, v):
        return _strip_title(v)


# Response Models
class GoalResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    category: str
    target_date: datetime
    is_completed: bool
    progress: int
    priority: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @validator('target_date', 'created_at', 'updated_at')
    def mark_utc(cls, v):
        return as_utc(v)

    class Config:
        from_attributes = True


class TaskResponse(BaseModel):
    id: str
    goal_id: str
    user_id: str
    title: str
    description: Optional[str] = None
    due_date: datetime
    is_completed: bool
    priority: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @validator('due_date', 'created_at', 'updated_at')
    def mark_utc(cls, v):
        return as_utc(v)

    class Config:
        from_attributes = True


class TodayTaskResponse(TaskResponse):
    goal_title: Optional[str] = None


class SuggestedTask(BaseModel):
    """A non-persisted task suggestion."""
    title: str
    description: str
    due_date: datetime
    priority: str

    @validator('due_date')
    def mark_utc(cls, v):
        return as_utc(v)


class PlanResponse(BaseModel):
    title: str
    description: Optional[str] = None
    category: str
    target_date: datetime
    tasks: List[SuggestedTask]
    ai_plan: Optional[str] = None

    @validator('target_date')
    def mark_utc(cls, v):
        return as_utc(v)


# Envelopes
class GoalEnvelope(BaseModel):
    success: bool = True
    data: GoalResponse


class GoalListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[GoalResponse]


class TaskEnvelope(BaseModel):
    success: bool = True
    data: TaskResponse


class TaskListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[TaskResponse]


class TodayTaskListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[TodayTaskResponse]


class SuggestedTaskListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[SuggestedTask]


class PlanEnvelope(BaseModel):
    success: bool = True
    data: PlanResponse


class DeleteEnvelope(BaseModel):
    success: bool = True
    data: Dict[str, Any] = Field(default_factory=dict)

