from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import List, Optional

from app.schemas.pagination import Pagination

GOAL_STATUS_PATTERN = "^(NotStarted|InProgress|OnTrack|AtRisk|Completed|Cancelled)$"

class GoalCreate(BaseModel):
    employee_id: str = Field(..., min_length=1)
    performance_review_id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    target_date: date
    status: str = Field("NotStarted", pattern=GOAL_STATUS_PATTERN)
    progress: int = Field(0, ge=0, le=100)
    completion_date: Optional[date] = None
    notes: Optional[str] = None

class GoalUpdate(BaseModel):
    performance_review_id: Optional[int] = None
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    target_date: Optional[date] = None
    status: Optional[str] = Field(None, pattern=GOAL_STATUS_PATTERN)
    progress: Optional[int] = Field(None, ge=0, le=100)
    completion_date: Optional[date] = None
    notes: Optional[str] = None

class GoalBrief(BaseModel):
    id: int
    employee_id: str
    performance_review_id: Optional[int]
    title: str
    description: Optional[str]
    target_date: date
    status: str
    progress: int
    completion_date: Optional[date]
    notes: Optional[str]

    model_config = {"from_attributes": True}

class GoalReviewBrief(BaseModel):
    id: int
    period: Optional[str]
    start_date: date
    end_date: date

    model_config = {"from_attributes": True}

class GoalEmployeeBrief(BaseModel):
    employee_id: str
    first_name: str
    last_name: str
    middle_name: Optional[str] = None

    model_config = {"from_attributes": True}

class GoalResponse(GoalBrief):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    employee: Optional[GoalEmployeeBrief] = None
    review: Optional[GoalReviewBrief] = None

class GoalListResponse(BaseModel):
    goals: List[GoalResponse]
    pagination: Pagination
