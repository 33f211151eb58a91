from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Any, List, Optional

from app.schemas.goal import GoalBrief
from app.schemas.pagination import Pagination


class EmployeeBrief(BaseModel):
    employee_id: str
    first_name: str
    last_name: str
    middle_name: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None

    model_config = {"from_attributes": True}


class ReviewerBrief(BaseModel):
    id: int
    name: Optional[str]
    email: str

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------- KPIs

class KPICreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    category: str = Field(..., pattern="^(kpi|behavior|attendance|other)$")
    weight: float = Field(..., ge=0, le=100)
    max_score: float = Field(..., gt=0)
    min_score: float = Field(0.0, ge=0)
    is_active: bool = True

class KPIUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = Field(None, pattern="^(kpi|behavior|attendance|other)$")
    weight: Optional[float] = Field(None, ge=0, le=100)
    max_score: Optional[float] = Field(None, gt=0)
    min_score: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None

class KPIResponse(BaseModel):
    id: int
    name: str
    description: str
    category: str
    weight: float
    max_score: float
    min_score: float
    is_active: bool
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class KPIListResponse(BaseModel):
    kpis: List[KPIResponse]
    pagination: Pagination


# ---------------------------------------------------------------- Metrics

METRIC_TYPE_PATTERN = "^(KPI|Behavior|Attendance|Quality|Productivity|CustomerSatisfaction|Other)$"

class PerformanceMetricCreate(BaseModel):
    employee_id: str = Field(..., min_length=1)
    metric_name: str = Field(..., min_length=1, max_length=200)
    metric_type: str = Field(..., pattern=METRIC_TYPE_PATTERN)
    value: float
    target: Optional[float] = None
    unit: Optional[str] = None
    period: str = Field(..., min_length=1)
    period_start: date
    period_end: date
    notes: Optional[str] = None

class PerformanceMetricUpdate(BaseModel):
    metric_name: Optional[str] = Field(None, min_length=1, max_length=200)
    metric_type: Optional[str] = Field(None, pattern=METRIC_TYPE_PATTERN)
    value: Optional[float] = None
    target: Optional[float] = None
    unit: Optional[str] = None
    period: Optional[str] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    notes: Optional[str] = None

class PerformanceMetricResponse(BaseModel):
    id: Optional[int] = None
    employee_id: str
    metric_name: str
    metric_type: str
    value: float
    target: Optional[float] = None
    unit: Optional[str] = None
    period: Optional[str] = None
    period_start: date
    period_end: date
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    employee: Optional[EmployeeBrief] = None

    model_config = {"from_attributes": True}

class PerformanceMetricListResponse(BaseModel):
    metrics: List[PerformanceMetricResponse]
    pagination: Pagination


# ---------------------------------------------------------------- Scores

class CategoryScoreRequest(BaseModel):
    employee_id: str = Field(..., min_length=1)
    start_date: date
    end_date: date

class CategoryBreakdown(BaseModel):
    category: str  # "KPI", "Behavior" or "Attendance"
    metrics: List[PerformanceMetricResponse]
    calculated_score: Optional[float]

class CategoryScoreResult(BaseModel):
    kpi_score: Optional[float]
    behavior_score: Optional[float]
    attendance_score: Optional[float]
    metrics: List[PerformanceMetricResponse]
    breakdown: List[CategoryBreakdown]


# ---------------------------------------------------------------- Reviews

REVIEW_STATUS_PATTERN = "^(draft|pending|completed|approved)$"

class PerformanceReviewCreate(BaseModel):
    employee_id: str = Field(..., min_length=1)
    reviewer_id: Optional[int] = None
    period: Optional[str] = None
    start_date: date
    end_date: date
    kpi_score: Optional[float] = Field(None, ge=0, le=100)
    behavior_score: Optional[float] = Field(None, ge=0, le=100)
    attendance_score: Optional[float] = Field(None, ge=0, le=100)
    total_score: Optional[float] = Field(None, ge=0, le=100)
    status: Optional[str] = Field(None, pattern=REVIEW_STATUS_PATTERN)
    remarks: Optional[str] = None
    employee_comments: Optional[str] = None
    goals: Optional[Any] = None
    achievements: Optional[Any] = None
    improvement_areas: Optional[Any] = None

class PerformanceReviewUpdate(BaseModel):
    reviewer_id: Optional[int] = None
    period: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    kpi_score: Optional[float] = Field(None, ge=0, le=100)
    behavior_score: Optional[float] = Field(None, ge=0, le=100)
    attendance_score: Optional[float] = Field(None, ge=0, le=100)
    total_score: Optional[float] = Field(None, ge=0, le=100)
    status: Optional[str] = Field(None, pattern=REVIEW_STATUS_PATTERN)
    remarks: Optional[str] = None
    employee_comments: Optional[str] = None
    goals: Optional[Any] = None
    achievements: Optional[Any] = None
    improvement_areas: Optional[Any] = None
    reviewed_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None

class EmployeeReviewResponse(BaseModel):
    """Review as shown to the reviewed employee: no reviewer details."""
    id: int
    employee_id: str
    period: Optional[str]
    start_date: date
    end_date: date
    kpi_score: Optional[float]
    behavior_score: Optional[float]
    attendance_score: Optional[float]
    total_score: Optional[float]
    status: str
    remarks: Optional[str]
    employee_comments: Optional[str]
    goals: Optional[Any] = None
    achievements: Optional[Any] = None
    improvement_areas: Optional[Any] = None
    reviewed_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    employee: Optional[EmployeeBrief] = None
    performance_goals: List[GoalBrief] = []

    model_config = {"from_attributes": True}

class PerformanceReviewResponse(EmployeeReviewResponse):
    reviewer_id: Optional[int]
    reviewer: Optional[ReviewerBrief] = None

class PerformanceReviewListResponse(BaseModel):
    reviews: List[PerformanceReviewResponse]
    pagination: Pagination


# ---------------------------------------------------------------- Dashboard

class RankedReview(BaseModel):
    id: int
    employee_id: str
    employee_name: str
    department: str
    position: str
    total_score: float
    kpi_score: float
    behavior_score: float
    attendance_score: float
    period: Optional[str] = None
    improvement_areas: List[Any] = []

class DashboardSummaryResponse(BaseModel):
    average_kpi_score: float
    average_total_score: float
    total_reviews: int
    completed_reviews: int
    employees_up_for_promotion: int
    employees_needing_training: int
    top_performers: List[RankedReview]
    employees_needing_improvement: List[RankedReview]


# ---------------------------------------------------------------- History

class EmployeeHistoryResponse(BaseModel):
    reviews: List[PerformanceReviewResponse]
    goals: List[GoalBrief]
    metrics: List[PerformanceMetricResponse]

class MyPerformanceSummary(BaseModel):
    total_reviews: int
    completed_reviews: int
    pending_reviews: int
    average_score: float
    average_kpi_score: float
    total_metrics: int

class MyPerformanceResponse(BaseModel):
    employee_id: str
    reviews: List[EmployeeReviewResponse]
    metrics: List[PerformanceMetricResponse]
    summary: MyPerformanceSummary
