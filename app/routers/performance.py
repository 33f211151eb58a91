from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from datetime import date
from typing import Optional
from app.database import get_db
from app.core.auth import get_current_user, get_current_admin
from app.models.employee import Employee
from app.models.performance import PerformanceMetric, PerformanceReview
from app.models.user import User
from app.schemas.performance import (
    CategoryScoreRequest, CategoryScoreResult,
    PerformanceReviewCreate, PerformanceReviewUpdate,
    PerformanceReviewResponse, PerformanceReviewListResponse,
    DashboardSummaryResponse, EmployeeHistoryResponse, MyPerformanceResponse
)
from app.services import performance as performance_service
from app.services.performance import get_employee, get_review, paginate
from app.services.scoring import calculate_total_score

router = APIRouter(prefix="/performance", tags=["performance"])

# Review columns that may be cleared by sending null
NULLABLE_REVIEW_FIELDS = {
    "reviewer_id", "period", "kpi_score", "behavior_score", "attendance_score", "total_score",
    "remarks", "employee_comments", "goals", "achievements", "improvement_areas",
    "reviewed_at", "approved_at",
}

MY_PERFORMANCE_LIMIT = 100


def check_date_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise HTTPException(400, "Start date must be before or equal to end date")


async def check_reviewer(db: AsyncSession, reviewer_id: Optional[int]) -> None:
    if reviewer_id is not None and not await db.get(User, reviewer_id):
        raise HTTPException(404, "Reviewer not found")


# ---------------------------------------------------------------- Scores

@router.post("/reviews/calculate-scores", response_model=CategoryScoreResult)
async def calculate_scores(
    request: CategoryScoreRequest,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    check_date_range(request.start_date, request.end_date)
    return await performance_service.calculate_category_scores(
        db, request.employee_id, request.start_date, request.end_date
    )


# ---------------------------------------------------------------- Reviews

@router.get("/reviews", response_model=PerformanceReviewListResponse)
async def list_reviews(
    employee_id: Optional[str] = None,
    reviewer_id: Optional[int] = None,
    status: Optional[str] = None,
    start_date_from: Optional[date] = None,
    start_date_to: Optional[date] = None,
    end_date_from: Optional[date] = None,
    end_date_to: Optional[date] = None,
    period: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    query = select(PerformanceReview).order_by(PerformanceReview.created_at.desc(), PerformanceReview.id.desc())
    if employee_id:
        query = query.where(PerformanceReview.employee_id == employee_id)
    if reviewer_id:
        query = query.where(PerformanceReview.reviewer_id == reviewer_id)
    if status and status != "all":
        query = query.where(PerformanceReview.status == status)
    if start_date_from:
        query = query.where(PerformanceReview.start_date >= start_date_from)
    if start_date_to:
        query = query.where(PerformanceReview.start_date <= start_date_to)
    if end_date_from:
        query = query.where(PerformanceReview.end_date >= end_date_from)
    if end_date_to:
        query = query.where(PerformanceReview.end_date <= end_date_to)
    if period:
        query = query.where(PerformanceReview.period == period)
    if search:
        pattern = f"%{search}%"
        matching_employees = select(Employee.employee_id).where(or_(
            Employee.first_name.ilike(pattern),
            Employee.last_name.ilike(pattern),
        ))
        query = query.where(or_(
            PerformanceReview.period.ilike(pattern),
            PerformanceReview.remarks.ilike(pattern),
            PerformanceReview.employee_id.in_(matching_employees),
        ))

    reviews, pagination = await paginate(db, query, page, limit)
    return {"reviews": reviews, "pagination": pagination}


@router.post("/reviews", response_model=PerformanceReviewResponse, status_code=201)
async def create_review(
    review_in: PerformanceReviewCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    check_date_range(review_in.start_date, review_in.end_date)
    if not await get_employee(db, review_in.employee_id):
        raise HTTPException(404, "Employee not found")

    await check_reviewer(db, review_in.reviewer_id)
    reviewer_id = review_in.reviewer_id if review_in.reviewer_id is not None else current_user.id

    total_score = review_in.total_score
    if total_score is None:
        total_score = calculate_total_score(
            review_in.kpi_score, review_in.behavior_score, review_in.attendance_score
        )

    review = PerformanceReview(
        **review_in.model_dump(exclude={"reviewer_id", "total_score", "status"}),
        reviewer_id=reviewer_id,
        total_score=total_score,
        status=review_in.status or "draft",
        created_by=str(current_user.id),
    )
    db.add(review)
    await db.commit()
    return await get_review(db, review.id)


@router.get("/reviews/{review_id}", response_model=PerformanceReviewResponse)
async def get_review_detail(
    review_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    review = await get_review(db, review_id)
    if not review:
        raise HTTPException(404, "Performance review not found")
    return review


@router.patch("/reviews/{review_id}", response_model=PerformanceReviewResponse)
async def update_review(
    review_id: int,
    review_in: PerformanceReviewUpdate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    review = await get_review(db, review_id)
    if not review:
        raise HTTPException(404, "Performance review not found")

    changes = {
        field: value
        for field, value in review_in.model_dump(exclude_unset=True).items()
        if value is not None or field in NULLABLE_REVIEW_FIELDS
    }
    check_date_range(
        changes.get("start_date", review.start_date),
        changes.get("end_date", review.end_date),
    )
    await check_reviewer(db, changes.get("reviewer_id"))

    performance_service.apply_review_update(review, changes)
    review.updated_by = str(current_user.id)

    await db.commit()
    return await get_review(db, review_id)


@router.delete("/reviews/{review_id}", status_code=204)
async def delete_review(
    review_id: int,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    review = await get_review(db, review_id)
    if not review:
        raise HTTPException(404, "Performance review not found")
    await db.delete(review)
    await db.commit()
    return Response(status_code=204)


# ---------------------------------------------------------------- Dashboard

@router.get("/dashboard", response_model=DashboardSummaryResponse)
async def dashboard_summary(
    employee_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return await performance_service.get_dashboard_summary(db, employee_id, start_date, end_date)


@router.get("/employees/{employee_id}/history", response_model=EmployeeHistoryResponse)
async def employee_history(
    employee_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    if not await get_employee(db, employee_id):
        raise HTTPException(404, "Employee not found")
    return await performance_service.get_employee_performance_history(db, employee_id)


@router.get("/my", response_model=MyPerformanceResponse)
async def my_performance(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    employee_id = current_user.employee_id
    if not employee_id:
        raise HTTPException(404, "Employee ID not found for this user")

    reviews, _ = await paginate(
        db,
        select(PerformanceReview)
        .where(PerformanceReview.employee_id == employee_id)
        .order_by(PerformanceReview.created_at.desc(), PerformanceReview.id.desc()),
        1, MY_PERFORMANCE_LIMIT,
    )
    metrics, metric_page = await paginate(
        db,
        select(PerformanceMetric)
        .where(PerformanceMetric.employee_id == employee_id)
        .order_by(PerformanceMetric.created_at.desc(), PerformanceMetric.id.desc()),
        1, MY_PERFORMANCE_LIMIT,
    )

    return {
        "employee_id": employee_id,
        "reviews": reviews,
        "metrics": metrics,
        "summary": performance_service.summarize_my_reviews(reviews, metric_page.total),
    }
