from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from datetime import date
from typing import Optional
from app.database import get_db
from app.core.auth import get_current_user, get_current_admin
from app.models.performance import PerformanceMetric
from app.schemas.performance import (
    PerformanceMetricCreate, PerformanceMetricUpdate,
    PerformanceMetricResponse, PerformanceMetricListResponse
)
from app.services.performance import get_employee, get_metric, paginate

router = APIRouter(prefix="/performance/metrics", tags=["metrics"])

# Columns that may be cleared by sending null
NULLABLE_FIELDS = {"target", "unit", "notes"}


def check_period(period_start: date, period_end: date) -> None:
    if period_start > period_end:
        raise HTTPException(400, "Period start date must be before or equal to period end date")


@router.get("", response_model=PerformanceMetricListResponse)
async def list_metrics(
    employee_id: Optional[str] = None,
    metric_type: Optional[str] = None,
    period: Optional[str] = None,
    period_start_from: Optional[date] = None,
    period_start_to: Optional[date] = None,
    period_end_from: Optional[date] = None,
    period_end_to: Optional[date] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    query = select(PerformanceMetric).order_by(PerformanceMetric.created_at.desc(), PerformanceMetric.id.desc())
    if employee_id:
        query = query.where(PerformanceMetric.employee_id == employee_id)
    if metric_type and metric_type != "all":
        query = query.where(PerformanceMetric.metric_type == metric_type)
    if period:
        query = query.where(PerformanceMetric.period == period)
    if period_start_from:
        query = query.where(PerformanceMetric.period_start >= period_start_from)
    if period_start_to:
        query = query.where(PerformanceMetric.period_start <= period_start_to)
    if period_end_from:
        query = query.where(PerformanceMetric.period_end >= period_end_from)
    if period_end_to:
        query = query.where(PerformanceMetric.period_end <= period_end_to)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            PerformanceMetric.metric_name.ilike(pattern),
            PerformanceMetric.period.ilike(pattern),
            PerformanceMetric.notes.ilike(pattern),
        ))

    metrics, pagination = await paginate(db, query, page, limit)
    return {"metrics": metrics, "pagination": pagination}


@router.post("", response_model=PerformanceMetricResponse, status_code=201)
async def create_metric(
    metric_in: PerformanceMetricCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    check_period(metric_in.period_start, metric_in.period_end)
    if not await get_employee(db, metric_in.employee_id):
        raise HTTPException(404, "Employee not found")

    metric = PerformanceMetric(**metric_in.model_dump(), created_by=str(current_user.id))
    db.add(metric)
    await db.commit()
    return await get_metric(db, metric.id)


@router.get("/{metric_id}", response_model=PerformanceMetricResponse)
async def get_metric_detail(
    metric_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    metric = await get_metric(db, metric_id)
    if not metric:
        raise HTTPException(404, "Performance metric not found")
    return metric


@router.patch("/{metric_id}", response_model=PerformanceMetricResponse)
async def update_metric(
    metric_id: int,
    metric_in: PerformanceMetricUpdate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    metric = await get_metric(db, metric_id)
    if not metric:
        raise HTTPException(404, "Performance metric not found")

    changes = {
        field: value
        for field, value in metric_in.model_dump(exclude_unset=True).items()
        if value is not None or field in NULLABLE_FIELDS
    }
    check_period(
        changes.get("period_start", metric.period_start),
        changes.get("period_end", metric.period_end),
    )
    for field, value in changes.items():
        setattr(metric, field, value)
    metric.updated_by = str(current_user.id)

    await db.commit()
    return await get_metric(db, metric_id)


@router.delete("/{metric_id}", status_code=204)
async def delete_metric(
    metric_id: int,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    metric = await get_metric(db, metric_id)
    if not metric:
        raise HTTPException(404, "Performance metric not found")
    await db.delete(metric)
    await db.commit()
    return Response(status_code=204)
