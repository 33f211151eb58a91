import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select, func, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import execute_with_reconnect
from app.models.employee import Employee
from app.models.goal import PerformanceGoal
from app.models.performance import KPI, PerformanceMetric, PerformanceReview
from app.schemas.pagination import Pagination
from app.services.scoring import compute_category_scores, calculate_total_score

logger = logging.getLogger(__name__)

SCORE_FIELDS = ("kpi_score", "behavior_score", "attendance_score")


async def get_active_kpis(db: AsyncSession) -> Sequence[KPI]:
    result = await db.execute(
        select(KPI).where(KPI.is_active.is_(True)).order_by(KPI.category, KPI.id)
    )
    return result.scalars().all()


def overlapping_period(start_date: date, end_date: date):
    """Metric periods that start in, end in, or span the whole window."""
    return or_(
        and_(PerformanceMetric.period_start >= start_date, PerformanceMetric.period_start <= end_date),
        and_(PerformanceMetric.period_end >= start_date, PerformanceMetric.period_end <= end_date),
        and_(PerformanceMetric.period_start <= start_date, PerformanceMetric.period_end >= end_date),
    )


async def get_metrics_in_window(
    db: AsyncSession, employee_id: str, start_date: date, end_date: date
) -> Sequence[PerformanceMetric]:
    result = await db.execute(
        select(PerformanceMetric)
        .where(PerformanceMetric.employee_id == employee_id)
        .where(overlapping_period(start_date, end_date))
        .order_by(PerformanceMetric.period_start, PerformanceMetric.id)
    )
    return result.scalars().all()


async def calculate_category_scores(
    db: AsyncSession, employee_id: str, start_date: date, end_date: date
):
    kpis = await get_active_kpis(db)
    metrics = await get_metrics_in_window(db, employee_id, start_date, end_date)
    return compute_category_scores(employee_id, start_date, end_date, kpis, metrics)


async def paginate(db: AsyncSession, query, page: int, limit: int):
    """Run `query` for one page and count the full result set."""
    total = (await db.execute(
        select(func.count()).select_from(query.order_by(None).subquery())
    )).scalar_one()
    rows = (await db.execute(query.offset((page - 1) * limit).limit(limit))).scalars().all()
    return rows, Pagination.build(page, limit, total)


# ---------------------------------------------------------------- Lookups

async def get_employee(db: AsyncSession, employee_id: str) -> Optional[Employee]:
    result = await db.execute(select(Employee).where(Employee.employee_id == employee_id))
    return result.scalar_one_or_none()


async def get_review(db: AsyncSession, review_id: int) -> Optional[PerformanceReview]:
    result = await db.execute(
        select(PerformanceReview)
        .where(PerformanceReview.id == review_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_goal(db: AsyncSession, goal_id: int) -> Optional[PerformanceGoal]:
    result = await db.execute(
        select(PerformanceGoal)
        .where(PerformanceGoal.id == goal_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_metric(db: AsyncSession, metric_id: int) -> Optional[PerformanceMetric]:
    result = await db.execute(
        select(PerformanceMetric)
        .where(PerformanceMetric.id == metric_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_kpi(db: AsyncSession, kpi_id: int) -> Optional[KPI]:
    result = await db.execute(
        select(KPI).where(KPI.id == kpi_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


# ---------------------------------------------------------------- Reviews

def apply_review_update(review: PerformanceReview, changes: Dict[str, Any]) -> None:
    """
    Copy `changes` onto `review`. When any category score is part of the
    change set the total is recomputed from the new and stored scores, unless
    an explicit total is given.
    """
    for field, value in changes.items():
        if field != "total_score":
            setattr(review, field, value)

    if any(field in changes for field in SCORE_FIELDS):
        explicit_total = changes.get("total_score")
        review.total_score = explicit_total if explicit_total is not None else calculate_total_score(
            review.kpi_score, review.behavior_score, review.attendance_score
        )
    elif "total_score" in changes:
        review.total_score = changes["total_score"]


async def get_dashboard_summary(
    db: AsyncSession,
    employee_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Dict[str, Any]:
    query = select(PerformanceReview)
    if employee_id:
        query = query.where(PerformanceReview.employee_id == employee_id)
    if start_date:
        query = query.where(PerformanceReview.start_date >= start_date)
    if end_date:
        query = query.where(PerformanceReview.start_date <= end_date)

    result = await execute_with_reconnect(db, query)
    return summarize_reviews(result.scalars().all())


def _ranked(review: PerformanceReview) -> Dict[str, Any]:
    employee = review.employee
    return {
        "id": review.id,
        "employee_id": review.employee_id,
        "employee_name": employee.full_name if employee else "",
        "department": (employee.department if employee else None) or "",
        "position": (employee.position if employee else None) or "",
        "total_score": review.total_score or 0.0,
        "kpi_score": review.kpi_score or 0.0,
        "behavior_score": review.behavior_score or 0.0,
        "attendance_score": review.attendance_score or 0.0,
        "period": review.period,
        "improvement_areas": review.improvement_areas if isinstance(review.improvement_areas, list) else [],
    }


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def summarize_reviews(reviews: Sequence[PerformanceReview]) -> Dict[str, Any]:
    scored = [r for r in reviews if r.total_score is not None]
    ranking_size = settings.DASHBOARD_RANKING_SIZE

    top = sorted(scored, key=lambda r: r.total_score, reverse=True)[:ranking_size]
    bottom = sorted(scored, key=lambda r: r.total_score)[:ranking_size]

    return {
        "average_kpi_score": _mean([r.kpi_score for r in reviews if r.kpi_score is not None]),
        "average_total_score": _mean([r.total_score for r in scored]),
        "total_reviews": len(reviews),
        "completed_reviews": sum(1 for r in reviews if r.status in ("completed", "approved")),
        "employees_up_for_promotion": sum(
            1 for r in scored if r.total_score >= settings.PROMOTION_SCORE_THRESHOLD
        ),
        "employees_needing_training": sum(
            1 for r in scored if r.total_score < settings.TRAINING_SCORE_THRESHOLD
        ),
        "top_performers": [_ranked(r) for r in top],
        "employees_needing_improvement": [_ranked(r) for r in bottom],
    }


async def get_employee_performance_history(db: AsyncSession, employee_id: str) -> Dict[str, Any]:
    reviews = await db.execute(
        select(PerformanceReview)
        .where(PerformanceReview.employee_id == employee_id)
        .order_by(PerformanceReview.start_date.desc())
    )
    goals = await db.execute(
        select(PerformanceGoal)
        .where(PerformanceGoal.employee_id == employee_id)
        .order_by(PerformanceGoal.target_date.desc())
    )
    metrics = await db.execute(
        select(PerformanceMetric)
        .where(PerformanceMetric.employee_id == employee_id)
        .order_by(PerformanceMetric.period_start.desc())
    )
    return {
        "reviews": reviews.scalars().all(),
        "goals": goals.scalars().all(),
        "metrics": metrics.scalars().all(),
    }


def summarize_my_reviews(reviews: Sequence[PerformanceReview], total_metrics: int) -> Dict[str, Any]:
    completed = [r for r in reviews if r.status in ("completed", "approved")]
    pending = [r for r in reviews if r.status in ("pending", "draft")]
    completed_with_scores = [r for r in completed if r.total_score is not None]

    return {
        "total_reviews": len(reviews),
        "completed_reviews": len(completed),
        "pending_reviews": len(pending),
        "average_score": round(_mean([r.total_score for r in completed_with_scores]), 2),
        "average_kpi_score": round(_mean([r.kpi_score or 0.0 for r in completed_with_scores]), 2),
        "total_metrics": total_metrics,
    }
