from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from datetime import date
from typing import Optional
from app.database import get_db
from app.core.auth import get_current_user, get_current_admin
from app.models.goal import PerformanceGoal
from app.schemas.goal import GoalCreate, GoalUpdate, GoalResponse, GoalListResponse
from app.services.performance import get_employee, get_goal, get_review, paginate

router = APIRouter(prefix="/performance/goals", tags=["goals"])

NULLABLE_FIELDS = {"performance_review_id", "description", "completion_date", "notes"}


@router.get("", response_model=GoalListResponse)
async def list_goals(
    employee_id: Optional[str] = None,
    performance_review_id: Optional[int] = None,
    status: Optional[str] = None,
    target_date_from: Optional[date] = None,
    target_date_to: Optional[date] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    query = select(PerformanceGoal).order_by(PerformanceGoal.created_at.desc(), PerformanceGoal.id.desc())
    if employee_id:
        query = query.where(PerformanceGoal.employee_id == employee_id)
    if performance_review_id:
        query = query.where(PerformanceGoal.performance_review_id == performance_review_id)
    if status and status != "all":
        query = query.where(PerformanceGoal.status == status)
    if target_date_from:
        query = query.where(PerformanceGoal.target_date >= target_date_from)
    if target_date_to:
        query = query.where(PerformanceGoal.target_date <= target_date_to)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            PerformanceGoal.title.ilike(pattern),
            PerformanceGoal.description.ilike(pattern),
            PerformanceGoal.notes.ilike(pattern),
        ))

    goals, pagination = await paginate(db, query, page, limit)
    return {"goals": goals, "pagination": pagination}


@router.post("", response_model=GoalResponse, status_code=201)
async def create_goal(
    goal_in: GoalCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    if not await get_employee(db, goal_in.employee_id):
        raise HTTPException(404, "Employee not found")
    if goal_in.performance_review_id and not await get_review(db, goal_in.performance_review_id):
        raise HTTPException(404, "Performance review not found")

    goal = PerformanceGoal(**goal_in.model_dump(), created_by=str(current_user.id))
    db.add(goal)
    await db.commit()
    return await get_goal(db, goal.id)


@router.get("/{goal_id}", response_model=GoalResponse)
async def get_goal_detail(
    goal_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    goal = await get_goal(db, goal_id)
    if not goal:
        raise HTTPException(404, "Performance goal not found")
    return goal


@router.patch("/{goal_id}", response_model=GoalResponse)
async def update_goal(
    goal_id: int,
    goal_in: GoalUpdate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    goal = await get_goal(db, goal_id)
    if not goal:
        raise HTTPException(404, "Performance goal not found")

    changes = {
        field: value
        for field, value in goal_in.model_dump(exclude_unset=True).items()
        if value is not None or field in NULLABLE_FIELDS
    }
    if changes.get("performance_review_id") and not await get_review(db, changes["performance_review_id"]):
        raise HTTPException(404, "Performance review not found")

    for field, value in changes.items():
        setattr(goal, field, value)
    goal.updated_by = str(current_user.id)

    await db.commit()
    return await get_goal(db, goal_id)


@router.delete("/{goal_id}", status_code=204)
async def delete_goal(
    goal_id: int,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    goal = await get_goal(db, goal_id)
    if not goal:
        raise HTTPException(404, "Performance goal not found")
    await db.delete(goal)
    await db.commit()
    return Response(status_code=204)
