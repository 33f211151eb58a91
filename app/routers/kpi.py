from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from typing import Optional
from app.database import get_db
from app.core.auth import get_current_user, get_current_admin
from app.models.performance import KPI
from app.schemas.performance import KPICreate, KPIUpdate, KPIResponse, KPIListResponse
from app.services.performance import get_kpi, paginate

router = APIRouter(prefix="/performance/kpis", tags=["kpis"])


def check_score_bounds(max_score: float, min_score: float) -> None:
    if max_score <= min_score:
        raise HTTPException(400, "Max score must be greater than min score")


@router.get("", response_model=KPIListResponse)
async def list_kpis(
    category: Optional[str] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    query = select(KPI).order_by(KPI.created_at.desc(), KPI.id.desc())
    if category and category != "all":
        query = query.where(KPI.category == category)
    if is_active is not None:
        query = query.where(KPI.is_active.is_(is_active))
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(KPI.name.ilike(pattern), KPI.description.ilike(pattern)))

    kpis, pagination = await paginate(db, query, page, limit)
    return {"kpis": kpis, "pagination": pagination}


@router.post("", response_model=KPIResponse, status_code=201)
async def create_kpi(
    kpi_in: KPICreate,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    check_score_bounds(kpi_in.max_score, kpi_in.min_score)

    kpi = KPI(**kpi_in.model_dump(), created_by=str(admin.id))
    db.add(kpi)
    await db.commit()
    return await get_kpi(db, kpi.id)


@router.get("/{kpi_id}", response_model=KPIResponse)
async def get_kpi_detail(
    kpi_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    kpi = await get_kpi(db, kpi_id)
    if not kpi:
        raise HTTPException(404, "KPI not found")
    return kpi


@router.patch("/{kpi_id}", response_model=KPIResponse)
async def update_kpi(
    kpi_id: int,
    kpi_in: KPIUpdate,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    kpi = await get_kpi(db, kpi_id)
    if not kpi:
        raise HTTPException(404, "KPI not found")

    changes = kpi_in.model_dump(exclude_unset=True, exclude_none=True)
    check_score_bounds(
        changes.get("max_score", kpi.max_score),
        changes.get("min_score", kpi.min_score),
    )
    for field, value in changes.items():
        setattr(kpi, field, value)
    kpi.updated_by = str(admin.id)

    await db.commit()
    return await get_kpi(db, kpi_id)


@router.delete("/{kpi_id}", status_code=204)
async def delete_kpi(
    kpi_id: int,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    kpi = await get_kpi(db, kpi_id)
    if not kpi:
        raise HTTPException(404, "KPI not found")
    await db.delete(kpi)
    await db.commit()
    return Response(status_code=204)
