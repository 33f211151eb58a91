# app/main.py
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import exc as sa_exc
from app.config import settings
from app.database import engine, Base
from app.models.employee import Employee  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.performance import KPI, PerformanceMetric, PerformanceReview  # noqa: F401
from app.models.goal import PerformanceGoal  # noqa: F401
from app.routers import auth, kpi, metrics, goal, performance

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(title="Staff Performance Service", version="1.0")

# Include Routers
app.include_router(auth.router)
app.include_router(kpi.router)
app.include_router(metrics.router)
app.include_router(goal.router)
app.include_router(performance.router)


@app.exception_handler(sa_exc.SQLAlchemyError)
async def database_error_handler(request: Request, exc: sa_exc.SQLAlchemyError):
    # Driver messages stay in the log, clients get a generic failure
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Database error. Please try again later."})


# Create DB Tables (for demo only; use Alembic in prod)
@app.on_event("startup")
async def startup_event():
    # create tables (async). ignore duplicate-object errors from previous partial runs.
    async with engine.begin() as conn:
        try:
            await conn.run_sync(Base.metadata.create_all)
        except sa_exc.IntegrityError as e:
            msg = str(getattr(e, "orig", e))
            if "duplicate key value violates unique constraint" in msg or "already exists" in msg:
                logging.warning("Ignored duplicate DDL error during create_all: %s", msg)
            else:
                raise

@app.get("/")
def read_root():
    return {"message": "Welcome to the Staff Performance Service"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
