import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from app.core.security import create_access_token
from app.database import Base, get_db
from app.main import app
from app.models.employee import Employee
from app.models.user import User
from app.utils.password import hash_password


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "performance.db"
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    engine.dispose()
    return path


@pytest.fixture
def sync_session(db_path):
    """Plain synchronous session for seeding rows."""
    engine = create_engine(f"sqlite:///{db_path}")
    with Session(engine, expire_on_commit=False) as session:
        yield session
    engine.dispose()


@pytest.fixture
def session_factory(db_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
def people(sync_session):
    """Two employees, an admin user and a staff user linked to employee E-100."""
    sync_session.add_all([
        Employee(employee_id="E-100", first_name="Maria", last_name="Santos",
                 department="Mathematics", position="Instructor"),
        Employee(employee_id="E-200", first_name="Jose", last_name="Reyes",
                 department="Physics", position="Professor"),
    ])
    sync_session.flush()
    admin = User(email="admin@example.edu", name="Admin", role="admin",
                 hashed_password=hash_password("admin-password"))
    staff = User(email="maria@example.edu", name="Maria", role="staff", employee_id="E-100",
                 hashed_password=hash_password("staff-password"))
    sync_session.add_all([admin, staff])
    sync_session.commit()
    return {"admin": admin, "staff": staff}


@pytest.fixture
def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


@pytest.fixture
def admin_headers(people):
    return auth_headers(people["admin"])


@pytest.fixture
def staff_headers(people):
    return auth_headers(people["staff"])
