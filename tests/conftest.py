"""Test configuration: env variables are set before any project module is imported."""
import os
import tempfile
import uuid

_DB_FILE = os.path.join(tempfile.gettempdir(), f"mentorship_test_{uuid.uuid4().hex}.db")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_FILE}"
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.core.config import settings
from app.core.security import create_access_token
from app.db.models import Base
from app.db.session import engine, AsyncSessionLocal
from app.main import app
from app.modules.users.models import User, UserRole
from app.modules.mentors.models import Mentor
from app.modules.requests.models import TrainingRequest, RequestStatus

API = settings.API_V1_PREFIX


@pytest_asyncio.fixture
async def db():
    """Fresh schema and a session for each test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture
async def client(db):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    async def _make(name: str = "Employee", role: str = UserRole.EMPLOYEE, **extra) -> User:
        counter["n"] += 1
        user = User(name=name, email=f"user{counter['n']}@acme.io", role=role, **extra)
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_mentor(db):
    counter = {"n": 0}

    async def _make(name: str = "Mentor", workload: int = 0, **extra) -> Mentor:
        counter["n"] += 1
        mentor = Mentor(
            name=name,
            job_title=extra.pop("job_title", "Senior Engineer"),
            experience=extra.pop("experience", "10 years"),
            email=f"mentor{counter['n']}@acme.io",
            workload=workload,
            **extra,
        )
        db.add(mentor)
        await db.commit()
        await db.refresh(mentor)
        return mentor

    return _make


@pytest.fixture
def make_request(db):
    async def _make(user: User, topic: str = "Go concurrency", status: str = RequestStatus.PENDING) -> TrainingRequest:
        req = TrainingRequest(user_id=user.id, topic=topic, description="Channels and goroutines", status=status)
        db.add(req)
        await db.commit()
        await db.refresh(req)
        return req

    return _make


@pytest_asyncio.fixture
async def employee(make_user):
    return await make_user("Ivan Petrov")


@pytest_asyncio.fixture
async def admin(make_user):
    return await make_user("Admin", role=UserRole.ADMIN)


def token_for(user_id: int) -> str:
    return create_access_token({"sub": str(user_id)}, secret_key=settings.SECRET_KEY)


def auth(user: User) -> dict:
    return {"Authorization": f"Bearer {token_for(user.id)}"}
