import uuid
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ats_server.core.config import settings

# Override settings for tests
settings.fake_ai = True
settings.allow_dev_auth = True
settings.supabase_jwt_secret = "test-jwt-secret-that-is-at-least-32-bytes-long"
settings.allowed_ai_models = ""
settings.app_env = "development"

from ats_server.db.base import Base  # noqa: E402
from ats_server.db.postgres import get_db  # noqa: E402
from ats_server.gateway.gateway import AiGateway  # noqa: E402
from ats_server.gateway.rate_limiter import SlidingWindowRateLimiter  # noqa: E402
from ats_server.gateway.types import GatewayConfig  # noqa: E402
from ats_server.main import app  # noqa: E402
from ats_server.models import Job, Profile, Skill  # noqa: E402

USER_ID = uuid.UUID("6f1c1d7e-3a52-4a0e-9b8e-2f4d8c1b0a11")
OTHER_USER_ID = uuid.UUID("0b7e5a90-8c3d-4f1e-a2b6-9d4c3e2f1a22")


@pytest.fixture
async def engine():
    """Fresh in-memory database per test; StaticPool keeps the single connection alive."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.state.rate_limiter = SlidingWindowRateLimiter()
    app.state.gateway = AiGateway(GatewayConfig(force_mock=True))

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
    app.state.gateway = None


@pytest.fixture
async def profile(db: AsyncSession) -> Profile:
    """The test user's profile with a few skills."""
    profile = Profile(
        id=USER_ID,
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        professional_title="Software Engineer",
        summary="Backend engineer focused on data-heavy APIs.",
        experience_level="mid",
        industry="Software",
    )
    db.add(profile)
    db.add_all(
        [
            Skill(user_id=USER_ID, skill_name="Python", proficiency_level="expert", skill_category="Technical"),
            Skill(user_id=USER_ID, skill_name="PostgreSQL", proficiency_level="advanced", skill_category="Technical"),
            Skill(user_id=USER_ID, skill_name="Mentoring", proficiency_level="advanced", skill_category="Soft"),
        ]
    )
    await db.commit()
    return profile


@pytest.fixture
async def job(db: AsyncSession, profile: Profile) -> Job:
    job = Job(
        user_id=USER_ID,
        job_title="Senior Backend Engineer",
        company_name="Acme Corp",
        job_description="Design and operate Python services on PostgreSQL.",
        industry="Software",
        required_skills=["Python", "PostgreSQL"],
        preferred_skills=["Kubernetes"],
    )
    db.add(job)
    await db.commit()
    return job


@pytest.fixture
async def other_job(db: AsyncSession) -> Job:
    """A job owned by a different user."""
    db.add(Profile(id=OTHER_USER_ID, first_name="Grace", last_name="Hopper", email="grace@example.com"))
    job = Job(user_id=OTHER_USER_ID, job_title="Compiler Engineer", company_name="Navy")
    db.add(job)
    await db.commit()
    return job


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-User-Id": str(USER_ID)}


@pytest.fixture
def other_headers() -> dict[str, str]:
    return {"X-User-Id": str(OTHER_USER_ID)}
