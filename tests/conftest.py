"""
Pytest configuration and fixtures
"""
import os

# Configure the app for tests before any project module reads the environment
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DB_AUTO_CREATE", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from typing import AsyncGenerator, Callable, List
import httpx
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from app.core.security import create_access_token, generate_user_id, hash_password
from app.core.vocabulary import Vocabulary
from app.models import User
from app.services.diagnosis_service import DiagnosisService, get_diagnosis_service
from app.services.prediction_client import PredictionClient
from app.services.recommendation_client import RecommendationClient


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

PREDICTION_URL = "https://model.test/v1/models/diagnosis:predict"
RECOMMENDATION_URL = "https://text.test/v1/generate"

TEST_VOCABULARY = Vocabulary(
    version="test-1",
    symptoms=("gatal", "ruam kulit", "bersin", "demam", "batuk"),
    diseases=("Alergi", "Flu Biasa", "Tifus"),
)


class FakeUpstream:
    """
    Programmable stand-in for an external model service

    Set `handler` to a callable taking the httpx.Request and returning an
    httpx.Response (or raising an httpx exception). Every request is kept in
    `requests` for assertions.
    """

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def prediction_upstream() -> FakeUpstream:
    """Model that answers with Flu Biasa as the most probable class"""
    return FakeUpstream(lambda request: httpx.Response(200, json={"predictions": [[0.1, 0.7, 0.2]]}))


@pytest.fixture
def recommendation_upstream() -> FakeUpstream:
    return FakeUpstream(lambda request: httpx.Response(200, json={
        "candidates": [{"content": {"parts": [{"text": "Istirahat yang cukup dan minum air putih."}]}}]
    }))


@pytest.fixture
def diagnosis_service(prediction_upstream, recommendation_upstream) -> DiagnosisService:
    return DiagnosisService(
        vocabulary=TEST_VOCABULARY,
        prediction_client=PredictionClient(
            endpoint=PREDICTION_URL,
            timeout=1.0,
            transport=prediction_upstream.transport,
        ),
        recommendation_client=RecommendationClient(
            endpoint=RECOMMENDATION_URL,
            timeout=1.0,
            transport=recommendation_upstream.transport,
        ),
    )


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a test database session
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def client(db_session, diagnosis_service) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    ASGI client with the database and the model services replaced
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_diagnosis_service] = lambda: diagnosis_service

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def make_user(db_session: AsyncSession, email: str = "test@example.com") -> User:
    user = User(
        user_id=generate_user_id(),
        email=email,
        first_name="Budi",
        last_name="Santoso",
        hashed_password=hash_password("testpassword123"),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """
    Create a test user
    """
    return await make_user(db_session)


@pytest.fixture
def test_token(test_user: User) -> str:
    """
    Create a test JWT token
    """
    return create_access_token(data={"sub": test_user.user_id})


@pytest.fixture
def auth_headers(test_token: str) -> dict:
    """
    Create authorization headers for testing
    """
    return {"Authorization": f"Bearer {test_token}"}
