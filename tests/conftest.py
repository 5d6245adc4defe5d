"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite DB, session, and httpx client fixtures.
Each test gets a fresh database (StaticPool keeps the single in-memory
connection alive for the engine's lifetime). The payment processor is
replaced by FakePaymentProcessor so no network calls are made.
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from servicehub.database import Base, get_db
from servicehub.main import app
from servicehub.models import *  # noqa: F401,F403 — register all models with metadata
from servicehub.models.user import User
from servicehub.services.payment_processor import (
    PaymentIntentHandle,
    ProcessorStatus,
    get_payment_processor,
)
from servicehub.utils.exceptions import UpstreamError
from servicehub.utils.jwt import create_access_token
from servicehub.utils.password import hash_password

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ---------------------------------------------------------------------------
# 가짜 결제 처리기 — Fake payment processor
# ---------------------------------------------------------------------------
class FakePaymentProcessor:
    """인메모리 결제 처리기. 인텐트 상태는 테스트가 직접 설정합니다."""

    def __init__(self) -> None:
        self.statuses: dict[str, ProcessorStatus] = {}
        self.created: list[dict] = []
        self.fail: bool = False

    async def create_intent(self, amount_minor: int, currency: str, metadata: dict[str, str]) -> PaymentIntentHandle:
        if self.fail:
            raise UpstreamError("Failed to create payment intent: processor down")
        ref = f"pi_test_{len(self.created) + 1}"
        self.created.append({
            "external_ref": ref,
            "amount_minor": amount_minor,
            "currency": currency,
            "metadata": metadata,
        })
        self.statuses[ref] = ProcessorStatus.REQUIRES_ACTION
        return PaymentIntentHandle(external_ref=ref, client_secret=f"{ref}_secret_abc")

    async def retrieve_status(self, external_ref: str) -> ProcessorStatus:
        if self.fail:
            raise UpstreamError("Failed to retrieve payment intent: processor down")
        return self.statuses.get(external_ref, ProcessorStatus.UNKNOWN)


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진 — 매 테스트마다 새 스키마."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def processor() -> FakePaymentProcessor:
    return FakePaymentProcessor()


@pytest_asyncio.fixture
async def client(db: AsyncSession, processor: FakePaymentProcessor) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션과 결제 처리기를 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_payment_processor] = lambda: processor

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 사용자 생성
# ---------------------------------------------------------------------------
async def _make_user(db: AsyncSession, email: str, role: str | None, skills: list[str] | None = None) -> User:
    now = datetime.now(timezone.utc)
    user = User(
        email=email,
        password_hash=hash_password("secret123"),
        role=role,
        first_name=email.split("@")[0],
        skills=skills or [],
        is_available=True,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def client_user(db: AsyncSession) -> User:
    """고객 사용자를 생성합니다."""
    return await _make_user(db, "client@test.com", "client")


@pytest_asyncio.fixture
async def other_client(db: AsyncSession) -> User:
    """다른 고객 사용자를 생성합니다."""
    return await _make_user(db, "other@test.com", "client")


@pytest_asyncio.fixture
async def technician1(db: AsyncSession) -> User:
    """배관 기술자 (skills=["Plumber"])."""
    return await _make_user(db, "t1@test.com", "technician", ["Plumber"])


@pytest_asyncio.fixture
async def technician2(db: AsyncSession) -> User:
    """전기 기술자 (skills=["Electrician"])."""
    return await _make_user(db, "t2@test.com", "technician", ["Electrician"])


@pytest_asyncio.fixture
async def new_user(db: AsyncSession) -> User:
    """온보딩 전 사용자 (role=None)."""
    return await _make_user(db, "new@test.com", None)


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id), "role": user.role})


def auth_header(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user)}"}


REQUESTS = "/api/service-requests"


async def create_request(client: AsyncClient, owner: User, service_type: str = "Plumber") -> dict:
    """API로 서비스 요청을 생성하고 응답 JSON을 반환합니다."""
    res = await client.post(REQUESTS, headers=auth_header(owner), json={
        "service_type": service_type,
        "description": "Kitchen sink is leaking",
        "location": "12 Main St",
    })
    assert res.status_code == 201, res.text
    return res.json()


async def advance_to_completed(client: AsyncClient, owner: User, technician: User, price: int = 120) -> dict:
    """요청을 생성해 completed까지 진행합니다."""
    request = await create_request(client, owner)
    rid = request["id"]
    headers = auth_header(technician)
    assert (await client.post(f"{REQUESTS}/{rid}/accept", headers=headers)).status_code == 200
    assert (await client.post(f"{REQUESTS}/{rid}/start", headers=headers)).status_code == 200
    res = await client.post(f"{REQUESTS}/{rid}/complete", headers=headers, json={
        "quoted_price": price,
        "technician_notes": "Fixed leak",
    })
    assert res.status_code == 200, res.text
    return res.json()
