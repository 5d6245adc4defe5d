"""동시성 테스트 — 두 세션이 같은 요청을 두고 경쟁.

Concurrency tests — Two sessions on a file-backed database race for the
same service request. The losing session has already read the row when the
winner commits, so only the conditional UPDATE can stop it.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from servicehub.database import Base
from servicehub.models import *  # noqa: F401,F403 — register all models with metadata
from servicehub.models.service_request import ServiceRequest
from servicehub.models.user import User
from servicehub.schemas.service_request import ServiceRequestUpdate
from servicehub.services.service_request_service import service_request_service
from servicehub.utils.caller import CallerContext
from servicehub.utils.exceptions import ConflictError

SessionAction = Callable[[AsyncSession], Awaitable[Any]]


@pytest_asyncio.fixture
async def factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """파일 기반 SQLite — 세션마다 별도 커넥션."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'race.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def parties(factory) -> dict[str, CallerContext]:
    """고객 1명, 기술자 2명을 커밋합니다."""
    now = datetime.now(timezone.utc)
    users: dict[str, User] = {}
    async with factory() as session:
        for key, role in (("client", "client"), ("t1", "technician"), ("t2", "technician")):
            users[key] = User(
                email=f"{key}@race.com",
                password_hash="x",
                role=role,
                skills=["Plumber"],
                is_available=True,
                created_at=now,
                updated_at=now,
            )
            session.add(users[key])
        await session.commit()
    return {key: CallerContext(caller_id=user.id, role=user.role) for key, user in users.items()}


async def _seed_request(factory, parties, status: str = "pending", technician: str | None = None) -> ServiceRequest:
    now = datetime.now(timezone.utc)
    async with factory() as session:
        request = ServiceRequest(
            client_id=parties["client"].caller_id,
            technician_id=parties[technician].caller_id if technician else None,
            service_type="Plumber",
            description="Leak",
            location="Here",
            status=status,
            images=[],
            created_at=now,
            updated_at=now,
        )
        session.add(request)
        await session.commit()
        return request


async def _lose_race(
    monkeypatch, factory, request_id, loser: SessionAction, winner: SessionAction
) -> ServiceRequest:
    """loser가 요청을 읽은 직후 winner가 다른 세션에서 커밋합니다.

    Returns the row as committed after the loser gave up.
    """
    original_get_request = service_request_service.get_request
    state: dict[str, Any] = {"loser_session": None, "fired": False}

    async def get_request_then_interleave(db, request_id):
        request = await original_get_request(db, request_id)
        if db is state["loser_session"] and not state["fired"]:
            state["fired"] = True
            async with factory() as other:
                await winner(other)
                await other.commit()
        return request

    monkeypatch.setattr(service_request_service, "get_request", get_request_then_interleave)

    async with factory() as session:
        state["loser_session"] = session
        with pytest.raises(ConflictError):
            await loser(session)
        await session.rollback()

    assert state["fired"]
    async with factory() as session:
        return await session.get(ServiceRequest, request_id)


class TestRacingTransitions:
    """먼저 커밋한 쪽만 반영되고 늦은 쪽은 Conflict."""

    async def test_accept_against_accept(self, monkeypatch, factory, parties):
        request = await _seed_request(factory, parties)

        current = await _lose_race(
            monkeypatch, factory, request.id,
            loser=lambda db: service_request_service.accept(db, parties["t2"], request.id),
            winner=lambda db: service_request_service.accept(db, parties["t1"], request.id),
        )
        assert current.status == "accepted"
        assert current.technician_id == parties["t1"].caller_id

    async def test_cancel_against_accept(self, monkeypatch, factory, parties):
        request = await _seed_request(factory, parties)

        current = await _lose_race(
            monkeypatch, factory, request.id,
            loser=lambda db: service_request_service.cancel(db, parties["client"], request.id),
            winner=lambda db: service_request_service.accept(db, parties["t1"], request.id),
        )
        assert current.status == "accepted"
        assert current.technician_id == parties["t1"].caller_id

    async def test_start_against_start(self, monkeypatch, factory, parties):
        request = await _seed_request(factory, parties, status="accepted", technician="t1")

        current = await _lose_race(
            monkeypatch, factory, request.id,
            loser=lambda db: service_request_service.start(db, parties["t1"], request.id),
            winner=lambda db: service_request_service.start(db, parties["t1"], request.id),
        )
        assert current.status == "in_progress"

    async def test_complete_against_complete(self, monkeypatch, factory, parties):
        request = await _seed_request(factory, parties, status="in_progress", technician="t1")

        current = await _lose_race(
            monkeypatch, factory, request.id,
            loser=lambda db: service_request_service.complete(db, parties["t1"], request.id, 999, "Late"),
            winner=lambda db: service_request_service.complete(db, parties["t1"], request.id, 120, "Fixed leak"),
        )
        assert current.status == "completed"
        assert current.quoted_price == 120
        assert current.technician_notes == "Fixed leak"

    async def test_notes_patch_against_accept(self, monkeypatch, factory, parties):
        """pending에서 읽은 메모 수정은 수락 후 적용되지 않음."""
        request = await _seed_request(factory, parties)

        current = await _lose_race(
            monkeypatch, factory, request.id,
            loser=lambda db: service_request_service.update_request(
                db, parties["client"], request.id, ServiceRequestUpdate(technician_notes="Gate 12")
            ),
            winner=lambda db: service_request_service.accept(db, parties["t1"], request.id),
        )
        assert current.status == "accepted"
        assert current.technician_notes is None
