"""로깅 미들웨어 테스트 — 민감 필드 마스킹.

Logging middleware tests — Sensitive field masking, the shape of the
ingested event, and pass-through when Axiom is not configured.
"""

import pytest
from fastapi import FastAPI, HTTPException
from httpx import ASGITransport, AsyncClient

from servicehub.config import settings
from servicehub.middleware import axiom_logging
from servicehub.middleware.axiom_logging import AxiomLoggingMiddleware, _mask_dict


class TestMasking:
    """민감 필드 마스킹."""

    def test_masks_passwords_and_secrets(self):
        masked = _mask_dict({
            "email": "a@b.com",
            "password": "secret123",
            "client_secret": "pi_1_secret_x",
            "nested": {"access_token": "abc", "note": "ok"},
        })
        assert masked["email"] == "a@b.com"
        assert masked["password"] == "***"
        assert masked["client_secret"] == "***"
        assert masked["nested"] == {"access_token": "***", "note": "ok"}

    def test_lists_are_truncated(self):
        masked = _mask_dict({"images": [f"img{i}" for i in range(50)]})
        assert len(masked["images"]) == 20

    def test_long_strings_truncated(self):
        masked = _mask_dict({"description": "x" * 5000})
        assert masked["description"].endswith("...(truncated)")
        assert len(masked["description"]) < 5000

    def test_deep_nesting_cut_off(self):
        data: dict = {"v": 1}
        for _ in range(10):
            data = {"child": data}
        masked = _mask_dict(data)
        for _ in range(6):
            masked = masked["child"]
        assert masked == "..."


async def test_health_passes_through(client: AsyncClient):
    """Axiom 미설정 시 요청은 그대로 통과."""
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


class _RecordingAxiomClient:
    """ingest_events 호출을 기록하는 대체 클라이언트."""

    instances: list["_RecordingAxiomClient"] = []

    def __init__(self, token: str) -> None:
        self.token = token
        self.events: list[dict] = []
        _RecordingAxiomClient.instances.append(self)

    def ingest_events(self, dataset: str, events: list[dict]) -> None:
        self.events.extend(events)


class TestLoggedEvent:
    """Axiom 설정 시 기록되는 이벤트 내용."""

    @pytest.fixture
    def recorder(self, monkeypatch):
        _RecordingAxiomClient.instances = []
        monkeypatch.setattr(axiom_logging, "AxiomClient", _RecordingAxiomClient)
        monkeypatch.setattr(settings, "AXIOM_API_TOKEN", "xaat-test")
        monkeypatch.setattr(settings, "AXIOM_DATASET", "servicehub-test")

        app = FastAPI()
        app.add_middleware(AxiomLoggingMiddleware)

        @app.post("/items/{item_id}")
        async def update_item(item_id: str):
            return {"id": item_id}

        @app.get("/items/{item_id}/missing")
        async def missing_item(item_id: str):
            raise HTTPException(status_code=404, detail="Item not found")

        return app

    async def test_path_params_and_masked_body(self, recorder: FastAPI):
        """경로 파라미터와 마스킹된 body가 이벤트에 포함."""
        async with AsyncClient(transport=ASGITransport(app=recorder), base_url="http://test") as ac:
            res = await ac.post("/items/42", json={"password": "hunter22", "note": "ok"})
        assert res.status_code == 200

        event = _RecordingAxiomClient.instances[0].events[0]
        assert event["path"] == "/items/42"
        assert event["path_params"] == {"item_id": "42"}
        assert event["request_body"] == {"password": "***", "note": "ok"}
        assert event["status_code"] == 200

    async def test_error_event_keeps_path_params(self, recorder: FastAPI):
        async with AsyncClient(transport=ASGITransport(app=recorder), base_url="http://test") as ac:
            res = await ac.get("/items/7/missing")
        assert res.status_code == 404
        assert res.json() == {"detail": "Item not found"}

        event = _RecordingAxiomClient.instances[0].events[0]
        assert event["path_params"] == {"item_id": "7"}
        assert event["error"] == "Item not found"
