"""인증 API 테스트 — 회원가입, 로그인, 현재 사용자 조회.

Auth API tests — Signup, login, current-user endpoint and bearer token checks.
"""

from datetime import datetime, timedelta, timezone

import jwt
from httpx import AsyncClient

from servicehub.config import settings
from tests.conftest import auth_header

AUTH = "/api/auth"


class TestSignup:
    """회원가입 테스트."""

    async def test_signup_success(self, client: AsyncClient):
        """회원가입 성공 — 역할 없이 생성, 토큰 발급."""
        res = await client.post(f"{AUTH}/signup", json={
            "email": "Alice@Example.com",
            "password": "secret123",
            "first_name": "Alice",
        })
        assert res.status_code == 201
        data = res.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["user"]["email"] == "alice@example.com"
        assert data["user"]["role"] is None
        assert data["user"]["skills"] == []

    async def test_signup_duplicate_email(self, client: AsyncClient, client_user):
        """중복 이메일 가입 시 409 (대소문자 무시)."""
        res = await client.post(f"{AUTH}/signup", json={
            "email": "CLIENT@test.com",
            "password": "secret123",
        })
        assert res.status_code == 409

    async def test_signup_short_password(self, client: AsyncClient):
        """비밀번호 6자 미만 — 검증 오류 400."""
        res = await client.post(f"{AUTH}/signup", json={
            "email": "bob@example.com",
            "password": "123",
        })
        assert res.status_code == 400
        body = res.json()
        assert body["detail"] == "Invalid request data"
        assert body["errors"]

    async def test_signup_malformed_email(self, client: AsyncClient):
        """형식이 잘못된 이메일 — 검증 오류 400, 계정 미생성."""
        for email in ("a@@b.com", "a@b..com", "a b@c.com", "plainaddress"):
            res = await client.post(f"{AUTH}/signup", json={
                "email": email,
                "password": "secret123",
            })
            assert res.status_code == 400, email

        res = await client.post(f"{AUTH}/login", json={
            "email": "a@@b.com",
            "password": "secret123",
        })
        assert res.status_code == 400

    async def test_signup_token_works(self, client: AsyncClient):
        """가입 시 받은 토큰으로 /user 접근 가능."""
        res = await client.post(f"{AUTH}/signup", json={
            "email": "carol@example.com",
            "password": "secret123",
        })
        token = res.json()["access_token"]
        me = await client.get(f"{AUTH}/user", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "carol@example.com"


class TestLogin:
    """로그인 테스트."""

    async def test_login_success(self, client: AsyncClient, client_user):
        res = await client.post(f"{AUTH}/login", json={
            "email": "client@test.com",
            "password": "secret123",
        })
        assert res.status_code == 200
        assert res.json()["user"]["id"] == str(client_user.id)

    async def test_login_wrong_password(self, client: AsyncClient, client_user):
        res = await client.post(f"{AUTH}/login", json={
            "email": "client@test.com",
            "password": "wrong-password",
        })
        assert res.status_code == 401

    async def test_login_unknown_email(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/login", json={
            "email": "nobody@test.com",
            "password": "secret123",
        })
        assert res.status_code == 401


class TestCurrentUser:
    """/user 엔드포인트 및 토큰 검증 테스트."""

    async def test_me(self, client: AsyncClient, technician1):
        res = await client.get(f"{AUTH}/user", headers=auth_header(technician1))
        assert res.status_code == 200
        data = res.json()
        assert data["role"] == "technician"
        assert data["skills"] == ["Plumber"]

    async def test_missing_token(self, client: AsyncClient):
        """토큰 없이 접근 시 401."""
        res = await client.get(f"{AUTH}/user")
        assert res.status_code == 401

    async def test_invalid_token(self, client: AsyncClient):
        res = await client.get(f"{AUTH}/user", headers={"Authorization": "Bearer not.a.token"})
        assert res.status_code == 401

    async def test_expired_token(self, client: AsyncClient, client_user):
        """만료된 토큰은 401."""
        token = jwt.encode(
            {
                "sub": str(client_user.id),
                "type": "access",
                "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
            },
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        res = await client.get(f"{AUTH}/user", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 401

    async def test_non_access_token_rejected(self, client: AsyncClient, client_user):
        """type이 access가 아닌 토큰은 거부."""
        token = jwt.encode(
            {"sub": str(client_user.id), "type": "refresh"},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        res = await client.get(f"{AUTH}/user", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 401
