"""프로필 API 테스트 — 온보딩, 프로필 수정, 역할 변경 제한.

Profile API tests — Onboarding, profile update, skill normalisation and the
role change guard.
"""

from httpx import AsyncClient

from servicehub.services.profile_service import normalize_skills
from tests.conftest import REQUESTS, auth_header, create_request

PROFILE = "/api/user/profile"


class TestOnboarding:
    """역할 선택 테스트."""

    async def test_choose_technician_role(self, client: AsyncClient, new_user):
        res = await client.patch(PROFILE, headers=auth_header(new_user), json={
            "role": "technician",
            "skills": ["Plumber", "Electrician"],
            "bio": "20 years of experience",
        })
        assert res.status_code == 200
        data = res.json()
        assert data["role"] == "technician"
        assert data["skills"] == ["Plumber", "Electrician"]
        assert data["bio"] == "20 years of experience"

    async def test_invalid_role(self, client: AsyncClient, new_user):
        res = await client.patch(PROFILE, headers=auth_header(new_user), json={"role": "admin"})
        assert res.status_code == 400

    async def test_unknown_field_rejected(self, client: AsyncClient, new_user):
        """알 수 없는 필드는 거부."""
        res = await client.patch(PROFILE, headers=auth_header(new_user), json={"email": "x@y.com"})
        assert res.status_code == 400

    async def test_requires_auth(self, client: AsyncClient):
        res = await client.patch(PROFILE, json={"bio": "hi"})
        assert res.status_code == 401


class TestProfileUpdate:
    """프로필 수정 테스트."""

    async def test_partial_update_keeps_other_fields(self, client: AsyncClient, technician1):
        res = await client.patch(PROFILE, headers=auth_header(technician1), json={
            "phone": "555-0100",
            "is_available": False,
        })
        assert res.status_code == 200
        data = res.json()
        assert data["phone"] == "555-0100"
        assert data["is_available"] is False
        assert data["skills"] == ["Plumber"]
        assert data["role"] == "technician"

    async def test_skills_normalised(self, client: AsyncClient, technician1):
        res = await client.patch(PROFILE, headers=auth_header(technician1), json={
            "skills": [" Plumber ", "", "Plumber", "HVAC"],
        })
        assert res.status_code == 200
        assert res.json()["skills"] == ["Plumber", "HVAC"]

    def test_normalize_skills_keeps_case(self):
        """대소문자는 유지 — 매칭은 정확 일치."""
        assert normalize_skills(["plumber", "Plumber", "  "]) == ["plumber", "Plumber"]


class TestRoleChangeGuard:
    """진행 중인 요청이 있을 때 역할 변경 제한."""

    async def test_client_with_pending_request_cannot_switch(self, client: AsyncClient, client_user):
        await create_request(client, client_user)
        res = await client.patch(PROFILE, headers=auth_header(client_user), json={"role": "technician"})
        assert res.status_code == 400

    async def test_client_without_active_requests_can_switch(self, client: AsyncClient, client_user):
        request = await create_request(client, client_user)
        cancel = await client.post(f"{REQUESTS}/{request['id']}/cancel", headers=auth_header(client_user))
        assert cancel.status_code == 200

        res = await client.patch(PROFILE, headers=auth_header(client_user), json={"role": "technician"})
        assert res.status_code == 200
        assert res.json()["role"] == "technician"

    async def test_technician_with_accepted_job_cannot_switch(
        self, client: AsyncClient, client_user, technician1
    ):
        request = await create_request(client, client_user)
        accept = await client.post(f"{REQUESTS}/{request['id']}/accept", headers=auth_header(technician1))
        assert accept.status_code == 200

        res = await client.patch(PROFILE, headers=auth_header(technician1), json={"role": "client"})
        assert res.status_code == 400

    async def test_same_role_is_not_a_change(self, client: AsyncClient, client_user):
        await create_request(client, client_user)
        res = await client.patch(PROFILE, headers=auth_header(client_user), json={"role": "client"})
        assert res.status_code == 200
