"""API 라우터 패키지 — 모든 엔드포인트 통합.

API Router package — Aggregates all endpoints into a single router that
main.py mounts under the /api prefix.

Included routers:
    - auth: 회원가입/로그인 (Signup, login, current user)
    - profile: 온보딩 및 프로필 수정 (Onboarding and profile update)
    - service_requests: 요청 생성/조회/전이 (Requests and lifecycle transitions)
    - jobs: 내 작업 및 공개 작업 (My jobs and public jobs)
    - payments: 결제 인텐트 및 확인 (Payment intents and confirmation)
"""

from fastapi import APIRouter

from servicehub.api.auth import router as auth_router
from servicehub.api.jobs import router as jobs_router
from servicehub.api.payments import router as payments_router
from servicehub.api.profile import router as profile_router
from servicehub.api.service_requests import router as service_requests_router

api_router: APIRouter = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
# 프로필: /user/profile 엔드포인트 (PATCH my profile)
api_router.include_router(profile_router, prefix="/user", tags=["Profile"])
api_router.include_router(service_requests_router, prefix="/service-requests", tags=["Service Requests"])
# 내 작업 / 공개 작업: /my/jobs, /public/jobs
api_router.include_router(jobs_router, tags=["Jobs"])
api_router.include_router(payments_router, prefix="/payments", tags=["Payments"])
