"""ServiceHub 서버 패키지 — 고객-기술자 서비스 마켓플레이스 API.

ServiceHub server package — Two-sided service marketplace API
connecting clients who post service requests with technicians who fulfil them.
"""
