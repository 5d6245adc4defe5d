"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
Services own the lifecycle rules, matching and payment orchestration;
they call repositories for storage and take the caller context explicitly.
"""
