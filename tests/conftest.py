"""Test configuration and fixtures."""

import os
from datetime import datetime, timezone
from typing import List

import pytest
from fastapi.testclient import TestClient

# Set test environment variables BEFORE importing the app
os.environ["ENVIRONMENT"] = "test"
os.environ["LLM_PROVIDER"] = "mock"
os.environ["QUOTA_BACKEND"] = "memory"
os.environ.pop("ADMIN_PASSWORD", None)

from health_links.config import Settings
from health_links.generation.models import AnswerResult, Claim, IntakeFinalResult, QAPair
from health_links.generation.parsing import clamp_briefing
from health_links.main import create_app
from health_links.quota import InMemoryBackend, QuotaStore

ADMIN_PASSWORD = "test-admin-password"

# 2025-03-10 14:30 in UTC+9
FIXED_NOW = datetime(2025, 3, 10, 5, 30, tzinfo=timezone.utc)


class FakeGenerator:
    """Records calls; returns whatever the test configured."""

    def __init__(self, answer_result=None, brief_payload=None, error=None):
        self.answer_calls = 0
        self.brief_calls = 0
        self.closed = False
        self.answer_result = answer_result or AnswerResult(
            answer="두통은 흔한 증상입니다.",
            claims=[
                Claim(text="대부분의 두통은 휴식으로 호전됩니다.", cites=["kdca"]),
                Claim(text="갑작스러운 극심한 두통은 응급 신호일 수 있습니다.", cites=["pubmed", "who"]),
            ],
        )
        self.brief_payload = brief_payload or {
            "preVisitBriefing": {"oneLiner": "3일 전부터 두통이 있습니다.", "visitPurpose": "원인 확인"},
            "questionsForDoctor": ["검사가 필요할까요?"],
            "redFlags": [],
        }
        self.error = error

    async def answer(self, question: str) -> AnswerResult:
        self.answer_calls += 1
        if self.error:
            raise self.error
        return self.answer_result

    async def brief(self, symptom_text: str, qa: List[QAPair]) -> IntakeFinalResult:
        self.brief_calls += 1
        if self.error:
            raise self.error
        return clamp_briefing(self.brief_payload)

    async def aclose(self) -> None:
        self.closed = True


def make_settings(**overrides) -> Settings:
    values = {
        "environment": "test",
        "llm_provider": "mock",
        "quota_backend": "memory",
        "admin_password": ADMIN_PASSWORD,
        "global_daily_cap": 500,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def memory_backend(fixed_clock) -> InMemoryBackend:
    return InMemoryBackend(clock=fixed_clock)


@pytest.fixture
def make_generator():
    return FakeGenerator


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def quota_store(memory_backend, fixed_clock) -> QuotaStore:
    return QuotaStore(backend=memory_backend, tier="dev", cap=500, clock=fixed_clock)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def client(settings, quota_store, fake_generator) -> TestClient:
    """Create a test client with an in-memory quota store and a fake generator."""
    app = create_app(settings=settings, quota_store=quota_store, generator=fake_generator)
    client = TestClient(app)
    yield client


@pytest.fixture
def make_client():
    """Build a test client around an explicit quota store and generator."""
    def _make(quota_store, generator, **setting_overrides) -> TestClient:
        app = create_app(
            settings=make_settings(**setting_overrides),
            quota_store=quota_store,
            generator=generator,
        )
        return TestClient(app)
    return _make
