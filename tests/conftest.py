"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from typing import AsyncGenerator

import httpx
from jose import jwt

from invest_client.app import ClientApp, create_client_app
from invest_client.config import Settings
from invest_client.domain.models import (
    EnrollmentStatus,
    PlanEnrollment,
    ProfitRecord,
    ProofAttachment,
)
from invest_client.infrastructure.clients.backend import BackendGateway
from invest_client.infrastructure.session import SessionContext
from mock_backend.main import BackendState, create_app

BACKEND_BASE = "http://testserver/api"

# 1x1 transparent PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


def make_token(**claims) -> str:
    """Unsigned-for-our-purposes JWT; the client never verifies signatures"""
    return jwt.encode({"sub": "42", **claims}, "test-secret", algorithm="HS256")


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None, backend_api_base=BACKEND_BASE, http_timeout_seconds=2.0)


@pytest.fixture
def png_proof() -> ProofAttachment:
    return ProofAttachment(filename="receipt.png", content_type="image/png", content=PNG_BYTES)


@pytest.fixture
def backend_state() -> BackendState:
    """Mock backend with money in the wallet and no plans yet"""
    return BackendState(balance=Decimal("50000"))


@pytest.fixture
def transport(backend_state: BackendState) -> httpx.ASGITransport:
    return httpx.ASGITransport(app=create_app(backend_state))


@pytest.fixture
def session() -> SessionContext:
    session = SessionContext()
    session.init(make_token(username="ali"))
    return session


@pytest.fixture
def gateway(session: SessionContext, transport: httpx.ASGITransport, test_settings: Settings) -> BackendGateway:
    return BackendGateway(session, transport=transport, settings=test_settings)


@pytest.fixture
async def client_app(transport: httpx.ASGITransport, test_settings: Settings) -> AsyncGenerator[ClientApp, None]:
    """Fully wired client, logged in against the mock backend"""
    app = create_client_app(test_settings, transport=transport, configure_logging=False)
    app.login(make_token(username="ali"))
    yield app
    app.logout()


@pytest.fixture
def today() -> date:
    return date(2026, 3, 15)


@pytest.fixture
def sample_enrollments(today: date) -> list[PlanEnrollment]:
    """Two active plans, one expired, one completed"""
    return [
        PlanEnrollment(
            title="10 Marla",
            amount=Decimal("3000"),
            start_date=today - timedelta(days=10),
            end_date=today + timedelta(days=20),
            status=EnrollmentStatus.ACTIVE,
        ),
        PlanEnrollment(
            title="1 Kanal",
            amount=Decimal("8000"),
            start_date=today - timedelta(days=5),
            end_date=today + timedelta(days=25),
            status=EnrollmentStatus.ACTIVE,
        ),
        PlanEnrollment(
            title="20 Marla",
            amount=Decimal("5000"),
            start_date=today - timedelta(days=60),
            end_date=today - timedelta(days=30),
            status=EnrollmentStatus.EXPIRED,
        ),
        PlanEnrollment(
            title="10 Kanal",
            amount=Decimal("10000"),
            start_date=today - timedelta(days=90),
            end_date=today - timedelta(days=60),
            status=EnrollmentStatus.COMPLETED,
        ),
    ]


@pytest.fixture
def sample_profit_records() -> list[ProfitRecord]:
    return [
        ProfitRecord(
            title="10 Marla",
            daily_profit=Decimal("50"),
            total_earned=Decimal("500"),
            remaining_days=20,
            is_active=True,
        ),
        ProfitRecord(
            title="20 Marla",
            daily_profit=Decimal("100"),
            total_earned=Decimal("3000"),
            remaining_days=0,
            is_active=False,
        ),
    ]
