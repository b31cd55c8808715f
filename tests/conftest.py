"""Pytest configuration and shared fixtures for the dispute draft service."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from services.llm_service import LLMService
from services.service_factory import ServiceContainer, ServiceFactory
from tests.factories import SIGNING_SECRET, make_dispute
from tests.fakes.fake_stripe_service import FakeStripeService
from utils.config import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(
        stripe_secret_key="sk_test_123",
        stripe_client_id="ca_test_123",
        stripe_redirect_uri="http://localhost:3000/connect/stripe/callback",
        stripe_signing_secret=SIGNING_SECRET,
        openai_api_key=None,
    )


@pytest.fixture
def fake_stripe() -> FakeStripeService:
    return FakeStripeService(disputes={"dp_1": make_dispute("dp_1")})


@pytest.fixture
def services(settings: Settings, fake_stripe: FakeStripeService) -> ServiceContainer:
    return ServiceFactory.create_services(
        settings,
        stripe_service=fake_stripe,
        llm_service=LLMService(api_key=None),
    )


@pytest.fixture
def client(services: ServiceContainer) -> TestClient:
    return TestClient(create_app(services))
