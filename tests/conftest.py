from __future__ import annotations

from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from storefront.config import Settings
from storefront.main import create_app
from storefront.purchase.stripe_service import (
    CheckoutRequest,
    CheckoutSession,
    PaymentProcessorError,
)
from storefront.storage import CatalogStore


class FakeProcessor:
    """In-process stand-in for Stripe that records every request."""

    def __init__(self, fail_with: Optional[str] = None) -> None:
        self.fail_with = fail_with
        self.requests: List[CheckoutRequest] = []

    def create_checkout_session(self, request: CheckoutRequest) -> CheckoutSession:
        self.requests.append(request)
        if self.fail_with is not None:
            raise PaymentProcessorError(self.fail_with)
        return CheckoutSession(
            session_id=f"cs_test_{len(self.requests)}",
            url=f"https://checkout.example.com/pay/cs_test_{len(self.requests)}",
        )


@pytest.fixture
def settings() -> Settings:
    return Settings(stripe_secret_key="sk_test_dummy")


@pytest.fixture
def store() -> CatalogStore:
    return CatalogStore()


@pytest.fixture
def processor() -> FakeProcessor:
    return FakeProcessor()


@pytest.fixture
def client(settings: Settings, store: CatalogStore, processor: FakeProcessor):
    """Test client with the app started (lifespan run)."""
    app = create_app(settings=settings, store=store, processor=processor)
    with TestClient(app) as client:
        yield client
