"""
Tests for application wiring: startup configuration, CORS, request ids
and the health endpoint.
"""

from __future__ import annotations

import pytest
from fastapi.responses import Response
from fastapi.testclient import TestClient

from storefront.config import Settings
from storefront.errors import ConfigError
from storefront.main import create_app
from storefront.purchase.stripe_service import StripeCheckout
from storefront.storage import CatalogStore


class TestSettings:
    """Environment-driven configuration."""

    def test_from_env_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_env")
        for name in (
            "STOREFRONT_CURRENCY",
            "STOREFRONT_ARTIST",
            "STOREFRONT_PUBLIC_URL",
            "STOREFRONT_PURCHASE_MODE",
            "STOREFRONT_SEED_ON_STARTUP",
            "STOREFRONT_LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)
        settings = Settings.from_env()
        assert settings.stripe_secret_key == "sk_test_env"
        assert settings.currency == "usd"
        assert settings.artist_name == "CEAZY"
        assert settings.public_base_url == "http://localhost:5000"
        assert settings.purchase_mode == "download"
        assert settings.seed_on_startup is True
        settings.validate()

    def test_from_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_env")
        monkeypatch.setenv("STOREFRONT_CURRENCY", "EUR")
        monkeypatch.setenv("STOREFRONT_PUBLIC_URL", "https://ceazy.example/")
        monkeypatch.setenv("STOREFRONT_PURCHASE_MODE", "coming_soon")
        monkeypatch.setenv("STOREFRONT_SEED_ON_STARTUP", "no")
        settings = Settings.from_env()
        assert settings.currency == "eur"
        assert settings.public_base_url == "https://ceazy.example"
        assert settings.purchase_mode == "coming_soon"
        assert settings.seed_on_startup is False

    def test_missing_secret_key(self) -> None:
        with pytest.raises(ConfigError, match="STRIPE_SECRET_KEY"):
            Settings(stripe_secret_key=None).validate()

    def test_unknown_purchase_mode(self) -> None:
        with pytest.raises(ConfigError, match="purchase mode"):
            Settings(stripe_secret_key="sk", purchase_mode="free").validate()


class TestStartup:
    """Lifespan behaviour."""

    def test_missing_secret_key_fails_startup(self) -> None:
        """The app refuses to start rather than failing on first request."""
        app = create_app(settings=Settings(stripe_secret_key=None))
        with pytest.raises(ConfigError):
            with TestClient(app):
                pass

    def test_seeds_on_startup(self, settings: Settings, store: CatalogStore, processor) -> None:
        app = create_app(settings=settings, store=store, processor=processor)
        with TestClient(app):
            assert store.initialized is True

    def test_lazy_seeding(self, settings: Settings, store: CatalogStore, processor) -> None:
        settings.seed_on_startup = False
        app = create_app(settings=settings, store=store, processor=processor)
        with TestClient(app) as client:
            assert store.initialized is False
            assert client.get("/health").json() == {"status": "ok", "albums": None}
            client.get("/api/albums")
            assert store.initialized is True

    def test_startup_seed_failure_is_not_fatal(self, settings: Settings, processor) -> None:
        """A failing startup seed leaves the app up and retries on first request."""
        calls = {"n": 0}

        def seed():
            calls["n"] += 1
            if calls["n"] == 1:
                raise RuntimeError("boom")
            return []

        store = CatalogStore(seed=seed)
        app = create_app(settings=settings, store=store, processor=processor)
        with TestClient(app) as client:
            assert store.initialized is False
            assert client.get("/api/albums").json() == []
            assert calls["n"] == 2

    def test_creates_stripe_processor(self, settings: Settings, store: CatalogStore) -> None:
        app = create_app(settings=settings, store=store)
        with TestClient(app):
            assert isinstance(app.state.processor, StripeCheckout)


class TestHttpSurface:
    """CORS, OPTIONS and request ids."""

    def test_health(self, client: TestClient) -> None:
        assert client.get("/health").json() == {"status": "ok", "albums": 2}

    def test_options_short_circuits(self, client: TestClient) -> None:
        response = client.options("/api/albums")
        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"
        assert "POST" in response.headers["access-control-allow-methods"]
        assert "Authorization" in response.headers["access-control-allow-headers"]

    def test_options_on_unknown_path(self, client: TestClient) -> None:
        assert client.options("/api/purchase/abc").status_code == 200

    def test_cors_header_on_get(self, client: TestClient) -> None:
        response = client.get("/api/albums", headers={"Origin": "https://anywhere.example"})
        assert response.headers["access-control-allow-origin"] == "*"

    def test_request_id_header(self, client: TestClient) -> None:
        first = client.get("/api/albums").headers["X-Request-ID"]
        second = client.get("/api/albums").headers["X-Request-ID"]
        assert first and second and first != second

    def test_repeated_headers_survive_logging(
        self, settings: Settings, store: CatalogStore, processor
    ) -> None:
        """Headers sent more than once are not merged when the body is logged."""
        app = create_app(settings=settings, store=store, processor=processor)

        @app.get("/api/cookies")
        def set_cookies() -> Response:
            response = Response(content="ok")
            response.headers.append("set-cookie", "a=1")
            response.headers.append("set-cookie", "b=2")
            return response

        with TestClient(app) as client:
            response = client.get("/api/cookies")
        assert response.headers.get_list("set-cookie") == ["a=1", "b=2"]
        assert response.headers["X-Request-ID"]


class TestErrorShape:
    """Framework errors use the same {"error": ...} body as the API."""

    def test_unknown_route(self, client: TestClient) -> None:
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    def test_wrong_method(self, client: TestClient) -> None:
        response = client.delete("/api/albums")
        assert response.status_code == 405
        assert "error" in response.json()

    def test_unparsable_json_body(self, client: TestClient) -> None:
        response = client.post(
            "/api/create-payment-intent",
            content=b'{"albumId": ',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert set(response.json()) == {"error"}
