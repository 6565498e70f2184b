"""
UYNM Backend — Gateway Tests
==============================

What:  Everything every request passes through, independent of the forms:
       banner, health, unknown routes, request IDs, CORS, rate limiting,
       the admin gate and configuration loading.
"""

from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from conftest import make_settings
from uynm_api.config import Settings
from uynm_api.main import create_app
from uynm_api.services.mail_transport import OutgoingMail, SmtpMailTransport


@pytest_asyncio.fixture
async def limited_client(database, identity, mail_transport):
    app = create_app(
        make_settings(rate_limit_requests=2, rate_limit_window=60),
        database=database,
        identity=identity,
        mail_transport=mail_transport,
    )
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


class TestServiceEndpoints:

    @pytest.mark.asyncio
    async def test_banner(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json() == {
            "message": "United Youth Nigeria Movement API",
            "status": "running",
            "version": "1.0.0",
        }

    @pytest.mark.asyncio
    async def test_health_reports_notification_counters(self, client, sample_contact):
        await client.post("/api/contact", json=sample_contact)

        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["uptime_seconds"] >= 0
        assert data["notifications"] == {"delivered": 1, "failed": 0, "skipped": 0}

    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        response = await client.get("/api/donations", headers={"X-Request-ID": "abc123"})

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": "not_found",
            "message": "Route not found",
            "request_id": "abc123",
        }

    @pytest.mark.asyncio
    async def test_wrong_method_keeps_envelope(self, client):
        response = await client.delete("/api/contact")

        assert response.status_code == 405
        assert response.json()["error"] == "http_error"


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, client):
        response = await client.get("/api/health")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_client_value_is_echoed_and_truncated(self, client):
        response = await client.get("/api/health", headers={"X-Request-ID": "x" * 100})

        assert response.headers["X-Request-ID"] == "x" * 64


class TestCors:

    @pytest.mark.asyncio
    async def test_configured_origin_allowed(self, client):
        response = await client.get("/api/health", headers={"Origin": "http://localhost:5500"})

        assert response.headers["access-control-allow-origin"] == "http://localhost:5500"

    @pytest.mark.asyncio
    async def test_frontend_url_allowed(self, client):
        response = await client.get("/api/health", headers={"Origin": "https://uynm.test"})

        assert response.headers["access-control-allow-origin"] == "https://uynm.test"

    @pytest.mark.asyncio
    async def test_unlisted_origin_gets_no_grant(self, client):
        response = await client.get("/api/health", headers={"Origin": "http://localhost:8080"})

        assert "access-control-allow-origin" not in response.headers

    @pytest.mark.asyncio
    async def test_any_localhost_port_in_development(self, database, identity, mail_transport):
        app = create_app(
            make_settings(environment="development"),
            database=database,
            identity=identity,
            mail_transport=mail_transport,
        )
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            response = await c.get("/api/health", headers={"Origin": "http://localhost:8080"})

        assert response.headers["access-control-allow-origin"] == "http://localhost:8080"


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_window_full_returns_429(self, limited_client):
        for _ in range(2):
            assert (await limited_client.get("/api/events")).status_code == 200

        response = await limited_client.get("/api/events")

        assert response.status_code == 429
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "rate_limit_exceeded"
        assert body["request_id"] == response.headers["X-Request-ID"]
        assert 0 < int(response.headers["Retry-After"]) <= 61

    @pytest.mark.asyncio
    async def test_health_is_never_limited(self, limited_client):
        for _ in range(5):
            assert (await limited_client.get("/api/health")).status_code == 200


class TestAdminGate:

    @pytest.mark.asyncio
    async def test_no_key_configured_refuses_everyone(self, database, identity, mail_transport):
        app = create_app(
            make_settings(admin_api_key=""),
            database=database,
            identity=identity,
            mail_transport=mail_transport,
        )
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            response = await c.get("/api/contact", headers={"X-Admin-Key": ""})
            guessed = await c.get("/api/contact", headers={"X-Admin-Key": "anything"})

        assert response.status_code == 401
        assert guessed.status_code == 403
        assert guessed.json()["error"] == "forbidden"


class TestConfiguration:

    def test_deployment_variable_names(self, monkeypatch):
        monkeypatch.setenv("NODE_ENV", "Development")
        monkeypatch.setenv("PORT", "8080")

        loaded = Settings(_env_file=None)

        assert loaded.is_development is True
        assert loaded.backend_port == 8080

    def test_identity_settings_are_public_client_only(self):
        supabase_fields = {name for name in Settings.model_fields if name.startswith("supabase")}

        assert supabase_fields == {"supabase_url", "supabase_anon_key"}

    def test_cors_list_includes_frontend_once(self):
        loaded = make_settings(
            cors_origins="http://localhost:5500, ,https://uynm.test",
            frontend_url="https://uynm.test",
        )

        assert loaded.cors_origins_list == ["http://localhost:5500", "https://uynm.test"]

    def test_missing_collaborators_reported_together(self):
        loaded = make_settings(smtp_user="", smtp_pass="", admin_api_key="")

        with pytest.raises(ValueError) as exc_info:
            loaded.validate_required_for_production()

        message = str(exc_info.value)
        assert "SMTP_USER" in message
        assert "ADMIN_API_KEY" in message

    def test_notification_recipient_falls_back_to_smtp_user(self):
        assert make_settings(notification_email="").notification_recipient == "mailer@uynm.test"


class TestSmtpTransport:

    @pytest.mark.asyncio
    async def test_send_uses_starttls_port(self):
        transport = SmtpMailTransport(
            host="smtp.test", port=587, username="mailer@uynm.test", password="secret"
        )
        mail = OutgoingMail(
            sender_name="UYNM Website",
            sender_address="mailer@uynm.test",
            recipient="admin@uynm.test",
            subject="[UYNM Newsletter] New Subscription: a@example.com",
            html="<p>a@example.com</p>",
            text="a@example.com",
        )

        with patch(
            "uynm_api.services.mail_transport.aiosmtplib.send", new_callable=AsyncMock
        ) as send:
            reference = await transport.send(mail)

        kwargs = send.call_args.kwargs
        assert kwargs["hostname"] == "smtp.test"
        assert kwargs["use_tls"] is False
        assert reference.endswith("@uynm.test>")

    def test_unconfigured_without_password(self):
        assert SmtpMailTransport("smtp.test", 587, "mailer@uynm.test", "").configured is False
