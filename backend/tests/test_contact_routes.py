"""
UYNM Backend — Contact Route Tests
====================================

What we test:
    ✅ Valid submission → 201, row stored as 'unread', admin notified
    ✅ Every violated rule reported at once, nothing stored, nothing sent
    ✅ Notification failure never changes the response
    ✅ Admin listing and status update (404 for unknown ids)
"""

import uuid

import pytest

from conftest import FailingMailTransport


class TestSubmitContact:

    @pytest.mark.asyncio
    async def test_valid_submission_is_stored_and_notified(
        self, client, admin_headers, mail_transport, sample_contact
    ):
        response = await client.post("/api/contact", json=sample_contact)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Thank you for your message! We will get back to you soon."
        assert body["data"]["status"] == "unread"
        uuid.UUID(body["data"]["id"])

        assert len(mail_transport.sent) == 1
        mail = mail_transport.sent[0]
        assert mail.subject == "[UYNM Contact] Partnership"
        assert mail.recipient == "admin@uynm.test"
        assert "Chinedu Okafor" in mail.html

        listing = await client.get("/api/contact", headers=admin_headers)
        assert [row["email"] for row in listing.json()["data"]] == ["chinedu@example.com"]

    @pytest.mark.asyncio
    async def test_missing_first_name_and_short_message_report_two_errors(
        self, client, admin_headers, mail_transport, sample_contact
    ):
        payload = dict(sample_contact, message="short")
        del payload["firstName"]

        response = await client.post("/api/contact", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "validation_error"
        assert body["errors"] == [
            {"field": "firstName", "message": "First name is required", "location": "body"},
            {
                "field": "message",
                "message": "Message must be at least 10 characters",
                "location": "body",
            },
        ]
        assert mail_transport.sent == []

        listing = await client.get("/api/contact", headers=admin_headers)
        assert listing.json()["data"] == []

    @pytest.mark.asyncio
    async def test_whitespace_only_fields_are_rejected(self, client, sample_contact):
        payload = dict(sample_contact, subject="   ", message="          x")

        response = await client.post("/api/contact", json=payload)

        fields = [error["field"] for error in response.json()["errors"]]
        assert response.status_code == 400
        assert fields == ["subject", "message"]

    @pytest.mark.asyncio
    async def test_invalid_email_is_rejected(self, client, sample_contact):
        response = await client.post(
            "/api/contact", json=dict(sample_contact, email="not-an-email")
        )

        assert response.status_code == 400
        assert response.json()["errors"] == [
            {"field": "email", "message": "Valid email is required", "location": "body"}
        ]

    @pytest.mark.asyncio
    async def test_non_object_body_is_rejected(self, client):
        response = await client.post("/api/contact", json=["not", "an", "object"])

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "body"

    @pytest.mark.asyncio
    async def test_repeat_submissions_are_all_stored(
        self, client, admin_headers, sample_contact
    ):
        for _ in range(2):
            response = await client.post("/api/contact", json=sample_contact)
            assert response.status_code == 201

        listing = await client.get("/api/contact", headers=admin_headers)
        assert len(listing.json()["data"]) == 2


class TestNotificationFailure:

    @pytest.fixture
    def mail_transport(self):
        return FailingMailTransport()

    @pytest.mark.asyncio
    async def test_relay_failure_does_not_change_response(
        self, app, client, admin_headers, sample_contact
    ):
        response = await client.post("/api/contact", json=sample_contact)

        assert response.status_code == 201
        assert response.json()["success"] is True
        assert app.state.dispatcher.stats["failed"] == 1

        listing = await client.get("/api/contact", headers=admin_headers)
        assert len(listing.json()["data"]) == 1


class TestContactAdmin:

    @pytest.mark.asyncio
    async def test_listing_requires_admin_key(self, client):
        response = await client.get("/api/contact")

        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_status_update(self, client, admin_headers, sample_contact):
        created = await client.post("/api/contact", json=sample_contact)
        contact_id = created.json()["data"]["id"]

        response = await client.patch(
            f"/api/contact/{contact_id}/status",
            json={"status": "read"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "read"

    @pytest.mark.asyncio
    async def test_status_update_unknown_id_is_404(self, client, admin_headers):
        response = await client.patch(
            f"/api/contact/{uuid.uuid4()}/status",
            json={"status": "read"},
            headers=admin_headers,
        )

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_status_update_requires_status(self, client, admin_headers, sample_contact):
        created = await client.post("/api/contact", json=sample_contact)
        contact_id = created.json()["data"]["id"]

        response = await client.patch(
            f"/api/contact/{contact_id}/status", json={}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["message"] == "Status is required"

    @pytest.mark.asyncio
    async def test_malformed_id_is_a_validation_error(self, client, admin_headers):
        response = await client.patch(
            "/api/contact/not-a-uuid/status", json={"status": "read"}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["errors"] == [
            {"field": "id", "message": "Invalid id", "location": "path"}
        ]
