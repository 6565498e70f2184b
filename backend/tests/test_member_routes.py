"""
UYNM Backend — Member Route Tests
===================================

What we test:
    ✅ Registration → 201 with {id, fullName, track} and a member notification
    ✅ Same email twice → 400 duplicate_email, one row, one notification
    ✅ Track must be one of volunteer / partner / member / mentor
    ✅ Admin roster with per-track stats and track filter
    ✅ A unique-constraint violation from the store maps to duplicate_email
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from uynm_api.exceptions import ConflictError
from uynm_api.schemas.member import MemberCreate
from uynm_api.services.member_service import MemberService, compute_stats


class TestRegisterMember:

    @pytest.mark.asyncio
    async def test_register_then_duplicate(
        self, client, admin_headers, mail_transport, sample_member
    ):
        first = await client.post("/api/members/register", json=sample_member)

        assert first.status_code == 201
        body = first.json()
        assert body["success"] is True
        assert body["message"] == (
            "Welcome to UYNM! Your mentor registration has been received. "
            "Our team will contact you within 48 hours."
        )
        assert body["data"]["fullName"] == "Ada Lovelace"
        assert body["data"]["track"] == "mentor"
        uuid.UUID(body["data"]["id"])

        second = await client.post("/api/members/register", json=sample_member)

        assert second.status_code == 400
        assert second.json()["error"] == "duplicate_email"
        assert second.json()["message"] == (
            "This email is already registered. Please login or use a different email."
        )

        roster = await client.get("/api/members", headers=admin_headers)
        assert roster.json()["stats"]["total"] == 1
        assert len(mail_transport.sent) == 1
        assert mail_transport.sent[0].subject == "[UYNM] New mentor Registration: Ada Lovelace"

    @pytest.mark.asyncio
    async def test_invalid_track_is_rejected(self, client, mail_transport, sample_member):
        response = await client.post(
            "/api/members/register", json=dict(sample_member, involvementTrack="sponsor")
        )

        assert response.status_code == 400
        assert response.json()["errors"] == [
            {
                "field": "involvementTrack",
                "message": "Please select a valid involvement track",
                "location": "body",
            }
        ]
        assert mail_transport.sent == []

    @pytest.mark.asyncio
    async def test_reason_is_optional(self, client, admin_headers, sample_member):
        payload = dict(sample_member)
        del payload["reason"]

        response = await client.post("/api/members/register", json=payload)

        assert response.status_code == 201
        member_id = response.json()["data"]["id"]
        detail = await client.get(f"/api/members/{member_id}", headers=admin_headers)
        assert detail.json()["data"]["reason"] is None

    @pytest.mark.asyncio
    async def test_empty_body_reports_every_required_field(self, client):
        response = await client.post("/api/members/register", json={})

        fields = [error["field"] for error in response.json()["errors"]]
        assert response.status_code == 400
        assert fields == ["fullName", "email", "phone", "involvementTrack", "location"]


class TestMemberAdmin:

    @pytest.mark.asyncio
    async def test_roster_stats_and_track_filter(self, client, admin_headers, sample_member):
        registrations = [
            ("vol1@example.com", "volunteer"),
            ("vol2@example.com", "volunteer"),
            ("partner@example.com", "partner"),
            ("mentor@example.com", "mentor"),
        ]
        for email, track in registrations:
            response = await client.post(
                "/api/members/register",
                json=dict(sample_member, email=email, involvementTrack=track),
            )
            assert response.status_code == 201

        roster = await client.get("/api/members", headers=admin_headers)
        assert roster.status_code == 200
        assert roster.json()["stats"] == {
            "total": 4,
            "volunteers": 2,
            "partners": 1,
            "members": 0,
            "mentors": 1,
        }

        volunteers = await client.get(
            "/api/members", params={"track": "volunteer"}, headers=admin_headers
        )
        assert {row["email"] for row in volunteers.json()["data"]} == {
            "vol1@example.com",
            "vol2@example.com",
        }
        assert volunteers.json()["stats"]["total"] == 2

    @pytest.mark.asyncio
    async def test_wrong_admin_key_is_forbidden(self, client):
        response = await client.get("/api/members", headers={"X-Admin-Key": "guess"})

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    @pytest.mark.asyncio
    async def test_bearer_admin_key_is_accepted(self, client):
        response = await client.get(
            "/api/members", headers={"Authorization": "Bearer test-admin-key"}
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_unknown_member_is_404(self, client, admin_headers):
        response = await client.get(f"/api/members/{uuid.uuid4()}", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Member not found"


class TestMemberServiceConstraint:
    """The store's UNIQUE(email) settles a registration race."""

    def setup_method(self):
        self.service = MemberService()

    @pytest.mark.asyncio
    async def test_integrity_error_maps_to_duplicate(self, mock_db_session):
        no_row = MagicMock()
        no_row.first.return_value = None
        mock_db_session.execute.return_value = no_row
        mock_db_session.commit = AsyncMock(
            side_effect=IntegrityError("INSERT INTO profiles", {}, Exception("unique"))
        )
        payload = MemberCreate(
            full_name="Ada Lovelace",
            email="ada@example.com",
            phone="+2348012345678",
            involvement_track="mentor",
            location="Lagos",
        )

        with pytest.raises(ConflictError) as exc_info:
            await self.service.register_member(mock_db_session, payload)

        assert exc_info.value.error_code == "duplicate_email"
        mock_db_session.rollback.assert_awaited_once()


def test_compute_stats_empty():
    stats = compute_stats([])
    assert stats.total == 0
    assert stats.volunteers == 0
