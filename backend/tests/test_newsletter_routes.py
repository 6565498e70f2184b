"""
UYNM Backend — Newsletter Route Tests
=======================================

What we test:
    ✅ New address → 201; active address again → 400 already_subscribed
    ✅ Unsubscribe then subscribe → 200 "Welcome back!", still one row
    ✅ Unsubscribe of an unknown address still succeeds
    ✅ Admin list with total / active counts
"""

import pytest


class TestSubscribe:

    @pytest.mark.asyncio
    async def test_subscribe_new_address(self, client, mail_transport):
        response = await client.post(
            "/api/newsletter/subscribe", json={"email": "reader@example.com"}
        )

        assert response.status_code == 201
        assert response.json() == {
            "success": True,
            "message": "Thank you for subscribing! Stay tuned for updates.",
        }
        assert mail_transport.sent[0].subject == (
            "[UYNM Newsletter] New Subscription: reader@example.com"
        )

    @pytest.mark.asyncio
    async def test_active_address_is_rejected(self, client, mail_transport):
        await client.post("/api/newsletter/subscribe", json={"email": "reader@example.com"})

        response = await client.post(
            "/api/newsletter/subscribe", json={"email": "reader@example.com"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "already_subscribed"
        assert response.json()["message"] == "This email is already subscribed to our newsletter."
        assert len(mail_transport.sent) == 1

    @pytest.mark.asyncio
    async def test_resubscribe_reactivates_the_same_row(
        self, client, admin_headers, mail_transport
    ):
        email = {"email": "reader@example.com"}
        await client.post("/api/newsletter/subscribe", json=email)

        unsubscribed = await client.request("DELETE", "/api/newsletter/unsubscribe", json=email)
        assert unsubscribed.status_code == 200
        assert unsubscribed.json()["message"] == "You have been unsubscribed from our newsletter."

        listing = await client.get("/api/newsletter/subscribers", headers=admin_headers)
        assert listing.json()["active"] == 0

        response = await client.post("/api/newsletter/subscribe", json=email)

        assert response.status_code == 200
        assert response.json()["message"] == (
            "Welcome back! Your subscription has been reactivated."
        )
        assert len(mail_transport.sent) == 2
        assert "reactivated" in mail_transport.sent[1].html

        listing = await client.get("/api/newsletter/subscribers", headers=admin_headers)
        assert listing.json()["total"] == 1
        assert listing.json()["active"] == 1

    @pytest.mark.asyncio
    async def test_invalid_email(self, client):
        response = await client.post("/api/newsletter/subscribe", json={"email": "nope"})

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "email"


class TestUnsubscribe:

    @pytest.mark.asyncio
    async def test_unknown_address_still_succeeds(self, client, admin_headers):
        response = await client.request(
            "DELETE", "/api/newsletter/unsubscribe", json={"email": "stranger@example.com"}
        )

        assert response.status_code == 200
        assert response.json()["success"] is True

        listing = await client.get("/api/newsletter/subscribers", headers=admin_headers)
        assert listing.json()["total"] == 0

    @pytest.mark.asyncio
    async def test_email_is_validated(self, client):
        response = await client.request(
            "DELETE", "/api/newsletter/unsubscribe", json={"email": ""}
        )

        assert response.status_code == 400


class TestSubscriberList:

    @pytest.mark.asyncio
    async def test_counts(self, client, admin_headers):
        for email in ("a@example.com", "b@example.com", "c@example.com"):
            await client.post("/api/newsletter/subscribe", json={"email": email})
        await client.request(
            "DELETE", "/api/newsletter/unsubscribe", json={"email": "b@example.com"}
        )

        response = await client.get("/api/newsletter/subscribers", headers=admin_headers)

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["total"] == 3
        assert body["active"] == 2
        assert {row["email"] for row in body["data"] if not row["is_active"]} == {
            "b@example.com"
        }

    @pytest.mark.asyncio
    async def test_requires_admin(self, client):
        response = await client.get("/api/newsletter/subscribers")

        assert response.status_code == 401
