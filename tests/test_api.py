"""
PetSitter Connect Backend — HTTP API Tests
===========================================

What:  End-to-end behaviour through FastAPI: status codes, camelCase bodies,
       error envelope, and the accept cascade against a real SQLite store.
How:   HTTPX AsyncClient over ASGITransport (see conftest.test_client).
"""

from datetime import date, timedelta

import pytest


async def _create_listing(client, payload):
    response = await client.post("/listings", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def _apply(client, listing_id, sitter_id):
    response = await client.post(
        f"/listings/{listing_id}/applications", json={"sitterId": sitter_id}
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestListingEndpoints:
    @pytest.mark.asyncio
    async def test_create_listing_returns_camel_case_body(self, test_client, listing_payload):
        response = await test_client.post("/listings", json=listing_payload(breed="Labrador"))

        assert response.status_code == 201
        body = response.json()
        assert isinstance(body["id"], int)
        assert body["ownerId"] == "owner1"
        assert body["listingType"] == ["house-sitting", "walks"]
        assert body["sitterVerified"] is False
        assert body["breed"] == "Labrador"
        assert body["medication"] is None

    @pytest.mark.asyncio
    async def test_create_listing_in_the_past_is_400(self, test_client, listing_payload):
        yesterday = (date.today() - timedelta(days=1)).isoformat()

        response = await test_client.post("/listings", json=listing_payload(startDate=yesterday))

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"] == "Start date cannot be in the past"

    @pytest.mark.asyncio
    async def test_end_before_start_is_400(self, test_client, listing_payload):
        payload = listing_payload()
        payload["endDate"] = payload["startDate"]

        response = await test_client.post("/listings", json=payload)

        assert response.status_code == 400
        assert response.json()["message"] == "End date must be after start date"

    @pytest.mark.asyncio
    async def test_malformed_listing_is_400(self, test_client, listing_payload):
        response = await test_client.post(
            "/listings", json=listing_payload(species="dragon", listingType=[])
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        fields = {err["field"] for err in body["details"]["errors"]}
        assert {"species", "listingType"} <= fields

    @pytest.mark.asyncio
    async def test_price_beyond_column_precision_is_400(self, test_client, listing_payload):
        response = await test_client.post("/listings", json=listing_payload(price=100_000_000))

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert "price" in {err["field"] for err in body["details"]["errors"]}

    @pytest.mark.asyncio
    async def test_largest_storable_price_is_accepted(self, test_client, listing_payload):
        response = await test_client.post("/listings", json=listing_payload(price=99_999_999.99))

        assert response.status_code == 201
        assert response.json()["price"] == 99_999_999.99

    @pytest.mark.asyncio
    async def test_unknown_listing_is_404(self, test_client):
        response = await test_client.get("/listings/999")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert body["message"] == "Listing with ID 999 not found"
        assert body["path"] == "/listings/999"

    @pytest.mark.asyncio
    async def test_get_listing_and_owner_listings(self, test_client, listing_payload):
        mine = await _create_listing(test_client, listing_payload(ownerId="owner2"))
        await _create_listing(test_client, listing_payload(ownerId="owner3"))

        single = await test_client.get(f"/listings/{mine['id']}")
        owned = await test_client.get("/listings/owner/owner2")

        assert single.status_code == 200
        assert single.json()["id"] == mine["id"]
        assert [item["id"] for item in owned.json()] == [mine["id"]]

    @pytest.mark.asyncio
    async def test_filters_are_applied_and_invalid_ones_ignored(
        self, test_client, listing_payload
    ):
        verified = await _create_listing(test_client, listing_payload(sitterVerified=True))
        unverified = await _create_listing(test_client, listing_payload(sitterVerified=False))

        filtered = await test_client.get("/listings", params={"sitterVerified": "true"})
        unfiltered = await test_client.get("/listings", params={"price": "not-a-number"})

        assert [item["id"] for item in filtered.json()] == [verified["id"]]
        assert [item["id"] for item in unfiltered.json()] == [unverified["id"], verified["id"]]

    @pytest.mark.asyncio
    async def test_listing_type_filter(self, test_client, listing_payload):
        feeding = await _create_listing(test_client, listing_payload(listingType=["feeding"]))
        await _create_listing(test_client, listing_payload(listingType=["walks"]))

        response = await test_client.get("/listings", params={"listingType": "feeding"})

        assert [item["id"] for item in response.json()] == [feeding["id"]]


class TestApplicationEndpoints:
    @pytest.mark.asyncio
    async def test_accept_rejects_the_other_applications(self, test_client, listing_payload):
        listing = await _create_listing(test_client, listing_payload())
        a = await _apply(test_client, listing["id"], "a")
        b = await _apply(test_client, listing["id"], "b")
        c = await _apply(test_client, listing["id"], "c")

        response = await test_client.patch(f"/applications/{b['id']}", json={"status": "accepted"})

        assert response.status_code == 200
        assert response.json()["status"] == "accepted"
        listed = await test_client.get(f"/listings/{listing['id']}/applications")
        statuses = {item["id"]: item["status"] for item in listed.json()}
        assert statuses == {a["id"]: "rejected", b["id"]: "accepted", c["id"]: "rejected"}

    @pytest.mark.asyncio
    async def test_accept_leaves_other_listings_alone(self, test_client, listing_payload):
        first = await _create_listing(test_client, listing_payload())
        second = await _create_listing(test_client, listing_payload())
        chosen = await _apply(test_client, first["id"], "a")
        await _apply(test_client, first["id"], "b")
        elsewhere = await _apply(test_client, second["id"], "b")

        await test_client.patch(f"/applications/{chosen['id']}", json={"status": "accepted"})

        response = await test_client.get(f"/listings/{second['id']}/applications")
        assert response.json() == [
            {"id": elsewhere["id"], "listingId": second["id"], "sitterId": "b", "status": "pending"}
        ]

    @pytest.mark.asyncio
    async def test_reject_does_not_cascade(self, test_client, listing_payload):
        listing = await _create_listing(test_client, listing_payload())
        a = await _apply(test_client, listing["id"], "a")
        b = await _apply(test_client, listing["id"], "b")

        response = await test_client.patch(f"/applications/{a['id']}", json={"status": "rejected"})

        assert response.json()["status"] == "rejected"
        listed = await test_client.get(f"/listings/{listing['id']}/with-applications")
        statuses = {item["id"]: item["status"] for item in listed.json()["applications"]}
        assert statuses == {a["id"]: "rejected", b["id"]: "pending"}

    @pytest.mark.asyncio
    async def test_duplicate_application_is_400(self, test_client, listing_payload):
        listing = await _create_listing(test_client, listing_payload())
        await _apply(test_client, listing["id"], "sitter1")

        response = await test_client.post(
            f"/listings/{listing['id']}/applications", json={"sitterId": "sitter1"}
        )

        assert response.status_code == 400
        assert response.json()["message"] == (
            f"Sitter sitter1 has already applied to listing {listing['id']}"
        )

    @pytest.mark.asyncio
    async def test_blank_sitter_id_is_400(self, test_client, listing_payload):
        listing = await _create_listing(test_client, listing_payload())

        response = await test_client.post(
            f"/listings/{listing['id']}/applications", json={"sitterId": "   "}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "sitterId cannot be empty"

    @pytest.mark.asyncio
    async def test_apply_to_unknown_listing_is_404(self, test_client):
        response = await test_client.post("/listings/4242/applications", json={"sitterId": "s"})

        assert response.status_code == 404
        assert response.json()["message"] == "Listing with ID 4242 not found"

    @pytest.mark.asyncio
    async def test_patch_unknown_application_is_404(self, test_client):
        response = await test_client.patch("/applications/31337", json={"status": "accepted"})

        assert response.status_code == 404
        assert response.json()["message"] == "Application with ID 31337 not found"

    @pytest.mark.asyncio
    async def test_patch_with_invalid_status_is_400(self, test_client, listing_payload):
        listing = await _create_listing(test_client, listing_payload())
        application = await _apply(test_client, listing["id"], "a")

        response = await test_client.patch(
            f"/applications/{application['id']}", json={"status": "maybe"}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_accept_on_started_listing_stays_pending(
        self, test_client, store, listing_values
    ):
        started = await store.create_listing(
            listing_values(
                start_date=date.today() - timedelta(days=2),
                end_date=date.today() + timedelta(days=2),
            )
        )
        application = await _apply(test_client, started.id, "late-sitter")

        response = await test_client.patch(
            f"/applications/{application['id']}", json={"status": "accepted"}
        )

        assert response.status_code == 400
        assert response.json()["message"] == (
            "Cannot accept applications for listings that have already started"
        )
        stored = await store.get_application_by_id(application["id"])
        assert stored.status == "pending"

    @pytest.mark.asyncio
    async def test_sitter_applications_include_listing(self, test_client, listing_payload):
        listing = await _create_listing(test_client, listing_payload(title="Parrot care"))
        await _apply(test_client, listing["id"], "sitter7")

        response = await test_client.get("/sitters/sitter7/applications")

        assert response.status_code == 200
        [item] = response.json()
        assert item["sitterId"] == "sitter7"
        assert item["listing"]["title"] == "Parrot care"


class TestHealthAndTracing:
    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/listings", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"
