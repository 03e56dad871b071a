"""
Integration tests for parcel management.

Tests parcel create/list/get/delete and owner-scoped access.
"""

import pytest
from sqlalchemy import func, select

from backend.app.models.parcel import Parcel
from conftest import ALICE, BOB


# TEST 1: Create and fetch
@pytest.mark.asyncio
async def test_created_parcel_resolves_to_same_document(client, alice_headers):
    parcel_data = {
        "tracking_id": "TRK-100",
        "title": "Documents",
        "type": "document",
        "created_by": ALICE,
        "senderRegion": "Dhaka",
        "receiverRegion": "Sylhet",
        "senderName": "Alice",
        "receiverContact": "+8801700000000",
        "pickupInstruction": {"floor": 3, "note": "ring twice"},
        "deliveryCost": 60,
        "created_at": "2026-10-02T08:30:00+00:00",
    }

    create_response = await client.post("/parcel", json=parcel_data, headers=alice_headers)

    assert create_response.status_code == 201
    body = create_response.json()
    assert body["message"] == "Parcel saved successfully"
    parcel_id = body["insertedId"]

    get_response = await client.get(f"/parcel/{parcel_id}", params={"email": ALICE}, headers=alice_headers)

    assert get_response.status_code == 200
    document = get_response.json()
    assert document["_id"] == parcel_id
    assert {key: document[key] for key in parcel_data} == parcel_data
    assert document["payment_status"] == "unpaid"
    assert document["delivery_status"] == "created"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"title": "No tracking id"},
    {"tracking_id": "", "title": "Empty tracking id"},
    {"tracking_id": "   "},
])
async def test_create_parcel_requires_tracking_id(client, alice_headers, db_session, payload):
    response = await client.post("/parcel", json=payload, headers=alice_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Tracking ID is required"

    count = await db_session.scalar(select(func.count(Parcel.id)))
    assert count == 0


@pytest.mark.asyncio
async def test_new_parcel_cannot_start_paid(client, alice_headers):
    response = await client.post(
        "/parcel",
        json={"tracking_id": "TRK-2", "created_by": ALICE, "payment_status": "paid"},
        headers=alice_headers,
    )
    parcel_id = response.json()["insertedId"]

    document = (await client.get(f"/parcel/{parcel_id}", params={"email": ALICE}, headers=alice_headers)).json()
    assert document["payment_status"] == "unpaid"


# TEST 2: List
@pytest.mark.asyncio
async def test_list_parcels_projection_and_order(client, alice_headers, bob_headers):
    for i, created_at in enumerate(["2026-10-01T00:00:00", "2026-10-03T00:00:00", "2026-10-02T00:00:00"]):
        await client.post(
            "/parcel",
            json={
                "tracking_id": f"TRK-{i}",
                "created_by": ALICE,
                "created_at": created_at,
                "receiverAddress": "secret street 1",
            },
            headers=alice_headers,
        )
    await client.post(
        "/parcel",
        json={"tracking_id": "TRK-BOB", "created_by": BOB, "created_at": "2026-10-04T00:00:00"},
        headers=bob_headers,
    )

    response = await client.get("/parcels", params={"email": ALICE}, headers=alice_headers)

    assert response.status_code == 200
    parcels = response.json()
    assert [p["tracking_id"] for p in parcels] == ["TRK-1", "TRK-2", "TRK-0"]
    assert all("receiverAddress" not in p for p in parcels)
    assert all(p["created_by"] == ALICE for p in parcels)

    everything = (await client.get("/parcels", headers=alice_headers)).json()
    assert len(everything) == 4
    assert everything[0]["tracking_id"] == "TRK-BOB"


@pytest.mark.asyncio
async def test_list_parcels_pagination(client, alice_headers):
    for day in range(1, 6):
        await client.post(
            "/parcel",
            json={"tracking_id": f"TRK-{day}", "created_by": ALICE, "created_at": f"2026-10-0{day}T00:00:00"},
            headers=alice_headers,
        )

    response = await client.get("/parcels", params={"skip": 1, "limit": 2}, headers=alice_headers)

    assert [p["tracking_id"] for p in response.json()] == ["TRK-4", "TRK-3"]


# TEST 3: Get
@pytest.mark.asyncio
async def test_get_unknown_parcel_returns_404(client, alice_headers):
    response = await client.get("/parcel/doesnotexist", params={"email": ALICE}, headers=alice_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_cannot_read_other_users_parcel(client, alice_parcel, bob_headers):
    """Bob passes the guard with his own email but does not own the parcel."""
    response = await client.get(f"/parcel/{alice_parcel}", params={"email": BOB}, headers=bob_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_can_read_any_parcel(client, alice_parcel, admin_headers):
    response = await client.get(
        f"/parcel/{alice_parcel}", params={"email": "admin@example.com"}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["created_by"] == ALICE


# TEST 4: Delete
@pytest.mark.asyncio
async def test_delete_parcel(client, alice_parcel, alice_headers):
    response = await client.delete(f"/parcel/{alice_parcel}", params={"email": ALICE}, headers=alice_headers)

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Parcel deleted successfully", "deletedCount": 1}

    again = await client.delete(f"/parcel/{alice_parcel}", params={"email": ALICE}, headers=alice_headers)
    assert again.status_code == 404

    fetch = await client.get(f"/parcel/{alice_parcel}", params={"email": ALICE}, headers=alice_headers)
    assert fetch.status_code == 404


@pytest.mark.asyncio
async def test_cannot_delete_other_users_parcel(client, alice_parcel, alice_headers, bob_headers):
    response = await client.delete(f"/parcel/{alice_parcel}", params={"email": BOB}, headers=bob_headers)

    assert response.status_code == 403

    still_there = await client.get(f"/parcel/{alice_parcel}", params={"email": ALICE}, headers=alice_headers)
    assert still_there.status_code == 200


@pytest.mark.asyncio
async def test_parcel_document_is_stored_as_sent(client, alice_headers):
    """Keys that mirror storage internals and values that fit no typed column survive unchanged."""
    parcel_data = {
        "tracking_id": 12345,
        "created_by": ALICE,
        "id": "caller-ref-7",
        "details": "fragile, glass",
        "body": {"note": "not the storage column"},
        "title": "x" * 300,
        "senderRegion": "r" * 150,
        "parcelWeight": "2 kg",
        "deliveryCost": "150",
        "insurance": None,
    }

    response = await client.post("/parcel", json=parcel_data, headers=alice_headers)

    assert response.status_code == 201
    parcel_id = response.json()["insertedId"]

    document = (await client.get(f"/parcel/{parcel_id}", params={"email": ALICE}, headers=alice_headers)).json()
    assert document["_id"] == parcel_id
    assert {key: document[key] for key in parcel_data} == parcel_data

    summaries = (await client.get("/parcels", params={"email": ALICE}, headers=alice_headers)).json()
    assert summaries[0]["title"] == "x" * 300
    assert summaries[0]["deliveryCost"] == "150"
    assert "details" not in summaries[0]


@pytest.mark.asyncio
async def test_payment_status_change_shows_in_document(client, alice_parcel, alice_headers):
    await client.post(
        "/payments",
        json={"parcelId": alice_parcel, "email": ALICE, "amount": 150},
        headers=alice_headers,
    )

    document = (await client.get(f"/parcel/{alice_parcel}", params={"email": ALICE}, headers=alice_headers)).json()
    summaries = (await client.get("/parcels", params={"email": ALICE}, headers=alice_headers)).json()

    assert document["payment_status"] == "paid"
    assert document["parcelWeight"] == 2.5
    assert summaries[0]["payment_status"] == "paid"
