"""
Integration tests for the identity and ownership guards.

Verifies 401/403 handling of bearer credentials and that self-scoped
operations reject parameter substitution.
"""

import pytest
from datetime import timedelta
from jose import jwt

from backend.app.core.config import settings
from backend.app.core.identity import create_access_token, IdentityProvider, IdentityVerificationError
from conftest import ALICE, BOB


# TEST 1: Missing credential
@pytest.mark.asyncio
async def test_missing_token_is_unauthorized(client):
    response = await client.get("/parcels")

    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_AUTH_001"


@pytest.mark.asyncio
async def test_non_bearer_scheme_is_unauthorized(client):
    response = await client.get("/parcels", headers={"Authorization": "Basic YWxpY2U6c2VjcmV0"})

    assert response.status_code == 401


# TEST 2: Rejected credentials
@pytest.mark.asyncio
async def test_garbage_token_is_forbidden(client):
    response = await client.get("/parcels", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 403
    assert response.json()["error_code"] == "ERR_AUTH_002"


@pytest.mark.asyncio
async def test_expired_token_is_forbidden(client):
    token = create_access_token({"email": ALICE}, expires_delta=timedelta(minutes=-5))

    response = await client.get("/parcels", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_token_signed_with_other_key_is_forbidden(client):
    token = jwt.encode({"email": ALICE}, "some-other-key-entirely", algorithm=settings.identity_algorithm)

    response = await client.get("/parcels", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_token_without_email_claim_is_forbidden(client):
    token = create_access_token({"sub": "uid-123"})

    response = await client.get("/parcels", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_valid_token_is_accepted(client, alice_headers):
    response = await client.get("/parcels", headers=alice_headers)

    assert response.status_code == 200
    assert response.json() == []


def test_identity_provider_checks_audience():
    provider = IdentityProvider(secret_key="k" * 32, audience="parcel-courier")
    good = jwt.encode({"email": ALICE, "aud": "parcel-courier"}, "k" * 32, algorithm="HS256")
    bad = jwt.encode({"email": ALICE, "aud": "someone-else"}, "k" * 32, algorithm="HS256")

    assert provider.verify(good)["email"] == ALICE
    with pytest.raises(IdentityVerificationError):
        provider.verify(bad)


# TEST 3: Public endpoints
@pytest.mark.asyncio
async def test_public_endpoints_need_no_token(client):
    register = await client.post("/users", json={"email": ALICE})
    role = await client.get(f"/users/{ALICE}/role")
    health = await client.get("/health")

    assert register.status_code == 201
    assert role.status_code == 200
    assert health.status_code == 200


# TEST 4: Ownership guard
@pytest.mark.asyncio
async def test_ownership_requires_matching_target(client, alice_parcel, bob_headers):
    """Bob cannot act on Alice's resources by substituting her email."""
    responses = [
        await client.get(f"/parcel/{alice_parcel}", params={"email": ALICE}, headers=bob_headers),
        await client.delete(f"/parcel/{alice_parcel}", params={"email": ALICE}, headers=bob_headers),
        await client.get("/payments", params={"email": ALICE}, headers=bob_headers),
        await client.post(
            "/payments",
            json={"parcelId": alice_parcel, "email": ALICE, "amount": 500},
            headers=bob_headers,
        ),
        await client.patch(f"/users/{ALICE}", json={"displayName": "Mallory"}, headers=bob_headers),
        await client.post("/riders", json={"email": ALICE, "name": "Alice"}, headers=bob_headers),
    ]

    for response in responses:
        assert response.status_code == 403
        assert response.json()["error_code"] == "ERR_PERM_001"


@pytest.mark.asyncio
async def test_ownership_rejects_missing_target(client, alice_parcel, alice_headers):
    response = await client.get(f"/parcel/{alice_parcel}", headers=alice_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_query_target_takes_priority_over_body(client, alice_parcel, alice_headers):
    """?email= is checked before the body email."""
    response = await client.post(
        "/payments",
        params={"email": BOB},
        json={"parcelId": alice_parcel, "email": ALICE, "amount": 500},
        headers=alice_headers,
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_response_carries_correlation_id(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "req-42"})

    assert response.headers["X-Correlation-ID"] == "req-42"
    assert "X-Process-Time" in response.headers
