"""Record Routes — verifies the HTTP contract of /phone_number end to end.

Invariants:
    - POST echoes the body with 200; GET returns firstName/lastName/createdAt
    - Unknown phone number → 404, corrupt stored value → 500 (never 404)
    - Internal failures carry no internal detail
"""

import asyncio
import re

from phonebook.infrastructure.kv_store import KeyValueStore

TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")

ADA = {"phoneNumber": "+15551234567", "firstName": "Ada", "lastName": "Lovelace"}


async def test_index_returns_banner(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.text == "phonebook"


async def test_create_echoes_submitted_record(client):
    res = await client.post("/phone_number", json=ADA)
    assert res.status_code == 200
    assert res.json() == ADA


async def test_create_then_lookup_example_scenario(client):
    await client.post("/phone_number", json=ADA)

    found = await client.get("/phone_number/+15551234567")
    assert found.status_code == 200
    body = found.json()
    assert set(body) == {"firstName", "lastName", "createdAt"}
    assert body["firstName"] == "Ada"
    assert body["lastName"] == "Lovelace"
    assert TIMESTAMP.match(body["createdAt"])

    missing = await client.get("/phone_number/+19998887777")
    assert missing.status_code == 404


async def test_client_supplied_created_at_is_ignored(client):
    await client.post(
        "/phone_number", json={**ADA, "createdAt": "1999-01-01T00:00:00Z"},
    )
    body = (await client.get("/phone_number/+15551234567")).json()
    assert body["createdAt"] != "1999-01-01T00:00:00Z"


async def test_second_create_overwrites(client):
    await client.post("/phone_number", json=ADA)
    first = (await client.get("/phone_number/+15551234567")).json()
    await client.post(
        "/phone_number",
        json={"phoneNumber": "+15551234567", "firstName": "Grace", "lastName": "Hopper"},
    )
    second = (await client.get("/phone_number/+15551234567")).json()
    assert (second["firstName"], second["lastName"]) == ("Grace", "Hopper")
    assert second["createdAt"] >= first["createdAt"]


async def test_corrupt_value_is_internal_error_not_404(client, store: KeyValueStore):
    await store.put("+15550000000", b"{not json")
    res = await client.get("/phone_number/+15550000000")
    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "INTERNAL_ERROR"
    assert "json" not in error["message"].lower()


async def test_concurrent_creates_all_retrievable(client):
    phones = [f"+1555200{i:04d}" for i in range(20)]
    responses = await asyncio.gather(*(
        client.post(
            "/phone_number",
            json={"phoneNumber": p, "firstName": "F", "lastName": p},
        )
        for p in phones
    ))
    assert all(r.status_code == 200 for r in responses)
    for phone in phones:
        res = await client.get(f"/phone_number/{phone}")
        assert res.json()["lastName"] == phone


async def test_missing_field_is_validation_error(client):
    res = await client.post("/phone_number", json={"phoneNumber": "+1", "firstName": "A"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_blank_phone_number_is_validation_error(client):
    res = await client.post(
        "/phone_number", json={"phoneNumber": "   ", "firstName": "A", "lastName": "B"},
    )
    assert res.status_code == 400


async def test_non_string_name_is_validation_error(client):
    res = await client.post(
        "/phone_number", json={"phoneNumber": "+1", "firstName": 42, "lastName": "B"},
    )
    assert res.status_code == 400


async def test_worker_down_is_internal_error(client_without_worker):
    res = await client_without_worker.get("/phone_number/+15551234567")
    assert res.status_code == 500
    assert res.json()["error"]["code"] == "INTERNAL_ERROR"

    res = await client_without_worker.post("/phone_number", json=ADA)
    assert res.status_code == 500
