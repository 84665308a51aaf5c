"""Calendar events."""

from fastapi.testclient import TestClient


def _create(client: TestClient, headers: dict, name: str, date: str, **extra) -> dict:
    response = client.post("/api/events", json={"name": name, "date": date, **extra}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["event"]


def test_events_are_listed_by_date(client: TestClient, auth_headers: dict) -> None:
    _create(client, auth_headers, "Later", "2026-12-01")
    _create(client, auth_headers, "Sooner", "2026-03-15", city="Madrid", venue="Teatro Real")

    events = client.get("/api/events", headers=auth_headers).json()["events"]

    assert [e["name"] for e in events] == ["Sooner", "Later"]
    assert events[0]["venue"] == "Teatro Real"


def test_events_on_a_day(client: TestClient, auth_headers: dict) -> None:
    _create(client, auth_headers, "Breakfast", "2026-03-15")
    _create(client, auth_headers, "Dinner", "2026-03-15")
    _create(client, auth_headers, "Other day", "2026-03-16")

    response = client.get("/api/events/date/2026-03-15", headers=auth_headers)

    assert response.status_code == 200
    assert {e["name"] for e in response.json()["events"]} == {"Breakfast", "Dinner"}


def test_events_on_a_malformed_day(client: TestClient, auth_headers: dict) -> None:
    response = client.get("/api/events/date/15-03-2026", headers=auth_headers)

    assert response.status_code == 400


def test_event_date_must_be_iso(client: TestClient, auth_headers: dict) -> None:
    response = client.post("/api/events", json={"name": "Party", "date": "2026/03/15"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"


def test_event_date_must_be_zero_padded(client: TestClient, auth_headers: dict) -> None:
    created = client.post("/api/events", json={"name": "Party", "date": "2026-3-5"}, headers=auth_headers)
    by_day = client.get("/api/events/date/2026-3-5", headers=auth_headers)

    assert created.status_code == 400
    assert by_day.status_code == 400


def test_update_and_delete_event(client: TestClient, auth_headers: dict) -> None:
    event = _create(client, auth_headers, "Party", "2026-03-15")

    updated = client.put(
        f"/api/events/{event['id']}", json={"city": "Lima", "type": "birthday"}, headers=auth_headers
    )
    assert updated.status_code == 200
    assert updated.json()["event"]["city"] == "Lima"
    assert updated.json()["event"]["name"] == "Party"

    assert client.delete(f"/api/events/{event['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/events/{event['id']}", headers=auth_headers).status_code == 404


def test_deleting_event_keeps_its_outfits(client: TestClient, auth_headers: dict, wardrobe: list) -> None:
    event = _create(client, auth_headers, "Party", "2026-03-15")
    outfit = client.post(
        "/api/outfits",
        json={"name": "Party look", "garment_ids": [wardrobe[4]["id"]], "event_id": event["id"]},
        headers=auth_headers,
    ).json()["outfit"]

    client.delete(f"/api/events/{event['id']}", headers=auth_headers)

    kept = client.get(f"/api/outfits/{outfit['id']}", headers=auth_headers).json()["outfit"]
    assert kept["event_id"] is None


def test_events_are_private(client: TestClient, auth_headers: dict, other_headers: dict) -> None:
    event = _create(client, auth_headers, "Party", "2026-03-15")

    assert client.get(f"/api/events/{event['id']}", headers=other_headers).status_code == 404
    assert client.put(
        f"/api/events/{event['id']}", json={"name": "Mine now"}, headers=other_headers
    ).status_code == 404
    assert client.get("/api/events", headers=other_headers).json()["events"] == []
