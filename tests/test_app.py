"""Health, error envelope, correlation ids and the public utility routes."""

import asyncio

from fastapi.testclient import TestClient


def test_health_reports_database_and_storage(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["database"] == "connected"
    assert body["storage"]["configured"] is False


def test_correlation_id_is_echoed(client: TestClient) -> None:
    response = client.get("/health", headers={"X-Correlation-ID": "req-42"})

    assert response.headers["X-Correlation-ID"] == "req-42"
    assert client.get("/health").headers["X-Correlation-ID"]


def test_unknown_route_uses_error_envelope(client: TestClient) -> None:
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json()["ok"] is False
    assert response.json()["error_code"] == "NOT_FOUND"


def test_reverse_geocode(client: TestClient, mocker) -> None:
    lookup = mocker.patch("pocketcloset.routers.utils.reverse_geocode", return_value="Alicante")

    response = client.post("/api/utils/reverse-geocode", json={"latitude": 38.34, "longitude": -0.48})

    assert response.status_code == 200
    assert response.json() == {"ok": True, "city": "Alicante"}
    lookup.assert_called_once_with(38.34, -0.48)


def test_reverse_geocode_offline(client: TestClient) -> None:
    response = client.post("/api/utils/reverse-geocode", json={"latitude": 38.34, "longitude": -0.48})

    assert response.json()["city"] == "Unknown location"


def test_reverse_geocode_validates_coordinates(client: TestClient) -> None:
    response = client.post("/api/utils/reverse-geocode", json={"latitude": 123, "longitude": 0})

    assert response.status_code == 400


def _records_loop(calls: list, result=None):
    """Side effect noting whether it ran on the event loop thread."""

    def run(*args, **kwargs):
        try:
            asyncio.get_running_loop()
            calls.append("event-loop")
        except RuntimeError:
            calls.append("worker")
        return result

    return run


def test_gemini_calls_leave_the_event_loop(client: TestClient, auth_headers: dict, wardrobe: list, mocker) -> None:
    calls = []
    mocker.patch("pocketcloset.routers.outfits.ask_gemini", side_effect=_records_loop(calls))

    response = client.post("/api/outfits/by-weather", json={"temperature": 20}, headers=auth_headers)

    assert response.status_code == 200
    assert calls == ["worker"]


def test_password_checks_leave_the_event_loop(client: TestClient, auth_headers: dict, mocker) -> None:
    calls = []
    mocker.patch("pocketcloset.routers.auth.verify_password", side_effect=_records_loop(calls, result=True))

    response = client.post("/api/auth/login", json={"email": "ana@example.com", "password": "secret123"})

    assert response.status_code == 200
    assert calls == ["worker"]
