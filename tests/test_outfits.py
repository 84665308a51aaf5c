"""Outfit CRUD and the suggestion flows (with and without Gemini)."""

from fastapi.testclient import TestClient

from conftest import create_garment


def _ids(outfit: dict) -> list:
    return [g["id"] for g in outfit["garments"]]


def test_suggestions_need_two_garments(client: TestClient, auth_headers: dict) -> None:
    create_garment(client, auth_headers, "White tee", "t-shirt", "white", "top")

    response = client.post("/api/outfits/suggestions", headers=auth_headers)

    assert response.status_code == 400
    assert "at least 2 garments" in response.json()["error"]


def test_suggestions_without_gemini_fall_back_to_heuristics(
    client: TestClient, auth_headers: dict, wardrobe: list
) -> None:
    response = client.post("/api/outfits/suggestions", headers=auth_headers)

    assert response.status_code == 201
    body = response.json()
    # Weather service unreachable: neutral default
    assert body["weather"] == {"temperature": 20, "condition": "Unknown", "code": 0}
    outfits = body["outfits"]
    assert [o["category"] for o in outfits] == ["casual", "formal", "sport"]
    owned = {g["id"] for g in wardrobe}
    for outfit in outfits:
        assert outfit["id"]
        assert outfit["season"] == "all"
        assert len(outfit["garments"]) >= 2
        assert set(_ids(outfit)) <= owned
        assert outfit["image_url"].startswith("data:image/jpeg;base64,")

    saved = client.get("/api/outfits", headers=auth_headers).json()["outfits"]
    assert len(saved) == 3


def test_suggestions_use_gemini_names(client: TestClient, auth_headers: dict, wardrobe: list, mocker) -> None:
    mocker.patch(
        "pocketcloset.reco.outfit_builder.generate_json",
        return_value=[
            {"name": "Weekend", "category": "casual", "garments": ["white tee", "Blue jeans", "Invented hat"]},
            {"name": "Party", "category": "formal", "garments": ["Red dress", "White sneakers"]},
        ],
    )

    response = client.post("/api/outfits/suggestions", headers=auth_headers)

    outfits = response.json()["outfits"]
    assert len(outfits) == 3
    assert outfits[0]["name"] == "Weekend"
    assert {g["name"] for g in outfits[0]["garments"]} == {"White tee", "Blue jeans"}
    assert {g["name"] for g in outfits[1]["garments"]} == {"Red dress", "White sneakers"}
    # Padded third suggestion
    assert outfits[2]["category"] == "sport"


def test_create_outfit_with_foreign_garment_fails(
    client: TestClient, auth_headers: dict, other_headers: dict, wardrobe: list
) -> None:
    foreign = create_garment(client, other_headers, "Bob tee", "t-shirt", "black", "top")

    response = client.post(
        "/api/outfits",
        json={"name": "Mixed", "garment_ids": [wardrobe[0]["id"], foreign["id"]]},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"] == "One or more garments do not exist or do not belong to the user"


def test_outfit_crud_and_filters(client: TestClient, auth_headers: dict, wardrobe: list) -> None:
    created = client.post(
        "/api/outfits",
        json={
            "name": "Office",
            "category": "formal",
            "season": "winter",
            "garment_ids": [wardrobe[0]["id"], wardrobe[1]["id"]],
        },
        headers=auth_headers,
    )
    assert created.status_code == 201
    outfit = created.json()["outfit"]
    assert set(_ids(outfit)) == {wardrobe[0]["id"], wardrobe[1]["id"]}

    by_category = client.get("/api/outfits/category/formal", headers=auth_headers).json()["outfits"]
    by_season = client.get("/api/outfits/season/summer", headers=auth_headers).json()["outfits"]
    assert [o["id"] for o in by_category] == [outfit["id"]]
    assert by_season == []

    updated = client.put(
        f"/api/outfits/{outfit['id']}",
        json={"name": "Office v2", "garment_ids": [wardrobe[4]["id"], wardrobe[2]["id"]]},
        headers=auth_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["outfit"]["name"] == "Office v2"
    assert set(_ids(updated.json()["outfit"])) == {wardrobe[4]["id"], wardrobe[2]["id"]}

    assert client.delete(f"/api/outfits/{outfit['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/outfits/{outfit['id']}", headers=auth_headers).status_code == 404
    # Garments survive their outfits
    assert client.get(f"/api/garments/{wardrobe[0]['id']}", headers=auth_headers).status_code == 200


def test_empty_garment_list_keeps_outfit_garments(client: TestClient, auth_headers: dict, wardrobe: list) -> None:
    outfit = client.post(
        "/api/outfits",
        json={"name": "Base", "garment_ids": [wardrobe[0]["id"], wardrobe[1]["id"]]},
        headers=auth_headers,
    ).json()["outfit"]

    updated = client.put(f"/api/outfits/{outfit['id']}", json={"garment_ids": []}, headers=auth_headers)

    assert len(updated.json()["outfit"]["garments"]) == 2


def test_deleting_garment_removes_it_from_outfits(client: TestClient, auth_headers: dict, wardrobe: list) -> None:
    outfit = client.post(
        "/api/outfits",
        json={"name": "Base", "garment_ids": [wardrobe[0]["id"], wardrobe[1]["id"]]},
        headers=auth_headers,
    ).json()["outfit"]

    client.delete(f"/api/garments/{wardrobe[0]['id']}", headers=auth_headers)

    remaining = client.get(f"/api/outfits/{outfit['id']}", headers=auth_headers).json()["outfit"]
    assert _ids(remaining) == [wardrobe[1]["id"]]


def test_outfit_by_weather_is_not_saved(client: TestClient, auth_headers: dict, wardrobe: list) -> None:
    response = client.post(
        "/api/outfits/by-weather", json={"category": "sport", "temperature": 5}, headers=auth_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["weather"]["condition"] == "Custom"
    assert body["outfit"]["id"] is None
    assert body["outfit"]["category"] == "sport"
    # Cold: the heuristic adds outerwear
    assert "Wool coat" in [g["name"] for g in body["outfit"]["garments"]]
    assert client.get("/api/outfits", headers=auth_headers).json()["outfits"] == []


def test_outfit_for_event_uses_event_season(client: TestClient, auth_headers: dict, wardrobe: list) -> None:
    event = client.post(
        "/api/events",
        json={"name": "Wedding", "date": "2026-01-10", "city": "Sydney"},
        headers=auth_headers,
    ).json()["event"]

    response = client.post("/api/outfits/by-event", json={"event_id": event["id"]}, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    # January in the southern hemisphere
    assert body["season"] == "summer"
    assert body["outfit"]["event_id"] == event["id"]
    assert body["outfit"]["season"] == "summer"


def test_outfit_for_foreign_event_is_not_found(
    client: TestClient, auth_headers: dict, other_headers: dict, wardrobe: list
) -> None:
    event = client.post(
        "/api/events", json={"name": "Bob party", "date": "2026-05-01"}, headers=other_headers
    ).json()["event"]

    response = client.post("/api/outfits/by-event", json={"event_id": event["id"]}, headers=auth_headers)

    assert response.status_code == 404


def test_outfit_from_garment_includes_the_garment(client: TestClient, auth_headers: dict, wardrobe: list) -> None:
    base = wardrobe[1]

    response = client.post("/api/outfits/by-garment", json={"garment_id": base["id"]}, headers=auth_headers)

    assert response.status_code == 200
    outfit = response.json()["outfit"]
    assert outfit["name"] == "Outfit with Blue jeans"
    assert _ids(outfit)[0] == base["id"]
    assert len(outfit["garments"]) >= 2


def test_outfit_from_garment_with_gemini_selection(
    client: TestClient, auth_headers: dict, wardrobe: list, mocker
) -> None:
    mocker.patch(
        "pocketcloset.reco.outfit_builder.generate_json",
        return_value=["White tee", "White sneakers"],
    )

    response = client.post(
        "/api/outfits/by-garment", json={"garment_id": wardrobe[1]["id"], "category": "casual"}, headers=auth_headers
    )

    names = [g["name"] for g in response.json()["outfit"]["garments"]]
    assert names == ["Blue jeans", "White tee", "White sneakers"]


def test_outfit_from_garment_keeps_three_garments(
    client: TestClient, auth_headers: dict, wardrobe: list, mocker
) -> None:
    mocker.patch(
        "pocketcloset.reco.outfit_builder.generate_json",
        return_value=["White tee", "White sneakers", "Wool coat", "Red dress"],
    )

    response = client.post("/api/outfits/by-garment", json={"garment_id": wardrobe[1]["id"]}, headers=auth_headers)

    names = [g["name"] for g in response.json()["outfit"]["garments"]]
    assert names == ["Blue jeans", "White tee", "White sneakers"]


def test_outfit_category_and_season_are_stored_lowercase(
    client: TestClient, auth_headers: dict, wardrobe: list
) -> None:
    created = client.post(
        "/api/outfits",
        json={"name": "Brunch", "category": "Casual", "season": "SUMMER", "garment_ids": [wardrobe[0]["id"]]},
        headers=auth_headers,
    ).json()["outfit"]
    assert (created["category"], created["season"]) == ("casual", "summer")

    client.put(f"/api/outfits/{created['id']}", json={"category": "Formal "}, headers=auth_headers)

    by_category = client.get("/api/outfits/category/Formal", headers=auth_headers).json()["outfits"]
    by_season = client.get("/api/outfits/season/Summer", headers=auth_headers).json()["outfits"]
    assert [o["id"] for o in by_category] == [created["id"]]
    assert [o["id"] for o in by_season] == [created["id"]]
