"""Shared fixtures: in-memory database, offline network and an authenticated client."""

import base64
import io
import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["USE_CLOUDINARY"] = "false"
os.environ["GEMINI_API_KEY"] = ""
os.environ["REDIS_URL"] = ""
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_DIR"] = ""

import pytest
import requests
from cachetools import TTLCache
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import pocketcloset.models  # noqa: F401
from pocketcloset.config import settings
from pocketcloset.database import get_db
from pocketcloset.main import app
from pocketcloset.models.base import Base
from pocketcloset.utils import cache
from pocketcloset.utils.cache import clear_all_caches

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = _override_get_db


@pytest.fixture(autouse=True)
def _fresh_state():
    Base.metadata.create_all(bind=engine)
    clear_all_caches()
    yield
    Base.metadata.drop_all(bind=engine)
    clear_all_caches()


@pytest.fixture(autouse=True)
def _offline(monkeypatch: pytest.MonkeyPatch) -> None:
    """No test talks to Open-Meteo, Nominatim, Gemini or image hosts."""

    def refuse(*args, **kwargs):
        raise requests.ConnectionError("network disabled in tests")

    monkeypatch.setattr(requests, "get", refuse)
    monkeypatch.setattr(requests, "post", refuse)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    """Drive expiry of the LOGIN_BLOCK_SECONDS cache by hand."""
    fake = FakeClock()
    ttl = settings.LOGIN_BLOCK_SECONDS
    monkeypatch.setitem(cache._in_memory_caches, ttl, TTLCache(maxsize=100, ttl=ttl, timer=fake))
    return fake


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def register(client: TestClient, email: str = "ana@example.com", password: str = "secret123",
             name: str = "Ana") -> dict:
    response = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth_headers(client: TestClient) -> dict:
    token = register(client)["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_headers(client: TestClient) -> dict:
    token = register(client, email="bob@example.com", name="Bob")["token"]
    return {"Authorization": f"Bearer {token}"}


def image_bytes(color=(200, 30, 30), size=(40, 60), fmt="PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def data_url(color=(200, 30, 30)) -> str:
    return "data:image/png;base64," + base64.b64encode(image_bytes(color)).decode("ascii")


def create_garment(client: TestClient, headers: dict, name: str, type_: str, color: str,
                   section: str, season: str = "all") -> dict:
    response = client.post(
        "/api/garments",
        json={
            "name": name,
            "type": type_,
            "color": color,
            "section": section,
            "season": season,
            "image": data_url(),
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["garment"]


@pytest.fixture
def wardrobe(client: TestClient, auth_headers: dict) -> list:
    return [
        create_garment(client, auth_headers, "White tee", "t-shirt", "white", "top", "summer"),
        create_garment(client, auth_headers, "Blue jeans", "jeans", "blue", "bottom"),
        create_garment(client, auth_headers, "White sneakers", "sneakers", "white", "footwear"),
        create_garment(client, auth_headers, "Wool coat", "coat", "grey", "outerwear", "winter"),
        create_garment(client, auth_headers, "Red dress", "dress", "red", "one-piece", "summer"),
    ]
