"""Google and Apple identity verification."""

import time

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient
from jose import jwk, jwt

from pocketcloset.config import settings
from pocketcloset.core.exceptions import AuthenticationError
from pocketcloset.utils import oauth

APP_ID = "com.pocketcloset.app"


def _rsa_pair():
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM, serialization.PrivateFormat.PKCS8, serialization.NoEncryption()
    ).decode()
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo
    ).decode()
    return private_pem, public_pem


SIGNING_KEY, SIGNING_PUBLIC = _rsa_pair()
_, OTHER_PUBLIC = _rsa_pair()


def _jwks() -> dict:
    keys = []
    for kid, public_pem in (("rotated", OTHER_PUBLIC), ("current", SIGNING_PUBLIC)):
        entry = jwk.construct(public_pem, algorithm="RS256").to_dict()
        entry.update({"kid": kid, "use": "sig"})
        keys.append(entry)
    return {"keys": keys}


def _apple_token(kid: str = "current", audience: str = APP_ID, **claims) -> str:
    payload = {
        "iss": oauth.APPLE_ISSUER,
        "aud": audience,
        "sub": "apple-001",
        "email": "ana@privaterelay.appleid.com",
        "iat": int(time.time()),
        "exp": int(time.time()) + 600,
    }
    payload.update(claims)
    return jwt.encode(payload, SIGNING_KEY, algorithm="RS256", headers={"kid": kid})


@pytest.fixture
def apple_keys(mocker, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(settings, "APPLE_CLIENT_ID", APP_ID)
    response = mocker.Mock()
    response.json.return_value = _jwks()
    response.raise_for_status.return_value = None
    return mocker.patch.object(oauth.requests, "get", return_value=response)


def test_apple_token_verified_with_matching_key(apple_keys) -> None:
    identity = oauth.verify_apple_token(_apple_token())

    assert identity == {
        "email": "ana@privaterelay.appleid.com",
        "name": oauth.DEFAULT_APPLE_NAME,
        "subject": "apple-001",
    }
    assert apple_keys.call_args.args[0] == oauth.APPLE_KEYS_URL


def test_apple_token_signed_for_another_kid(apple_keys) -> None:
    with pytest.raises(AuthenticationError):
        oauth.verify_apple_token(_apple_token(kid="rotated"))

    with pytest.raises(AuthenticationError):
        oauth.verify_apple_token(_apple_token(kid="missing"))


def test_apple_token_for_another_app(apple_keys) -> None:
    with pytest.raises(AuthenticationError):
        oauth.verify_apple_token(_apple_token(audience="com.someone.else"))


def test_apple_token_without_email(apple_keys) -> None:
    with pytest.raises(AuthenticationError):
        oauth.verify_apple_token(_apple_token(email=None))


def test_apple_token_when_keys_unreachable() -> None:
    with pytest.raises(AuthenticationError):
        oauth.verify_apple_token(_apple_token())


def test_apple_login_endpoint(client: TestClient, apple_keys) -> None:
    response = client.post("/api/auth/oauth/apple", json={"id_token": _apple_token()})

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "ana@privaterelay.appleid.com"
    assert response.json()["token"]


def test_google_id_token_audience_checked(mocker, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", "web-client")
    foreign = mocker.Mock(status_code=200)
    foreign.json.return_value = {"aud": "other-client", "email": "ana@example.com", "sub": "1"}
    userinfo = mocker.Mock(status_code=401)
    mocker.patch.object(oauth.requests, "get", side_effect=[foreign, userinfo])

    with pytest.raises(AuthenticationError):
        oauth.verify_google_token(id_token="token")


def test_google_access_token_uses_userinfo(mocker) -> None:
    userinfo = mocker.Mock(status_code=200)
    userinfo.json.return_value = {"email": "ana@example.com", "name": "Ana", "id": "g-7"}
    get = mocker.patch.object(oauth.requests, "get", return_value=userinfo)

    identity = oauth.verify_google_token(access_token="ya29.token")

    assert identity == {"email": "ana@example.com", "name": "Ana", "subject": "g-7"}
    assert get.call_args.kwargs["headers"] == {"Authorization": "Bearer ya29.token"}
