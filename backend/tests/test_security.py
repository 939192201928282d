from datetime import timedelta
from types import SimpleNamespace

import pytest
from jose import jwt

from storefront.auth import security
from storefront.auth.deps import extract_access_token


def test_access_token_carries_identity_claims():
    token = security.create_access_token({"id": "usr_1", "name": "Ada", "email": "ada@example.com"})
    claims = jwt.decode(token, security.ACCESS_SECRET, algorithms=["HS256"])
    assert {k: claims[k] for k in ("id", "name", "email")} == {
        "id": "usr_1",
        "name": "Ada",
        "email": "ada@example.com",
    }
    assert "exp" in claims


def test_refresh_token_carries_only_the_user_id():
    token = security.create_refresh_token("usr_1")
    claims = jwt.decode(token, security.REFRESH_SECRET, algorithms=["HS256"])
    assert claims["id"] == "usr_1"
    assert "email" not in claims and "name" not in claims


def test_access_and_refresh_tokens_use_different_secrets():
    access = security.create_access_token({"id": "usr_1", "name": "Ada", "email": "ada@example.com"})
    refresh = security.create_refresh_token("usr_1")
    with pytest.raises(security.JWTError):
        security.decode_refresh_token(access)
    with pytest.raises(security.JWTError):
        security.decode_access_token(refresh)


def test_expired_access_token_raises_expired_signature():
    token = security.create_access_token(
        {"id": "usr_1", "name": "Ada", "email": "ada@example.com"},
        expires_delta=timedelta(seconds=-30),
    )
    with pytest.raises(security.ExpiredSignatureError):
        security.decode_access_token(token)


def test_password_hash_round_trip_and_bcrypt_limit():
    pw_hash = security.hash_password("Sup3r$ecret")
    assert pw_hash != "Sup3r$ecret"
    assert security.verify_password("Sup3r$ecret", pw_hash)
    assert not security.verify_password("Wr0ng$ecret", pw_hash)
    with pytest.raises(ValueError):
        security.hash_password("A1!" + "x" * 80)


def _request(cookies=None, headers=None, query=None):
    return SimpleNamespace(cookies=cookies or {}, headers=headers or {}, query_params=query or {})


def test_token_is_taken_from_cookie_before_header_and_query():
    request = _request(
        cookies={"accessToken": "from-cookie"},
        headers={"Authorization": "Bearer from-header"},
        query={"accessToken": "from-query"},
    )
    assert extract_access_token(request) == "from-cookie"


def test_token_falls_back_to_bearer_header_then_query():
    assert extract_access_token(
        _request(headers={"Authorization": "Bearer from-header"}, query={"accessToken": "q"})
    ) == "from-header"
    assert extract_access_token(_request(query={"accessToken": "from-query"})) == "from-query"
    assert extract_access_token(_request(headers={"Authorization": "Basic abc"})) is None
    assert extract_access_token(_request()) is None
