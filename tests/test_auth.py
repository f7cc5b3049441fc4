import jwt
import pytest
from fastapi import HTTPException

from dailyriddle.auth import create_token, ensure_same_user, parse_token
from dailyriddle.config import settings


def test_token_round_trip():
    assert parse_token(create_token("user-42")) == "user-42"


def test_token_with_wrong_audience_is_rejected():
    token = jwt.encode(
        {"sub": "user-42", "iss": settings.JWT_ISS, "aud": "someone-else"},
        settings.JWT_SECRET,
        algorithm="HS256",
    )
    with pytest.raises(HTTPException) as exc:
        parse_token(token)
    assert exc.value.status_code == 401


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode(
        {"sub": "user-42", "iss": settings.JWT_ISS, "aud": settings.JWT_AUD},
        "another-secret-another-secret-32b",
        algorithm="HS256",
    )
    with pytest.raises(HTTPException):
        parse_token(token)


def test_ensure_same_user():
    ensure_same_user("a", "a")
    with pytest.raises(HTTPException) as exc:
        ensure_same_user("a", "b")
    assert exc.value.status_code == 403
