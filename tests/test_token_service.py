from datetime import datetime, timedelta

import jwt
import pytest

from health_companion.application.services.token_service import TokenService
from health_companion.exceptions import InvalidToken, TokenExpired


def test_issue_and_verify_roundtrip_carries_subject():
    svc = TokenService(secret_key="s3cret")
    token = svc.issue("user-1")
    payload = svc.verify(token)
    assert payload["sub"] == "user-1"
    assert payload["exp"] > payload["iat"]
    assert svc.user_id_from(token) == "user-1"


def test_token_signed_with_other_secret_is_invalid():
    token = TokenService(secret_key="other").issue("user-1")
    with pytest.raises(InvalidToken):
        TokenService(secret_key="s3cret").verify(token)


def test_tampered_token_is_invalid():
    svc = TokenService(secret_key="s3cret")
    token = svc.issue("user-1")
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[:-2] + ("AA" if signature[-2:] != "AA" else "BB")])
    with pytest.raises(InvalidToken):
        svc.verify(tampered)


def test_garbage_token_is_invalid():
    with pytest.raises(InvalidToken):
        TokenService(secret_key="s3cret").verify("not-a-token")


def test_expired_token_raises_token_expired():
    issued_long_ago = TokenService(
        secret_key="s3cret",
        expire_minutes=1,
        clock=lambda: datetime.utcnow() - timedelta(days=2),
    )
    token = issued_long_ago.issue("user-1")
    with pytest.raises(TokenExpired):
        TokenService(secret_key="s3cret").verify(token)


def test_token_without_subject_is_invalid():
    token = jwt.encode({"exp": datetime.utcnow() + timedelta(minutes=5)}, "s3cret", algorithm="HS256")
    with pytest.raises(InvalidToken):
        TokenService(secret_key="s3cret").verify(token)
