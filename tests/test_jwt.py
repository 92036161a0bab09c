"""SessionIssuer: token issue/verify and forgery resistance."""

import base64
import json

import jwt
import pytest

from messagely.auth.jwt import SessionIssuer
from messagely.errors import UnauthorizedError


def _b64(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def test_issue_then_verify_round_trip(issuer):
    token = issuer.issue("alice")
    assert issuer.verify(token) == "alice"


def test_tokens_are_bound_to_one_user(issuer):
    assert issuer.verify(issuer.issue("alice")) != issuer.verify(issuer.issue("bob"))


def test_tampered_payload_fails(issuer):
    header, _, signature = issuer.issue("alice").split(".")
    forged = f"{header}.{_b64({'sub': 'mallory'})}.{signature}"
    with pytest.raises(UnauthorizedError):
        issuer.verify(forged)


def test_truncated_token_fails(issuer):
    token = issuer.issue("alice")
    with pytest.raises(UnauthorizedError):
        issuer.verify(token[:-6])
    with pytest.raises(UnauthorizedError):
        issuer.verify(token.rsplit(".", 1)[0])


def test_wrong_secret_fails(issuer):
    other = SessionIssuer(secret="someone-elses-secret")
    with pytest.raises(UnauthorizedError):
        issuer.verify(other.issue("alice"))


@pytest.mark.parametrize("token", [None, "", "not-a-jwt", "a.b.c"])
def test_missing_or_malformed_token_fails(issuer, token):
    with pytest.raises(UnauthorizedError) as exc_info:
        issuer.verify(token)
    assert exc_info.value.message == "Invalid or missing credentials"


def test_unsigned_token_rejected(issuer):
    unsigned = jwt.encode({"sub": "alice"}, None, algorithm="none")
    with pytest.raises(UnauthorizedError):
        issuer.verify(unsigned)


def test_token_without_subject_rejected(issuer):
    token = jwt.encode({"name": "alice"}, "test-secret", algorithm="HS256")
    with pytest.raises(UnauthorizedError):
        issuer.verify(token)


def test_token_has_no_expiry(issuer):
    payload = jwt.decode(issuer.issue("alice"), "test-secret", algorithms=["HS256"])
    assert payload["sub"] == "alice"
    assert "exp" not in payload
