from __future__ import annotations

import pytest

from palette.core.errors import ExpiredTokenError, InvalidTokenError, MissingTokenError
from palette.core.security import hash_token, verify_token_hash
from palette.core.tokens import TokenType, decode_token, issue_token, peek_claims

SECRET = "test-secret"


def _token(token_type=TokenType.ACCESS, ttl=60, now=1_000_000):
    return issue_token(secret=SECRET, user_id=5, email="a@example.com", token_type=token_type, ttl_seconds=ttl, now=now)


def test_round_trip_claims():
    claims = decode_token(_token(), secret=SECRET, expected_type=TokenType.ACCESS, now=1_000_010)
    assert claims.user_id == 5
    assert claims.email == "a@example.com"
    assert claims.token_type is TokenType.ACCESS
    assert claims.expires_at == 1_000_060


def test_tokens_issued_in_the_same_second_differ():
    assert _token() != _token()


def test_type_claim_must_match():
    with pytest.raises(InvalidTokenError):
        decode_token(_token(TokenType.REFRESH), secret=SECRET, expected_type=TokenType.ACCESS, now=1_000_000)
    with pytest.raises(InvalidTokenError):
        decode_token(_token(TokenType.ACCESS), secret=SECRET, expected_type=TokenType.REFRESH, now=1_000_000)


def test_expired_token():
    with pytest.raises(ExpiredTokenError):
        decode_token(_token(ttl=60), secret=SECRET, expected_type=TokenType.ACCESS, now=1_000_060)


def test_tampered_or_foreign_tokens_are_invalid():
    token = _token()
    payload, sig = token.split(".")
    with pytest.raises(InvalidTokenError):
        decode_token(f"{payload}x.{sig}", secret=SECRET, expected_type=TokenType.ACCESS, now=1_000_000)
    with pytest.raises(InvalidTokenError):
        decode_token(token, secret="other-secret", expected_type=TokenType.ACCESS, now=1_000_000)
    with pytest.raises(InvalidTokenError):
        decode_token("not-a-token", secret=SECRET, expected_type=TokenType.ACCESS)


@pytest.mark.parametrize("value", [None, "", "   "])
def test_missing_token(value):
    with pytest.raises(MissingTokenError):
        decode_token(value, secret=SECRET, expected_type=TokenType.ACCESS)


def test_peek_claims_ignores_expiry_but_not_signature():
    expired = _token(ttl=1, now=10)
    assert peek_claims(expired, secret=SECRET).user_id == 5
    assert peek_claims(expired, secret="other-secret") is None
    assert peek_claims(None, secret=SECRET) is None


def test_token_hash_verification():
    stored = hash_token("refresh-value")
    assert stored.startswith("argon2$")
    assert verify_token_hash("refresh-value", stored) is True
    assert verify_token_hash("other-value", stored) is False
    assert verify_token_hash("refresh-value", None) is False
    assert verify_token_hash("refresh-value", "argon2$garbage") is False
