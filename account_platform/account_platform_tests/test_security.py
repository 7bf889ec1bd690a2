"""Tests for password hashing, reset code generation and token issuance."""
from datetime import timedelta
from unittest.mock import patch

import jwt
import pytest

from account_platform.account_platform.auth_service.auth import (
    TokenIssuer,
    dummy_verify,
    generate_numeric_code,
    hash_password,
    verify_password,
)

SECRET = "unit-test-secret-key-with-32-bytes-min"


def test_hash_password_is_salted():
    first = hash_password("Secret123!")
    second = hash_password("Secret123!")
    assert first != second
    assert first.startswith("$pbkdf2-sha256$")


def test_verify_password_accepts_match_and_rejects_mismatch():
    hashed = hash_password("Secret123!")
    assert verify_password("Secret123!", hashed) is True
    assert verify_password("secret123!", hashed) is False


@pytest.mark.parametrize("bad_hash", ["", "not-a-hash", "$2b$12$truncated", None])
def test_verify_password_malformed_hash_is_failure(bad_hash):
    assert verify_password("Secret123!", bad_hash) is False


def test_dummy_verify_always_fails():
    assert dummy_verify("anything") is False


def test_generate_numeric_code_length_and_digits():
    for _ in range(50):
        code = generate_numeric_code(6)
        assert len(code) == 6
        assert code.isdigit()


def test_generate_numeric_code_keeps_leading_zeros():
    with patch("account_platform.account_platform.auth_service.auth.secrets.randbelow", return_value=0):
        assert generate_numeric_code(6) == "000000"


def test_generate_numeric_code_rejects_non_positive_length():
    with pytest.raises(ValueError):
        generate_numeric_code(0)


def test_generate_numeric_code_propagates_source_failure():
    with patch(
        "account_platform.account_platform.auth_service.auth.secrets.randbelow",
        side_effect=OSError("entropy source unavailable"),
    ):
        with pytest.raises(OSError):
            generate_numeric_code(6)


def test_generate_token_claims():
    issuer = TokenIssuer(SECRET, "account_platform")
    token = issuer.generate_token("user-123", "ada@x.com")
    claims = issuer.decode_token(token)

    assert claims["user_id"] == "user-123"
    assert claims["sub"] == "user-123"
    assert claims["email"] == "ada@x.com"
    assert claims["iss"] == "account_platform"
    assert claims["nbf"] == claims["iat"]
    assert claims["exp"] - claims["iat"] == 24 * 60 * 60


def test_generate_token_unique_per_call():
    issuer = TokenIssuer(SECRET, "account_platform")
    assert issuer.generate_token("user-123", "a@x.com") != issuer.generate_token("user-123", "a@x.com")


def test_decode_token_rejects_other_secret():
    token = TokenIssuer(SECRET, "account_platform").generate_token("user-123", "a@x.com")
    other = TokenIssuer("another-secret-key-with-32-bytes-min!!", "account_platform")
    with pytest.raises(jwt.InvalidSignatureError):
        other.decode_token(token)


def test_decode_token_rejects_expired():
    issuer = TokenIssuer(SECRET, "account_platform", lifetime=timedelta(seconds=-1))
    token = issuer.generate_token("user-123", "a@x.com")
    with pytest.raises(jwt.ExpiredSignatureError):
        issuer.decode_token(token)


def test_token_issuer_requires_secret():
    with pytest.raises(ValueError):
        TokenIssuer("", "account_platform")
