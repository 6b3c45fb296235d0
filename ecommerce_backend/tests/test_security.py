import pytest

from src.core.errors import AuthError, ValidationError
from src.core.security import create_access_token, decode_access_token, hash_password, verify_password


class TestPasswords:
    def test_hash_round_trip(self):
        stored = hash_password("secret123")
        assert stored.startswith("$2b$")
        assert verify_password("secret123", stored)
        assert not verify_password("secret124", stored)

    def test_hashes_are_salted(self):
        assert hash_password("secret123") != hash_password("secret123")

    @pytest.mark.parametrize("stored", ["", "plain-text", "pbkdf2_sha256$1$abc$def"])
    def test_unknown_formats_never_verify(self, stored):
        assert not verify_password("secret123", stored)

    def test_overlong_password_is_rejected(self):
        with pytest.raises(ValidationError):
            hash_password("x" * 73)
        assert not verify_password("x" * 73, hash_password("x" * 72))


class TestTokens:
    def test_claims_survive_signing(self):
        claims = decode_access_token(create_access_token("user-1", {"role": "admin"}))
        assert claims["sub"] == "user-1"
        assert claims["role"] == "admin"
        assert claims["exp"] > claims["iat"]

    def test_expired_token(self):
        with pytest.raises(AuthError):
            decode_access_token(create_access_token("user-1", expires_in=-10))

    @pytest.mark.parametrize("token", ["not-a-token", "a.b.c"])
    def test_garbage(self, token):
        with pytest.raises(AuthError):
            decode_access_token(token)

    def test_tampered_signature(self):
        token = create_access_token("user-1")
        head, body, signature = token.split(".")
        forged = f"{head}.{body}.{signature[::-1]}"
        with pytest.raises(AuthError):
            decode_access_token(forged)
