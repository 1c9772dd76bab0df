"""Unit tests for BcryptPasswordHasher."""

from __future__ import annotations

import pytest

from blogapi.infra.security.bcrypt_hasher import BcryptPasswordHasher
from blogapi.services._shared.errors import WeakCredentialError


@pytest.fixture()
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(cost=4)


class TestBcryptPasswordHasher:
    @pytest.mark.parametrize("plaintext", ["longenough1", "Passw0rd!", "ñandú-contraseña"])
    def test_hash_then_verify(self, hasher, plaintext):
        hashed = hasher.hash(plaintext)

        assert hashed != plaintext
        assert hashed.startswith("$2")
        assert hasher.verify(plaintext, hashed)
        assert not hasher.verify(plaintext + "x", hashed)

    def test_same_password_gets_a_fresh_salt(self, hasher):
        assert hasher.hash("longenough1") != hasher.hash("longenough1")

    @pytest.mark.parametrize("plaintext", ["", "short", "x" * 73])
    def test_rejects_passwords_outside_window(self, hasher, plaintext):
        with pytest.raises(WeakCredentialError):
            hasher.hash(plaintext)

    def test_rejects_more_than_72_bytes(self, hasher):
        # 40 characters but 80 bytes once encoded
        with pytest.raises(WeakCredentialError):
            hasher.hash("é" * 40)

    @pytest.mark.parametrize("hashed", ["", "not-a-bcrypt-hash", "$2b$04$tooshort"])
    def test_verify_malformed_hash_is_false(self, hasher, hashed):
        assert hasher.verify("longenough1", hashed) is False

    def test_verify_empty_plaintext_is_false(self, hasher):
        assert hasher.verify("", hasher.hash("longenough1")) is False
