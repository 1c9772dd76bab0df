"""bcrypt-backed password hashing."""

from __future__ import annotations

from dataclasses import dataclass

import bcrypt

from blogapi.services._shared.errors import WeakCredentialError
from blogapi.services._shared.ports import PasswordHasher

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True, slots=True)
class BcryptPasswordHasher(PasswordHasher):
    """
    Hash and verify passwords with bcrypt.

    :param cost: Work factor passed to ``bcrypt.gensalt``.
    :param min_length: Minimum accepted plaintext length (characters).
    :param max_length: Maximum accepted plaintext length (characters).
    """

    cost: int = 10
    min_length: int = 6
    max_length: int = 72

    def hash(self, plaintext: str) -> str:
        """
        Hash ``plaintext`` with a fresh salt.

        :raises WeakCredentialError: Length outside the window or more than
            72 bytes once UTF-8 encoded.
        """
        if not isinstance(plaintext, str):
            raise WeakCredentialError()
        if not self.min_length <= len(plaintext) <= self.max_length:
            raise WeakCredentialError(
                f"password must be between {self.min_length} and {self.max_length} characters"
            )
        encoded = plaintext.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_BYTES:
            raise WeakCredentialError(f"password must not exceed {BCRYPT_MAX_BYTES} bytes")
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self.cost)).decode("utf-8")

    def verify(self, plaintext: str, hashed: str) -> bool:
        if not plaintext or not hashed:
            return False
        encoded = plaintext.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False
