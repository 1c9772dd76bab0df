from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """
    Port for one-way password hashing.

    ``hash`` raises :class:`~blogapi.services._shared.errors.WeakCredentialError`
    for plaintexts outside the accepted window. ``verify`` only ever returns a
    bool; a malformed stored hash simply does not verify.
    """

    def hash(self, plaintext: str) -> str: ...

    def verify(self, plaintext: str, hashed: str) -> bool: ...
