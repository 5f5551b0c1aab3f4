"""Port for password hashing and verification."""

from __future__ import annotations

from typing import Protocol


class CredentialTransformError(RuntimeError):
    """Raised when the one-way password transform cannot be computed or checked."""


class PasswordHasherPort(Protocol):
    """Password hashing/verification contract."""

    def hash_password(self, password: str) -> str:
        """Hash plaintext password into a self-describing salted hash."""

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        """Return whether plaintext password matches stored hash."""
