"""Bcrypt password hasher adapter."""

from __future__ import annotations

import bcrypt

from host_registry.application.ports.password_hasher_port import (
    CredentialTransformError,
    PasswordHasherPort,
)

DEFAULT_BCRYPT_ROUNDS = 10
_BCRYPT_MAX_PASSWORD_BYTES = 72


class BcryptPasswordHasher(PasswordHasherPort):
    """Password hashing adapter using bcrypt with a configurable cost factor."""

    def __init__(self, *, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash_password(self, password: str) -> str:
        encoded = password.encode("utf-8")
        try:
            salt = bcrypt.gensalt(rounds=self._rounds)
            return bcrypt.hashpw(encoded, salt).decode("utf-8")
        except ValueError as exc:
            raise CredentialTransformError(f"bcrypt hashing failed: {exc}") from exc

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        encoded = password.encode("utf-8")
        too_long = len(encoded) > _BCRYPT_MAX_PASSWORD_BYTES
        try:
            # Over-long candidates never match but still cost one bcrypt check.
            matched = bcrypt.checkpw(
                encoded[:_BCRYPT_MAX_PASSWORD_BYTES],
                password_hash.encode("utf-8"),
            )
        except ValueError as exc:
            raise CredentialTransformError("stored password hash is malformed") from exc
        return matched and not too_long
