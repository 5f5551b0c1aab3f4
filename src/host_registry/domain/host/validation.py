"""Field rules and normalization for host account records."""

from __future__ import annotations

import re
from collections.abc import Mapping

HOST_TEXT_FIELDS = (
    "organization_name",
    "org_email",
    "mobile_number",
    "org_location",
    "wallet_address",
)
HOST_FIELDS = (*HOST_TEXT_FIELDS, "password")

PASSWORD_MIN_LENGTH = 6
# bcrypt only consumes the first 72 bytes of its input.
PASSWORD_MAX_BYTES = 72

# Word-character segments joined by single "." or "-", then a 2-3 character TLD.
EMAIL_PATTERN = re.compile(r"\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*(?:\.\w{2,3})+", re.ASCII)
WALLET_ADDRESS_PATTERN = re.compile(r"0x[a-fA-F0-9]{40}")

_REQUIRED_MESSAGES = {
    "organization_name": "Organization name is required",
    "org_email": "Organization email is required",
    "mobile_number": "Mobile number is required",
    "password": "Password is required",
    "org_location": "Organization location is required",
    "wallet_address": "Wallet address is required",
}
_INVALID_EMAIL_MESSAGE = "Please fill a valid email address"
_INVALID_WALLET_MESSAGE = "Please provide a valid wallet address"
_PASSWORD_TOO_SHORT_MESSAGE = (
    f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
)
_PASSWORD_TOO_LONG_MESSAGE = f"Password must be at most {PASSWORD_MAX_BYTES} bytes long"


class HostValidationError(ValueError):
    """Raised when one or more host fields fail presence, format or length rules."""

    def __init__(self, errors: Mapping[str, str]) -> None:
        self.errors = dict(errors)
        details = "; ".join(f"{field}: {message}" for field, message in self.errors.items())
        super().__init__(f"host validation failed: {details}")


def normalize_host_email(email: str) -> str:
    """Return the stored form of one organization email."""

    return email.strip().lower()


def normalize_host_fields(
    values: Mapping[str, object],
    *,
    partial: bool,
) -> dict[str, str]:
    """Validate and normalize host fields, collecting every field error.

    With ``partial=False`` all host fields are required. With ``partial=True``
    only the fields present with a non-``None`` value are checked. Keys that
    are not host fields are dropped.
    """

    normalized: dict[str, str] = {}
    errors: dict[str, str] = {}

    for field in HOST_FIELDS:
        raw = values.get(field)
        if raw is None and partial:
            continue
        if not isinstance(raw, str) or not raw.strip():
            errors[field] = _REQUIRED_MESSAGES[field]
            continue

        if field == "password":
            error = _check_password(raw)
            value = raw
        else:
            value = raw.strip()
            if field == "org_email":
                value = value.lower()
            error = _check_format(field, value)

        if error is not None:
            errors[field] = error
            continue
        normalized[field] = value

    if errors:
        raise HostValidationError(errors)
    return normalized


def _check_password(password: str) -> str | None:
    if len(password) < PASSWORD_MIN_LENGTH:
        return _PASSWORD_TOO_SHORT_MESSAGE
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return _PASSWORD_TOO_LONG_MESSAGE
    return None


def _check_format(field: str, value: str) -> str | None:
    if field == "org_email" and EMAIL_PATTERN.fullmatch(value) is None:
        return _INVALID_EMAIL_MESSAGE
    if field == "wallet_address" and WALLET_ADDRESS_PATTERN.fullmatch(value) is None:
        return _INVALID_WALLET_MESSAGE
    return None
