"""Domain helpers for invitation code generation and validation."""
from __future__ import annotations

import re
import secrets
import string

INVITATION_CODE_LENGTH = 8
INVITATION_CODE_PATTERN = re.compile(r"[A-Za-z]{8}")
_ALPHABET = string.ascii_letters


def new_invitation_code() -> str:
    """Return a random 8-letter code (mixed case ASCII letters)."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(INVITATION_CODE_LENGTH))


def is_valid_invitation_code(value: str | None) -> bool:
    if not value:
        return False
    return bool(INVITATION_CODE_PATTERN.fullmatch(value))


def normalize_invitation_code(value: str | None) -> str:
    return (value or "").strip()
