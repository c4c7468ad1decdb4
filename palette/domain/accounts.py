"""Domain helpers for user accounts (social login types)."""
from __future__ import annotations

from enum import Enum
from typing import Iterable

from palette.core.errors import InvalidInputError


class SocialType(str, Enum):
    KAKAO = "KAKAO"
    APPLE = "APPLE"
    GOOGLE = "GOOGLE"

    @classmethod
    def of(cls, value: str | None) -> "SocialType":
        raw = (value or "").strip().upper()
        try:
            return cls(raw)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown social type: {value!r}") from exc


def parse_social_types(stored: str | None) -> list[SocialType]:
    """Decode the comma-separated column, skipping names we no longer know."""
    result: list[SocialType] = []
    for item in (stored or "").split(","):
        item = item.strip()
        if item in SocialType.__members__ and SocialType(item) not in result:
            result.append(SocialType(item))
    return result


def join_social_types(types: Iterable[SocialType]) -> str:
    seen: list[str] = []
    for social in types:
        if social.value not in seen:
            seen.append(social.value)
    return ",".join(seen)
