"""
Diary lifecycle rules.

Pure functions over a diary's membership rows and its histories. Nothing here
touches the database: callers load the rows, these functions decide.

A diary moves WAIT -> READY when the second member joins, READY <-> START as
histories open and close, and ends in DISCARD as soon as either member leaves.
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Optional, Protocol, Sequence

from palette.core.errors import (
    DiaryEmptyError,
    DiaryExistUserError,
    DiaryNotFoundError,
    DiaryOutedUserError,
    DiaryOverUserError,
    ProgressedHistoryError,
)

MAX_MEMBERS = 2


class DiaryStatus(str, Enum):
    WAIT = "WAIT"
    READY = "READY"
    START = "START"
    DISCARD = "DISCARD"


class Membership(Protocol):
    user_id: int
    is_admin: bool
    is_outed: bool


class HistoryWindow(Protocol):
    end_date: datetime
    closed_at: Optional[datetime]


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite drops tzinfo) as UTC."""
    return value.astimezone(timezone.utc) if value.tzinfo else value.replace(tzinfo=timezone.utc)


def is_in_progress(history: HistoryWindow, now: datetime | None = None) -> bool:
    if history.closed_at is not None:
        return False
    current = as_utc(now or datetime.now(timezone.utc))
    return as_utc(history.end_date) > current


def progress_history(histories: Iterable[HistoryWindow], now: datetime | None = None):
    """Return the in-progress history, if any."""
    for history in histories:
        if is_in_progress(history, now):
            return history
    return None


def find_admin(groups: Iterable[Membership]) -> Optional[int]:
    """User id of the first row flagged admin, or None when there is none."""
    for group in groups:
        if group.is_admin:
            return group.user_id
    return None


def diary_status(groups: Sequence[Membership], current_history: Optional[HistoryWindow]) -> DiaryStatus:
    if not groups:
        raise DiaryNotFoundError()
    if len(groups) == 1:
        return DiaryStatus.WAIT
    if any(group.is_outed for group in groups):
        return DiaryStatus.DISCARD
    if current_history is None:
        return DiaryStatus.READY
    return DiaryStatus.START


def check_invite(groups: Sequence[Membership], invitee_user_id: int) -> Optional[int]:
    """Validate that ``invitee_user_id`` may join; return the admin's user id."""
    if not groups:
        raise DiaryEmptyError()
    own_rows = [group for group in groups if group.user_id == invitee_user_id]
    # a member who left is refused as such even when the diary is full
    if any(group.is_outed for group in own_rows):
        raise DiaryOutedUserError()
    if len(groups) >= MAX_MEMBERS:
        raise DiaryOverUserError()
    if own_rows:
        raise DiaryExistUserError()
    return find_admin(groups)


def check_start_history(current_history: Optional[HistoryWindow]) -> None:
    if current_history is not None:
        raise ProgressedHistoryError()
