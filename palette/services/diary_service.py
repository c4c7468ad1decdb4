"""
Diary use cases: create a diary, join it with an invitation code, run
histories inside it and list a user's diaries.

Every mutating method is one transaction. ``invite`` and ``create_history``
lock the diary row first (on SQLite every transaction starts with
``BEGIN IMMEDIATE``), so two concurrent callers cannot both see "one member"
or "no history in progress" and both insert.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from palette.core.config import get_settings
from palette.core.errors import (
    ColorNotFoundError,
    DiaryNotFoundError,
    HistoryNotFoundError,
    InvalidInputError,
    InviteCodeNotFoundError,
    UserNotFoundError,
)
from palette.db.models import Color, Diary, History, User
from palette.db.session import transactional
from palette.domain import diary_lifecycle as lifecycle
from palette.domain.diary_lifecycle import DiaryStatus
from palette.domain.invitation import (
    is_valid_invitation_code,
    new_invitation_code,
    normalize_invitation_code,
)
from palette.repositories.sql_repository import SQLRepository

logger = logging.getLogger(__name__)


@dataclass
class HistoryView:
    id: int
    diary_id: int
    start_date: datetime
    end_date: datetime

    @classmethod
    def of(cls, history: History) -> "HistoryView":
        return cls(
            id=history.id,
            diary_id=history.diary_id,
            start_date=lifecycle.as_utc(history.start_date),
            end_date=lifecycle.as_utc(history.end_date),
        )


@dataclass
class DiaryView:
    id: int
    title: Optional[str]
    invitation_code: str
    color_id: int
    color_hex: Optional[str]
    diary_status: DiaryStatus
    current_history: Optional[HistoryView]


@dataclass
class InviteResult:
    admin_user: Optional[User]
    diary: Diary


@dataclass
class DiaryService:
    """Coordinates diaries, memberships and histories."""

    def __post_init__(self):
        self.settings = get_settings()

    # -------------------------------------- helpers --------------------------------------
    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def _require_user(self, repository: SQLRepository, email: str) -> User:
        user = repository.get_user((email or "").strip())
        if user is None:
            raise UserNotFoundError()
        return user

    def _progress_history(self, repository: SQLRepository, diary_id: int) -> Optional[History]:
        return lifecycle.progress_history(repository.get_open_histories(diary_id), self._now())

    def _view(self, repository: SQLRepository, diary: Diary, color: Optional[Color]) -> DiaryView:
        groups = repository.get_groups_by_diary(diary.id)
        history = self._progress_history(repository, diary.id)
        return DiaryView(
            id=diary.id,
            title=diary.title,
            invitation_code=diary.invitation_code,
            color_id=diary.color_id,
            color_hex=color.hex_code if color else None,
            diary_status=lifecycle.diary_status(groups, history),
            current_history=HistoryView.of(history) if history else None,
        )

    # -------------------------------------- diaries --------------------------------------
    @transactional
    def create_diary(
        self,
        color_id: int,
        founder_email: str,
        title: str | None = None,
        *,
        session: Session = None,
    ) -> str:
        repository = SQLRepository(session)
        if repository.get_color(color_id) is None:
            raise ColorNotFoundError()
        founder = self._require_user(repository, founder_email)
        # a duplicate code trips the unique index and rolls the whole call back
        diary = repository.create_diary(new_invitation_code(), color_id, (title or "").strip() or None)
        repository.create_group(diary.id, founder.id, is_admin=True)
        logger.info("User %s created diary %s", founder.id, diary.id)
        return diary.invitation_code

    @transactional
    def invite(self, invitation_code: str, invitee_email: str, *, session: Session = None) -> InviteResult:
        repository = SQLRepository(session)
        code = normalize_invitation_code(invitation_code)
        diary = repository.get_diary_by_code(code, for_update=True) if is_valid_invitation_code(code) else None
        if diary is None:
            raise InviteCodeNotFoundError()
        groups = repository.get_groups_by_diary(diary.id)
        invitee = self._require_user(repository, invitee_email)

        admin_id = lifecycle.check_invite(groups, invitee.id)
        repository.create_group(diary.id, invitee.id, is_admin=False)
        admin_user = repository.get_user_by_id(admin_id) if admin_id is not None else None
        logger.info("User %s joined diary %s", invitee.id, diary.id)
        return InviteResult(admin_user=admin_user, diary=diary)

    @transactional
    def leave_diary(self, diary_id: int, user_email: str, *, session: Session = None) -> None:
        repository = SQLRepository(session)
        user = self._require_user(repository, user_email)
        if repository.get_diary(diary_id, for_update=True) is None:
            raise DiaryNotFoundError()
        group = repository.get_group(diary_id, user.id)
        if group is None:
            raise DiaryNotFoundError()
        if not group.is_outed:
            repository.set_group_outed(group.id)
            logger.info("User %s left diary %s", user.id, diary_id)

    @transactional
    def list_diaries(self, user_email: str, *, session: Session = None) -> list[DiaryView]:
        repository = SQLRepository(session)
        user = self._require_user(repository, user_email)
        diary_ids = [group.diary_id for group in repository.get_groups_by_user(user.id)]
        colors = {color.id: color for color in repository.list_colors()}
        return [
            self._view(repository, diary, colors.get(diary.color_id))
            for diary in repository.get_diaries_by_ids(diary_ids)
        ]

    @transactional
    def diary_status(self, diary_id: int, *, session: Session = None) -> DiaryStatus:
        repository = SQLRepository(session)
        if repository.get_diary(diary_id) is None:
            raise DiaryNotFoundError()
        groups = repository.get_groups_by_diary(diary_id)
        return lifecycle.diary_status(groups, self._progress_history(repository, diary_id))

    @transactional
    def current_history(self, diary_id: int, *, session: Session = None) -> Optional[HistoryView]:
        repository = SQLRepository(session)
        if repository.get_diary(diary_id) is None:
            raise DiaryNotFoundError()
        history = self._progress_history(repository, diary_id)
        return HistoryView.of(history) if history else None

    @transactional
    def list_colors(self, *, session: Session = None) -> list[Color]:
        return SQLRepository(session).list_colors()

    # -------------------------------------- histories --------------------------------------
    def _require_member(self, repository: SQLRepository, diary_id: int, email: str) -> User:
        user = self._require_user(repository, email)
        group = repository.get_group(diary_id, user.id)
        if group is None or group.is_outed:
            raise DiaryNotFoundError()
        return user

    @transactional
    def create_history(
        self,
        diary_id: int,
        user_email: str,
        period_days: int | None = None,
        *,
        session: Session = None,
    ) -> int:
        days = self.settings.default_history_days if period_days is None else int(period_days)
        if days <= 0:
            raise InvalidInputError("History period must be at least one day.")
        repository = SQLRepository(session)
        if repository.get_diary(diary_id, for_update=True) is None:
            raise DiaryNotFoundError()
        self._require_member(repository, diary_id, user_email)
        lifecycle.check_start_history(self._progress_history(repository, diary_id))

        start = self._now()
        history = repository.create_history(diary_id, start, start + timedelta(days=days))
        logger.info("Started history %s in diary %s for %s days", history.id, diary_id, days)
        return history.id

    @transactional
    def close_history(self, history_id: int, user_email: str, *, session: Session = None) -> None:
        repository = SQLRepository(session)
        history = repository.get_history(history_id)
        if history is None:
            raise HistoryNotFoundError()
        self._require_member(repository, history.diary_id, user_email)
        if history.closed_at is None:
            repository.close_history(history_id, self._now())
            logger.info("Closed history %s in diary %s", history_id, history.diary_id)
