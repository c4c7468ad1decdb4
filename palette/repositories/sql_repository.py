"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update, delete
from sqlalchemy.orm import Session

from palette.db.models import (
    User,
    Color,
    Diary,
    DiaryGroup,
    History,
    RefreshToken,
)


class SQLRepository:
    """CRUD helpers over one SQLAlchemy session.

    The repository never commits; the caller owns the transaction (see
    ``palette.db.session.transactional``).
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    # -------------------------- users --------------------------
    def get_user(self, email: str) -> Optional[User]:
        """Active (not soft-deleted) user by email."""
        stmt = select(User).where(User.email == email, User.is_deleted.is_(False))
        return self.session.execute(stmt).scalar_one_or_none()

    def get_user_including_deleted(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        return self.session.execute(stmt).scalar_one_or_none()

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return self.session.get(User, user_id)

    def create_user(self, email: str, social_types: str) -> User:
        now = datetime.now(timezone.utc)
        user = User(
            email=email,
            social_types=social_types,
            agree_with_terms=False,
            is_deleted=False,
            created_at=now,
            updated_at=now,
        )
        self.session.add(user)
        self.session.flush()
        return user

    def update_user_social_types(self, user_id: int, social_types: str) -> None:
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(social_types=social_types, updated_at=datetime.now(timezone.utc))
        )
        self.session.execute(stmt)

    def set_user_agree_terms(self, user_id: int) -> None:
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(agree_with_terms=True, updated_at=datetime.now(timezone.utc))
        )
        self.session.execute(stmt)

    def soft_delete_user(self, user_id: int) -> None:
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(is_deleted=True, updated_at=datetime.now(timezone.utc))
        )
        self.session.execute(stmt)

    # -------------------------- colors --------------------------
    def get_color(self, color_id: int) -> Optional[Color]:
        return self.session.get(Color, color_id)

    def list_colors(self) -> list[Color]:
        return list(self.session.execute(select(Color).order_by(Color.id)).scalars().all())

    def create_color(self, name: str, hex_code: str) -> Color:
        color = Color(name=name, hex_code=hex_code)
        self.session.add(color)
        self.session.flush()
        return color

    # -------------------------- diaries --------------------------
    def get_diary(self, diary_id: int, *, for_update: bool = False) -> Optional[Diary]:
        stmt = select(Diary).where(Diary.id == diary_id)
        if for_update:
            stmt = stmt.with_for_update()
        return self.session.execute(stmt).scalar_one_or_none()

    def get_diary_by_code(self, invitation_code: str, *, for_update: bool = False) -> Optional[Diary]:
        stmt = select(Diary).where(Diary.invitation_code == invitation_code)
        if for_update:
            stmt = stmt.with_for_update()
        return self.session.execute(stmt).scalar_one_or_none()

    def get_diaries_by_ids(self, diary_ids: list[int]) -> list[Diary]:
        if not diary_ids:
            return []
        stmt = select(Diary).where(Diary.id.in_(diary_ids)).order_by(Diary.id)
        return list(self.session.execute(stmt).scalars().all())

    def create_diary(self, invitation_code: str, color_id: int, title: str | None = None) -> Diary:
        now = datetime.now(timezone.utc)
        diary = Diary(
            title=title,
            invitation_code=invitation_code,
            color_id=color_id,
            created_at=now,
            updated_at=now,
        )
        self.session.add(diary)
        self.session.flush()
        return diary

    # -------------------------- diary groups --------------------------
    def get_groups_by_diary(self, diary_id: int) -> list[DiaryGroup]:
        stmt = select(DiaryGroup).where(DiaryGroup.diary_id == diary_id).order_by(DiaryGroup.id)
        return list(self.session.execute(stmt).scalars().all())

    def get_groups_by_user(self, user_id: int) -> list[DiaryGroup]:
        stmt = select(DiaryGroup).where(DiaryGroup.user_id == user_id).order_by(DiaryGroup.id)
        return list(self.session.execute(stmt).scalars().all())

    def get_group(self, diary_id: int, user_id: int) -> Optional[DiaryGroup]:
        stmt = select(DiaryGroup).where(DiaryGroup.diary_id == diary_id, DiaryGroup.user_id == user_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def create_group(self, diary_id: int, user_id: int, *, is_admin: bool) -> DiaryGroup:
        group = DiaryGroup(
            diary_id=diary_id,
            user_id=user_id,
            is_admin=is_admin,
            is_outed=False,
            created_at=datetime.now(timezone.utc),
        )
        self.session.add(group)
        self.session.flush()
        return group

    def set_group_outed(self, group_id: int) -> None:
        self.session.execute(update(DiaryGroup).where(DiaryGroup.id == group_id).values(is_outed=True))

    def out_groups_for_user(self, user_id: int) -> int:
        result = self.session.execute(
            update(DiaryGroup)
            .where(DiaryGroup.user_id == user_id, DiaryGroup.is_outed.is_(False))
            .values(is_outed=True)
        )
        return result.rowcount or 0

    # -------------------------- histories --------------------------
    def get_history(self, history_id: int) -> Optional[History]:
        return self.session.get(History, history_id)

    def get_open_histories(self, diary_id: int) -> list[History]:
        """Histories of a diary that were not closed explicitly (they may still have expired)."""
        stmt = (
            select(History)
            .where(History.diary_id == diary_id, History.closed_at.is_(None))
            .order_by(History.id.desc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def create_history(self, diary_id: int, start_date: datetime, end_date: datetime) -> History:
        history = History(
            diary_id=diary_id,
            start_date=start_date,
            end_date=end_date,
            closed_at=None,
            created_at=datetime.now(timezone.utc),
        )
        self.session.add(history)
        self.session.flush()
        return history

    def close_history(self, history_id: int, closed_at: datetime) -> None:
        self.session.execute(
            update(History).where(History.id == history_id, History.closed_at.is_(None)).values(closed_at=closed_at)
        )

    # -------------------------- refresh tokens --------------------------
    def get_refresh_token(self, user_id: int) -> Optional[RefreshToken]:
        return self.session.get(RefreshToken, user_id)

    def store_refresh_token(self, user_id: int, token_hash: str, expires_at: datetime) -> None:
        """Replace whatever refresh token the user had (one active token per user)."""
        entity = self.session.get(RefreshToken, user_id)
        if entity is None:
            self.session.add(
                RefreshToken(
                    user_id=user_id,
                    token_hash=token_hash,
                    expires_at=expires_at,
                    created_at=datetime.now(timezone.utc),
                )
            )
        else:
            entity.token_hash = token_hash
            entity.expires_at = expires_at
            entity.created_at = datetime.now(timezone.utc)
        self.session.flush()

    def delete_refresh_token(self, user_id: int) -> bool:
        result = self.session.execute(delete(RefreshToken).where(RefreshToken.user_id == user_id))
        return bool(result.rowcount)
