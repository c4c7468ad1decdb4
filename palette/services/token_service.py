"""
Access/refresh token lifecycle.

Login issues a short-lived access token and a longer-lived refresh token.
Only an Argon2 hash of the refresh token is stored, one row per user, so a new
login supersedes the previous refresh token and logout simply drops the row.

Renewal keeps the refresh token as is (fixed expiry): the session ends when
the refresh token issued at login expires, no matter how often it is used.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from palette.core.config import get_settings
from palette.core.errors import DeletedUserError, InvalidInputError, InvalidTokenError, UserNotFoundError
from palette.core.security import hash_token, verify_token_hash
from palette.core.tokens import TokenClaims, TokenType, decode_token, issue_token, peek_claims
from palette.db.models import User
from palette.db.session import transactional
from palette.domain.accounts import SocialType, join_social_types, parse_social_types
from palette.repositories.sql_repository import SQLRepository

logger = logging.getLogger(__name__)


@dataclass
class LoginResult:
    user_id: int
    email: str
    access_token: str
    refresh_token: str
    is_registered: bool
    social_types: list[SocialType]


@dataclass
class TokenService:
    """Issues, validates, renews and revokes tokens for a user identity."""

    def __post_init__(self):
        self.settings = get_settings()

    # -------------------------------------- issue --------------------------------------
    def create_access_token(self, user_id: int, email: str) -> str:
        return issue_token(
            secret=self.settings.jwt_secret,
            user_id=user_id,
            email=email,
            token_type=TokenType.ACCESS,
            ttl_seconds=self.settings.access_token_ttl_seconds,
        )

    def create_refresh_token(self, repository: SQLRepository, user_id: int, email: str) -> str:
        ttl = self.settings.refresh_token_ttl_seconds
        token = issue_token(
            secret=self.settings.jwt_secret,
            user_id=user_id,
            email=email,
            token_type=TokenType.REFRESH,
            ttl_seconds=ttl,
        )
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl)
        repository.store_refresh_token(user_id, hash_token(token), expires_at)
        return token

    # -------------------------------------- login --------------------------------------
    def _upsert_user(self, repository: SQLRepository, email: str, social_type: SocialType) -> User:
        user = repository.get_user_including_deleted(email)
        if user is None:
            user = repository.create_user(email, join_social_types([social_type]))
            logger.info("Created user %s via %s", user.id, social_type.value)
            return user
        if user.is_deleted:
            raise DeletedUserError()
        known = parse_social_types(user.social_types)
        if social_type not in known:
            merged = join_social_types([*known, social_type])
            repository.update_user_social_types(user.id, merged)
            user.social_types = merged
        return user

    @transactional
    def login(self, email: str, social_type: SocialType | str, *, session: Session = None) -> LoginResult:
        raw_email = (email or "").strip()
        if not raw_email:
            raise InvalidInputError("Email is required.")
        social = social_type if isinstance(social_type, SocialType) else SocialType.of(social_type)
        repository = SQLRepository(session)
        user = self._upsert_user(repository, raw_email, social)
        access_token = self.create_access_token(user.id, user.email)
        refresh_token = self.create_refresh_token(repository, user.id, user.email)
        logger.info("User %s logged in", user.id)
        return LoginResult(
            user_id=user.id,
            email=user.email,
            access_token=access_token,
            refresh_token=refresh_token,
            is_registered=bool(user.agree_with_terms),
            social_types=parse_social_types(user.social_types),
        )

    # -------------------------------------- validation --------------------------------------
    def validate_access_token(self, token: str | None) -> TokenClaims:
        return decode_token(token, secret=self.settings.jwt_secret, expected_type=TokenType.ACCESS)

    def validate_refresh_token(self, token: str | None) -> TokenClaims:
        return decode_token(token, secret=self.settings.jwt_secret, expected_type=TokenType.REFRESH)

    # -------------------------------------- renew / revoke --------------------------------------
    @transactional
    def renew_access_token(self, refresh_token: str | None, *, session: Session = None) -> str:
        claims = self.validate_refresh_token(refresh_token)
        repository = SQLRepository(session)
        stored = repository.get_refresh_token(claims.user_id)
        if stored is None or not verify_token_hash(refresh_token, stored.token_hash):
            logger.warning("Rejected refresh token for user %s: revoked or superseded", claims.user_id)
            raise InvalidTokenError("Refresh token revoked.")
        user = repository.get_user(claims.email)
        if user is None or user.id != claims.user_id:
            raise UserNotFoundError()
        return self.create_access_token(user.id, user.email)

    @transactional
    def revoke(self, refresh_token: str | None, *, user_id: int | None = None, session: Session = None) -> bool:
        """Drop the stored refresh token; unknown or stale tokens are ignored.

        With ``user_id`` set, a token issued to anyone else is left alone.
        """
        claims = peek_claims(refresh_token, secret=self.settings.jwt_secret)
        if claims is None or claims.token_type is not TokenType.REFRESH:
            return False
        if user_id is not None and claims.user_id != user_id:
            logger.warning("Refusing to revoke refresh token of user %s for user %s", claims.user_id, user_id)
            return False
        repository = SQLRepository(session)
        stored = repository.get_refresh_token(claims.user_id)
        # a token superseded by a newer login must not end the newer session
        if stored is None or not verify_token_hash(refresh_token, stored.token_hash):
            return False
        repository.delete_refresh_token(claims.user_id)
        logger.info("Revoked refresh token for user %s", claims.user_id)
        return True
