"""
Account use cases: login, terms agreement and account deletion.

Deleting an account is a soft delete. The user row stays with ``is_deleted``
set, every membership of the user is flagged outed (the partner's diary turns
DISCARD) and the stored refresh token is dropped. Diaries and histories are
left untouched for the remaining member.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from palette.core.errors import UserNotFoundError
from palette.db.models import User
from palette.db.session import transactional
from palette.domain.accounts import SocialType
from palette.repositories.sql_repository import SQLRepository
from palette.services.token_service import LoginResult, TokenService

logger = logging.getLogger(__name__)


@dataclass
class UserAccountService:
    """Handles login, registration (terms) and account deletion."""

    token_service: TokenService = field(default_factory=TokenService)

    def login(self, email: str, social_type: SocialType | str) -> LoginResult:
        return self.token_service.login(email, social_type)

    def logout(self, refresh_token: str | None) -> None:
        self.token_service.revoke(refresh_token)

    def _require_user(self, repository: SQLRepository, email: str) -> User:
        user = repository.get_user(email)
        if user is None:
            raise UserNotFoundError()
        return user

    @transactional
    def agree_terms(self, email: str, *, session: Session = None) -> None:
        repository = SQLRepository(session)
        user = self._require_user(repository, email)
        if not user.agree_with_terms:
            repository.set_user_agree_terms(user.id)
            logger.info("User %s agreed to the terms", user.id)

    @transactional
    def delete_account(self, access_token: str | None, refresh_token: str | None, *, session: Session = None) -> None:
        claims = self.token_service.validate_access_token(access_token)
        repository = SQLRepository(session)
        user = self._require_user(repository, claims.email)

        outed = repository.out_groups_for_user(user.id)
        repository.soft_delete_user(user.id)
        # only the deleted account's own token is revoked
        self.token_service.revoke(refresh_token, user_id=user.id, session=session)
        logger.info("Deleted account %s (%s memberships outed)", user.id, outed)
