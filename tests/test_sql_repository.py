"""
Smoke tests for the SQLRepository against a temporary SQLite database.
"""
from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlalchemy.exc import IntegrityError

from palette.db.create_tables import DEFAULT_COLORS, seed_colors
from palette.db.session import get_session, transaction
from palette.repositories.sql_repository import SQLRepository

SCRIPTS = Path(__file__).resolve().parents[1] / "scripts"


def test_user_lookup_skips_soft_deleted(temp_db):
    with transaction() as session:
        repo = SQLRepository(session)
        user = repo.create_user("alice@example.com", "KAKAO")
        repo.soft_delete_user(user.id)

    with get_session() as session:
        repo = SQLRepository(session)
        assert repo.get_user("alice@example.com") is None
        deleted = repo.get_user_including_deleted("alice@example.com")
        assert deleted is not None and deleted.is_deleted is True


def test_membership_is_unique_per_user(temp_db):
    with transaction() as session:
        repo = SQLRepository(session)
        user = repo.create_user("alice@example.com", "KAKAO")
        diary = repo.create_diary("ABCDEFGH", repo.list_colors()[0].id)
        repo.create_group(diary.id, user.id, is_admin=True)
        user_id, diary_id = user.id, diary.id

    with pytest.raises(IntegrityError):
        with transaction() as session:
            SQLRepository(session).create_group(diary_id, user_id, is_admin=False)

    with get_session() as session:
        assert len(SQLRepository(session).get_groups_by_diary(diary_id)) == 1


def test_invitation_code_is_unique(temp_db):
    with transaction() as session:
        repo = SQLRepository(session)
        repo.create_diary("ABCDEFGH", repo.list_colors()[0].id)

    with pytest.raises(IntegrityError):
        with transaction() as session:
            repo = SQLRepository(session)
            repo.create_diary("ABCDEFGH", repo.list_colors()[0].id)


def test_transaction_rolls_back_every_write(temp_db):
    with pytest.raises(RuntimeError):
        with transaction() as session:
            repo = SQLRepository(session)
            repo.create_user("alice@example.com", "KAKAO")
            raise RuntimeError("boom")

    with get_session() as session:
        assert SQLRepository(session).get_user("alice@example.com") is None


def test_refresh_token_row_is_replaced(temp_db):
    expires = datetime.now(timezone.utc) + timedelta(days=1)
    with transaction() as session:
        repo = SQLRepository(session)
        user = repo.create_user("alice@example.com", "KAKAO")
        repo.store_refresh_token(user.id, "argon2$first", expires)
        repo.store_refresh_token(user.id, "argon2$second", expires)
        user_id = user.id

    with transaction() as session:
        repo = SQLRepository(session)
        assert repo.get_refresh_token(user_id).token_hash == "argon2$second"
        assert repo.delete_refresh_token(user_id) is True
        assert repo.delete_refresh_token(user_id) is False


def test_seed_colors_only_once(temp_db):
    assert seed_colors() == 0
    with get_session() as session:
        assert len(SQLRepository(session).list_colors()) == len(DEFAULT_COLORS)


def test_add_color_script(temp_db, monkeypatch, capsys):
    monkeypatch.syspath_prepend(str(SCRIPTS))
    import add_color

    color_id = add_color.main(["--name", "ink", "--hex", "#112233"])
    assert "OK: color added" in capsys.readouterr().out
    with get_session() as session:
        assert SQLRepository(session).get_color(color_id).hex_code == "#112233"

    with pytest.raises(SystemExit):
        add_color.main(["--name", "ink", "--hex", "#112233"])
    with pytest.raises(SystemExit):
        add_color.main(["--name", "bad", "--hex", "blue"])
    sys.modules.pop("add_color", None)
