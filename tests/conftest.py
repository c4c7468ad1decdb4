from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the palette package importable when running the tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from palette.core import config as core_config  # noqa: E402
from palette.db import create_tables  # noqa: E402
from palette.db import models  # noqa: E402
from palette.db import session as db_session  # noqa: E402


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Point the app at a temporary SQLite file and tear it down completely afterwards."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    # reset caches so the new env is read
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    create_tables.create_all()

    yield db_file

    try:
        models.Base.metadata.drop_all(bind=engine)
    except Exception:
        pass
    try:
        engine.dispose()
    except Exception:
        pass
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]
