"""Utility script to create the database schema and seed the color palette."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine, transaction
from . import models  # noqa: F401  # ensure models are imported for metadata

DEFAULT_COLORS = (
    ("coral", "#FF7F7F"),
    ("peach", "#FFB38A"),
    ("lemon", "#FFE98A"),
    ("mint", "#9EE6B8"),
    ("sky", "#8AC7FF"),
    ("lavender", "#C3A6FF"),
)


def seed_colors() -> int:
    """Insert the default palette when the colors table is empty; return rows added."""
    with transaction() as session:
        if session.execute(select(models.Color.id).limit(1)).first() is not None:
            return 0
        session.add_all(models.Color(name=name, hex_code=hex_code) for name, hex_code in DEFAULT_COLORS)
    return len(DEFAULT_COLORS)


def create_all() -> None:
    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    seed_colors()


if __name__ == "__main__":
    try:
        create_all()
        print("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
