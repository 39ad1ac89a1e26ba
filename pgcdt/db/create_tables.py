"""Utility script to create (or drop) the demo schema."""
from __future__ import annotations

import sys

from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata


def create_all() -> None:
    engine = get_engine()
    Base.metadata.create_all(bind=engine)


def drop_all() -> None:
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)


if __name__ == "__main__":
    try:
        if "--drop" in sys.argv[1:]:
            drop_all()
            print("Database tables dropped.")
        else:
            create_all()
            print("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to manage tables: {exc}") from exc
