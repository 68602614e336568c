"""Create the ``kv_entries`` table when it is missing (safe to run repeatedly)."""
from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # registers KeyValueEntry on Base.metadata


def create_all() -> None:
    Base.metadata.create_all(bind=get_engine(), checkfirst=True)


if __name__ == "__main__":
    try:
        create_all()
    except (SQLAlchemyError, RuntimeError) as exc:
        raise SystemExit(f"Could not create the CRM schema: {exc}") from exc
    print("kv_entries table is ready.")
