"""
refurb.db
=========

SQLite persistence layer for the Refurb tracker.

This module exposes:

* ``engine`` – a global SQLModel engine pointing at *refurb.db*
* ``SessionLocal`` – a session factory used via ``with SessionLocal() as s:``
* ``create_all()`` – helper to create tables at first run
* ``SQLiteStore`` – a :class:`refurb.store.BlobStore` over the ``blob`` table
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import Field, Session, SQLModel, create_engine

from refurb.settings import DB_ECHO, DB_URL
from refurb.store import BlobStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Engine (SQLite file lives in project root unless REFURB_DB_FILE is set)
# ---------------------------------------------------------------------------
engine = create_engine(DB_URL, echo=DB_ECHO)


def make_engine(db_file: str | Path, echo: bool = False) -> Engine:
    """Return an engine for an arbitrary SQLite file."""
    return create_engine(f"sqlite:///{db_file}", echo=echo)


# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------
def SessionLocal(bind: Optional[Engine] = None) -> Session:  # noqa: N802 (factory camel‑case)
    """Return a new Session bound to *bind* (default: the global engine)."""
    return Session(bind or engine)


# ---------------------------------------------------------------------------
# ORM model: one row per blob key
# ---------------------------------------------------------------------------
class Blob(SQLModel, table=True):
    """
    One whole stored value.

    *key* is one of ``units``, ``controllers``, ``scorecard``, ``nextId``,
    ``nextControllerId``; *value* is the serialized JSON or counter.
    """

    key: str = Field(primary_key=True)
    value: str


# ---------------------------------------------------------------------------
# Utility: create tables
# ---------------------------------------------------------------------------
def create_all(bind: Optional[Engine] = None) -> None:
    """Create all tables for imported SQLModel subclasses, including Blob."""
    SQLModel.metadata.create_all(bind or engine)


# ---------------------------------------------------------------------------
# Store adapter
# ---------------------------------------------------------------------------
class SQLiteStore(BlobStore):
    """
    SQLite‑backed blob store.

    Each :meth:`set` merges the row and commits straight away, so the file
    always holds the last whole value written for every key.
    """

    def __init__(self, session: Session | None = None, bind: Optional[Engine] = None) -> None:
        if session is None:
            create_all(bind)
            session = SessionLocal(bind)
        self._session: Session = session

    def get(self, key: str) -> Optional[str]:
        row = self._session.get(Blob, key)
        return row.value if row else None

    def set(self, key: str, value: str) -> None:
        self._session.merge(Blob(key=key, value=value))
        self._session.commit()
        logger.debug("wrote blob %r (%d bytes)", key, len(value))

    # ----------------------------------------------------- context manager
    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "SQLiteStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Lightweight CLI
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(
        prog="python -m refurb.db",
        description="Refurb DB utilities",
    )
    parser.add_argument("--create", action="store_true", help="create tables (safe if they already exist)")
    args = parser.parse_args()

    if args.create:
        create_all()
        print("✅ refurb.db schema initialised")
