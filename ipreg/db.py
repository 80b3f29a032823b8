"""
ipreg.db
========

SQLite persistence layer for the IP registry.

This module exposes:

* ``make_engine(url)`` – build a SQLModel engine (default: ``settings.db_url``)
* ``get_engine()`` – the process‑wide default engine, created lazily
* ``IPRecordDB`` – the ``ip_records`` table
* ``create_all()`` – helper to create tables at first run
* CRUD helpers that always hand back plain :class:`IPRecord` dataclasses
"""

from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Field, Session, SQLModel, create_engine, select

from ipreg.models import IPRecord, is_valid_id
from ipreg.settings import settings


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
def make_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Return a new engine for *url*.

    In‑memory SQLite URLs get a :class:`StaticPool` so every session shares
    the same connection (and therefore the same database).
    """
    url = url or settings.db_url
    echo = settings.db_echo if echo is None else echo
    kwargs = {}
    if url.startswith("sqlite"):
        # writers from other connections wait on the file lock instead of failing
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, echo=echo, **kwargs)


@lru_cache
def get_engine() -> Engine:
    """Process‑wide engine bound to the configured database file."""
    return make_engine()


# ---------------------------------------------------------------------------
# ORM model that mirrors ipreg.models.IPRecord
# ---------------------------------------------------------------------------
class IPRecordDB(SQLModel, table=True):
    """
    SQLite‑backed representation of an :class:`ipreg.models.IPRecord`.

    ``sqlite_autoincrement`` makes SQLite keep a high‑water mark, so an id
    is never handed out twice for the lifetime of the file.
    """

    __tablename__ = "ip_records"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    owner: str = Field(index=True)
    title: str
    description: str
    creation_date: int
    registration_date: int
    expiration_date: int
    is_active: bool = True

    def to_record(self) -> IPRecord:
        """Convert the DB row into a plain IPRecord."""
        return IPRecord(
            id=self.id,
            owner=self.owner,
            title=self.title,
            description=self.description,
            creation_date=self.creation_date,
            registration_date=self.registration_date,
            expiration_date=self.expiration_date,
            is_active=self.is_active,
        )


# ---------------------------------------------------------------------------
# Convenience CRUD helpers
# ---------------------------------------------------------------------------
def insert_record(s: Session, owner: str, title: str, description: str,
                  created: int, expiration_date: int) -> int:
    """Insert a new active row and return the id SQLite assigned to it."""
    row = IPRecordDB(
        owner=owner,
        title=title,
        description=description,
        creation_date=created,
        registration_date=created,
        expiration_date=expiration_date,
        is_active=True,
    )
    s.add(row)
    s.commit()
    s.refresh(row)
    return row.id


def get_record(s: Session, ip_id: int) -> IPRecord | None:
    """Return a record by id or *None* if missing (or not a storable id)."""
    if not is_valid_id(ip_id):
        return None
    db_row = s.get(IPRecordDB, ip_id)
    return db_row.to_record() if db_row else None


def update_if_owner(s: Session, ip_id: int, caller: str, field: str, value) -> int:
    """
    Set *field* on row *ip_id* only if *caller* still owns it, in a single
    ``UPDATE ... WHERE id = :id AND owner = :caller``.  Returns the number
    of rows changed (0 or 1).
    """
    stmt = (
        update(IPRecordDB)
        .where(IPRecordDB.id == ip_id, IPRecordDB.owner == caller)
        .values({field: value})
    )
    result = s.connection().execute(stmt)
    s.commit()
    return result.rowcount


def all_records(s: Session) -> List[IPRecord]:
    """Return every record in id order."""
    rows = s.exec(select(IPRecordDB).order_by(IPRecordDB.id)).all()
    return [row.to_record() for row in rows]


def records_by_owner(s: Session, owner: str) -> List[IPRecord]:
    rows = s.exec(
        select(IPRecordDB).where(IPRecordDB.owner == owner).order_by(IPRecordDB.id)
    ).all()
    return [row.to_record() for row in rows]


# ---------------------------------------------------------------------------
# Utility: create tables
# ---------------------------------------------------------------------------
def create_all(engine: Optional[Engine] = None) -> None:
    """Create all tables for imported SQLModel subclasses, including IPRecordDB."""
    SQLModel.metadata.create_all(engine or get_engine())
