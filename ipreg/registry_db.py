"""
ipreg.registry_db
=================

SQLite‑backed implementation of the :class:`ipreg.registry.IPRegistry`
public surface.

This adapter wraps the helpers in :pymod:`ipreg.db` so that any code
expecting the in‑memory registry can switch to a persistent store
without changing its calls.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterator, List, Optional

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from ipreg import lifecycle
from ipreg.db import (
    IPRecordDB,
    all_records,
    create_all,
    get_engine,
    get_record,
    insert_record,
    records_by_owner,
    update_if_owner,
)
from ipreg.models import (
    IPRecord,
    NotAuthorized,
    NotFound,
    Outcome,
    Principal,
    RegistryError,
    is_valid_id,
    now_ms,
)

logger = logging.getLogger(__name__)


class DBRegistry:
    """
    Drop‑in replacement backed by SQLite.

    Methods mirror the in‑memory IPRegistry:
    * register / get_info / is_active / transfer / set_status
    * find_by_owner / find_by_status
    * iteration / len()

    Every call opens its own short session.  Owner‑gated writes are a
    single conditional ``UPDATE`` (see :pyfunc:`ipreg.db.update_if_owner`),
    so the ownership check and the write are one statement even across
    registries, processes or workers sharing the database file.
    ``_write_lock`` only keeps threads of this instance from interleaving
    on a shared in‑memory connection.
    """

    def __init__(self, engine: Optional[Engine] = None,
                 clock: Callable[[], int] = now_ms) -> None:
        self._engine = engine or get_engine()
        self._clock = clock
        self._write_lock = threading.Lock()
        create_all(self._engine)

    # ------------------------------------------------------------ internals
    def _guarded_mutation(self, caller: Principal, ip_id: int, field: str, value) -> Outcome[bool]:
        lifecycle.check_update(field, value)
        try:
            if not is_valid_id(ip_id):
                raise NotFound(ip_id)
            with self._write_lock, Session(self._engine) as s:
                if update_if_owner(s, ip_id, caller, field, value) == 0:
                    # nothing matched: decide which check failed
                    if get_record(s, ip_id) is None:
                        raise NotFound(ip_id)
                    raise NotAuthorized(ip_id, caller)
        except RegistryError as exc:
            logger.warning(f"{field} update on IP {ip_id} rejected: {exc.kind}")
            return Outcome.fail(exc.kind)
        logger.info(f"IP {ip_id}: {field} set to {value!r} by {caller!r}")
        return Outcome.ok(True)

    # ------------------------------------------------------------------ CRUD
    def register(self, caller: Principal, title: str, description: str,
                 expiration_date: int) -> Outcome[int]:
        if not caller:
            raise ValueError("owner must be a non-empty principal")
        with self._write_lock, Session(self._engine) as s:
            ip_id = insert_record(s, caller, title, description, self._clock(), expiration_date)
        logger.info(f"registered IP {ip_id} ({title!r}) for {caller!r}")
        return Outcome.ok(ip_id)

    def get_info(self, ip_id: int) -> Outcome[IPRecord]:
        with Session(self._engine) as s:
            record = get_record(s, ip_id)
        if record is None:
            return Outcome.fail(NotFound.kind)
        return Outcome.ok(record)

    def is_active(self, ip_id: int) -> Outcome[bool]:
        info = self.get_info(ip_id)
        return Outcome.ok(info.value.is_active) if info.success else info

    def transfer(self, caller: Principal, ip_id: int, new_owner: Principal) -> Outcome[bool]:
        return self._guarded_mutation(caller, ip_id, "owner", new_owner)

    def set_status(self, caller: Principal, ip_id: int, is_active: bool) -> Outcome[bool]:
        return self._guarded_mutation(caller, ip_id, "is_active", is_active)

    # --------------------------------------------------------------- queries
    def find_by_owner(self, owner: Principal) -> List[IPRecord]:
        with Session(self._engine) as s:
            return records_by_owner(s, owner)

    def find_by_status(self, is_active: bool) -> List[IPRecord]:
        return [r for r in self if r.is_active is is_active]

    # ------------------------------------------------------ dunder helpers
    def __iter__(self) -> Iterator[IPRecord]:
        with Session(self._engine) as s:
            records = all_records(s)
        yield from records

    def __len__(self) -> int:
        with Session(self._engine) as s:
            return s.exec(select(func.count()).select_from(IPRecordDB)).one()
