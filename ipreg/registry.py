"""
ipreg.registry
==============

The in‑memory registry: the single authoritative store mapping an id to
its :class:`ipreg.models.IPRecord`, with a monotonic id allocator and
owner‑gated mutations.

Only the standard library is used so the core can be unit‑tested without
a database.  Every public operation returns an :class:`Outcome`; the two
failure kinds (``NOT_FOUND`` / ``NOT_AUTHORIZED``) are never raised to
the caller.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Callable, Dict, Iterator, List

from . import lifecycle
from .models import IPRecord, NotFound, Outcome, Principal, RegistryError, is_valid_id, now_ms

logger = logging.getLogger(__name__)


class IPRegistry:
    """
    Dictionary‑backed registry of IP claims.

    Each instance owns its own map and counter, so independent registries
    (one per test, say) never interfere.

    Example
    -------
    >>> reg = IPRegistry(clock=lambda: 1000)
    >>> reg.register("alice", "Patent X", "widget", 2000).value
    1
    >>> reg.is_active(1).value
    True
    >>> reg.set_status("bob", 1, False).error
    <ErrorKind.NOT_AUTHORIZED: 2>
    """

    def __init__(self, clock: Callable[[], int] = now_ms) -> None:
        self._clock = clock
        self._records: Dict[int, IPRecord] = {}
        self._record_locks: Dict[int, threading.Lock] = {}
        self._next_id = 1
        # guards allocation + insertion; record locks guard per‑id mutation
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _locked(self, ip_id: int) -> threading.Lock:
        """Return the per‑record lock or raise NotFound."""
        if not is_valid_id(ip_id):
            raise NotFound(ip_id)
        lock = self._record_locks.get(ip_id)
        if lock is None:
            raise NotFound(ip_id)
        return lock

    def _guarded_mutation(self, caller: Principal, ip_id: int, field: str, value) -> Outcome[bool]:
        """
        Existence check, then ownership check, then write, all under the
        record's lock.  Shared by :meth:`transfer` and :meth:`set_status`.
        """
        lifecycle.check_update(field, value)
        try:
            with self._locked(ip_id):
                record = self._records[ip_id]
                lifecycle.require_owner(record, caller)
                lifecycle.apply_update(record, field, value)
        except RegistryError as exc:
            logger.warning(f"{field} update on IP {ip_id} rejected: {exc.kind}")
            return Outcome.fail(exc.kind)
        logger.info(f"IP {ip_id}: {field} set to {value!r} by {caller!r}")
        return Outcome.ok(True)

    def _snapshot(self, ip_id: int) -> IPRecord:
        with self._locked(ip_id):
            return replace(self._records[ip_id])

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def register(self, caller: Principal, title: str, description: str,
                 expiration_date: int) -> Outcome[int]:
        """Create a record owned by *caller* and return its new id."""
        now = self._clock()
        with self._lock:
            ip_id = self._next_id
            record = IPRecord(
                id=ip_id,
                owner=caller,
                title=title,
                description=description,
                creation_date=now,
                registration_date=now,
                expiration_date=expiration_date,
            )
            self._records[ip_id] = record
            self._record_locks[ip_id] = threading.Lock()
            self._next_id += 1
        logger.info(f"registered IP {ip_id} ({title!r}) for {caller!r}")
        return Outcome.ok(ip_id)

    def get_info(self, ip_id: int) -> Outcome[IPRecord]:
        """Return a copy of the full record."""
        try:
            return Outcome.ok(self._snapshot(ip_id))
        except NotFound as exc:
            return Outcome.fail(exc.kind)

    def is_active(self, ip_id: int) -> Outcome[bool]:
        """Return the stored status flag (NOT_FOUND is distinct from False)."""
        try:
            return Outcome.ok(self._snapshot(ip_id).is_active)
        except NotFound as exc:
            return Outcome.fail(exc.kind)

    def transfer(self, caller: Principal, ip_id: int, new_owner: Principal) -> Outcome[bool]:
        """Hand the record to *new_owner*; only the current owner may do this."""
        return self._guarded_mutation(caller, ip_id, "owner", new_owner)

    def set_status(self, caller: Principal, ip_id: int, is_active: bool) -> Outcome[bool]:
        """Flip the active flag; only the current owner may do this."""
        return self._guarded_mutation(caller, ip_id, "is_active", is_active)

    # ------------------------------------------------------------------
    # Read‑only queries
    # ------------------------------------------------------------------
    def find_by_owner(self, owner: Principal) -> List[IPRecord]:
        """Snapshots of every record currently owned by *owner*."""
        return [r for r in self if lifecycle.is_owned_by(r, owner)]

    def find_by_status(self, is_active: bool) -> List[IPRecord]:
        """Snapshots of every record whose flag equals *is_active*."""
        return [r for r in self if r.is_active is is_active]

    # ------------------------------------------------------------------
    # Dunder helpers for convenience
    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[IPRecord]:
        with self._lock:
            ids = sorted(self._records)
        for ip_id in ids:
            yield self._snapshot(ip_id)

    def __len__(self) -> int:
        return len(self._records)
