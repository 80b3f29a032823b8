"""
ipreg.lifecycle
===============

Ownership guard for an :class:`ipreg.models.IPRecord`.

A record is created once and never destroyed; after creation only the
fields listed in :pydata:`MUTABLE_FIELDS` may change, and only at the
request of the current owner.  The in‑memory registry routes every
mutation through :pyfunc:`require_owner` followed by :pyfunc:`apply_update`;
the SQLite registry validates with :pyfunc:`check_update` and folds the
owner test into its conditional ``UPDATE``.
"""

from __future__ import annotations

from typing import Any

from .models import IPRecord, NotAuthorized, Principal

# ---------------------------------------------------------------------
# Owner‑gated fields: field name → expected value type
# ---------------------------------------------------------------------
MUTABLE_FIELDS = {
    "owner":     str,
    "is_active": bool,
}


def require_owner(record: Any, caller: Principal) -> None:
    """
    Raise :class:`NotAuthorized` unless *caller* is ``record.owner``.

    *record* is anything with ``id`` and ``owner`` attributes, so the
    SQLModel row type is accepted as well as the dataclass.
    """
    if record.owner != caller:
        raise NotAuthorized(record.id, caller)


def apply_update(record: Any, field: str, value: Any) -> None:
    """
    Set *field* on *record* in place if it is owner‑gated,
    otherwise raise :class:`ValueError`.

    Examples
    --------
    >>> r = IPRecord(1, "alice", "Patent X", "", 0, 0, 0)
    >>> apply_update(r, "is_active", False)
    >>> apply_update(r, "title", "Renamed")
    Traceback (most recent call last):
        ...
    ValueError: field 'title' is immutable
    """
    check_update(field, value)
    setattr(record, field, value)


def check_update(field: str, value: Any) -> None:
    """Raise :class:`ValueError` unless *value* may be written to *field*."""
    expected = MUTABLE_FIELDS.get(field)
    if expected is None:
        raise ValueError(f"field {field!r} is immutable")
    if not isinstance(value, expected):
        raise ValueError(f"{field} must be {expected.__name__}, got {type(value).__name__}")
    if field == "owner" and not value:
        raise ValueError("new owner must be a non-empty principal")


def is_owned_by(record: IPRecord, principal: Principal) -> bool:
    """Convenience predicate used by the ``find_by_owner`` queries."""
    return record.owner == principal
