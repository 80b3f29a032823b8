"""
ipreg.models
============

Dataclasses and enums describing a single intellectual‑property claim
and the tagged outcome every registry operation returns.  Like the rest
of the core, this module carries **no** external‑library dependencies.
"""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")

#: Opaque identity token of a caller / owner.  Only ever compared with ``==``.
Principal = str

#: Largest id a SQLite INTEGER PRIMARY KEY can hold.
MAX_ID = 2**63 - 1


def is_valid_id(ip_id) -> bool:
    """True if *ip_id* could ever have been issued (a plain int in ``1..MAX_ID``)."""
    return isinstance(ip_id, int) and not isinstance(ip_id, bool) and 1 <= ip_id <= MAX_ID


def now_ms() -> int:
    """Milliseconds since the Unix epoch (the registry's timestamp unit)."""
    return int(time.time() * 1000)


class ErrorKind(Enum):
    """The only two failure categories a registry operation can report."""
    NOT_FOUND = 1
    NOT_AUTHORIZED = 2

    def __str__(self) -> str:        # nicer REPL display
        return self.name


class RegistryError(Exception):
    """Base class for failures raised inside the registry core."""

    kind: ErrorKind

    def __init__(self, ip_id: Optional[int], message: str) -> None:
        super().__init__(message)
        self.ip_id = ip_id

    @staticmethod
    def for_kind(kind: ErrorKind, ip_id: Optional[int] = None) -> "RegistryError":
        """Build the exception matching *kind*."""
        if kind is ErrorKind.NOT_FOUND:
            return NotFound(ip_id)
        return NotAuthorized(ip_id)


class NotFound(RegistryError):
    """No record exists for the requested id."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, ip_id: Optional[int] = None) -> None:
        what = "no such IP record" if ip_id is None else f"no IP record with id {ip_id}"
        super().__init__(ip_id, what)


class NotAuthorized(RegistryError):
    """The caller is not the record's current owner."""

    kind = ErrorKind.NOT_AUTHORIZED

    def __init__(self, ip_id: Optional[int] = None, caller: Optional[Principal] = None) -> None:
        what = "the IP record" if ip_id is None else f"IP record {ip_id}"
        super().__init__(ip_id, f"caller {caller!r} does not own {what}")
        self.caller = caller


@dataclass
class IPRecord:
    """
    One registered intellectual‑property claim.

    Parameters
    ----------
    id : int
        Registry‑assigned identifier, unique and immutable.
    owner : str
        Principal allowed to mutate the record.
    title : str
        Free‑form title, fixed at registration.
    description : str
        Free‑form description, fixed at registration.
    creation_date : int
        Milliseconds since epoch, captured at registration.
    registration_date : int
        Same instant as ``creation_date``; kept as its own field.
    expiration_date : int
        Caller‑supplied timestamp, stored as given and never enforced.
    is_active : bool, default=True
        Status flag, changed only by the owner.
    """
    id: int
    owner: Principal
    title: str
    description: str
    creation_date: int
    registration_date: int
    expiration_date: int
    is_active: bool = True

    def __post_init__(self):
        if not self.owner:
            raise ValueError("owner must be a non-empty principal")

    # Wire shape used by the operation dispatcher -------------------------
    def to_wire(self) -> Dict[str, Any]:
        """Return the record with kebab‑case keys."""
        return {
            "id": self.id,
            "owner": self.owner,
            "title": self.title,
            "description": self.description,
            "creation-date": self.creation_date,
            "registration-date": self.registration_date,
            "expiration-date": self.expiration_date,
            "is-active": self.is_active,
        }


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Tagged result of a registry operation: either ``(success, value)``
    or ``(failure, error)``, never a silent default.

    Example
    -------
    >>> Outcome.ok(3).unwrap()
    3
    >>> Outcome.fail(ErrorKind.NOT_FOUND).success
    False
    """
    success: bool
    value: Optional[T] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, value: T) -> "Outcome[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: ErrorKind) -> "Outcome[T]":
        return cls(success=False, error=error)

    def unwrap(self, ip_id: Optional[int] = None) -> T:
        """Return the value, or raise the exception matching the error kind."""
        if self.success:
            return self.value
        raise RegistryError.for_kind(self.error, ip_id)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to ``{"success", "result"}`` or ``{"success", "error"}``."""
        if not self.success:
            return {"success": False, "error": self.error.value}
        result = self.value
        if isinstance(result, IPRecord):
            result = result.to_wire()
        return {"success": True, "result": result}


def record_as_dict(record: IPRecord) -> Dict[str, Any]:
    """Plain snake_case dict (JSON friendly) for CLI output."""
    return asdict(record)
