"""
ipreg.dispatch
==============

Name‑based entry point for request‑dispatch layers that speak the
contract wire vocabulary (``register-ip``, ``get-ip-info`` ...).

Arguments arrive as a loose kebab‑case mapping; each operation validates
them with a strict pydantic model before the registry sees them, so both
backends receive the same well‑typed values.

>>> from ipreg.registry import IPRegistry
>>> reg = IPRegistry(clock=lambda: 0)
>>> call(reg, "alice", "register-ip", {"title": "T", "description": "D", "expiration": 9}).to_dict()
{'success': True, 'result': 1}
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .models import Outcome, Principal

__all__ = ["OPERATIONS", "InvalidArguments", "UnknownOperation", "call"]


class UnknownOperation(KeyError):
    """The requested operation name is not part of the registry surface."""


class InvalidArguments(ValueError):
    """Wire arguments are missing or have the wrong type."""


# ---------------------------------------------------------------------
# Argument models (kebab‑case aliases, no coercion: "1" is not an id)
# ---------------------------------------------------------------------
class WireArgs(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True, extra="ignore")


class RegisterArgs(WireArgs):
    title: str
    description: str
    expiration: int


class IdArgs(WireArgs):
    id: int


class TransferArgs(IdArgs):
    new_owner: str = Field(alias="new-owner")


class StatusArgs(IdArgs):
    is_active: bool = Field(alias="is-active")


def _register(reg, caller, args: RegisterArgs):
    return reg.register(caller, args.title, args.description, args.expiration)


def _get_info(reg, caller, args: IdArgs):
    return reg.get_info(args.id)


def _is_active(reg, caller, args: IdArgs):
    return reg.is_active(args.id)


def _transfer(reg, caller, args: TransferArgs):
    return reg.transfer(caller, args.id, args.new_owner)


def _set_status(reg, caller, args: StatusArgs):
    return reg.set_status(caller, args.id, args.is_active)


# wire name → (argument model, handler(registry, caller, args))
OPERATIONS: Dict[str, Tuple[Type[WireArgs], Callable[[Any, Principal, Any], Outcome]]] = {
    "register-ip":   (RegisterArgs, _register),
    "get-ip-info":   (IdArgs,       _get_info),
    "is-ip-active":  (IdArgs,       _is_active),
    "transfer-ip":   (TransferArgs, _transfer),
    "set-ip-status": (StatusArgs,   _set_status),
}


def call(registry, caller: Principal, name: str, args: Mapping[str, Any]) -> Outcome:
    """
    Run operation *name* against *registry* on behalf of *caller*.

    Raises :class:`UnknownOperation` for a name outside :pydata:`OPERATIONS`
    and :class:`InvalidArguments` when *args* do not fit the operation.
    """
    try:
        model, handler = OPERATIONS[name]
    except KeyError:
        raise UnknownOperation(name) from None
    try:
        parsed = model.model_validate(dict(args))
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise InvalidArguments(f"{name}: {problems}") from None
    return handler(registry, caller, parsed)
