"""
api.ip
======

Endpoints over the IP registry.

Registry outcomes are unwrapped here: ``NOT_FOUND`` becomes 404 and
``NOT_AUTHORIZED`` becomes 403.  ``/call/{operation}`` instead returns the
tagged outcome body untouched, for clients that speak the contract wire
vocabulary.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from ipreg.dispatch import InvalidArguments, UnknownOperation, call
from ipreg.models import ErrorKind, IPRecord, Outcome
from .deps import get_principal, get_registry

logger = logging.getLogger(__name__)

router = APIRouter()

# HTTP status per registry error kind
HTTP_STATUS = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.NOT_AUTHORIZED: 403,
}


class RegisterRequest(BaseModel):
    """Body of POST /ip."""
    title: str
    description: str
    expiration_date: int


class TransferRequest(BaseModel):
    """Body of POST /ip/{id}/transfer."""
    new_owner: str = Field(..., min_length=1)


class StatusRequest(BaseModel):
    """Body of PUT /ip/{id}/status."""
    is_active: bool


def _unwrap(outcome: Outcome, ip_id: int):
    if outcome.success:
        return outcome.value
    detail = "IP record not found" if outcome.error is ErrorKind.NOT_FOUND else "Caller is not the owner"
    raise HTTPException(status_code=HTTP_STATUS[outcome.error], detail=f"{detail} (id={ip_id})")


# ---------- POST /ip ----------
@router.post("/ip", status_code=201)
def register_ip(req: RegisterRequest,
                caller: str = Depends(get_principal),
                registry=Depends(get_registry)):
    ip_id = registry.register(caller, req.title, req.description, req.expiration_date).unwrap()
    return {"id": ip_id}


# ---------- GET /ip ----------
@router.get("/ip", response_model=List[IPRecord])
def list_ip(
    owner: Optional[str] = Query(None, description="Only records owned by this principal"),
    active: Optional[bool] = Query(None, description="Only records with this status flag"),
    registry=Depends(get_registry),
):
    """Return every record, optionally filtered by owner and status."""
    records = list(registry) if owner is None else registry.find_by_owner(owner)
    if active is not None:
        records = [r for r in records if r.is_active is active]
    return records


# ---------- GET /ip/{id} ----------
@router.get("/ip/{ip_id}", response_model=IPRecord)
def get_ip_info(ip_id: int, registry=Depends(get_registry)):
    return _unwrap(registry.get_info(ip_id), ip_id)


# ---------- GET /ip/{id}/active ----------
@router.get("/ip/{ip_id}/active")
def is_ip_active(ip_id: int, registry=Depends(get_registry)):
    return {"id": ip_id, "is_active": _unwrap(registry.is_active(ip_id), ip_id)}


# ---------- POST /ip/{id}/transfer ----------
@router.post("/ip/{ip_id}/transfer")
def transfer_ip(ip_id: int, req: TransferRequest,
                caller: str = Depends(get_principal),
                registry=Depends(get_registry)):
    return {"success": _unwrap(registry.transfer(caller, ip_id, req.new_owner), ip_id)}


# ---------- PUT /ip/{id}/status ----------
@router.put("/ip/{ip_id}/status")
def set_ip_status(ip_id: int, req: StatusRequest,
                  caller: str = Depends(get_principal),
                  registry=Depends(get_registry)):
    return {"success": _unwrap(registry.set_status(caller, ip_id, req.is_active), ip_id)}


# ---------- GET /status ----------
@router.get("/status")
def status_snapshot(registry=Depends(get_registry)):
    counts = {"ACTIVE": 0, "INACTIVE": 0}
    for record in registry:
        counts["ACTIVE" if record.is_active else "INACTIVE"] += 1
    return counts


# ---------- POST /call/{operation} ----------
@router.post("/call/{operation}")
def call_operation(operation: str,
                   args: Dict[str, Any] = Body({}),
                   caller: str = Depends(get_principal),
                   registry=Depends(get_registry)):
    """
    Contract‑style entry point: run *operation* with kebab‑case *args*
    and return ``{"success": ..., "result"|"error": ...}``.
    """
    try:
        outcome = call(registry, caller, operation, args)
    except UnknownOperation:
        raise HTTPException(status_code=404, detail="Function not found")
    except InvalidArguments as e:
        raise HTTPException(status_code=422, detail=str(e))
    logger.info(f"{operation} by {caller!r}: success={outcome.success}")
    return outcome.to_dict()
