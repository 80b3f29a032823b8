"""
api.deps
========

FastAPI dependency providers.

`get_registry` returns one process‑wide registry: the SQLite‑backed
**DBRegistry** by default, or the in‑memory **IPRegistry** when
``IPREG_BACKEND=memory``.  `get_principal` reads the caller identity the
upstream authentication layer placed in the ``X-Principal`` header.
"""

from functools import lru_cache
from typing import Union

from fastapi import Header

from ipreg.registry import IPRegistry
from ipreg.registry_db import DBRegistry
from ipreg.settings import settings


@lru_cache
def get_registry() -> Union[DBRegistry, IPRegistry]:
    """Singleton registry (persists across requests)."""
    if settings.backend == "memory":
        return IPRegistry()
    return DBRegistry()


@lru_cache
def get_settings():
    """Return application settings."""
    return settings


def get_principal(
    x_principal: str = Header(..., alias="X-Principal", min_length=1,
                              description="Authenticated caller principal"),
) -> str:
    """Return the already‑authenticated caller principal."""
    return x_principal
