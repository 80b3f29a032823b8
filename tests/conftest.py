"""
Pytest configuration: make sure `import ipreg` / `import api` work
regardless of where pytest is invoked, and provide fresh registries.

Every fixture builds its own store, so no state leaks between tests.
"""

import sys
from pathlib import Path

import pytest

# /path/to/project/tests -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ipreg.db import make_engine  # noqa: E402
from ipreg.registry import IPRegistry  # noqa: E402
from ipreg.registry_db import DBRegistry  # noqa: E402

FIXED_NOW = 1_700_000_000_000


@pytest.fixture
def registry():
    """In‑memory registry with a frozen clock."""
    return IPRegistry(clock=lambda: FIXED_NOW)


@pytest.fixture
def db_registry():
    """SQLite registry on a private in‑memory database."""
    engine = make_engine("sqlite://", echo=False)
    yield DBRegistry(engine, clock=lambda: FIXED_NOW)
    engine.dispose()
