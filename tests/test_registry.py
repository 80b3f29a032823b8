"""
tests/test_registry.py
======================

Behavioural tests shared by ipreg.registry.IPRegistry and
ipreg.registry_db.DBRegistry; both must give identical answers.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import FIXED_NOW
from ipreg.models import MAX_ID, ErrorKind
from ipreg.registry import IPRegistry

NOT_FOUND = ErrorKind.NOT_FOUND
NOT_AUTHORIZED = ErrorKind.NOT_AUTHORIZED


@pytest.fixture(params=["memory", "db"])
def reg(request):
    fixture = "registry" if request.param == "memory" else "db_registry"
    return request.getfixturevalue(fixture)


def _register(reg, owner="alice", title="Patent X", expiration=1234567890):
    return reg.register(owner, title, "description", expiration).value


# ---------------------------------------------------------------------------
# Allocation
# ---------------------------------------------------------------------------
def test_ids_are_sequential_from_one(reg):
    ids = [_register(reg, title=f"T{i}") for i in range(5)]
    assert ids == [1, 2, 3, 4, 5]
    assert len(reg) == 5


def test_ids_unaffected_by_interleaved_operations(reg):
    first = _register(reg)
    reg.set_status("alice", first, False)
    reg.transfer("mallory", first, "mallory")
    reg.get_info(99)
    assert _register(reg) == 2


def test_independent_registries_do_not_share_state():
    a, b = IPRegistry(), IPRegistry()
    assert a.register("alice", "T", "D", 0).value == 1
    assert b.register("bob", "T", "D", 0).value == 1
    assert b.get_info(1).value.owner == "bob"


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------
def test_register_then_get_info_round_trip(reg):
    ip_id = reg.register("alice", "Test IP", "This is a test IP description", 4102444800000).value
    info = reg.get_info(ip_id)
    assert info.success
    rec = info.value
    assert rec.id == ip_id
    assert rec.owner == "alice"
    assert rec.title == "Test IP"
    assert rec.description == "This is a test IP description"
    assert rec.expiration_date == 4102444800000
    assert rec.is_active is True
    assert rec.creation_date == rec.registration_date == FIXED_NOW


def test_empty_text_and_past_expiration_accepted(reg):
    ip_id = reg.register("alice", "", "", -5).value
    rec = reg.get_info(ip_id).value
    assert (rec.title, rec.description, rec.expiration_date) == ("", "", -5)
    # expiry in the past does not deactivate anything
    assert reg.is_active(ip_id).value is True


def test_get_info_returns_snapshot(reg):
    ip_id = _register(reg)
    snap = reg.get_info(ip_id).value
    snap.owner = "mallory"
    snap.is_active = False
    rec = reg.get_info(ip_id).value
    assert rec.owner == "alice"
    assert rec.is_active is True


def test_unknown_id_is_not_found_everywhere(reg):
    _register(reg)
    assert reg.get_info(42).error is NOT_FOUND
    assert reg.is_active(42).error is NOT_FOUND
    assert reg.transfer("alice", 42, "bob").error is NOT_FOUND
    assert reg.set_status("alice", 42, False).error is NOT_FOUND


@pytest.mark.parametrize("ip_id", [0, -1, MAX_ID + 1, 2**64, -(2**70)])
def test_out_of_range_id_is_not_found(reg, ip_id):
    """Ids no store could ever issue answer NOT_FOUND instead of raising."""
    _register(reg)
    assert reg.get_info(ip_id).error is NOT_FOUND
    assert reg.is_active(ip_id).error is NOT_FOUND
    assert reg.transfer("alice", ip_id, "bob").error is NOT_FOUND
    assert reg.set_status("alice", ip_id, False).error is NOT_FOUND


@pytest.mark.parametrize("ip_id", ["1", 1.0, True, None])
def test_non_integer_id_is_not_found(reg, ip_id):
    """Both stores agree: only a real int can name record 1."""
    _register(reg)
    assert reg.get_info(ip_id).error is NOT_FOUND
    assert reg.is_active(ip_id).error is NOT_FOUND
    assert reg.transfer("alice", ip_id, "bob").error is NOT_FOUND
    assert reg.set_status("alice", ip_id, False).error is NOT_FOUND
    assert reg.get_info(1).value.owner == "alice"


def test_not_found_is_distinct_from_inactive(reg):
    ip_id = _register(reg)
    reg.set_status("alice", ip_id, False)
    inactive = reg.is_active(ip_id)
    missing = reg.is_active(ip_id + 1)
    assert inactive.success and inactive.value is False
    assert not missing.success and missing.error is NOT_FOUND


# ---------------------------------------------------------------------------
# Owner‑gated mutations
# ---------------------------------------------------------------------------
def test_stranger_cannot_mutate(reg):
    ip_id = _register(reg)
    before = reg.get_info(ip_id).value
    assert reg.transfer("bob", ip_id, "carol").error is NOT_AUTHORIZED
    assert reg.set_status("bob", ip_id, False).error is NOT_AUTHORIZED
    assert reg.get_info(ip_id).value == before


def test_transfer_moves_authority(reg):
    ip_id = _register(reg)
    assert reg.transfer("alice", ip_id, "carol").success
    assert reg.get_info(ip_id).value.owner == "carol"
    assert reg.transfer("alice", ip_id, "xavier").error is NOT_AUTHORIZED
    assert reg.transfer("carol", ip_id, "xavier").success
    assert reg.get_info(ip_id).value.owner == "xavier"


def test_transfer_to_self_succeeds(reg):
    ip_id = _register(reg)
    assert reg.transfer("alice", ip_id, "alice").success
    assert reg.get_info(ip_id).value.owner == "alice"


def test_status_toggle_readback(reg):
    ip_id = _register(reg)
    assert reg.set_status("alice", ip_id, False).value is True
    assert reg.is_active(ip_id).value is False
    assert reg.set_status("alice", ip_id, True).success
    assert reg.is_active(ip_id).value is True


def test_existence_checked_before_ownership(reg):
    """A stranger poking a missing id sees NOT_FOUND, not NOT_AUTHORIZED."""
    _register(reg)
    assert reg.set_status("mallory", 7, False).error is NOT_FOUND
    assert reg.transfer("mallory", 7, "mallory").error is NOT_FOUND


def test_empty_new_owner_rejected(reg):
    ip_id = _register(reg)
    with pytest.raises(ValueError):
        reg.transfer("alice", ip_id, "")
    assert reg.get_info(ip_id).value.owner == "alice"


def test_patent_scenario(reg):
    ip_id = reg.register("A", "Patent X", "...", 1893456000000).value
    assert ip_id == 1
    assert reg.is_active(1).value is True
    assert reg.set_status("B", 1, False).error is NOT_AUTHORIZED
    assert reg.set_status("A", 1, False).success
    assert reg.is_active(1).value is False
    assert reg.transfer("A", 1, "C").success
    assert reg.get_info(1).value.owner == "C"


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def test_find_by_owner_and_status(reg):
    a1 = _register(reg, owner="alice")
    b1 = _register(reg, owner="bob")
    a2 = _register(reg, owner="alice")
    reg.set_status("alice", a2, False)

    assert [r.id for r in reg.find_by_owner("alice")] == [a1, a2]
    assert [r.id for r in reg.find_by_status(True)] == [a1, b1]
    assert [r.id for r in reg.find_by_status(False)] == [a2]
    assert [r.id for r in reg] == [a1, b1, a2]


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------
def test_concurrent_registrations_get_distinct_ids(reg):
    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = list(pool.map(lambda i: _register(reg, title=f"T{i}"), range(100)))
    assert sorted(ids) == list(range(1, 101))
    assert len(reg) == 100


def test_concurrent_transfers_only_one_wins(reg):
    """Many strangers racing the owner: exactly the owner's transfer lands."""
    ip_id = _register(reg)

    def attempt(i):
        caller = "alice" if i == 0 else f"thief{i}"
        return reg.transfer(caller, ip_id, f"new{i}")

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(attempt, range(32)))
    assert sum(o.success for o in outcomes) == 1
    assert reg.get_info(ip_id).value.owner == "new0"


def test_concurrent_owner_chain_never_double_spends(reg):
    """
    Every caller tries to transfer away from "alice".  Once one succeeds
    alice is no longer owner, so every other attempt must fail.
    """
    ip_id = _register(reg)
    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(lambda i: reg.transfer("alice", ip_id, f"heir{i}"), range(32)))
    winners = [i for i, o in enumerate(outcomes) if o.success]
    assert len(winners) == 1
    assert reg.get_info(ip_id).value.owner == f"heir{winners[0]}"
