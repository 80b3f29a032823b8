#!/usr/bin/env python
"""
Seed database with sample IP claims for testing.

Registers a handful of claims under a few owners, then deactivates and
transfers some of them so the API has a mix of states to show.
"""

import json
from datetime import datetime, timezone

from ipreg.registry_db import DBRegistry


def _ms(year: int, month: int, day: int) -> int:
    return int(datetime(year, month, day, tzinfo=timezone.utc).timestamp() * 1000)


# (owner, title, description, expiration, is_active)
SAMPLE_CLAIMS = [
    ("acme-labs", "Patent X", "Self-tightening widget fastener", _ms(2045, 3, 1), True),
    ("acme-labs", "Acme Wordmark", "Trademark for consumer hardware", _ms(2034, 6, 30), True),
    ("widget-co", "Gear Train Design", "Low-noise planetary gear layout", _ms(2041, 1, 15), True),
    ("widget-co", "Legacy Hinge", "Superseded hinge mechanism", _ms(2020, 12, 31), False),
    ("techstart", "Sensor Firmware", "Copyright on embedded sensor firmware", _ms(2095, 1, 1), True),
]

# Add additional claims from sample_claims.json if available
try:
    with open('sample_claims.json', 'r') as f:
        for item in json.load(f):
            SAMPLE_CLAIMS.append((
                item['owner'],
                item['title'],
                item.get('description', ''),
                int(item['expiration']),
                bool(item.get('is_active', True)),
            ))
except (FileNotFoundError, json.JSONDecodeError):
    # Continue with default sample claims
    pass


def seed_database(registry=None):
    """Register sample claims; return a title → id map of what was created."""
    if registry is None:
        registry = DBRegistry()
    ids = {}
    for owner, title, description, expiration, is_active in SAMPLE_CLAIMS:
        ip_id = registry.register(owner, title, description, expiration).unwrap()
        if not is_active:
            registry.set_status(owner, ip_id, False).unwrap(ip_id)
        ids[title] = ip_id
        print(f"Added: #{ip_id} {title} ({owner}, {'ACTIVE' if is_active else 'INACTIVE'})")

    # one transfer so ownership history is visible
    firmware_id = ids["Sensor Firmware"]
    registry.transfer("techstart", firmware_id, "acme-labs").unwrap(firmware_id)
    print(f"Transferred: #{firmware_id} techstart -> acme-labs")

    print(f"\nAdded {len(SAMPLE_CLAIMS)} claims to the database!")
    return ids


if __name__ == "__main__":
    print("Seeding database with sample IP claims...")
    seed_database()

    print("\nDone! You can now run the API server with:")
    print("ipreg serve   # or: uvicorn api.main:app --reload --port 8001")
