"""
ipreg
=====

A minimal ownership‑controlled registry of intellectual‑property claims.

Import structure
----------------
`import ipreg` is intentionally cheap: nothing is imported by default.
The database layer (*sqlmodel*) is only loaded when you access
:pymod:`ipreg.db` or :pymod:`ipreg.registry_db`, and *pydantic* only
with :pymod:`ipreg.dispatch`.

Sub‑modules
~~~~~~~~~~~
- :pymod:`ipreg.models`       – ``IPRecord`` dataclass, ``Outcome`` result, error kinds
- :pymod:`ipreg.lifecycle`    – ownership guard and owner‑gated fields
- :pymod:`ipreg.registry`     – ``IPRegistry`` in‑memory store
- :pymod:`ipreg.registry_db`  – ``DBRegistry`` SQLite‑backed store
- :pymod:`ipreg.dispatch`     – wire‑name operation dispatch
- :pymod:`ipreg.cli`          – ``ipreg`` command line

Quick start
-----------
>>> from ipreg.registry import IPRegistry
>>> reg = IPRegistry()
>>> ip_id = reg.register("alice", "Patent X", "A better widget", 1893456000000).value
>>> reg.transfer("alice", ip_id, "bob").success
True
>>> reg.get_info(ip_id).value.owner
'bob'

"""

__all__ = [
    "models",
    "lifecycle",
    "registry",
    "registry_db",
    "dispatch",
]

__version__ = "0.1.0"
