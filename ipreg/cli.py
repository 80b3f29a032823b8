"""
ipreg.cli
=========

Command line over the SQLite‑backed registry.

Examples
--------
$ ipreg init-db
$ ipreg --as alice register "Patent X" "A better widget" 1893456000000
$ ipreg info 1
$ ipreg --as alice transfer 1 bob
$ ipreg --as bob status 1 false
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import textwrap
from typing import List, Optional

from ipreg.models import ErrorKind, IPRecord, Outcome, record_as_dict
from ipreg.settings import settings

# exit status per failure kind
EXIT_CODES = {
    ErrorKind.NOT_FOUND: 1,
    ErrorKind.NOT_AUTHORIZED: 2,
}


def _bool(text: str) -> bool:
    lowered = text.lower()
    if lowered in ("true", "1", "yes", "on"):
        return True
    if lowered in ("false", "0", "no", "off"):
        return False
    raise argparse.ArgumentTypeError(f"expected true/false, got {text!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ipreg",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            IP registry utilities
            ---------------------
            Mutating commands act on behalf of --as (or $IPREG_PRINCIPAL).
            """
        ),
    )
    parser.add_argument("--db", help="SQLite database file (default: $IPREG_DB_FILE)")
    parser.add_argument("--as", dest="principal", default=settings.principal,
                        help="caller principal for mutating commands")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create tables")

    p = sub.add_parser("register", help="register a new IP claim")
    p.add_argument("title")
    p.add_argument("description")
    p.add_argument("expiration", type=int, help="expiration timestamp (opaque)")

    p = sub.add_parser("info", help="show a record")
    p.add_argument("id", type=int)

    p = sub.add_parser("active", help="print whether a record is active")
    p.add_argument("id", type=int)

    p = sub.add_parser("transfer", help="hand a record to a new owner")
    p.add_argument("id", type=int)
    p.add_argument("new_owner")

    p = sub.add_parser("status", help="set a record's active flag")
    p.add_argument("id", type=int)
    p.add_argument("is_active", type=_bool)

    p = sub.add_parser("list", help="list records")
    p.add_argument("--owner", help="only records owned by this principal")

    sub.add_parser("serve", help="run the HTTP API with uvicorn")
    return parser


def _emit(outcome: Outcome) -> int:
    if not outcome.success:
        print(f"error: {outcome.error}", file=sys.stderr)
        return EXIT_CODES[outcome.error]
    value = outcome.value
    if isinstance(value, IPRecord):
        value = record_as_dict(value)
    print(json.dumps(value))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("api.main:app", host=settings.api_host, port=settings.api_port,
                    reload=settings.api_debug)
        return 0

    from ipreg.db import make_engine
    from ipreg.registry_db import DBRegistry

    engine = make_engine(f"sqlite:///{args.db}" if args.db else None)
    registry = DBRegistry(engine)

    if args.command == "init-db":
        print("✅ ipreg schema initialised")
        return 0

    if args.command in ("register", "transfer", "status") and not args.principal:
        print("error: --as PRINCIPAL (or IPREG_PRINCIPAL) is required", file=sys.stderr)
        return 3

    if args.command == "register":
        return _emit(registry.register(args.principal, args.title, args.description, args.expiration))
    if args.command == "info":
        return _emit(registry.get_info(args.id))
    if args.command == "active":
        return _emit(registry.is_active(args.id))
    if args.command == "transfer":
        return _emit(registry.transfer(args.principal, args.id, args.new_owner))
    if args.command == "status":
        return _emit(registry.set_status(args.principal, args.id, args.is_active))

    records = list(registry) if args.owner is None else registry.find_by_owner(args.owner)
    print(json.dumps([record_as_dict(r) for r in records]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
