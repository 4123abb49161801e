"""Provision a binding on a configured server and print its credentials."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pgbind.config import CONFIG_FILE, load_config
from pgbind.errors import BindingError
from pgbind.service import BindingService

REDACTED = "**********"


def render(payload: dict[str, object], *, show_secret: bool) -> str:
    if not show_secret:
        payload = dict(payload, password=REDACTED, uri=REDACTED, jdbcUrl=REDACTED)
    return json.dumps(payload, indent=2, sort_keys=True)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("server", help="Server name from the config file")
    parser.add_argument("database", help="Database (and database role) to bind to")
    parser.add_argument("--show-secret", action="store_true", help="Print the password and connection strings")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    config = load_config()
    logging.basicConfig(level=config.log_level)
    if not config.servers:
        print(f"No servers configured in {CONFIG_FILE}.")
        return 1
    service = BindingService(config)
    try:
        credentials = asyncio.run(service.bind(args.server, args.database))
    except ValueError as exc:
        print(str(exc))
        print("Configured servers: " + ", ".join(server.name for server in service.servers))
        return 1
    except BindingError as exc:
        print(f"Binding failed during {exc.step.value}: {exc}")
        if exc.role_may_exist:
            print(f"Role '{exc.role_name}' may still exist on the server; verify before retrying.")
        return 1
    print(render(credentials.to_payload(), show_secret=args.show_secret))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
