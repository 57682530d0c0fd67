#!/usr/bin/env python3
"""Upgrade the invitation schema.

Usage:
    python scripts/run_migrations.py            # upgrade to head
    python scripts/run_migrations.py 3c1f7a9e2b40
    python scripts/run_migrations.py --sql      # print SQL, touch nothing

Works from any directory: alembic.ini is resolved from the project root and
the database URL always comes from Settings (DATABASE__URL).
"""

import argparse
import sys
from pathlib import Path

import logfire
from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory

from steno.config import Settings
from steno.util.logging import setup_logging
from steno.util.observability import configure_logfire

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def build_alembic_config() -> Config:
    """Alembic config pinned to this checkout."""
    config = Config(str(PROJECT_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    # Logging is already set up by setup_logging
    config.attributes["configure_logger"] = False
    return config


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("revision", nargs="?", default="head")
    parser.add_argument(
        "--sql", action="store_true", help="Emit SQL instead of running it"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Upgrade the database and report the revision reached."""
    args = parse_args(sys.argv[1:] if argv is None else argv)
    settings = Settings()

    setup_logging(settings)
    configure_logfire(settings)

    config = build_alembic_config()
    head = ScriptDirectory.from_config(config).get_current_head()

    with logfire.span(
        "run_migrations", target=args.revision, head=head, offline=args.sql
    ):
        try:
            command.upgrade(config, args.revision, sql=args.sql)
        except Exception as e:
            logfire.error(
                "Schema upgrade failed",
                target=args.revision,
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # The container must not start against a half-migrated schema
            raise

    reached = head if args.revision == "head" else args.revision
    logfire.info("Schema upgraded", revision=reached, environment=settings.environment)
    return 0


if __name__ == "__main__":
    sys.exit(main())
