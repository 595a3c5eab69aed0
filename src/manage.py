"""Stockroom database management CLI.

Creates or drops the SQL schema of each bounded context.

Usage:
    python src/manage.py setup-db                     # Create all tables
    python src/manage.py drop-db --domain sales       # Drop one context's tables
"""

import argparse
import sys

from shared.db import drop_db, setup_db

DOMAIN_NAMES = ["inventory", "sales"]


def _domains(names=None):
    from inventory.domain import inventory
    from sales.domain import sales

    all_domains = {"inventory": inventory, "sales": sales}
    return {name: all_domains[name] for name in (names or DOMAIN_NAMES)}


def setup_databases(names=None):
    """Create database schemas for the given (or all) contexts."""
    for name, domain in _domains(names).items():
        domain.init()
        print(f"Creating {name} database schema...")
        setup_db(domain)
        print(f"  {name} schema ready.")
    print("Done.")


def drop_databases(names=None):
    """Drop database schemas for the given (or all) contexts."""
    for name, domain in _domains(names).items():
        domain.init()
        print(f"Dropping {name} database schema...")
        drop_db(domain)
        print(f"  {name} schema dropped.")
    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Stockroom database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for command, help_text in (("setup-db", "Create all database tables"), ("drop-db", "Drop all database tables")):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument(
            "--domain",
            choices=DOMAIN_NAMES,
            nargs="*",
            help="Specific context(s) to target (default: all)",
        )

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
