"""Command line interface for depot migrations.

Usage:
    depot upgrade [-d DB] [-m DIR] [VERSION]
    depot downgrade [-d DB] [-m DIR] VERSION
    depot version [-d DB]
    depot list [-m DIR]
    depot create NAME [-m DIR]

Defaults come from DEPOT_* environment variables (see depot.config). Without
a migrations directory the migrations shipped with depot are used.
"""

import argparse
import logging
import sys

from . import migrate
from .config import Settings
from .errors import Error

logger = logging.getLogger(__name__)


def setup_logging(level) -> None:
    """Configure logging for CLI."""
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _migrations(args: argparse.Namespace) -> str:
    return args.migrations or migrate.STATIONS_MIGRATIONS


def _print_version(db_url: str) -> None:
    version = migrate.get_version(db_url)
    if version is None:
        print(f"{db_url} is not version controlled")
    else:
        print(f"{db_url} is at version {version}")


def cmd_upgrade(args: argparse.Namespace) -> int:
    """Apply migrations up to a version, or all of them."""
    migrate.upgrade(args.database, _migrations(args), args.version)
    _print_version(args.database)
    return 0


def cmd_downgrade(args: argparse.Namespace) -> int:
    """Revert migrations down to a version."""
    migrate.downgrade(args.database, _migrations(args), args.version)
    _print_version(args.database)
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    _print_version(args.database)
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """List known migrations in version order."""
    migrations = migrate.load_migrations(_migrations(args))
    for migration in sorted(migrations, key=lambda m: m.get_version()):
        print(f"{migration.get_version()}  {migration.name}")
    return 0


def cmd_create(args: argparse.Namespace) -> int:
    path = migrate.create_migration(args.name, args.migrations)
    print(f"Created {path}")
    return 0


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="depot",
        description="SQLite schema migrations",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_database(p):
        p.add_argument(
            "-d",
            "--database",
            default=settings.database_url,
            help="SQLite database path (default: %(default)s)",
        )

    def add_migrations(p):
        p.add_argument(
            "-m",
            "--migrations",
            default=settings.migrations_dir,
            help="Migrations directory",
        )

    upgrade_parser = subparsers.add_parser("upgrade", help="Apply migrations")
    add_database(upgrade_parser)
    add_migrations(upgrade_parser)
    upgrade_parser.add_argument(
        "version", nargs="?", default=None, help="Target version (default: latest)"
    )
    upgrade_parser.set_defaults(func=cmd_upgrade)

    downgrade_parser = subparsers.add_parser("downgrade", help="Revert migrations")
    add_database(downgrade_parser)
    add_migrations(downgrade_parser)
    downgrade_parser.add_argument("version", help="Target version, 0 reverts all")
    downgrade_parser.set_defaults(func=cmd_downgrade)

    version_parser = subparsers.add_parser("version", help="Show database version")
    add_database(version_parser)
    version_parser.set_defaults(func=cmd_version)

    list_parser = subparsers.add_parser("list", help="List migrations")
    add_migrations(list_parser)
    list_parser.set_defaults(func=cmd_list)

    create_parser = subparsers.add_parser("create", help="Create a migration")
    create_parser.add_argument("name", help="Migration name")
    add_migrations(create_parser)
    create_parser.set_defaults(func=cmd_create)

    return parser


def main(argv=None) -> int:
    settings = Settings()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else settings.log_level)

    try:
        return args.func(args)
    except Error as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"depot: {e}", file=sys.stderr)
        return 1
