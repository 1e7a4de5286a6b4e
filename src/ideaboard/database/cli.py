#!/usr/bin/env python3
"""
ideaboard-migrate: Alembic migrations and connectivity checks for the ideaboard database.
"""

import asyncio
import os
import sys
from collections.abc import Callable
from pathlib import Path

import click

from alembic import command
from alembic.config import Config
from ideaboard import __version__
from ideaboard.logging import configure_logging, get_logger

logger = get_logger(__name__)

# src/ideaboard/database/cli.py -> project root
PROJECT_ROOT = Path(__file__).resolve().parents[3]


def get_alembic_config() -> Config:
    """Load ``alembic.ini`` with ``script_location`` made absolute."""
    alembic_ini = PROJECT_ROOT / "alembic.ini"
    if not alembic_ini.exists():
        raise FileNotFoundError(f"alembic.ini not found at {alembic_ini}")

    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return config


def _run_alembic(action: str, fn: Callable[[Config], None]) -> None:
    try:
        fn(get_alembic_config())
    except Exception as e:
        logger.error("Migration command failed", action=action, error=str(e))
        sys.exit(1)


@click.group()
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
@click.option(
    "--database-url",
    envvar="IDEABOARD_DATABASE_URL",
    default=None,
    help="Database to migrate (default: IDEABOARD_DATABASE_URL or settings)",
)
@click.version_option(version=__version__, prog_name="ideaboard-migrate")
def main(log_level: str, database_url: str | None) -> None:
    """Manage the ideaboard database schema."""
    configure_logging(debug=(log_level == "debug"), log_level=log_level)
    if database_url:
        # alembic/env.py resolves the URL through get_database_url()
        os.environ["IDEABOARD_DATABASE_URL"] = database_url


@main.command()
@click.argument("revision", default="head")
def upgrade(revision: str) -> None:
    """Apply migrations up to REVISION (default: head)."""
    logger.info("Upgrading database", revision=revision)
    _run_alembic("upgrade", lambda cfg: command.upgrade(cfg, revision))
    logger.info("Database upgraded", revision=revision)


@main.command()
@click.argument("revision", default="-1")
def downgrade(revision: str) -> None:
    """Revert migrations down to REVISION (default: one step)."""
    logger.info("Downgrading database", revision=revision)
    _run_alembic("downgrade", lambda cfg: command.downgrade(cfg, revision))
    logger.info("Database downgraded", revision=revision)


@main.command()
@click.option("-m", "--message", required=True, help="Revision message")
@click.option("--autogenerate/--no-autogenerate", default=True, help="Diff against the models")
def revision(message: str, autogenerate: bool) -> None:
    """Create a migration from the current ideaboard models."""
    _run_alembic(
        "revision", lambda cfg: command.revision(cfg, message=message, autogenerate=autogenerate)
    )


@main.command()
def current() -> None:
    """Show the revision the database is at."""
    _run_alembic("current", command.current)


@main.command()
def history() -> None:
    """List known revisions."""
    _run_alembic("history", command.history)


@main.command()
def check() -> None:
    """Verify the database is reachable."""
    from ideaboard.database.connection import (
        dispose_database,
        init_database,
        test_database_connection,
    )

    async def check_connection() -> tuple[bool, str | None]:
        init_database(force_reinit=True)
        try:
            return await test_database_connection()
        finally:
            await dispose_database()

    ok, error = asyncio.run(check_connection())
    if not ok:
        click.echo(f"✗ {error}", err=True)
        sys.exit(1)
    click.echo("✓ Database reachable")


if __name__ == "__main__":
    main()
