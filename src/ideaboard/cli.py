#!/usr/bin/env python3
"""
Main CLI entry point for the ideaboard backend server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from ideaboard import __version__
from ideaboard.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="ideaboard")
def cli() -> None:
    """ideaboard CLI - run the server and manage users."""
    pass


@cli.command()
@click.option("--host", default=None, help="Host to bind to (default: IDEABOARD_API_HOST)")
@click.option("--port", default=None, type=int, help="Port to bind to (default: IDEABOARD_API_PORT)")
@click.option(
    "--reload/--no-reload",
    default=None,
    help="Auto-reload for development (default: IDEABOARD_API_RELOAD)",
)
@click.option("--workers", default=1, type=int, help="Number of worker processes (default: 1)")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(
    host: str | None, port: int | None, reload: bool | None, workers: int, log_level: str
) -> None:
    """Start the ideaboard API server."""
    from ideaboard.config import settings

    configure_logging(debug=(log_level == "debug"))

    host = host if host is not None else settings.api_host
    port = port if port is not None else settings.api_port
    reload = reload if reload is not None else settings.api_reload

    logger.info(
        "Starting ideaboard API server",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

    # Child processes started by reload/workers read their settings from the environment
    if log_level == "debug":
        os.environ["IDEABOARD_DEBUG"] = "true"
        os.environ["IDEABOARD_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("IDEABOARD_DEBUG", "false")
        os.environ.setdefault("IDEABOARD_LOG_LEVEL", log_level)

    try:
        uvicorn.run(
            "ideaboard.api.app:app",
            host=host,
            port=port,
            reload=reload,
            workers=(workers if not reload else 1),
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.group()
def user() -> None:
    """Manage user accounts."""
    pass


@user.command("provision")
@click.option("--username", required=True, help="Initial username for the account")
@click.option("--email", required=True, help="Email the account will be claimed with")
def provision_user(username: str, email: str) -> None:
    """Create an unclaimed account that can be claimed by registering with its email."""
    from ideaboard.auth.sessions import SessionManager
    from ideaboard.auth.store import SqlCredentialStore
    from ideaboard.auth.tokens import TokenIssuer
    from ideaboard.config import settings
    from ideaboard.database.connection import get_async_session

    configure_logging()

    async def do_provision():
        async with get_async_session() as db:
            sessions = SessionManager(SqlCredentialStore(db), TokenIssuer.from_settings(settings))
            return await sessions.provision_user(username, email)

    try:
        account = asyncio.run(do_provision())
    except Exception as e:
        logger.error("Failed to provision user", error=str(e))
        click.echo(f"✗ Error provisioning user: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Unclaimed account created: {account.id}")
    click.echo(f"  Username: {account.username}")
    click.echo(f"  Email: {account.email}")


@user.command("list")
def list_users() -> None:
    """List all users and whether they have been claimed."""
    from sqlalchemy import select

    from ideaboard.database.connection import get_async_session
    from ideaboard.dbmodels import Users

    configure_logging()

    async def do_list():
        async with get_async_session() as db:
            result = await db.execute(select(Users).order_by(Users.created_at))
            return result.scalars().all()

    try:
        users = asyncio.run(do_list())
    except Exception as e:
        logger.error("Failed to list users", error=str(e))
        click.echo(f"✗ Error listing users: {e}", err=True)
        sys.exit(1)

    if not users:
        click.echo("No users found.")
        return

    click.echo(f"{'ID':<38} {'Username':<24} {'Email':<32} {'Claimed':<8} Admin")
    for account in users:
        click.echo(
            f"{str(account.id):<38} {account.username:<24} {account.email:<32} "
            f"{'yes' if account.is_claimed else 'no':<8} {'yes' if account.is_admin else 'no'}"
        )


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
