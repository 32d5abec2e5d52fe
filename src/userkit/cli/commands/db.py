"""
Database connectivity commands.

Usage:
    userkit db ping      # Acquire a pooled connection and run SELECT 1
"""

import asyncio

import click
from loguru import logger

from ...exceptions import StorageUnavailable
from ...services.postgres import PostgresService


async def _ping() -> tuple[bool, dict[str, int]]:
    async with PostgresService() as db:
        return await db.health_check(), db.get_pool_status()


@click.command("ping")
def ping():
    """Check that the configured PostgreSQL instance is reachable."""
    try:
        healthy, pool_status = asyncio.run(_ping())
    except StorageUnavailable as e:
        click.secho(f"✗ Database unavailable: {e}", fg="red")
        raise click.Abort()

    if not healthy:
        click.secho("✗ Database health check failed", fg="red")
        raise click.Abort()

    logger.debug(f"Pool status: {pool_status}")
    click.secho(
        f"✓ Database reachable (pool {pool_status['size']}/{pool_status['max_size']})",
        fg="green",
    )


def register_commands(db_group):
    """Register all db commands."""
    db_group.add_command(ping)
