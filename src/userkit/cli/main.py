"""
userkit CLI entry point.

Usage:
    userkit users create --email a@b.co --firstname A ...
    userkit users get <id>
    userkit users find --email a@b.co
    userkit db ping
"""

import sys

import click
from loguru import logger

from ..settings import settings


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool):
    """userkit - user account management CLI."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else settings.log_level.upper())


@cli.group()
def users():
    """User account operations (create, get, find)."""
    pass


@cli.group()
def db():
    """Database operations."""
    pass


# Register commands
from .commands.db import register_commands as register_db_commands
from .commands.users import register_commands as register_user_commands

register_user_commands(users)
register_db_commands(db)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
