"""
User account commands.

Usage:
    userkit users create --email a@b.co --firstname A --lastname B \\
        --middlename C --fullname "A B C" --username ab --phone-number +14155550000
    userkit users get 5f0c1c8e-3f3a-4a53-9d9c-1f2b3c4d5e6f
    userkit users find --email a@b.co

Results are printed as JSON using the external (camelCase) field names.
"""

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import click
from loguru import logger

from ...exceptions import StorageUnavailable, UserkitError, ValidationFailed
from ...models.entities.user import UserGender, UserInformation, UserModel
from ...services.postgres import PostgresService
from ...services.user_service import UserService

T = TypeVar("T")


def run_with_service(action: Callable[[UserService], Awaitable[T]]) -> T:
    """Open the pool, run one service call, close the pool, report failures."""

    async def _run() -> T:
        async with PostgresService() as db:
            return await action(UserService(db))

    try:
        return asyncio.run(_run())
    except ValidationFailed as e:
        click.secho("✗ Invalid input:", fg="red")
        for field, violations in sorted(e.violations.items()):
            for violation in violations:
                click.secho(f"  {field}: {violation.message}", fg="red")
        raise click.Abort()
    except StorageUnavailable as e:
        logger.error(f"Database unavailable: {e}")
        click.secho(f"✗ Database unavailable: {e}", fg="red")
        raise click.Abort()
    except UserkitError as e:
        click.secho(f"✗ {e}", fg="red")
        raise click.Abort()


def echo_user(user: UserModel) -> None:
    click.echo(json.dumps(user.to_public_dict(), indent=2))


@click.command("create")
@click.option("--email", required=True, help="Email address (unique)")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Password (prompted if omitted)",
)
@click.option("--firstname", help="First name")
@click.option("--lastname", help="Last name")
@click.option("--middlename", help="Middle name")
@click.option("--fullname", help="Full display name")
@click.option("--username", help="Username")
@click.option("--phone-number", help="Phone number in E.164 form (+14155550000)")
@click.option("--avatar", help="Avatar URL")
@click.option(
    "--gender",
    type=click.Choice([g.value for g in UserGender]),
    default=None,
    help="Gender (defaults to unspecified)",
)
@click.option(
    "--date-of-birth",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Date of birth (YYYY-MM-DD)",
)
def create_command(**options: Any):
    """Register a new user."""
    if options["date_of_birth"] is not None:
        options["date_of_birth"] = options["date_of_birth"].date()
    info = UserInformation(**{k: v for k, v in options.items() if v is not None})

    user = run_with_service(lambda service: service.register(info))
    click.secho(f"✓ Created user {user.id}", fg="green", err=True)
    echo_user(user)


@click.command("get")
@click.argument("user_id")
def get_command(user_id: str):
    """Show a user by id."""
    echo_user(run_with_service(lambda service: service.get_user(user_id)))


@click.command("find")
@click.option("--email", default=None, help="Match on email")
@click.option("--username", default=None, help="Match on username")
@click.option("--phone-number", default=None, help="Match on phone number")
def find_command(email: str | None, username: str | None, phone_number: str | None):
    """Find a user matching every given field."""
    fields = {
        key: value
        for key, value in {
            "email": email,
            "username": username,
            "phone_number": phone_number,
        }.items()
        if value is not None
    }
    if not fields:
        click.secho("Error: give at least one of --email, --username, --phone-number", fg="red")
        raise click.Abort()

    echo_user(run_with_service(lambda service: service.find_user(fields)))


def register_commands(users_group):
    """Register all user commands."""
    users_group.add_command(create_command)
    users_group.add_command(get_command)
    users_group.add_command(find_command)
