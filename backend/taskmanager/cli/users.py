"""Flask CLI commands for privileged account management."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from taskmanager.models.user import ROLE_ADMIN, User
from taskmanager.uow import SQLAlchemyUnitOfWork

LOGGER = logging.getLogger(__name__)


def _require_user(uow: SQLAlchemyUnitOfWork, email: str) -> User:
    user = uow.users.get_by_email(email)
    if user is None:
        raise click.ClickException(f"No user with email {email.strip().lower()}")
    return user


@click.group("users")
def users_cli() -> None:
    """Manage accounts outside the HTTP API."""


@users_cli.command("create-admin")
@click.argument("email")
@click.option("--name", required=True, help="Display name (2-50 characters).")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Initial password (prompted when omitted).",
)
@with_appcontext
def create_admin(email: str, name: str, password: str) -> None:
    """Create an administrator account."""
    if len(password) < 6:
        raise click.BadParameter("must be at least 6 characters long", param_hint="--password")
    with SQLAlchemyUnitOfWork() as uow:
        if uow.users.exists_by_email(email):
            raise click.ClickException("User already exists with this email")
        try:
            user = uow.users.add(User(name=name, email=email, password=password, role=ROLE_ADMIN))
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc
        user_id = user.id
    LOGGER.info("user.admin_created", extra={"user_id": user_id})
    click.echo(f"Created admin {email.strip().lower()} (id={user_id})")


def _set_active(email: str, active: bool) -> None:
    with SQLAlchemyUnitOfWork() as uow:
        user = _require_user(uow, email)
        uow.users.set_active(user, active)
        user_id = user.id
    state = "activated" if active else "deactivated"
    LOGGER.info("user.%s", state, extra={"user_id": user_id})
    click.echo(f"User {user_id} {state}")


@users_cli.command("deactivate")
@click.argument("email")
@with_appcontext
def deactivate(email: str) -> None:
    """Block every further request of an account (tokens stay issued)."""
    _set_active(email, False)


@users_cli.command("activate")
@click.argument("email")
@with_appcontext
def activate(email: str) -> None:
    _set_active(email, True)


@users_cli.command("promote")
@click.argument("email")
@with_appcontext
def promote(email: str) -> None:
    """Grant the admin role to an existing account."""
    with SQLAlchemyUnitOfWork() as uow:
        user = _require_user(uow, email)
        uow.users.set_role(user, ROLE_ADMIN)
        user_id = user.id
    LOGGER.info("user.promoted", extra={"user_id": user_id})
    click.echo(f"User {user_id} is now an admin")
