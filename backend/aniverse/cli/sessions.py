"""Flask CLI commands for inspecting and revoking refresh sessions."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from aniverse.core.security import get_token_service
from aniverse.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork

LOGGER = logging.getLogger(__name__)


def _resolve_user_id(email: str) -> int:
    with SQLAlchemyReadOnlyUnitOfWork() as uow:
        user = uow.users.get_by_email(email)
        if user is None:
            raise click.ClickException(f"No user with email {email!r}.")
        return int(user.id)


@click.group("sessions")
def sessions_cli() -> None:
    """Refresh-session administration."""


@sessions_cli.command("revoke")
@click.argument("email")
@with_appcontext
def revoke_command(email: str) -> None:
    """Delete the user's refresh record, forcing a new login on every device."""
    user_id = _resolve_user_id(email)
    removed = get_token_service().revoke_user(user_id)
    LOGGER.info("session revoked from CLI", extra={"event": "cli.sessions_revoke", "user_id": user_id})
    click.echo(f"{email}: {'session revoked' if removed else 'no live session'}")


@sessions_cli.command("show")
@click.argument("email")
@with_appcontext
def show_command(email: str) -> None:
    """Report whether the user currently holds a live refresh session."""
    user_id = _resolve_user_id(email)
    live = get_token_service().has_live_session(user_id)
    click.echo(f"{email}: {'live session' if live else 'no live session'}")
