"""Flask CLI commands to create or reset the database schema."""

from __future__ import annotations

import os

import click
from flask.cli import with_appcontext

from aniverse.core.config import ENV_VAR
from aniverse.core.extensions import db


def _ensure_non_production() -> None:
    """Abort destructive commands when running in production."""
    app_env = os.getenv(ENV_VAR, "").lower()
    if app_env == "production":
        raise click.UsageError("'flask schema reset' is restricted to non-production environments.")


@click.group("schema")
def schema_cli() -> None:
    """Schema management for environments without migrations."""


@schema_cli.command("create")
@with_appcontext
def create_command() -> None:
    """Create all missing tables."""
    db.create_all()
    click.echo("Schema created.")


@schema_cli.command("reset")
@click.option("--yes", is_flag=True, help="Skip the destructive confirmation prompt.")
@with_appcontext
def reset_command(yes: bool) -> None:
    """Drop and recreate every table."""
    _ensure_non_production()
    if not yes:
        click.confirm("This will DROP all tables. Continue?", abort=True)
    db.drop_all()
    db.create_all()
    click.echo("Schema reset.")
