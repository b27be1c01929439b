"""Command-line interface registration for the Flask application."""

from __future__ import annotations

from flask import Flask

from .schema import schema_cli
from .sessions import sessions_cli


def init_app(app: Flask) -> None:
    """Register the ``sessions`` and ``schema`` command groups on ``app.cli``."""
    app.cli.add_command(sessions_cli)
    app.cli.add_command(schema_cli)
