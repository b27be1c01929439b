"""Pytest fixtures building an isolated application per test.

Every test gets its own app bound to a fresh in-memory SQLite database, so
committed rows never leak between cases. Services commit through their own
units of work; a SAVEPOINT wrapper would be undone by the read-only UoW's
rollback, hence the per-test database instead.
"""

from __future__ import annotations

import os

import pytest

from aniverse.core.config import TestingConfig
from aniverse.core.extensions import db as _db
from aniverse.factory import create_app


@pytest.fixture()
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application with :class:`TestingConfig`, tables created and an
        application context pushed for the duration of the test.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestingConfig)
    app.logger.setLevel("WARNING")
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def db(app):
    """Database extension bound to the testing application."""
    return _db


@pytest.fixture()
def session(db):
    """Flask-scoped SQLAlchemy session used by services and factories alike."""
    return db.session


@pytest.fixture()
def client(app):
    """Flask test client; its cookie jar carries the refresh cookie."""
    return app.test_client()


@pytest.fixture()
def cli_runner(app):
    return app.test_cli_runner()


@pytest.fixture()
def token_service(app):
    """The application's token service (SQL refresh store under tests)."""
    return app.extensions["token_service"]


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to the application session ---------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper when the test uses the database."""
    from tests.factories import SQLAlchemySession

    if "app" not in request.fixturenames:
        SQLAlchemySession.set(None)
        yield
        return
    session = request.getfixturevalue("session")
    SQLAlchemySession.set(session)
    yield
    SQLAlchemySession.set(None)
