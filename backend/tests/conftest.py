"""Pytest fixtures for the task manager API.

Every test gets a fresh schema on an in-memory SQLite database, so rows
written through the API, the services or the factories never leak between
cases.
"""

from __future__ import annotations

import os

import pytest
from taskmanager.core.config import TestingConfig
from taskmanager.core.extensions import db as _db  # Flask-SQLAlchemy instance
from taskmanager.factory import create_app  # application factory under test


class TestConfig(TestingConfig):
    """Testing configuration pinned to in-memory SQLite.

    Notes
    -----
    - Secrets are fixed so tokens minted in tests verify deterministically.
    - Rate limiting is disabled by :class:`TestingConfig`.
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_ACCESS_EXPIRES = "15m"
    JWT_REFRESH_EXPIRES = "7d"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestConfig` applied and no
        instance-folder overrides.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    return create_app(TestConfig, instance_config_filename=None)


@pytest.fixture()
def db(app):
    """Create every table inside an application context and drop them afterwards.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def session(db):
    """Flask-scoped session of the active test context."""
    return db.session


@pytest.fixture()
def client(app, db):
    """Flask test client sharing the per-test schema."""
    return app.test_client()


@pytest.fixture()
def runner(app, db):
    """Click runner for ``flask`` commands."""
    return app.test_cli_runner()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to the per-test session -------------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper when the test uses the database."""
    from tests.factories import SQLAlchemySession

    if "db" not in request.fixturenames:
        SQLAlchemySession.set(None)
        yield
        return
    db = request.getfixturevalue("db")
    SQLAlchemySession.set(db.session)
    yield
    SQLAlchemySession.set(None)


# -- Auth helpers ---------------------------------------------------------------
@pytest.fixture()
def api(client):
    """:class:`tests.helpers.api.ApiClient` wrapping the test client."""
    from tests.helpers.api import ApiClient

    return ApiClient(client)
