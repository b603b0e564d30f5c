"""Pytest fixtures wiring the app, an in-memory database and media storage.

Each test gets a fresh schema on an in-memory SQLite database (Flask-SQLAlchemy
keeps a single static connection for ``:memory:``), so committed data never
leaks between cases.
"""

from __future__ import annotations

import os

import pytest
from flask.testing import FlaskClient

from videotube.core.config import TestingConfig
from videotube.core.extensions import db as _db
from videotube.core.extensions import get_token_provider, set_media_storage
from videotube.factory import create_app
from videotube.services import AuthService, AuthTokenConfig
from videotube.services._shared.ports import InMemoryMediaStorage


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestingConfig, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture()
def db(app):
    """Create all tables for one test and drop them afterwards.

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
    """Return the scoped session used by repositories and units of work."""
    return db.session


@pytest.fixture()
def media_storage(app):
    """Install an :class:`InMemoryMediaStorage` for the duration of a test."""
    storage = InMemoryMediaStorage()
    set_media_storage(app, storage)
    yield storage
    set_media_storage(app, None)


@pytest.fixture()
def token_provider(app):
    return get_token_provider(app)


@pytest.fixture()
def auth_service(app, token_provider) -> AuthService:
    """Auth service configured with the testing token lifetimes."""
    return AuthService(
        token_provider=token_provider,
        token_cfg=AuthTokenConfig(
            access_expires=app.config["ACCESS_TOKEN_EXPIRY"],
            refresh_expires=app.config["REFRESH_TOKEN_EXPIRY"],
        ),
    )


@pytest.fixture()
def client(app, db, media_storage) -> FlaskClient:
    """Flask test client with a cookie jar."""
    return app.test_client()


@pytest.fixture()
def api(app, db, media_storage) -> FlaskClient:
    """Flask test client without cookies; tokens travel in headers or bodies."""
    return app.test_client(use_cookies=False)


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to the test session -----------------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the scoped session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
    SQLAlchemySession.set(None)
