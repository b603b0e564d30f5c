"""Global Flask extension instances and service registrations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Flask, current_app
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

from videotube.core.config import ensure_production_secrets

if TYPE_CHECKING:
    from videotube.services._shared.ports import MediaStorage, TokenProvider

# Constraint names must be deterministic for Alembic autogenerate
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)

TOKEN_PROVIDER_KEY = "token_provider"
MEDIA_STORAGE_KEY = "media_storage"


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, the token provider and media storage.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`videotube.models` package so SQLAlchemy metadata is complete
        before Alembic inspects it.

    Raises
    ------
    RuntimeError
        When a production app still carries placeholder token secrets.
    """
    ensure_production_secrets(app.config)

    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from videotube import models as _models  # noqa: F401

    migrate.init_app(app, db)

    from videotube.infra.jwt import PyJWTTokenProvider

    app.extensions[TOKEN_PROVIDER_KEY] = PyJWTTokenProvider.from_config(app.config)

    supabase_url = app.config.get("SUPABASE_URL")
    if not supabase_url:
        app.extensions[MEDIA_STORAGE_KEY] = None
        return

    from videotube.infra.storage import SupabaseMediaStorage

    app.extensions[MEDIA_STORAGE_KEY] = SupabaseMediaStorage.from_config(app.config)


def get_token_provider(app: Flask | None = None) -> TokenProvider:
    """Return the token provider registered on ``app`` (or the current app)."""
    target = app or current_app
    provider = target.extensions.get(TOKEN_PROVIDER_KEY)
    if provider is None:
        raise RuntimeError("Token provider is not initialized. Call init_app() first.")
    return provider


def set_media_storage(app: Flask, storage: MediaStorage | None) -> None:
    """Replace the media storage backend (tests and alternative deployments)."""
    app.extensions[MEDIA_STORAGE_KEY] = storage
