"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from videotube.api.deps import api_response, timing
from videotube.core.extensions import db
from videotube.schemas import HealthSchema

bp = Blueprint("health", __name__)

health_schema = HealthSchema()


@bp.get("/health")
@timing
def healthcheck():
    """Report process and database liveness."""
    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"
    return api_response(health_schema.dump({"status": "ok", "database": db_status}), "OK")
