from __future__ import annotations

import logging

from flask import Flask, jsonify

from registrar import config
from registrar.activity import ActivityLog, MongoActivityLog, NullActivityLog
from registrar.colors import RandomHslColor
from registrar.db import EnrollmentStore, MongoEnrollmentStore
from registrar.engine import EnrollmentEngine
from registrar.routes import EXTENSION_KEY, enrollment_bp
from registrar.service import EnrollmentService

logger = logging.getLogger(__name__)


def create_app(
    store: EnrollmentStore | None = None,
    activity_log: ActivityLog | None = None,
    engine: EnrollmentEngine | None = None,
) -> Flask:
    """Build the Flask application around an enrollment service.

    Without arguments the service talks to MongoDB using the settings from
    ``backend/.env``; tests pass in-memory collaborators instead.
    """

    app = Flask(__name__)
    app.secret_key = config.SECRET_KEY

    if activity_log is None:
        activity_log = MongoActivityLog() if config.ACTIVITY_LOG_ENABLED else NullActivityLog()

    app.extensions[EXTENSION_KEY] = EnrollmentService(
        store=store if store is not None else MongoEnrollmentStore(),
        engine=engine or EnrollmentEngine(color_assigner=RandomHslColor()),
        activity_log=activity_log,
    )
    app.register_blueprint(enrollment_bp)

    @app.get("/api/health")
    def health():
        return jsonify({"ok": True})

    return app


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Starting enrollment API")
    app.run(debug=True)
