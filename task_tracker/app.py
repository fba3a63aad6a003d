import os

from flask import Flask, jsonify
from flask_cors import CORS


def create_app(config_overrides=None, ai_client=None):
    """Build the Task Tracker API.

    ``config_overrides`` is applied on top of ``task_tracker.config.Config``.
    ``ai_client`` replaces the lazily built OpenAI-compatible client; tests
    pass a fake here.
    """
    app = Flask(__name__)
    app.config.from_object("task_tracker.config.Config")
    if config_overrides:
        app.config.update(config_overrides)

    from task_tracker.utils.logging_setup import setup_logging

    setup_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Core extensions
    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})

    from task_tracker.services.ai_client import EXTENSION_KEY
    from task_tracker.utils.db import get_db_status, init_app as init_db

    init_db(app)
    if ai_client is not None:
        app.extensions[EXTENSION_KEY] = ai_client

    if not app.config.get("AI_API_KEY") and ai_client is None:
        app.logger.warning("AI_API_KEY is not set; /api/enhance and /api/transcribe will fail.")

    # Register blueprints
    from task_tracker.routes.ai_routes import ai_bp
    from task_tracker.routes.export_routes import exports_bp
    from task_tracker.routes.task_routes import tasks_bp

    app.register_blueprint(tasks_bp, url_prefix="/api/tasks")
    app.register_blueprint(exports_bp, url_prefix="/api/tasks/export")
    app.register_blueprint(ai_bp, url_prefix="/api")

    @app.get("/api/health")
    def health():
        return jsonify(status="ok", service="Task Tracker API", database=get_db_status()), 200

    @app.errorhandler(404)
    def not_found(_):
        return jsonify(error="Not Found"), 404

    @app.errorhandler(405)
    def method_not_allowed(_):
        return jsonify(error="Method Not Allowed"), 405

    @app.errorhandler(500)
    def server_error(_):
        return jsonify(error="Internal Server Error"), 500

    return app


if __name__ == "__main__":
    # Direct run support: python -m task_tracker.app
    create_app().run(
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "5000")),
        debug=os.environ.get("FLASK_DEBUG", "1") == "1",
    )
