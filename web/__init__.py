"""Flask application factory for the BLITZ 45 Dias dashboard."""

import logging

from dotenv import load_dotenv
load_dotenv()  # Load .env file if present (already gitignored)

from flask import Flask, jsonify, render_template, request
from flask_wtf.csrf import CSRFProtect

from config import settings

csrf = CSRFProtect()

VERSION = "0.1.0"


def create_app(test_config=None):
    """Create and configure the Flask application."""
    app = Flask(
        __name__,
        template_folder="templates",
        static_folder="static",
    )
    app.config["SECRET_KEY"] = settings.FLASK_SECRET_KEY
    app.config["WTF_CSRF_TIME_LIMIT"] = 3600
    app.config["BLITZ_STORAGE_PATH"] = str(settings.STORAGE_PATH)
    app.config["BLITZ_STORAGE_KEY"] = settings.STORAGE_KEY
    app.config["BLITZ_STALENESS_DAYS"] = settings.STALENESS_THRESHOLD_DAYS
    app.config["BLITZ_CRITICAL_DAYS"] = settings.CRITICAL_THRESHOLD_DAYS
    app.config["BLITZ_URGENCY_MODE"] = settings.URGENCY_MODE
    app.config["BLITZ_CLOCK"] = None
    app.config["NOTICE_TIMEOUT_MS"] = settings.NOTICE_TIMEOUT_MS
    if test_config:
        app.config.update(test_config)

    if not app.debug and not app.testing:
        logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)

    csrf.init_app(app)

    from web.routes.registration import bp as registration_bp
    from web.routes.report import bp as report_bp
    from web.routes.api import bp as api_bp

    app.register_blueprint(registration_bp)
    app.register_blueprint(report_bp, url_prefix="/relatorio")
    app.register_blueprint(api_bp, url_prefix="/api/v1")
    csrf.exempt(api_bp)

    @app.errorhandler(404)
    def not_found(e):
        if request.path.startswith("/api/"):
            return jsonify({"error": "Not found"}), 404
        return render_template("errors/404.html"), 404

    @app.errorhandler(500)
    def server_error(e):
        if request.path.startswith("/api/"):
            return jsonify({"error": "Internal server error"}), 500
        return render_template("errors/500.html"), 500

    @app.route("/health")
    def health_check():
        return jsonify({"status": "healthy", "version": VERSION}), 200

    @app.context_processor
    def inject_settings():
        return {
            "staleness_days": app.config["BLITZ_STALENESS_DAYS"],
            "notice_timeout_ms": app.config["NOTICE_TIMEOUT_MS"],
        }

    return app
