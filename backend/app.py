from __future__ import annotations

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .config import load_settings
from .errors import LottoAnalysisError
from .routes.analysis import bp as analysis_bp
from .routes.health import bp as health_bp
from .routes.scrape import bp as scrape_bp


def create_app() -> Flask:
    settings = load_settings()
    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.flask.secret_key
    # Summary sections are ordered; keep them that way in responses.
    app.json.sort_keys = False

    app.register_blueprint(health_bp)
    app.register_blueprint(scrape_bp)
    app.register_blueprint(analysis_bp, url_prefix="/analyze")

    @app.errorhandler(LottoAnalysisError)
    def handle_domain_error(exc: LottoAnalysisError):
        app.logger.info("%s: %s", type(exc).__name__, exc.message)
        return jsonify({"error": exc.message}), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return exc

    @app.errorhandler(Exception)
    def handle_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        return jsonify({"error": str(exc)}), 500

    return app
