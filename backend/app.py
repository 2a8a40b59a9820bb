from __future__ import annotations

from flask import Flask, jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from .config import load_settings
from .routes.health import bp as health_bp
from .routes.lottery import bp as lottery_bp
from .routes.weather import bp as weather_bp


def create_app() -> Flask:
    settings = load_settings()
    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.flask.secret_key
    app.json.ensure_ascii = False

    app.register_blueprint(health_bp)
    app.register_blueprint(lottery_bp, url_prefix="/api/lottery")
    app.register_blueprint(weather_bp, url_prefix="/api/weather")

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"error": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        return jsonify({"error": str(exc)}), 500

    return app


if __name__ == "__main__":
    create_app().run(debug=load_settings().flask.debug)
