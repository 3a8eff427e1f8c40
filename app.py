"""Application factory."""

import json
import os
import traceback
import uuid

from flask import Flask, g, jsonify, request, send_from_directory
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException, NotFound

from config import Config
from models import db
from routes.admin import admin_bp
from routes.auth import auth_bp
from routes.cart import cart_bp
from routes.customers import customers_bp
from routes.fabrics import fabrics_bp
from routes.posts import posts_bp
from routes.settings import settings_bp
from utils.errors import ApiError, Unauthenticated

migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    _register_jwt_callbacks()

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Rate limiting
    storage_uri = app.config.get("RATELIMIT_STORAGE_URI", "memory://")
    headers_enabled = app.config.get("RATELIMIT_HEADERS_ENABLED", True)
    key_prefix = app.config.get("RATELIMIT_KEY_PREFIX") or str(uuid.uuid4())

    global limiter
    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[lambda: app.config.get("RATE_LIMIT", "60 per minute")],
        storage_uri=storage_uri,
        headers_enabled=headers_enabled,
        key_prefix=key_prefix,
    )
    limiter.init_app(app)
    app.config["RATELIMIT_KEY_PREFIX"] = key_prefix

    # Ensure uploads directory exists for the local storage backend
    upload_dir = app.config.get("UPLOAD_DIR")
    if upload_dir and app.config.get("STORAGE_BACKEND", "local") == "local":
        os.makedirs(upload_dir, exist_ok=True)

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(fabrics_bp, url_prefix="/fabrics")
    app.register_blueprint(posts_bp, url_prefix="/posts")
    app.register_blueprint(cart_bp, url_prefix="/cart")
    app.register_blueprint(customers_bp, url_prefix="/customers")
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(settings_bp, url_prefix="/settings")

    # Health
    @app.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok"})

    @app.route("/uploads/<path:filename>", methods=["GET"])
    def uploaded_file(filename: str):
        if app.config.get("STORAGE_BACKEND", "local") != "local":
            raise NotFound()
        return send_from_directory(os.path.abspath(upload_dir), filename)

    # Errors
    _register_error_handlers(app)

    return app


def _error_payload(error: HTTPException, request_id: str) -> dict:
    payload = {
        "error": getattr(error, "name", "Error"),
        "detail": error.description,
        "request_id": request_id,
    }
    if isinstance(error, ApiError):
        payload["code"] = error.kind
        payload.update(error.extra)
    return payload


def _register_jwt_callbacks() -> None:
    """Render token failures in the same JSON shape as other errors."""

    def _unauthenticated(detail: str):
        error = Unauthenticated(detail)
        request_id = g.get("request_id") or str(uuid.uuid4())
        response = jsonify(_error_payload(error, request_id))
        response.status_code = error.code
        return response

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return _unauthenticated("Not authorized, no token provided.")

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return _unauthenticated("Not authorized, token failed.")

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_payload):
        return _unauthenticated("Not authorized, token expired.")


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():  # pragma: no cover
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):  # pragma: no cover
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        request_id = g.get("request_id") or str(uuid.uuid4())
        response = error.get_response()
        response.data = json.dumps(_error_payload(error, request_id))
        response.content_type = "application/json"
        response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        request_id = g.get("request_id") or str(uuid.uuid4())
        db.session.rollback()
        app.logger.exception("Unhandled application error", exc_info=error)
        payload = {
            "error": "Internal Server Error",
            "code": "Internal",
            "detail": "An unexpected error occurred.",
            "request_id": request_id,
        }
        if app.debug:
            payload["trace"] = traceback.format_exception(error)
        response = jsonify(payload)
        response.status_code = 500
        response.headers.setdefault("X-Request-ID", request_id)
        return response


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
