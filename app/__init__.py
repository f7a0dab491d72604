from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from app.config import Config
from app.db import db
from app.errors import ApiError, InternalError, error_response
from app.extensions.extensions import jwt, ma
from app.models import post_model, user_model  # noqa: F401
from app.routes.main_routes import main_bp
from app.routes.post_routes import post_bp
from app.routes.user_routes import user_bp
from app.services.credential_service import require_signing_secret


def _register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return error_response(error)

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if error.code is None or error.code < 400:
            return error
        return jsonify({"error": error.description, "code": error.name.replace(" ", "")}), error.code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        app.logger.exception("Database error")
        return error_response(InternalError())

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        app.logger.exception("Unhandled error")
        return error_response(InternalError())


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    require_signing_secret(app.config)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    db.init_app(app)
    jwt.init_app(app)
    ma.init_app(app)

    app.register_blueprint(main_bp)
    app.register_blueprint(user_bp, url_prefix="/api/users")
    app.register_blueprint(post_bp, url_prefix="/api")

    _register_error_handlers(app)

    with app.app_context():
        db.create_all()

    return app
