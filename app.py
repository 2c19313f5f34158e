# app.py
from flask import Flask, jsonify, redirect, url_for
from flask_migrate import Migrate
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from config import Config
from extensions import db, login_manager
from api.utils.errors import (
    PERMISSION_DENIED_MESSAGE,
    error_response,
    format_error,
    is_permission_denied,
)


def create_app(config_overrides: dict | None = None) -> Flask:
    """
    App factory.
    - Loads configuration
    - Initialises extensions
    - Registers blueprints and JSON error handlers
    - Wires migrations
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    # Extensions
    db.init_app(app)
    login_manager.init_app(app)

    # User loader for Flask-Login
    from models import User

    @login_manager.user_loader
    def load_user(user_id: str):
        try:
            return db.session.get(User, int(user_id))
        except (TypeError, ValueError):
            return None

    @login_manager.unauthorized_handler
    def unauthorized():
        return error_response("Sign in to continue.", 401, "signed_out")

    # API blueprints
    from api import api_bp
    from api.auth import auth_bp

    app.register_blueprint(api_bp)
    app.register_blueprint(auth_bp)

    # Migrations (Alembic/Flask-Migrate)
    Migrate(app, db)

    _register_error_handlers(app)

    @app.get("/")
    def home():
        """
        Entry point: the client always starts from the session state, which
        says whether to show the login screen or which view to land on.
        """
        return redirect(url_for("api.session_state"))

    @app.get("/health")
    def health():
        return jsonify({"status": "ok", "school": app.config.get("SCHOOL_NAME")})

    return app


def _register_error_handlers(app: Flask) -> None:

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        if exc.code == 403:
            # A bare abort(403) carries werkzeug's stock text
            custom = exc.description and exc.description != type(exc).description
            return error_response(exc.description if custom else PERMISSION_DENIED_MESSAGE, 403, "permission_denied")
        return error_response(exc.description or exc.name, exc.code or 500, exc.name.lower().replace(" ", "_"))

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(exc: SQLAlchemyError):
        db.session.rollback()
        if is_permission_denied(exc):
            app.logger.warning("Database refused the statement: %s", format_error(exc))
            return error_response(PERMISSION_DENIED_MESSAGE, 403, "permission_denied")
        app.logger.exception("Database error: %s", exc)
        return error_response(f"Database error: {format_error(exc)}", 500, "database_error")

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        db.session.rollback()
        app.logger.exception("Unexpected error: %s", exc)
        return error_response(f"Unexpected error: {format_error(exc)}", 500, "unexpected_error")


app = create_app()


if __name__ == "__main__":
    app.run(debug=True)
