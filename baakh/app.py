import structlog
from flask import Flask
from flask_cors import CORS
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from baakh.caching import init_cache
from baakh.config import Config, TestingConfig, engine_options
from baakh.database import db, init_db, teardown_db
from baakh.errors import BaakhError, error_response
from baakh.extensions import limiter
from baakh.logging_config import configure_logging

logger = structlog.get_logger(__name__)


def create_app(testing=False, **overrides):
    """Application factory."""
    app = Flask(__name__)
    app.config.from_object(TestingConfig if testing else Config)
    app.config.update(overrides)
    if 'SQLALCHEMY_DATABASE_URI' in overrides and 'SQLALCHEMY_ENGINE_OPTIONS' not in overrides:
        app.config['SQLALCHEMY_ENGINE_OPTIONS'] = engine_options(overrides['SQLALCHEMY_DATABASE_URI'])

    configure_logging(app.config.get('LOG_LEVEL', 'INFO'), app.config.get('LOG_FORMAT', 'console'))

    # Sindhi text stays readable in responses
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    CORS(app, resources={r"/api/*": {"origins": app.config['ALLOWED_ORIGINS']}})

    db.init_app(app)
    limiter.init_app(app)
    if app.config.get('CACHE_ENABLED') and not app.config.get('TESTING'):
        init_cache(app.config.get('REDIS_URL'))

    from baakh.routes import bp
    from baakh.admin_routes import admin_bp
    app.register_blueprint(bp)
    app.register_blueprint(admin_bp)

    register_error_handlers(app)
    app.teardown_request(teardown_db)

    @app.route('/health')
    def health_check():
        """A simple health check route."""
        return {"status": "OK"}

    if app.config.get('AUTO_CREATE_TABLES'):
        with app.app_context():
            init_db()

    logger.info("app_created", testing=testing, database=app.config['SQLALCHEMY_DATABASE_URI'].split('@')[-1])
    return app


def register_error_handlers(app):
    @app.errorhandler(BaakhError)
    def handle_baakh_error(error):
        return error_response(error.message, error.status_code, error.details)

    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        return error_response("Invalid request data", 400, error.messages)

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        logger.error("database_error", error=str(error), exc_info=True)
        return error_response("Database error", 500)

    @app.errorhandler(404)
    def not_found_error(error):
        return error_response("Resource not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_response("Method not allowed", 405)

    @app.errorhandler(429)
    def rate_limited(error):
        return error_response(f"Rate limit exceeded: {error.description}", 429)

    @app.errorhandler(Exception)
    def handle_error(error):
        if isinstance(error, HTTPException):
            return error_response(error.description, error.code)
        logger.error("unhandled_error", error=str(error), exc_info=True)
        return error_response("An unexpected error occurred", 500)
