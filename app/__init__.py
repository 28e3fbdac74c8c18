import logging
import sys

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .errors import register_error_handlers, register_jwt_handlers
from .extensions import db, migrate, jwt, cors
from .migrations import run_migrations
from .seed import seed_database
from .routes import api


def create_app(config_class=Config):
    app = Flask(__name__)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})

    register_error_handlers(app)
    register_jwt_handlers(jwt)

    app.register_blueprint(api, url_prefix="/api")
    register_commands(app)

    if app.config["RUN_MIGRATIONS"]:
        initialize_database(app)

    return app


def initialize_database(app):
    """Create the schema (and optionally seed it); a failure here is fatal."""
    with app.app_context():
        try:
            app.logger.info("Initializing database...")
            run_migrations()
            if app.config["SEED_DB"]:
                seed_database()
            app.logger.info("Database initialized successfully!")
        except Exception as e:
            app.logger.critical(f"Database initialization failed: {e}")
            sys.exit(1)


def register_commands(app):
    @app.cli.command("init-db")
    def init_db_command():
        """Create missing tables and indexes."""
        run_migrations()

    @app.cli.command("seed-db")
    def seed_db_command():
        """Replace all data with the sample users, courses and quiz."""
        run_migrations()
        seed_database()
