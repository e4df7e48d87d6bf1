import logging
from datetime import datetime, timezone

import click
from flask import Flask, jsonify
from pymongo.errors import PyMongoError

from config import Config
from utils.db import init_db_connection, initialize_database, mongo
from utils.errors import register_error_handlers
from utils.migrations import migrate_legacy_snapshots, migrate_legacy_students

# Import controllers
from controllers.auth_controller import auth_bp
from controllers.section_controller import sections_bp
from controllers.student_controller import students_bp
from controllers.attendance_controller import attendance_bp

logger = logging.getLogger(__name__)


def create_app(config_object=Config):
    app = Flask(__name__)               # Initialize Flask app
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    init_db_connection(app)             # Initialize MongoDB connection
    register_error_handlers(app)

    # Register Blueprint
    app.register_blueprint(auth_bp)
    app.register_blueprint(sections_bp)
    app.register_blueprint(students_bp)
    app.register_blueprint(attendance_bp)

    @app.route("/health")
    def health():
        return jsonify({"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()})

    @app.cli.command("init-db")
    def init_db_command():
        """Create indexes and the seed admin."""
        initialize_database(mongo.db, app.config)
        click.echo("Database initialized.")

    @app.cli.command("migrate-legacy")
    def migrate_legacy_command():
        """Move data written by the old schema into the current collections."""
        migrated = migrate_legacy_students(mongo.db)
        for year, count in migrated.items():
            click.echo(f"{year}: {count} students")
        snapshots = migrate_legacy_snapshots(mongo.db)
        click.echo(f"attendance: {snapshots} snapshots")

    if app.config.get("INIT_DB_ON_STARTUP"):
        # A storage outage at boot is not fatal, requests will report it
        try:
            initialize_database(mongo.db, app.config)
        except PyMongoError as e:
            logger.error("Error initializing database: %s", e)

    return app


# Run the app
if __name__ == "__main__":
    create_app().run(debug=True)
