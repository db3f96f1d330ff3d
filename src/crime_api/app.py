"""
app.py: Main Flask application for the St. Paul crime API.

This service handles:
- Filtered reads of crime codes, neighborhoods and incidents (read_service).
- Creating and removing incidents (write_service).
- Open API (Swagger) integration for documentation.
- Serving the built browser client from DOCS_DIR, with single-page-app fallback.

Run with: crime-api (starts on PORT, default 8000).
"""

import os

from flask import Flask, jsonify, send_from_directory
from flask_cors import CORS
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from crime_api.config import configure_logging, load_config
from crime_api.db.session import Base, create_db_engine, create_session_factory
from crime_api.read_service.api import create_read_blueprint
from crime_api.responses import text_response
from crime_api.swagger import OPENAPI_SPEC, create_swagger_blueprint
from crime_api.write_service.api import create_write_blueprint


def register_spa(app, docs_dir):
    """
    Serve the built client from docs_dir. Unknown GET paths fall back to
    index.html so client-side routes survive a page reload.

    Must be called after every API blueprint is registered.
    """
    if not os.path.isdir(docs_dir):
        app.logger.warning(f"Client directory {docs_dir} not found; serving API only")

        @app.route('/')
        def spa_not_built():
            return text_response("SPA not built yet. Build the client into " + docs_dir)
        return

    docs_dir = os.path.abspath(docs_dir)

    @app.route('/', defaults={'path': ''})
    @app.route('/<path:path>')
    def spa(path):
        if path and os.path.isfile(os.path.join(docs_dir, path)):
            return send_from_directory(docs_dir, path)
        return send_from_directory(docs_dir, 'index.html')


def create_app(config=None):
    """
    Build the Flask app.

    Args:
        config: optional dict of settings overriding the environment
            (see crime_api.config.load_config).
    """
    settings = load_config(config)
    configure_logging(settings["LOG_LEVEL"])

    app = Flask(__name__, static_folder=None)
    app.config.update(settings)
    app.logger.setLevel(settings["LOG_LEVEL"])

    # Use Flask CORS to allow connections from other sites
    CORS(app)

    engine = create_db_engine(app.config["DATABASE_URL"])
    Base.metadata.create_all(engine)
    SessionLocal = create_session_factory(engine)
    app.extensions["crime_api"] = {"engine": engine, "session_factory": SessionLocal}

    app.register_blueprint(create_swagger_blueprint())
    app.register_blueprint(create_read_blueprint(SessionLocal))
    app.register_blueprint(create_write_blueprint(SessionLocal))

    @app.route('/health', methods=['GET'])
    def health():
        """
        Health check: verifies the database answers a trivial query.
        Returns: {"status": "ok", "service": "crime_api", "database": true}
        """
        try:
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            database_status = True
        except SQLAlchemyError as e:
            app.logger.error(f"Database health check failed: {e}")
            database_status = False

        return jsonify({
            "status": "ok" if database_status else "error",
            "service": "crime_api",
            "database": database_status
        })

    @app.route('/swagger.json', methods=['GET'])
    def swagger_spec():
        """Open API spec for the crime API endpoints."""
        return jsonify(OPENAPI_SPEC)

    # Error handler for 404
    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"error": "Endpoint not found"}), 404

    # Error handler for 500
    @app.errorhandler(500)
    def internal_error(error):
        return jsonify({"error": "Internal server error"}), 500

    register_spa(app, app.config["DOCS_DIR"])

    return app


def main():
    """Console entry point: run the development server."""
    app = create_app()
    app.logger.info(f"Now listening on port {app.config['PORT']}")
    app.run(host='0.0.0.0', port=app.config["PORT"], debug=app.config["FLASK_DEBUG"])


if __name__ == '__main__':
    main()
