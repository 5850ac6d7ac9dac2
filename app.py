import logging

from flask import Flask, jsonify
from pymongo.errors import PyMongoError
from werkzeug.exceptions import HTTPException

from config import Config
from utils.db import init_db_connection
from utils.errors import ApiError

# Import controllers
from controllers.auth_controller import auth_bp
from controllers.roles_controller import roles_bp
from controllers.departments_controller import departments_bp
from controllers.employees_controller import employees_bp
from controllers.tasks_controller import tasks_bp
from controllers.attendance_controller import attendance_bp
from controllers.lunch_controller import lunch_bp
from controllers.holidays_controller import holidays_bp
from controllers.messages_controller import messages_bp


def register_error_handlers(app):

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(PyMongoError)
    def handle_database_error(error):
        app.logger.exception("Database error: %s", error)
        return jsonify({"success": False, "error": "Database error"}), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"success": False, "error": error.description}), error.code


def create_app(config_object=Config):
    app = Flask(__name__)               # Initialize Flask app
    app.config.from_object(config_object)

    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    init_db_connection(app)             # Initialize MongoDB connection

    # Register Blueprint
    app.register_blueprint(auth_bp)
    app.register_blueprint(roles_bp)
    app.register_blueprint(departments_bp)
    app.register_blueprint(employees_bp)
    app.register_blueprint(tasks_bp)
    app.register_blueprint(attendance_bp)
    app.register_blueprint(lunch_bp)
    app.register_blueprint(holidays_bp)
    app.register_blueprint(messages_bp)

    register_error_handlers(app)
    return app


# Run the app
if __name__ == "__main__":
    create_app().run(debug=True)
