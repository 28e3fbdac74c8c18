from flask import jsonify, current_app, request
from werkzeug.exceptions import HTTPException


class LearnlyError(Exception):
    """Base class for errors a request handler reports to the caller."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {"error": self.message}


class ValidationError(LearnlyError):
    status_code = 400
    message = "Missing required fields"


class DuplicateUser(LearnlyError):
    status_code = 400
    message = "User already exists"


class AlreadyEnrolled(LearnlyError):
    status_code = 400
    message = "Already enrolled in this course"


class InvalidCredentials(LearnlyError):
    status_code = 401
    message = "Invalid credentials"


class InvalidToken(LearnlyError):
    status_code = 401
    message = "Invalid token"


class Unauthorized(LearnlyError):
    status_code = 401
    message = "Unauthorized"


class Forbidden(LearnlyError):
    status_code = 403
    message = "Forbidden"


class NotFound(LearnlyError):
    status_code = 404
    message = "Not found"


class InternalError(LearnlyError):
    status_code = 500


def register_error_handlers(app):
    @app.errorhandler(LearnlyError)
    def handle_learnly_error(error):
        if error.status_code >= 500:
            app.logger.error(f"{request_path()} failed: {error.message}")
        else:
            app.logger.info(f"{request_path()} -> {error.status_code}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"error": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        app.logger.exception(f"Unhandled error on {request_path()}: {error}")
        return jsonify(InternalError().to_dict()), 500


def request_path():
    return f"{request.method} {request.path}"


def register_jwt_handlers(jwt):
    """Make Flask-JWT-Extended failures use the same {"error": ...} shape."""

    @jwt.unauthorized_loader
    def missing_token(reason):
        current_app.logger.info(f"Missing bearer token: {reason}")
        return jsonify(Unauthorized("No token provided").to_dict()), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        current_app.logger.info(f"Rejected bearer token: {reason}")
        return jsonify(InvalidToken().to_dict()), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify(InvalidToken("Token has expired").to_dict()), 401
