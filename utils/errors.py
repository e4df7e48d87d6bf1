"""
utils/errors.py
-----------------
Error kinds raised by handlers and helpers, and the Flask handlers that
turn them into ``{"kind": ..., "message": ...}`` JSON responses.
"""

import logging

from flask import jsonify
from pymongo.errors import DuplicateKeyError, PyMongoError
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that reach the request boundary."""

    kind = "InternalError"
    status_code = 500

    def __init__(self, message=None):
        super().__init__(message or self.kind)
        self.message = message or self.kind

    def to_dict(self):
        return {"kind": self.kind, "message": self.message}


class ValidationFailure(AppError):
    """Missing or malformed input."""

    kind = "ValidationFailure"
    status_code = 400


class NotFound(AppError):
    kind = "NotFound"
    status_code = 404


class AuthRequired(AppError):
    """No bearer token was sent."""

    kind = "AuthRequired"
    status_code = 401


class AuthRejected(AppError):
    """Bad credentials, or a token that is invalid or expired."""

    kind = "AuthRejected"
    status_code = 403


class DuplicateKey(AppError):
    kind = "DuplicateKey"
    status_code = 409


class UpstreamFailure(AppError):
    """Storage or parser error not otherwise classified."""

    kind = "UpstreamFailure"
    status_code = 502


def _error_response(error):
    return jsonify(error.to_dict()), error.status_code


def register_error_handlers(app):

    @app.errorhandler(AppError)
    def handle_app_error(error):
        if error.status_code >= 500:
            logger.error("%s: %s", error.kind, error.message)
        return _error_response(error)

    @app.errorhandler(DuplicateKeyError)
    def handle_duplicate_key(error):
        logger.warning("Duplicate key: %s", error)
        return _error_response(DuplicateKey("Record already exists"))

    @app.errorhandler(PyMongoError)
    def handle_storage_error(error):
        logger.exception("Storage error")
        return _error_response(UpstreamFailure(f"Storage error: {error}"))

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        failure = ValidationFailure("File too large (max 5 MiB)")
        return jsonify(failure.to_dict()), 413

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"kind": error.name.replace(" ", ""), "message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        logger.exception("Unhandled error")
        return jsonify({"kind": "InternalError", "message": str(error)}), 500
