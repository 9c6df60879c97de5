# storefront/errors.py
from flask import jsonify
from werkzeug.exceptions import HTTPException

from .extensions import db
from .utils.api import api_error


class ApiError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    """Missing or malformed input."""
    status_code = 400


class NotFoundError(ApiError):
    status_code = 404


class ConflictError(ApiError):
    """Duplicate names/slugs and stock that ran out under a checkout."""
    status_code = 400


class AuthorizationError(ApiError):
    status_code = 401


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(e):
        db.session.rollback()
        r = jsonify(api_error(e.message))
        r.status_code = e.status_code
        return r

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        r = jsonify(api_error(e.description or e.name))
        r.status_code = e.code or 500
        return r

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        db.session.rollback()
        app.logger.exception("unhandled error: %s", e)
        r = jsonify(api_error("Internal Server Error"))
        r.status_code = 500
        return r
