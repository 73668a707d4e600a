"""
Error taxonomy for the scheduler and the JSON error handlers that report it.

Stores and the authorization policy raise these exceptions; the handlers
registered here turn each into a JSON body of the form
``{"success": false, "error": <message>, "code": <code>}``.
"""

from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException

from scheduler import db


class SchedulerError(Exception):
    """Base class for errors reported to API callers."""
    status_code = 500
    code = 'operation_failed'
    message = 'The operation failed.'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self):
        return {'success': False, 'error': self.message, 'code': self.code}


class InvalidInput(SchedulerError):
    status_code = 400
    code = 'invalid_input'
    message = 'Invalid input.'

    def __init__(self, message=None, errors=None):
        super().__init__(message)
        self.errors = errors or {}

    def to_dict(self):
        data = super().to_dict()
        if self.errors:
            data['errors'] = self.errors
        return data


class DuplicateUsername(SchedulerError):
    status_code = 409
    code = 'duplicate_username'
    message = 'That username is already taken.'


class InvalidCredentials(SchedulerError):
    status_code = 401
    code = 'invalid_credentials'
    message = 'Invalid username or password.'


class PermissionDenied(SchedulerError):
    status_code = 403
    code = 'permission_denied'
    message = 'You do not have permission to perform this action.'


class AuthenticationRequired(PermissionDenied):
    status_code = 401
    code = 'authentication_required'
    message = 'You must be logged in to perform this action.'


class NotFound(SchedulerError):
    status_code = 404
    code = 'not_found'
    message = 'Event not found.'


class StoreFailure(SchedulerError):
    """The backing store could not complete the operation."""


def register_error_handlers(app):
    """Register error handlers with the Flask application"""

    @app.errorhandler(SchedulerError)
    def scheduler_error(error):
        if isinstance(error, StoreFailure):
            db.session.rollback()
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify({
            'success': False,
            'error': error.description,
            'code': error.name.lower().replace(' ', '_')
        }), error.code

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        current_app.logger.error(f"Unhandled error: {error}")
        return jsonify(StoreFailure().to_dict()), 500
