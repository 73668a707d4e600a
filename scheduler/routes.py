# Utility functions and decorators for Flask routes
# Route handlers live in their blueprints:
# - Account routes: scheduler/accounts/routes.py
# - Event routes: scheduler/events/routes.py

from functools import wraps
from flask import current_app
from flask_login import current_user

from scheduler import policy


def get_account_store():
    """Account store created for the current application."""
    return current_app.extensions['account_store']


def get_event_store():
    """Event store created for the current application."""
    return current_app.extensions['event_store']


def capability_required(capability):
    """
    Decorator to require a policy capability.
    Usage: @capability_required(Capability.APPROVE_EVENT)

    Unlike @login_required this also covers anonymous callers, who are
    reported as needing to authenticate.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            policy.require(current_user, capability)
            return f(*args, **kwargs)
        return decorated_function
    return decorator
