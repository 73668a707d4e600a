# Standard library imports
from contextlib import contextmanager

# Third-party imports
from flask import current_app, request
from sqlalchemy.exc import SQLAlchemyError, StatementError
from werkzeug.datastructures import MultiDict

# Local application imports
from scheduler.errors import InvalidInput, StoreFailure

TRUE_VALUES = ('1', 'true', 'yes', 'on')


@contextmanager
def store_operation(session, operation):
    """
    Run a store operation, turning database failures into StoreFailure.

    The session is rolled back and the failure logged with the operation
    name. Statements and their bound parameters are never logged, since
    they can hold password hashes. Callers must not put credentials in
    ``operation``.
    """
    try:
        yield
    except SQLAlchemyError as e:
        session.rollback()
        detail = e.orig if isinstance(e, StatementError) else e
        current_app.logger.error(f"Store failure during {operation}: {e.__class__.__name__}: {detail}")
        raise StoreFailure() from e


def json_formdata():
    """
    Read the JSON request body as form data for WTForms.

    Null values are dropped and scalars converted to strings so that
    WTForms sees the same shapes it would get from an HTML form.

    Raises:
        InvalidInput: if the body is not a JSON object
    """
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise InvalidInput('Request body must be a JSON object.')

    formdata = MultiDict()
    for key, value in payload.items():
        if value is None or isinstance(value, (dict, list)):
            continue
        if isinstance(value, bool):
            value = 'true' if value else 'false'
        formdata.add(key, str(value))
    return formdata


def parse_bool(value, default=False):
    """Interpret a query-string flag such as ``includePending=true``."""
    if value is None:
        return default
    return str(value).strip().lower() in TRUE_VALUES


def form_errors(form):
    """Flatten WTForms errors into ``{field: [messages]}``."""
    return {field: list(messages) for field, messages in form.errors.items()}
