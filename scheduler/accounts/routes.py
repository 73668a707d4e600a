# Account routes: registration and session management for API clients

from flask import jsonify, current_app
from flask_login import login_user, logout_user, current_user, login_required

from scheduler import limiter
from scheduler.accounts import bp
from scheduler.accounts.utils import get_account_data, generate_api_token
from scheduler.audit import audit_log_authentication
from scheduler.errors import InvalidInput, DuplicateUsername, InvalidCredentials
from scheduler.forms import RegistrationForm, LoginForm
from scheduler.routes import get_account_store
from scheduler.utils import json_formdata, form_errors


@bp.route('/register', methods=['POST'])
@limiter.limit("10 per hour")
def register():
    """
    Create a member account.
    """
    form = RegistrationForm(formdata=json_formdata())
    if not form.validate():
        raise InvalidInput('Username and password are required.', form_errors(form))

    try:
        account = get_account_store().register(
            form.username.data,
            form.password.data,
            email=form.email.data or None,
        )
    except DuplicateUsername:
        audit_log_authentication('REGISTER', form.username.data, False)
        raise

    audit_log_authentication('REGISTER', account.username, True)
    current_app.logger.info(f"New account registered: {account.username}")
    return jsonify(get_account_data(account)), 201


@bp.route('/login', methods=['POST'])
@limiter.limit("10 per minute")
def login():
    """
    Verify credentials, start a session and issue a bearer token.
    """
    form = LoginForm(formdata=json_formdata())
    if not form.validate():
        raise InvalidInput('Username and password are required.', form_errors(form))

    store = get_account_store()
    try:
        account = store.verify(form.username.data, form.password.data)
    except InvalidCredentials:
        audit_log_authentication('LOGIN', form.username.data, False)
        raise

    login_user(account)
    store.record_login(account)
    audit_log_authentication('LOGIN', account.username, True)

    return jsonify({
        **get_account_data(account),
        'token': generate_api_token(account),
    })


@bp.route('/logout', methods=['POST'])
@login_required
def logout():
    audit_log_authentication('LOGOUT', current_user.username, True)
    logout_user()
    return jsonify({'success': True})


@bp.route('/me')
@login_required
def me():
    return jsonify(get_account_data(current_user))
