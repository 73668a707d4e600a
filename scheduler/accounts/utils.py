# Third-party imports
from flask import current_app
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

# Local application imports
from scheduler.routes import get_account_store

TOKEN_SALT = 'api-token'


def get_account_data(account):
    """
    Public view of an account. The password hash is never included.
    """
    return {
        'id': account.id,
        'username': account.username,
        'email': account.email,
        'role': account.role.value,
        'createdAt': account.created_at.isoformat() if account.created_at else None,
    }


def generate_api_token(account):
    """
    Generate a signed bearer token for API clients.

    Args:
        account (Account): The account the token identifies.

    Returns:
        str: Token to send as ``Authorization: Bearer <token>``.
    """
    serializer = URLSafeTimedSerializer(current_app.config['SECRET_KEY'])
    return serializer.dumps(account.id, salt=TOKEN_SALT)


def verify_api_token(token, max_age=None):
    """
    Verify a bearer token and return the associated account.

    Args:
        token (str): The token to verify.
        max_age (int): Token lifetime in seconds (default: API_TOKEN_MAX_AGE).

    Returns:
        Account or None: Account if the token is valid, None if invalid/expired.
    """
    if max_age is None:
        max_age = current_app.config.get('API_TOKEN_MAX_AGE', 86400)
    serializer = URLSafeTimedSerializer(current_app.config['SECRET_KEY'])
    try:
        account_id = serializer.loads(token, salt=TOKEN_SALT, max_age=max_age)
    except SignatureExpired:
        current_app.logger.info("Rejected expired API token")
        return None
    except BadSignature:
        current_app.logger.warning("Rejected API token with bad signature")
        return None
    return get_account_store().get(int(account_id))
