"""
Persistence and verification of account credentials.

Only a one-way password hash is stored. Username uniqueness is left to the
database constraint so that two simultaneous registrations cannot both win.
"""

from typing import Optional

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash

from scheduler.audit import audit_log_create
from scheduler.errors import InvalidInput, DuplicateUsername, InvalidCredentials
from scheduler.models import Account, AccountRole, utcnow
from scheduler.utils import store_operation

USERNAME_MAX_LENGTH = 64
EMAIL_MAX_LENGTH = 120

# Checked when the username is unknown so both failure paths hash once
_DUMMY_PASSWORD_HASH = generate_password_hash('not-a-real-password')


class AccountStore:
    """Account records backed by a SQLAlchemy session."""

    def __init__(self, session):
        self.session = session

    def register(self, username, password, email=None, role=AccountRole.MEMBER) -> Account:
        """
        Create an account.

        Raises:
            InvalidInput: if username or password is missing, or a field is too long
            DuplicateUsername: if the username is already registered
        """
        errors = {}
        if not username or not username.strip():
            errors['username'] = ['Username is required.']
        elif len(username) > USERNAME_MAX_LENGTH:
            errors['username'] = [f'Username must be {USERNAME_MAX_LENGTH} characters or less.']
        if not password:
            errors['password'] = ['Password is required.']
        email = email.strip() if email and email.strip() else None
        if email and len(email) > EMAIL_MAX_LENGTH:
            errors['email'] = [f'Email must be {EMAIL_MAX_LENGTH} characters or less.']
        if errors:
            raise InvalidInput('Username and password are required.', errors)

        account = Account(username=username, email=email, role=role)
        account.set_password(password)

        with store_operation(self.session, 'register account'):
            try:
                self.session.add(account)
                self.session.commit()
            except IntegrityError:
                self.session.rollback()
                current_app.logger.info(f"Registration rejected, username taken: {username}")
                raise DuplicateUsername()

        audit_log_create('Account', account.id, f'Registered account: {account.username}',
                         {'role': account.role.value})
        return account

    def verify(self, username, password) -> Account:
        """
        Return the account matching the credentials.

        Raises:
            InvalidCredentials: for an unknown username and for a wrong
                password alike
        """
        account = None
        if username:
            with store_operation(self.session, 'verify account'):
                account = self.session.scalar(
                    sa.select(Account).where(Account.username == username)
                )

        if account is None:
            check_password_hash(_DUMMY_PASSWORD_HASH, password or '')
            raise InvalidCredentials()
        if not account.check_password(password):
            raise InvalidCredentials()
        return account

    def record_login(self, account):
        """Stamp the account's last successful login."""
        with store_operation(self.session, f'record login for account {account.id}'):
            account.last_login = utcnow()
            self.session.commit()

    def get(self, account_id) -> Optional[Account]:
        with store_operation(self.session, f'get account {account_id}'):
            return self.session.get(Account, account_id)
