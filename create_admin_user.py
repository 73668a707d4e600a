#!/usr/bin/env python3
"""
Create Admin User Script

Creates an administrator account. Administrators see pending events and may
approve or delete any event; events they submit are approved immediately.

Usage:
    source venv/bin/activate
    python create_admin_user.py admin --email admin@example.com
"""

import argparse
import getpass
import os
import sys

# Add the project directory to the path so we can import our modules
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

# Load environment variables from .flaskenv
from dotenv import load_dotenv
load_dotenv('.flaskenv')

from scheduler import create_app
from scheduler.audit import audit_log_system_event
from scheduler.errors import InvalidInput, DuplicateUsername
from scheduler.models import AccountRole
from scheduler.routes import get_account_store


def create_admin_user(username, password, email=None, config_name=None):
    """Create an administrator account. Returns True on success."""
    app = create_app(config_name or os.getenv('FLASK_CONFIG') or 'development')

    with app.app_context():
        try:
            account = get_account_store().register(username, password, email=email,
                                                   role=AccountRole.ADMIN)
        except DuplicateUsername:
            print(f"Username '{username}' is already taken; admin creation skipped")
            return False
        except InvalidInput as e:
            print(f"Invalid input: {e.message}")
            return False

        audit_log_system_event('BOOTSTRAP_ADMIN_CREATED',
                               f'Admin account created: {account.username} (ID: {account.id})')

        print(f"✓ Admin account '{account.username}' created successfully!")
        return True


def main():
    parser = argparse.ArgumentParser(description='Create an administrator account.')
    parser.add_argument('username')
    parser.add_argument('--email', default=None)
    args = parser.parse_args()

    password = getpass.getpass('Password: ')
    if password != getpass.getpass('Confirm password: '):
        print("Passwords do not match")
        return 1
    return 0 if create_admin_user(args.username, password, email=args.email) else 1


if __name__ == '__main__':
    sys.exit(main())
