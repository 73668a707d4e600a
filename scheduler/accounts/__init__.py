"""
Accounts blueprint: registration, login, logout and the current account.
"""

from flask import Blueprint

bp = Blueprint('accounts', __name__)

from scheduler.accounts import routes
