"""
Events blueprint.

Anyone may list approved events and submit new ones; submissions from
non-administrators wait for approval. Administrators see pending events and
may approve or delete any event.
"""

from flask import Blueprint

bp = Blueprint('events', __name__)

from scheduler.events import routes
