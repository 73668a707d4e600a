"""
Visibility and authorization rules for events.

Which events a caller may see, create, approve or delete is decided here and
nowhere else. Rights are looked up from the caller's role, never from the
caller's username:

    Actor           Create            View approved  View pending  Approve  Delete
    anonymous       yes -> pending    yes            no            no       no
    member          yes -> pending    yes            no            no       no
    admin           yes -> approved   yes            yes           yes      yes

Anonymous creation can be switched off with ``ALLOW_ANONYMOUS_EVENTS``.

An event moves Pending -> Approved only through an admin approval and never
back. Deletion is terminal. The policy never touches records itself; the
stores perform the operations it allows.
"""

import enum
from dataclasses import dataclass, replace
from typing import Optional

from flask import current_app

from scheduler.audit import audit_log_security_event
from scheduler.errors import AuthenticationRequired, PermissionDenied
from scheduler.models import AccountRole, ANONYMOUS_OWNER


class Capability(enum.Enum):
    CREATE_EVENT = 'create_event'
    VIEW_APPROVED = 'view_approved'
    VIEW_PENDING = 'view_pending'
    APPROVE_EVENT = 'approve_event'
    DELETE_EVENT = 'delete_event'


ROLE_CAPABILITIES = {
    AccountRole.MEMBER: frozenset({
        Capability.CREATE_EVENT,
        Capability.VIEW_APPROVED,
    }),
    AccountRole.ADMIN: frozenset(Capability),
}

SORT_ORDERS = ('asc', 'desc')
TIME_WINDOWS = ('all', 'upcoming', 'past')


@dataclass(frozen=True)
class EventFilter:
    """Selection and ordering for an event listing."""
    include_pending: bool = False
    sort: str = 'asc'
    search: Optional[str] = None
    when: str = 'all'

    def __post_init__(self):
        if self.sort not in SORT_ORDERS:
            raise ValueError(f"sort must be one of {SORT_ORDERS}, not {self.sort!r}")
        if self.when not in TIME_WINDOWS:
            raise ValueError(f"when must be one of {TIME_WINDOWS}, not {self.when!r}")


def is_authenticated(user) -> bool:
    return user is not None and bool(getattr(user, 'is_authenticated', False))


def anonymous_capabilities() -> frozenset:
    capabilities = {Capability.VIEW_APPROVED}
    if current_app.config.get('ALLOW_ANONYMOUS_EVENTS', True):
        capabilities.add(Capability.CREATE_EVENT)
    return frozenset(capabilities)


def capabilities_for(user) -> frozenset:
    """Return every capability the caller holds."""
    if not is_authenticated(user):
        return anonymous_capabilities()
    return ROLE_CAPABILITIES.get(user.role, frozenset())


def can(user, capability: Capability) -> bool:
    return capability in capabilities_for(user)


def require(user, capability: Capability):
    """
    Raise unless the caller holds ``capability``.

    Anonymous callers get AuthenticationRequired, authenticated callers get
    PermissionDenied. Both are recorded as ACCESS_DENIED security events.
    """
    if can(user, capability):
        return

    if not is_authenticated(user):
        audit_log_security_event('ACCESS_DENIED',
                                 f'Anonymous caller attempted {capability.value}')
        raise AuthenticationRequired()

    current_app.logger.warning(
        f"Access denied for {user.username} (role: {user.role.value}) attempting {capability.value}")
    audit_log_security_event('ACCESS_DENIED',
                             f'User {user.username} attempted {capability.value} without permission')
    raise PermissionDenied()


def listing_filter(user, include_pending=False, **options) -> EventFilter:
    """
    Build the listing filter for a caller.

    A request for pending events from a caller who may not see them is
    narrowed to approved events rather than refused.
    """
    event_filter = EventFilter(include_pending=bool(include_pending), **options)
    if event_filter.include_pending and not can(user, Capability.VIEW_PENDING):
        event_filter = replace(event_filter, include_pending=False)
    return event_filter


def can_view(user, event) -> bool:
    """Check whether a single event is visible to the caller."""
    if event.approved:
        return can(user, Capability.VIEW_APPROVED)
    return can(user, Capability.VIEW_PENDING)


def initial_approval(owner) -> bool:
    """Events created by administrators skip the approval queue."""
    return is_authenticated(owner) and can(owner, Capability.APPROVE_EVENT)


def owner_identity(owner) -> str:
    if not is_authenticated(owner):
        return ANONYMOUS_OWNER
    return owner.username
