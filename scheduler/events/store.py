"""
Persistence for events and their approval state.

The store owns every Event row. It validates and normalizes input, applies
the approval state the policy assigns at creation, and reports missing
records as NotFound. It does not decide who may call it; handlers check
the policy first.
"""

import datetime as dt
from typing import List, Optional

import sqlalchemy as sa
from flask import current_app

from scheduler.audit import audit_log_create, audit_log_update, audit_log_delete
from scheduler.errors import InvalidInput, NotFound
from scheduler.models import Event, utcnow
from scheduler.policy import EventFilter, initial_approval, owner_identity
from scheduler.utils import store_operation
from scheduler.events.utils import (
    normalize_text, normalize_time, parse_event_date
)

TITLE_MAX_LENGTH = 100


class EventStore:
    """Event records backed by a SQLAlchemy session."""

    def __init__(self, session):
        self.session = session

    def create(self, title, date, description=None, time=None, owner=None) -> Event:
        """
        Create an event owned by ``owner`` (None for anonymous submissions).

        Blank or malformed ``time`` and blank ``description`` are stored as
        absent. The event starts approved only when the owner is an
        administrator.

        Raises:
            InvalidInput: if the title is blank or too long, or the date is
                missing or malformed
        """
        title = normalize_text(title)
        if title is None:
            raise InvalidInput('Title and date are required.', {'title': ['Title is required.']})
        if len(title) > TITLE_MAX_LENGTH:
            raise InvalidInput(f'Title must be {TITLE_MAX_LENGTH} characters or less.',
                               {'title': [f'Title must be {TITLE_MAX_LENGTH} characters or less.']})

        approved = initial_approval(owner)
        event = Event(
            title=title,
            description=normalize_text(description),
            date=parse_event_date(date),
            time=normalize_time(time),
            user_id=owner_identity(owner),
            approved=approved,
            approved_at=utcnow() if approved else None,
        )

        with store_operation(self.session, 'create event'):
            self.session.add(event)
            self.session.commit()

        audit_log_create('Event', event.id, f'Created event: {event.title}',
                         {'approved': event.approved, 'owner': event.user_id})
        return event

    def get(self, event_id) -> Event:
        with store_operation(self.session, f'get event {event_id}'):
            event = self.session.get(Event, event_id)
        if event is None:
            raise NotFound()
        return event

    def set_approved(self, event_id) -> Event:
        """
        Approve a pending event.

        Approving an event that is already approved changes nothing and is
        not an error. The transition is one conditional UPDATE, so an event
        deleted concurrently is reported as NotFound.

        Raises:
            NotFound: if no event has this id
        """
        with store_operation(self.session, f'approve event {event_id}'):
            result = self.session.execute(
                sa.update(Event)
                .where(Event.id == event_id, Event.approved == False)
                .values(approved=True, approved_at=utcnow())
            )
            self.session.commit()

        event = self.get(event_id)
        if result.rowcount == 0:
            current_app.logger.debug(f"Event {event_id} already approved")
            return event

        audit_log_update('Event', event.id, f'Approved event: {event.title}', {'approved': False})
        return event

    def delete(self, event_id):
        """
        Delete an event permanently.

        Raises:
            NotFound: if no event has this id, including one already deleted
        """
        with store_operation(self.session, f'delete event {event_id}'):
            result = self.session.execute(sa.delete(Event).where(Event.id == event_id))
            self.session.commit()

        if result.rowcount == 0:
            raise NotFound()
        audit_log_delete('Event', event_id, f'Deleted event {event_id}')

    def list(self, event_filter: Optional[EventFilter] = None,
             today: Optional[dt.date] = None) -> List[Event]:
        """
        List events matching ``event_filter``.

        Events are ordered by date then time in the filter's direction, with
        events that have no time placed first when ascending. Ties are broken
        by id ascending in both directions.
        """
        event_filter = event_filter or EventFilter()
        query = sa.select(Event)

        if not event_filter.include_pending:
            query = query.where(Event.approved == True)

        if event_filter.search:
            term = event_filter.search.strip().lower()
            if term:
                query = query.where(sa.or_(
                    sa.func.lower(Event.title).contains(term, autoescape=True),
                    sa.func.lower(sa.func.coalesce(Event.description, '')).contains(term, autoescape=True),
                ))

        if event_filter.when != 'all':
            today = today or dt.date.today()
            if event_filter.when == 'upcoming':
                query = query.where(Event.date >= today)
            else:
                query = query.where(Event.date < today)

        if event_filter.sort == 'desc':
            query = query.order_by(Event.date.desc(), sa.nulls_last(Event.time.desc()), Event.id.asc())
        else:
            query = query.order_by(Event.date.asc(), sa.nulls_first(Event.time.asc()), Event.id.asc())

        with store_operation(self.session, 'list events'):
            return self.session.scalars(query).all()
