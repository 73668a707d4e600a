"""
Utility functions for event management.
"""

import datetime as dt
import re
from typing import Optional, Dict, Any, Union

from scheduler.errors import InvalidInput
from scheduler.models import Event

DATE_FORMAT = '%Y-%m-%d'
DATE_PATTERN = re.compile(r'[0-9]{4}-[0-9]{2}-[0-9]{2}')
TIME_FORMATS = ('%H:%M', '%H:%M:%S')
WIRE_TIME_FORMAT = '%H:%M'


def normalize_text(value: Optional[str]) -> Optional[str]:
    """Strip text input; blank text becomes None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def normalize_time(value: Union[str, dt.time, None]) -> Optional[dt.time]:
    """
    Convert a time-of-day input to a ``time`` or None.

    Blank and malformed values mean "no time given" and become None; they
    are never replaced by a default such as midnight.
    """
    if value is None:
        return None
    if isinstance(value, dt.time):
        return value.replace(second=0, microsecond=0, tzinfo=None)

    value = str(value).strip()
    if not value:
        return None
    for time_format in TIME_FORMATS:
        try:
            return dt.datetime.strptime(value, time_format).time().replace(second=0)
        except ValueError:
            continue
    return None


def parse_event_date(value: Union[str, dt.date, None]) -> dt.date:
    """
    Convert a ``YYYY-MM-DD`` string (or date) to a ``date``.

    Month and day must be zero-padded; ``2025-12-5`` is rejected.

    Raises:
        InvalidInput: if the date is missing or malformed
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value

    value = normalize_text(value)
    if value is None:
        raise InvalidInput('Title and date are required.', {'date': ['Date is required.']})
    try:
        if not DATE_PATTERN.fullmatch(value):
            raise ValueError(value)
        return dt.datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise InvalidInput('Date must be in YYYY-MM-DD format.',
                           {'date': ['Date must be in YYYY-MM-DD format.']})


def event_to_dict(event: Event) -> Dict[str, Any]:
    """Wire representation of an event."""
    return {
        'id': event.id,
        'title': event.title,
        'description': event.description,
        'date': event.date.strftime(DATE_FORMAT),
        'time': event.time.strftime(WIRE_TIME_FORMAT) if event.time is not None else None,
        'userId': event.user_id,
        'approved': event.approved,
    }
