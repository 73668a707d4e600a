"""
Forms for event submission and listing.
"""

from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional, AnyOf

from scheduler.forms import ApiForm
from scheduler.policy import SORT_ORDERS, TIME_WINDOWS


class EventForm(ApiForm):
    """Form for submitting an event"""
    title = StringField('Event Title', validators=[
        DataRequired(message='Title is required.'),
        Length(min=1, max=100, message='Title must be between 1 and 100 characters.')
    ])

    description = TextAreaField('Description', validators=[Optional()])

    # Parsed by the event store: the date must be YYYY-MM-DD, while a blank
    # or unreadable time is stored as "no time"
    date = StringField('Date', validators=[DataRequired(message='Date is required.')])

    time = StringField('Time', validators=[Optional()])


class EventListForm(ApiForm):
    """Query-string options for the event listing"""
    sort = StringField('Sort', validators=[
        Optional(),
        AnyOf(SORT_ORDERS, message='Sort must be one of: asc, desc.')
    ])

    when = StringField('When', validators=[
        Optional(),
        AnyOf(TIME_WINDOWS, message='When must be one of: all, upcoming, past.')
    ])

    q = StringField('Search', validators=[Optional(), Length(max=100)])
