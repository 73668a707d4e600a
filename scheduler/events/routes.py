"""
Event routes.

Every handler consults the policy before touching the event store: listings
are narrowed to what the caller may see, and approve/delete are refused to
non-administrators before the event id is even looked up.
"""

from flask import jsonify, request, current_app
from flask_login import current_user

from scheduler import limiter, policy
from scheduler.events import bp
from scheduler.events.forms import EventForm, EventListForm
from scheduler.events.utils import event_to_dict
from scheduler.errors import InvalidInput, NotFound
from scheduler.policy import Capability
from scheduler.routes import capability_required, get_event_store
from scheduler.utils import json_formdata, parse_bool, form_errors


def _read_limit():
    """Rate limit for event listings and lookups."""
    return current_app.config.get('EVENT_READ_RATE_LIMIT', '1000 per hour')


def _caller():
    """The verified caller, or None for anonymous requests."""
    if current_user.is_authenticated:
        return current_user._get_current_object()
    return None


@bp.route('', methods=['GET'])
@limiter.limit(_read_limit)
def list_events():
    """
    List events visible to the caller.

    Query parameters: includePending (honoured for administrators only),
    sort (asc|desc), q (search text), when (all|upcoming|past).
    """
    form = EventListForm(formdata=request.args)
    if not form.validate():
        raise InvalidInput('Invalid listing options.', form_errors(form))

    event_filter = policy.listing_filter(
        _caller(),
        include_pending=parse_bool(request.args.get('includePending')),
        sort=form.sort.data or current_app.config.get('DEFAULT_EVENT_SORT', 'asc'),
        search=form.q.data or None,
        when=form.when.data or 'all',
    )
    events = get_event_store().list(event_filter)
    return jsonify([event_to_dict(event) for event in events])


@bp.route('', methods=['POST'])
@capability_required(Capability.CREATE_EVENT)
def create_event():
    """
    Submit an event. Ownership comes from the session or bearer token;
    a userId in the request body is ignored.
    """
    formdata = json_formdata()
    if 'userId' in formdata:
        current_app.logger.debug("Ignoring client-supplied userId on event submission")

    form = EventForm(formdata=formdata)
    if not form.validate():
        raise InvalidInput('Title and date are required.', form_errors(form))

    event = get_event_store().create(
        title=form.title.data,
        date=form.date.data,
        description=form.description.data,
        time=form.time.data,
        owner=_caller(),
    )
    return jsonify(event_to_dict(event)), 201


@bp.route('/<int:event_id>', methods=['GET'])
@limiter.limit(_read_limit)
def get_event(event_id):
    event = get_event_store().get(event_id)
    # Pending events are reported as missing to callers who cannot see them
    if not policy.can_view(_caller(), event):
        raise NotFound()
    return jsonify(event_to_dict(event))


@bp.route('/<int:event_id>/approve', methods=['PUT'])
@capability_required(Capability.APPROVE_EVENT)
def approve_event(event_id):
    event = get_event_store().set_approved(event_id)
    return jsonify(event_to_dict(event))


@bp.route('/<int:event_id>', methods=['DELETE'])
@capability_required(Capability.DELETE_EVENT)
def delete_event(event_id):
    get_event_store().delete(event_id)
    return jsonify({'success': True, 'id': event_id})
