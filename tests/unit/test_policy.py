"""
Unit tests for the visibility and authorization policy.
"""
import pytest
from flask_login import AnonymousUserMixin
from scheduler import policy
from scheduler.errors import AuthenticationRequired, PermissionDenied
from scheduler.models import ANONYMOUS_OWNER
from scheduler.policy import Capability, EventFilter
from tests.fixtures.factories import EventFactory, ApprovedEventFactory


ANONYMOUS_CALLERS = [None, AnonymousUserMixin()]


@pytest.mark.unit
class TestCapabilities:

    @pytest.mark.parametrize('caller', ANONYMOUS_CALLERS)
    def test_anonymous(self, app, caller):
        assert policy.capabilities_for(caller) == {Capability.CREATE_EVENT, Capability.VIEW_APPROVED}

    def test_anonymous_creation_can_be_disabled(self, app, monkeypatch):
        monkeypatch.setitem(app.config, 'ALLOW_ANONYMOUS_EVENTS', False)

        assert policy.can(None, Capability.CREATE_EVENT) is False
        assert policy.can(None, Capability.VIEW_APPROVED) is True

    def test_member(self, member):
        assert policy.capabilities_for(member) == {Capability.CREATE_EVENT, Capability.VIEW_APPROVED}

    def test_admin(self, admin):
        assert policy.capabilities_for(admin) == set(Capability)


@pytest.mark.unit
class TestRequire:

    def test_allowed(self, admin):
        policy.require(admin, Capability.DELETE_EVENT)

    @pytest.mark.parametrize('capability', [Capability.APPROVE_EVENT, Capability.DELETE_EVENT,
                                            Capability.VIEW_PENDING])
    def test_member_denied(self, member, capability):
        with pytest.raises(PermissionDenied) as excinfo:
            policy.require(member, capability)

        assert not isinstance(excinfo.value, AuthenticationRequired)
        assert excinfo.value.status_code == 403

    def test_anonymous_denied(self, app):
        with pytest.raises(AuthenticationRequired) as excinfo:
            policy.require(None, Capability.APPROVE_EVENT)

        # Still a PermissionDenied, reported as needing a login
        assert isinstance(excinfo.value, PermissionDenied)
        assert excinfo.value.status_code == 401

    def test_denial_is_audited(self, member):
        from unittest.mock import patch

        with patch('scheduler.policy.audit_log_security_event') as mock_audit:
            with pytest.raises(PermissionDenied):
                policy.require(member, Capability.APPROVE_EVENT)

        mock_audit.assert_called_once()
        assert mock_audit.call_args[0][0] == 'ACCESS_DENIED'


@pytest.mark.unit
class TestVisibility:

    def test_member_pending_request_is_narrowed(self, member):
        event_filter = policy.listing_filter(member, include_pending=True, sort='desc')

        assert event_filter.include_pending is False
        assert event_filter.sort == 'desc'

    def test_anonymous_pending_request_is_narrowed(self, app):
        assert policy.listing_filter(None, include_pending=True).include_pending is False

    def test_admin_pending_request_is_kept(self, admin):
        assert policy.listing_filter(admin, include_pending=True).include_pending is True

    def test_admin_default_is_approved_only(self, admin):
        assert policy.listing_filter(admin).include_pending is False

    def test_can_view(self, member, admin):
        pending = EventFactory.create()
        approved = ApprovedEventFactory.create()

        assert policy.can_view(member, approved) is True
        assert policy.can_view(member, pending) is False
        assert policy.can_view(None, pending) is False
        assert policy.can_view(admin, pending) is True

    def test_member_cannot_see_own_pending_event(self, member):
        own = EventFactory.create(user_id=member.username)

        assert policy.can_view(member, own) is False


@pytest.mark.unit
class TestOwnership:

    def test_initial_approval(self, app, member, admin):
        assert policy.initial_approval(None) is False
        assert policy.initial_approval(AnonymousUserMixin()) is False
        assert policy.initial_approval(member) is False
        assert policy.initial_approval(admin) is True

    def test_owner_identity(self, app, member):
        assert policy.owner_identity(None) == ANONYMOUS_OWNER
        assert policy.owner_identity(AnonymousUserMixin()) == ANONYMOUS_OWNER
        assert policy.owner_identity(member) == 'member'


@pytest.mark.unit
class TestEventFilter:

    def test_defaults(self):
        event_filter = EventFilter()

        assert event_filter.include_pending is False
        assert event_filter.sort == 'asc'
        assert event_filter.when == 'all'
        assert event_filter.search is None

    def test_rejects_unknown_sort(self):
        with pytest.raises(ValueError):
            EventFilter(sort='sideways')

    def test_rejects_unknown_window(self):
        with pytest.raises(ValueError):
            EventFilter(when='someday')
