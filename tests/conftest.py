"""
Test configuration and fixtures for the Event Scheduler application.
"""
import pytest
import os
from scheduler import create_app, db
from scheduler.accounts.utils import generate_api_token
from tests.fixtures.factories import (
    AccountFactory, AdminAccountFactory, EventFactory, ApprovedEventFactory
)

# Set environment variables for testing
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app('testing')

    # The app context below stays pushed for the whole session, so test-client
    # requests reuse it and share one `g`. Drop Flask-Login's cached user at
    # the start of each request so every client is resolved from its own
    # session or token, as it would be with a fresh per-request context.
    @app.before_request
    def _reset_cached_login_user():
        from flask import g
        g.pop('_login_user', None)

    # Create application context and set up database
    with app.app_context():
        from scheduler import models

        # Create all database tables
        db.create_all()

        import sqlalchemy as sa
        inspector = sa.inspect(db.engine)
        tables = inspector.get_table_names()
        if 'accounts' not in tables or 'events' not in tables:
            raise RuntimeError(f"Database setup failed. Tables created: {tables}")

        yield app

        # Clean up after all tests in session
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Create database session for testing."""
    with app.app_context():
        yield db.session

        # Clear all tables for clean state between tests
        try:
            for table in reversed(db.metadata.sorted_tables):
                db.session.execute(table.delete())
            db.session.commit()
        except Exception:
            db.session.rollback()
        finally:
            db.session.remove()


@pytest.fixture
def account_store(app, db_session):
    return app.extensions['account_store']


@pytest.fixture
def event_store(app, db_session):
    return app.extensions['event_store']


@pytest.fixture
def member(db_session):
    """Create a member account."""
    return AccountFactory.create(username='member', password='memberpassword123')


@pytest.fixture
def admin(db_session):
    """Create an administrator account."""
    return AdminAccountFactory.create(username='admin', password='adminpassword123')


@pytest.fixture
def member_client(app, member):
    """Create a client logged in as a member."""
    client = app.test_client()
    with client.session_transaction() as sess:
        sess['_user_id'] = str(member.id)
        sess['_fresh'] = True
    return client


@pytest.fixture
def admin_client(app, admin):
    """Create a client logged in as an administrator."""
    client = app.test_client()
    with client.session_transaction() as sess:
        sess['_user_id'] = str(admin.id)
        sess['_fresh'] = True
    return client


@pytest.fixture
def admin_token(app, admin):
    """Bearer token for the administrator account."""
    with app.test_request_context():
        return generate_api_token(admin)


@pytest.fixture
def pending_event(db_session):
    return EventFactory.create(title='Pending Event')


@pytest.fixture
def approved_event(db_session):
    return ApprovedEventFactory.create(title='Approved Event')
