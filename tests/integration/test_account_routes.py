"""
Integration tests for account registration and authentication routes.
"""
import pytest
from unittest.mock import patch
from scheduler.errors import StoreFailure
from scheduler.models import Account


@pytest.mark.integration
@pytest.mark.auth
class TestRegisterRoute:

    def test_register(self, client, db_session):
        response = client.post('/api/register', json={
            'username': 'alice',
            'password': 's3cret-pass',
            'email': 'alice@example.com'
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data['username'] == 'alice'
        assert data['email'] == 'alice@example.com'
        assert data['role'] == 'member'
        assert data['createdAt']
        assert 'password' not in data
        assert 'password_hash' not in data
        assert 's3cret-pass' not in response.get_data(as_text=True)

    def test_register_without_email(self, client, db_session):
        response = client.post('/api/register', json={'username': 'alice', 'password': 'pw'})

        assert response.status_code == 201
        assert response.get_json()['email'] is None

    def test_register_duplicate(self, client, member, db_session):
        response = client.post('/api/register', json={'username': 'member', 'password': 'other'})

        assert response.status_code == 409
        assert response.get_json()['code'] == 'duplicate_username'
        assert db_session.query(Account).filter_by(username='member').count() == 1

    def test_register_cannot_claim_admin_role(self, client, db_session):
        response = client.post('/api/register', json={
            'username': 'sneaky',
            'password': 'pw',
            'role': 'admin'
        })

        assert response.status_code == 201
        assert response.get_json()['role'] == 'member'

    @pytest.mark.parametrize('payload,field', [
        ({'password': 'pw'}, 'username'),
        ({'username': 'alice'}, 'password'),
        ({'username': '', 'password': 'pw'}, 'username'),
        ({'username': 'alice', 'password': None}, 'password'),
        ({'username': 'alice', 'password': 'pw', 'email': 'not-an-email'}, 'email'),
    ])
    def test_register_invalid_input(self, client, db_session, payload, field):
        response = client.post('/api/register', json=payload)

        assert response.status_code == 400
        data = response.get_json()
        assert data['success'] is False
        assert data['code'] == 'invalid_input'
        assert field in data['errors']

    def test_register_requires_json_object(self, client, db_session):
        response = client.post('/api/register', json=['alice', 'pw'])

        assert response.status_code == 400
        assert response.get_json()['code'] == 'invalid_input'


@pytest.mark.integration
@pytest.mark.auth
class TestLoginRoute:

    def test_login(self, client, member):
        response = client.post('/api/login', json={
            'username': 'member',
            'password': 'memberpassword123'
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['username'] == 'member'
        assert data['role'] == 'member'
        assert data['token']
        assert 'password_hash' not in data

    def test_login_starts_session(self, client, member):
        client.post('/api/login', json={'username': 'member', 'password': 'memberpassword123'})

        response = client.get('/api/me')

        assert response.status_code == 200
        assert response.get_json()['username'] == 'member'

    def test_login_token_authenticates(self, app, client, member):
        token = client.post('/api/login', json={
            'username': 'member',
            'password': 'memberpassword123'
        }).get_json()['token']

        fresh_client = app.test_client()
        response = fresh_client.get('/api/me', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 200
        assert response.get_json()['username'] == 'member'

    def test_wrong_password_and_unknown_user_look_the_same(self, client, member):
        wrong_password = client.post('/api/login', json={
            'username': 'member',
            'password': 'wrongpassword'
        })
        unknown_user = client.post('/api/login', json={
            'username': 'nobody',
            'password': 'memberpassword123'
        })

        assert wrong_password.status_code == 401
        assert unknown_user.status_code == 401
        assert wrong_password.get_json() == unknown_user.get_json()
        assert wrong_password.get_json()['code'] == 'invalid_credentials'

    def test_login_missing_fields(self, client, db_session):
        response = client.post('/api/login', json={'username': 'member'})

        assert response.status_code == 400
        assert 'password' in response.get_json()['errors']

    def test_login_updates_last_login(self, client, member, db_session):
        client.post('/api/login', json={'username': 'member', 'password': 'memberpassword123'})

        db_session.refresh(member)
        assert member.last_login is not None


@pytest.mark.integration
@pytest.mark.auth
class TestSessionRoutes:

    def test_me_requires_login(self, client, db_session):
        response = client.get('/api/me')

        assert response.status_code == 401
        assert response.get_json()['code'] == 'authentication_required'

    def test_me(self, member_client):
        response = member_client.get('/api/me')

        assert response.status_code == 200
        assert response.get_json()['username'] == 'member'

    def test_logout(self, member_client):
        response = member_client.post('/api/logout')

        assert response.status_code == 200
        assert response.get_json()['success'] is True
        assert member_client.get('/api/me').status_code == 401

    def test_logout_requires_login(self, client, db_session):
        assert client.post('/api/logout').status_code == 401

    @pytest.mark.parametrize('header', [
        'Bearer not-a-real-token',
        'Bearer ',
        'Basic dXNlcjpwYXNz',
    ])
    def test_bad_authorization_header(self, client, member, header):
        response = client.get('/api/me', headers={'Authorization': header})

        assert response.status_code == 401


    def test_session_account_loaded_through_store(self, member_client, account_store, member):
        member_id = member.id

        with patch.object(account_store, 'get', wraps=account_store.get) as mock_get:
            response = member_client.get('/api/me')

        assert response.status_code == 200
        mock_get.assert_called_with(member_id)

    def test_token_account_loaded_through_store(self, client, account_store, admin, admin_token):
        admin_id = admin.id

        with patch.object(account_store, 'get', wraps=account_store.get) as mock_get:
            response = client.get('/api/me', headers={'Authorization': f'Bearer {admin_token}'})

        assert response.status_code == 200
        mock_get.assert_called_with(admin_id)

    def test_store_failure_while_loading_account(self, member_client, account_store):
        with patch.object(account_store, 'get', side_effect=StoreFailure()):
            response = member_client.get('/api/me')

        assert response.status_code == 500
        assert response.get_json()['code'] == 'operation_failed'
