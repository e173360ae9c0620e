import pytest
from itsdangerous import URLSafeTimedSerializer
from werkzeug.security import check_password_hash

from shoe_pos.models import has_module_access, permissions_for
from shoe_pos.repositories import new_id
from shoe_pos.services.errors import AuthenticationError


def auth(token):
    return {'Authorization': f'Bearer {token}'}


def test_register_returns_token_and_summary(client):
    r = client.post('/api/auth/register', json={
        'email': 'New@Shop.com', 'password': 'secret1', 'firstName': 'Nora', 'lastName': 'Diaz', 'role': 'MANAGER',
    })
    assert r.status_code == 201
    body = r.get_json()
    assert body['token']
    assert body['user']['firstName'] == 'Nora'
    assert body['user']['role'] == 'MANAGER'
    assert 'password' not in body['user']


def test_password_is_hashed(container, register):
    _, user_id = register('CASHIER', 'hash@shop.com', password='plaintext')
    stored = container.user_repo.get_user(user_id)['password']
    assert stored != 'plaintext'
    assert check_password_hash(stored, 'plaintext')


@pytest.mark.parametrize('overrides,message', [
    ({'email': 'not-an-email'}, 'Invalid email format'),
    ({'password': '123'}, 'Password must be at least 6 characters long'),
    ({'role': 'OWNER'}, 'Invalid role'),
    ({'lastName': ''}, 'All fields are required'),
])
def test_register_validation(client, overrides, message):
    payload = {'email': 'a@b.co', 'password': 'secret1', 'firstName': 'A', 'lastName': 'B', 'role': 'CASHIER'}
    payload.update(overrides)
    r = client.post('/api/auth/register', json=payload)
    assert r.status_code == 400
    assert r.get_json()['message'] == message


def test_register_duplicate_email(client, register):
    register('CASHIER', 'twice@shop.com')
    r = client.post('/api/auth/register', json={
        'email': 'TWICE@shop.com', 'password': 'secret1', 'firstName': 'A', 'lastName': 'B', 'role': 'CASHIER',
    })
    assert r.status_code == 400
    assert r.get_json()['message'] == 'User already exists'


def test_login(client, register):
    register('ADMIN', 'boss@shop.com', password='hunter22')

    r = client.post('/api/auth/login', json={'email': 'boss@shop.com', 'password': 'hunter22'})
    assert r.status_code == 200
    token = r.get_json()['token']
    assert client.get('/api/products', headers=auth(token)).status_code == 200

    r = client.post('/api/auth/login', json={'email': 'boss@shop.com', 'password': 'wrong'})
    assert r.status_code == 401
    r = client.post('/api/auth/login', json={'email': 'ghost@shop.com', 'password': 'hunter22'})
    assert r.status_code == 401
    r = client.post('/api/auth/login', json={'email': 'boss@shop.com'})
    assert r.status_code == 400


def test_inactive_user_cannot_login_or_use_token(client, container, register):
    token, user_id = register('ADMIN', 'gone@shop.com', password='secret1')

    users = container.user_repo.get_all()
    users[user_id]['isActive'] = False
    container.user_repo.save_all(users)

    r = client.post('/api/auth/login', json={'email': 'gone@shop.com', 'password': 'secret1'})
    assert r.status_code == 401
    assert client.get('/api/products', headers=auth(token)).status_code == 401


def test_bad_tokens_are_rejected(client, app):
    assert client.get('/api/sales').status_code == 401
    assert client.get('/api/sales', headers={'Authorization': 'Bearer garbage'}).status_code == 401
    assert client.get('/api/sales', headers={'Authorization': 'Basic abc'}).status_code == 401

    forged = URLSafeTimedSerializer('other-secret', salt='shoe-pos-auth').dumps({'userId': new_id()})
    assert client.get('/api/sales', headers=auth(forged)).status_code == 401


def test_expired_token(container, register):
    token, _ = register('CASHIER', 'old@shop.com')
    container.user_service.token_max_age = -1
    with pytest.raises(AuthenticationError):
        container.user_service.authenticate_token(token)


def test_list_users_hides_super_admin(client, super_token, admin_token, cashier_token):
    r = client.get('/api/auth/users', headers=auth(super_token))
    assert r.status_code == 200
    users = r.get_json()
    roles = {u['role'] for u in users}
    assert roles == {'ADMIN', 'CASHIER'}
    assert all('password' not in u for u in users)

    assert client.get('/api/auth/users', headers=auth(admin_token)).status_code == 403


def test_delete_user(client, register, super_token):
    _, cashier_id = register('CASHIER', 'bye@shop.com')
    _, root_id = register('SUPER_ADMIN', 'root2@shop.com')

    r = client.delete(f'/api/auth/users/{cashier_id}', headers=auth(super_token))
    assert r.status_code == 200
    r = client.delete(f'/api/auth/users/{cashier_id}', headers=auth(super_token))
    assert r.status_code == 404

    r = client.delete(f'/api/auth/users/{root_id}', headers=auth(super_token))
    assert r.status_code == 403
    assert r.get_json()['message'] == 'Cannot delete SUPER_ADMIN users'


def test_role_permissions():
    assert has_module_access('CASHIER', 'sales')
    assert has_module_access('CASHIER', ['customer', 'customer.create'])
    assert has_module_access('CASHIER', 'customer')
    assert not has_module_access('CASHIER', 'inventory')
    assert has_module_access('CASHIER', ['inventory', 'products.view'])
    assert has_module_access('MANAGER', 'inventory')
    assert not has_module_access('MANAGER', 'analytics')
    assert has_module_access('ADMIN', 'analytics')
    assert not has_module_access('ADMIN', 'permissions')
    assert has_module_access('SUPER_ADMIN', 'permissions')
    assert not has_module_access('NOBODY', 'sales')
    assert permissions_for('NOBODY') == frozenset()
