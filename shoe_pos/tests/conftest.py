import pytest

from shoe_pos.app_container import AppContainer, get_container
from shoe_pos.main import create_app


@pytest.fixture
def app(tmp_path):
    app = create_app({
        'DATA_DIR': str(tmp_path / 'data'),
        'LOG_DIR': str(tmp_path / 'logs'),
        'SECRET_KEY': 'test-secret',
        'ENABLE_PROFILING': False,
    })
    app.config['TESTING'] = True
    yield app
    AppContainer.reset_instance()


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def container(app):
    return get_container()


def auth(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def register(client):
    """Registra un usuario por la API y devuelve (token, user_id)."""
    def _register(role, email, first_name='Test', last_name='User', password='secret123'):
        r = client.post('/api/auth/register', json={
            'email': email,
            'password': password,
            'firstName': first_name,
            'lastName': last_name,
            'role': role,
        })
        assert r.status_code == 201, r.get_json()
        body = r.get_json()
        return body['token'], body['user']['userId']
    return _register


@pytest.fixture
def admin_token(register):
    return register('ADMIN', 'admin@shop.com', first_name='Ana')[0]


@pytest.fixture
def cashier_token(register):
    return register('CASHIER', 'cashier@shop.com', first_name='Carlos')[0]


@pytest.fixture
def super_token(register):
    return register('SUPER_ADMIN', 'root@shop.com', first_name='Root')[0]


@pytest.fixture
def make_product(client, admin_token):
    def _make(**overrides):
        payload = {
            'name': 'Runner',
            'description': 'Light running shoe',
            'price': 15.0,
            'category': 'SPORTS_SHOES',
            'gender': 'UNISEX',
            'brand': 'Stride',
            'color': 'Black',
            'sizes': [{'size': '9', 'quantity': 10}],
        }
        payload.update(overrides)
        r = client.post('/api/products', json=payload, headers=auth(admin_token))
        assert r.status_code == 201, r.get_json()
        return r.get_json()['product']
    return _make


@pytest.fixture
def make_customer(client, admin_token):
    counter = {'n': 0}

    def _make(**overrides):
        counter['n'] += 1
        payload = {
            'firstName': 'Lucia',
            'lastName': 'Gomez',
            'email': f"lucia{counter['n']}@example.com",
            'phone': '555-0100',
        }
        payload.update(overrides)
        r = client.post('/api/customers', json=payload, headers=auth(admin_token))
        assert r.status_code == 201, r.get_json()
        return r.get_json()['customer']
    return _make
