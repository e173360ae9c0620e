import os

from shoe_pos.app_container import AppContainer
from shoe_pos.config import Config
from shoe_pos.main import create_app
from shoe_pos.performance_logger import get_function_stats, reset_stats


def auth(token):
    return {'Authorization': f'Bearer {token}'}


def test_health_and_security_headers(client):
    r = client.get('/api/health')
    assert r.status_code == 200
    assert r.get_json()['status'] == 'ok'
    assert r.headers['X-Frame-Options'] == 'DENY'
    assert r.headers['X-Content-Type-Options'] == 'nosniff'


def test_unknown_route_returns_json(client):
    r = client.get('/api/nothing-here')
    assert r.status_code == 404
    assert 'message' in r.get_json()

    r = client.put('/api/sales')
    assert r.status_code == 405
    assert 'message' in r.get_json()


def test_unexpected_error_is_hidden(client, admin_token, container, monkeypatch):
    def explode():
        raise RuntimeError('secret internals')

    monkeypatch.setattr(container.inventory_service, 'list_products', explode)
    r = client.get('/api/products', headers=auth(admin_token))
    assert r.status_code == 500
    assert r.get_json() == {'message': 'Something went wrong!'}


def test_cors_headers(client):
    r = client.get('/api/health', headers={'Origin': 'http://localhost:3000'})
    assert r.headers.get('Access-Control-Allow-Origin') in ('*', 'http://localhost:3000')


def test_config_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv('SHOE_POS_SECRET_KEY', 'from-env')
    monkeypatch.setenv('SHOE_POS_TOKEN_MAX_AGE', '60')
    monkeypatch.setenv('SHOE_POS_PROFILING', '0')
    monkeypatch.setenv('SHOE_POS_CORS_ORIGINS', 'http://a.test, http://b.test')

    config = Config({'DATA_DIR': str(tmp_path)})
    assert config.SECRET_KEY == 'from-env'
    assert config.TOKEN_MAX_AGE == 60
    assert config.ENABLE_PROFILING is False
    assert config.CORS_ORIGINS == ['http://a.test', 'http://b.test']
    assert config.DATA_DIR == str(tmp_path)
    assert not config.uses_default_secret


def test_default_secret_is_flagged(monkeypatch):
    monkeypatch.delenv('SHOE_POS_SECRET_KEY', raising=False)
    assert Config().uses_default_secret


def test_profiling_logs_routes_and_sale_function(tmp_path):
    log_dir = tmp_path / 'logs'
    app = create_app({
        'DATA_DIR': str(tmp_path / 'data'),
        'LOG_DIR': str(log_dir),
        'SECRET_KEY': 'test-secret',
        'ENABLE_PROFILING': True,
    })
    reset_stats()
    try:
        with app.test_client() as client:
            r = client.post('/api/auth/register', json={
                'email': 'p@shop.com', 'password': 'secret1', 'firstName': 'P', 'lastName': 'Q', 'role': 'ADMIN',
            })
            token = r.get_json()['token']
            product = client.post('/api/products', json={
                'name': 'Clog', 'description': 'd', 'price': 10, 'category': 'CLOGS', 'gender': 'KIDS',
                'brand': 'B', 'color': 'Green', 'sizes': [{'size': '6', 'quantity': 3}],
            }, headers=auth(token)).get_json()['product']
            customer = client.post('/api/customers', json={
                'firstName': 'K', 'lastName': 'L', 'email': 'k@example.com', 'phone': '1',
            }, headers=auth(token)).get_json()['customer']
            r = client.post('/api/sales', json={
                'customerId': customer['id'],
                'items': [{'productId': product['id'], 'size': '6', 'quantity': 1}],
                'paymentMethod': 'CASH',
            }, headers=auth(token))
            assert r.status_code == 201

        assert get_function_stats()['Procesar venta']['calls'] == 1
        with open(os.path.join(log_dir, 'performance.log'), encoding='utf-8') as f:
            content = f.read()
        assert 'Procesar venta' in content
        assert 'p@shop.com' in content
    finally:
        reset_stats()
        AppContainer.reset_instance()


def test_non_object_json_bodies_are_rejected(client, admin_token, make_product, make_customer):
    product = make_product()
    customer = make_customer()
    requests_to_send = [
        ('post', '/api/auth/login'),
        ('post', '/api/auth/register'),
        ('post', '/api/products'),
        ('put', f"/api/products/{product['id']}"),
        ('patch', f"/api/products/{product['id']}/stock"),
        ('post', '/api/customers'),
        ('put', f"/api/customers/{customer['id']}"),
        ('patch', f"/api/customers/{customer['id']}/loyalty-points"),
        ('post', '/api/sales'),
        ('post', '/api/sales/report'),
    ]
    for method, url in requests_to_send:
        for body in ([1, 2], 'text', 7):
            r = getattr(client, method)(url, json=body, headers=auth(admin_token))
            assert r.status_code == 400, (method, url, body, r.get_json())
            assert 'message' in r.get_json()


def test_second_app_logs_to_its_own_directory(tmp_path):
    first_logs = tmp_path / 'first'
    second_logs = tmp_path / 'second'
    try:
        for log_dir in (first_logs, second_logs):
            create_app({
                'DATA_DIR': str(tmp_path / 'data'),
                'LOG_DIR': str(log_dir),
                'LOG_LEVEL': 'INFO',
                'SECRET_KEY': 'test-secret',
                'ENABLE_PROFILING': False,
            })
        names = os.listdir(second_logs)
        assert len(names) == 1
        with open(os.path.join(second_logs, names[0]), encoding='utf-8') as f:
            assert 'SISTEMA INICIADO' in f.read()
    finally:
        AppContainer.reset_instance()
