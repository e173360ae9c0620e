import pytest

from shoe_pos.repositories import ProductRepository, new_id


def auth(token):
    return {'Authorization': f'Bearer {token}'}


def test_create_product_generates_code(make_product):
    first = make_product(category='CASUAL_SHOES')
    second = make_product(category='CASUAL_SHOES')
    other = make_product(category='SANDALS')

    assert first['productCode'] == 'CAS-0001'
    assert second['productCode'] == 'CAS-0002'
    assert other['productCode'] == 'SAN-0001'


def test_next_product_code_skips_gaps():
    products = {
        'a': {'productCode': 'CLO-0003'},
        'b': {'productCode': 'CLO-0010'},
        'c': {'productCode': 'SLI-0042'},
    }
    assert ProductRepository.next_product_code('CLOGS', products) == 'CLO-0011'


def test_total_stock_is_derived(make_product):
    product = make_product(sizes=[{'size': '8', 'quantity': 3}, {'size': '9', 'quantity': 4}])
    assert product['totalStock'] == 7
    assert product['minStockLevel'] == 5


@pytest.mark.parametrize('overrides', [
    {'price': -1},
    {'price': 'ten'},
    {'category': 'BOOTS'},
    {'gender': 'ALIENS'},
    {'name': ''},
    {'sizes': [{'size': '13', 'quantity': 1}]},
    {'sizes': [{'size': '9', 'quantity': -1}]},
    {'sizes': [{'size': '9', 'quantity': 1}, {'size': '9', 'quantity': 2}]},
])
def test_create_product_validation(client, admin_token, overrides):
    payload = {
        'name': 'Runner', 'description': 'x', 'price': 10, 'category': 'SPORTS_SHOES',
        'gender': 'MENS', 'brand': 'B', 'color': 'Red', 'sizes': [],
    }
    payload.update(overrides)
    r = client.post('/api/products', json=payload, headers=auth(admin_token))
    assert r.status_code == 400


def test_update_product(client, admin_token, make_product):
    product = make_product()
    r = client.put(f"/api/products/{product['id']}", json={
        'price': 20.5,
        'sizes': [{'size': '10', 'quantity': 2}],
    }, headers=auth(admin_token))
    assert r.status_code == 200
    updated = r.get_json()['product']
    assert updated['price'] == 20.5
    assert updated['totalStock'] == 2
    assert updated['name'] == product['name']


def test_soft_delete_hides_product(client, admin_token, make_product):
    product = make_product()
    r = client.delete(f"/api/products/{product['id']}", headers=auth(admin_token))
    assert r.status_code == 200

    listed = client.get('/api/products', headers=auth(admin_token)).get_json()
    assert product['id'] not in [p['id'] for p in listed]

    r = client.get(f"/api/products/{product['id']}", headers=auth(admin_token))
    assert r.get_json()['isActive'] is False


def test_product_not_found(client, admin_token):
    assert client.get(f'/api/products/{new_id()}', headers=auth(admin_token)).status_code == 404
    assert client.get('/api/products/not-an-id', headers=auth(admin_token)).status_code == 404


def test_adjust_stock(client, admin_token, make_product):
    product = make_product(sizes=[{'size': '9', 'quantity': 2}])
    url = f"/api/products/{product['id']}/stock"

    r = client.patch(url, json={'size': '9', 'quantity': 5}, headers=auth(admin_token))
    assert r.status_code == 200
    assert r.get_json()['product']['sizes'][0]['quantity'] == 7

    r = client.patch(url, json={'size': '9', 'quantity': -8}, headers=auth(admin_token))
    assert r.status_code == 400
    assert r.get_json()['message'] == 'Insufficient stock for this size'

    r = client.patch(url, json={'size': '12', 'quantity': 1}, headers=auth(admin_token))
    assert r.status_code == 400
    assert r.get_json()['message'] == 'Size not found for this product'

    r = client.patch(url, json={'size': '9'}, headers=auth(admin_token))
    assert r.status_code == 400


def test_low_stock(client, admin_token, make_product):
    low = make_product(name='Low', sizes=[{'size': '9', 'quantity': 2}])
    make_product(name='Plenty', sizes=[{'size': '9', 'quantity': 50}])

    listed = client.get('/api/products/low-stock', headers=auth(admin_token)).get_json()
    assert [p['id'] for p in listed] == [low['id']]


def test_search_products(client, cashier_token, make_product):
    make_product(name='Trail Runner', brand='Peak', price=80, gender='MENS')
    make_product(name='Beach Flip', brand='Sun', price=12, category='BEACHWEAR', gender='WOMENS')

    def search(**params):
        r = client.get('/api/products/search', query_string=params, headers=auth(cashier_token))
        assert r.status_code == 200
        return [p['name'] for p in r.get_json()]

    assert search(query='trail') == ['Trail Runner']
    assert search(query='sun') == ['Beach Flip']
    assert search(category='BEACHWEAR') == ['Beach Flip']
    assert search(gender='MENS') == ['Trail Runner']
    assert search(minPrice=50) == ['Trail Runner']
    assert search(maxPrice=50) == ['Beach Flip']
    assert sorted(search()) == ['Beach Flip', 'Trail Runner']

    r = client.get('/api/products/search', query_string={'minPrice': 'abc'}, headers=auth(cashier_token))
    assert r.status_code == 400


def test_inventory_report(client, admin_token, make_product):
    make_product(name='Full', price=10.0, sizes=[{'size': '9', 'quantity': 20}])
    make_product(name='Low', price=5.0, sizes=[{'size': '8', 'quantity': 1}, {'size': '9', 'quantity': 2}])
    make_product(name='Empty', price=99.0, sizes=[{'size': '10', 'quantity': 0}])

    r = client.get('/api/products/inventory-report', headers=auth(admin_token))
    assert r.status_code == 200
    body = r.get_json()
    assert body['totalItems'] == 23
    assert body['totalValue'] == 215.0
    assert [p['name'] for p in body['lowStockItems']] == ['Low']
    assert all(s['isLowStock'] for s in body['lowStockItems'][0]['sizes'])
    assert [p['name'] for p in body['outOfStockItems']] == ['Empty']


def test_cashier_can_view_but_not_manage(client, cashier_token, make_product):
    product = make_product()

    assert client.get('/api/products', headers=auth(cashier_token)).status_code == 200
    assert client.get(f"/api/products/{product['id']}", headers=auth(cashier_token)).status_code == 403
    assert client.post('/api/products', json={}, headers=auth(cashier_token)).status_code == 403
    r = client.patch(f"/api/products/{product['id']}/stock", json={'size': '9', 'quantity': 1},
                     headers=auth(cashier_token))
    assert r.status_code == 403
    assert 'inventory' in r.get_json()['message']


@pytest.mark.parametrize('price_literal', ['NaN', 'Infinity', '-Infinity'])
def test_non_finite_price_is_rejected(client, admin_token, price_literal):
    body = (
        '{"name": "Runner", "description": "x", "price": %s, "category": "SPORTS_SHOES", '
        '"gender": "MENS", "brand": "B", "color": "Red", "sizes": []}' % price_literal
    )
    r = client.post('/api/products', data=body, content_type='application/json', headers=auth(admin_token))
    assert r.status_code == 400
    assert client.get('/api/products', headers=auth(admin_token)).get_json() == []


def test_price_is_limited_to_cents(client, admin_token, make_product):
    product = make_product()
    r = client.put(f"/api/products/{product['id']}", json={'price': 0.333}, headers=auth(admin_token))
    assert r.status_code == 400
    r = client.put(f"/api/products/{product['id']}", json={'price': 19.99}, headers=auth(admin_token))
    assert r.status_code == 200
    assert r.get_json()['product']['price'] == 19.99


@pytest.mark.parametrize('value', ['inf', 'nan', '-Infinity'])
def test_non_finite_price_filter_is_rejected(client, cashier_token, value):
    r = client.get('/api/products/search', query_string={'maxPrice': value}, headers=auth(cashier_token))
    assert r.status_code == 400
    assert r.get_json()['message'] == 'Invalid maxPrice value'
