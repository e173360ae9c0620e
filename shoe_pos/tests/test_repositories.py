import json
import os
import threading
from datetime import datetime, timezone

import pytest

from shoe_pos.models import Product, SizeStock
from shoe_pos.repositories import (
    BaseRepository,
    CustomerRepository,
    IProductRepository,
    ISalesRepository,
    IUserRepository,
    ProductRepository,
    SalesRepository,
    StorageError,
    UnitOfWork,
    UserRepository,
    is_valid_id,
    new_id,
)


def test_files_are_created_empty(tmp_path):
    ProductRepository(str(tmp_path))
    SalesRepository(str(tmp_path))
    with open(tmp_path / 'products.json', encoding='utf-8') as f:
        assert json.load(f) == {}
    with open(tmp_path / 'sales.json', encoding='utf-8') as f:
        assert json.load(f) == []


def test_ids():
    assert is_valid_id(new_id())
    assert not is_valid_id('123')
    assert not is_valid_id(None)
    assert not is_valid_id(new_id().upper())


def test_json_repositories_satisfy_protocols(tmp_path):
    assert isinstance(ProductRepository(str(tmp_path)), IProductRepository)
    assert isinstance(SalesRepository(str(tmp_path)), ISalesRepository)
    assert isinstance(UserRepository(str(tmp_path)), IUserRepository)


def test_corrupt_file_raises_storage_error(tmp_path):
    repo = CustomerRepository(str(tmp_path))
    with open(repo.file_path, 'w', encoding='utf-8') as f:
        f.write('{not json')
    with pytest.raises(StorageError):
        repo.get_all()


def test_unit_of_work_commits_all(tmp_path):
    products = ProductRepository(str(tmp_path))
    sales = SalesRepository(str(tmp_path))

    with UnitOfWork(products, sales) as uow:
        uow.data(products)['p1'] = {'id': 'p1', 'name': 'X'}
        uow.data(sales).append({'id': 's1'})
        uow.commit()

    assert products.get_by_id('p1')['name'] == 'X'
    assert sales.get_sale('s1') == {'id': 's1'}


def test_unit_of_work_discards_without_commit(tmp_path):
    products = ProductRepository(str(tmp_path))

    with pytest.raises(RuntimeError):
        with UnitOfWork(products) as uow:
            uow.data(products)['p1'] = {'id': 'p1'}
            raise RuntimeError('boom')

    assert products.get_all() == {}


def test_unit_of_work_restores_written_files_on_failure(tmp_path, monkeypatch):
    products = ProductRepository(str(tmp_path))
    sales = SalesRepository(str(tmp_path))
    products.save_all({'p1': {'id': 'p1', 'stock': 5}})

    original_write = BaseRepository._write_raw

    def failing_write(self, data):
        if self is sales:
            raise OSError('no space left')
        return original_write(self, data)

    monkeypatch.setattr(BaseRepository, '_write_raw', failing_write)

    with pytest.raises(StorageError):
        with UnitOfWork(products, sales) as uow:
            uow.data(products)['p1']['stock'] = 4
            uow.data(sales).append({'id': 's1'})
            uow.commit()

    monkeypatch.undo()
    assert products.get_by_id('p1')['stock'] == 5
    assert sales.get_all() == []


def test_unit_of_work_releases_lock(tmp_path):
    products = ProductRepository(str(tmp_path))
    with UnitOfWork(products):
        pass

    acquired = []

    def other_thread():
        got = BaseRepository._file_lock.acquire(timeout=1)
        acquired.append(got)
        if got:
            BaseRepository._file_lock.release()

    t = threading.Thread(target=other_thread)
    t.start()
    t.join()
    assert acquired == [True]


def test_no_temp_files_left(tmp_path):
    repo = ProductRepository(str(tmp_path))
    repo.save_all({'a': {'id': 'a'}})
    assert not [n for n in os.listdir(tmp_path) if n.endswith('.tmp')]


def test_sales_by_date_range_is_inclusive(tmp_path):
    repo = SalesRepository(str(tmp_path))
    repo.save_all([
        {'id': 'a', 'createdAt': '2024-01-01T00:00:00+00:00'},
        {'id': 'b', 'createdAt': '2024-01-15T10:00:00'},
        {'id': 'c', 'createdAt': '2024-02-01T00:00:00Z'},
    ])
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    end = datetime(2024, 1, 31, 23, 59, 59, tzinfo=timezone.utc)
    assert [s['id'] for s in repo.get_sales_by_date_range(start, end)] == ['a', 'b']


def test_users_excluding_role(tmp_path):
    repo = UserRepository(str(tmp_path))
    repo.save_all({
        'a': {'id': 'a', 'email': 'A@x.com', 'role': 'SUPER_ADMIN', 'createdAt': '2024-01-01'},
        'b': {'id': 'b', 'email': 'b@x.com', 'role': 'CASHIER', 'createdAt': '2024-01-02'},
        'c': {'id': 'c', 'email': 'c@x.com', 'role': 'ADMIN', 'createdAt': '2024-01-03'},
    })
    assert [u['id'] for u in repo.get_users_excluding_role('SUPER_ADMIN')] == ['c', 'b']
    assert repo.get_user_by_email('a@X.com')['id'] == 'a'


def test_product_total_stock_ignores_stored_value():
    product = Product.from_dict({
        'id': 'p', 'name': 'X', 'totalStock': 999,
        'sizes': [{'size': '9', 'quantity': 2}, {'size': '10', 'quantity': 3}],
    })
    assert product.total_stock == 5
    assert product.is_low_stock
    assert product.get_size('10') == SizeStock('10', 3)
    assert product.get_size('6') is None


def test_data_files_exist_after_create_app(app, container):
    for repo in (container.product_repo, container.customer_repo, container.sales_repo, container.user_repo):
        assert os.path.exists(repo.file_path)


def test_file_creation_failure_raises_storage_error(tmp_path, monkeypatch):
    def failing_write(self, data):
        raise OSError('read-only')

    monkeypatch.setattr(BaseRepository, '_write_raw', failing_write)
    with pytest.raises(StorageError) as exc:
        SalesRepository(str(tmp_path))
    assert 'read-only' in str(exc.value)
