from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from backoffice.auth import create_token
from catalog.models import Category, Product
from catalog.store import CatalogStore
from purchases.services import PurchaseService
from purchases.store import PurchaseStore
from .fakes import FailingGateway, FakeGateway


@pytest.fixture
def category(db):
    return Category.objects.create(name='Wallpapers', description='Printed wallpapers')


@pytest.fixture
def make_product(category):
    def _make(**kwargs):
        fields = {
            'name': 'Forest mural',
            'description': 'Large forest mural',
            'price': Decimal('10000'),
            'images': ['https://cdn.example.com/forest.png'],
            'category': category,
            'status': Product.STATUS_AVAILABLE,
        }
        fields.update(kwargs)
        return Product.objects.create(**fields)
    return _make


@pytest.fixture
def staff_user(db):
    return get_user_model().objects.create_user(
        'backoffice', 'backoffice@example.com', 'S3cret-pass', is_staff=True,
    )


@pytest.fixture
def auth_headers(staff_user):
    return {'HTTP_AUTHORIZATION': f'Bearer {create_token(staff_user)}'}


def _install(monkeypatch, gateway):
    monkeypatch.setattr(
        'purchases.views.get_purchase_service',
        lambda: PurchaseService(CatalogStore(), PurchaseStore(), gateway),
    )
    return gateway


@pytest.fixture
def gateway(monkeypatch):
    return _install(monkeypatch, FakeGateway())


@pytest.fixture
def failing_gateway(monkeypatch):
    return _install(monkeypatch, FailingGateway())


@pytest.fixture
def purchase_service(db):
    return PurchaseService(CatalogStore(), PurchaseStore(), FakeGateway())
