import json
from decimal import Decimal

import pytest

from catalog.models import Category, Product


def send(client, method, url, payload, headers):
    return getattr(client, method)(url, data=json.dumps(payload), content_type='application/json', **headers)


def product_payload(category, **overrides):
    payload = {
        'name': 'Forest mural',
        'description': 'Large forest mural',
        'price': 45000,
        'images': ['https://cdn.example.com/forest.png'],
        'categoryId': category.pk,
        'colors': ['Azúl', ' verde '],
    }
    payload.update(overrides)
    return payload


def test_product_listing_is_public(client, make_product):
    make_product(name='Forest')
    make_product(name='Dunes', is_showcase=True)

    response = client.get('/products')
    assert response.status_code == 200
    assert response.json()['data']['count'] == 2

    showcase = client.get('/products', {'showcase': 'true'}).json()['data']['products']
    assert [p['name'] for p in showcase] == ['Dunes']


def test_product_filters(client, make_product):
    make_product(name='Cheap', price=Decimal('1000'))
    make_product(name='Pricey', price=Decimal('90000'), status=Product.STATUS_OUT_OF_STOCK)

    names = lambda r: [p['name'] for p in r.json()['data']['products']]
    assert names(client.get('/products', {'minPrice': '5000'})) == ['Pricey']
    assert names(client.get('/products', {'status': 'available'})) == ['Cheap']
    assert names(client.get('/products', {'name': 'chea'})) == ['Cheap']


def test_create_product_requires_token(client, category):
    response = send(client, 'post', '/products', product_payload(category), {})
    assert response.status_code == 401
    assert Product.objects.count() == 0


def test_create_product_normalizes_colors(client, category, auth_headers):
    response = send(client, 'post', '/products', product_payload(category), auth_headers)

    assert response.status_code == 201
    data = response.json()['data']
    assert data['price'] == 45000
    assert data['colors'] == ['AZUL', 'VERDE']
    assert data['status'] == 'available'
    assert data['category']['name'] == 'Wallpapers'


@pytest.mark.parametrize('overrides', [
    {'price': 0},
    {'price': 'abc'},
    {'images': []},
    {'originalPrice': -1},
    {'status': 'discontinued'},
    {'categoryId': 999999},
    {'name': ''},
])
def test_create_product_validation(client, category, auth_headers, overrides):
    response = send(client, 'post', '/products', product_payload(category, **overrides), auth_headers)
    assert response.status_code == 400
    assert Product.objects.count() == 0


def test_update_and_delete_product(client, make_product, auth_headers):
    product = make_product()

    response = send(client, 'put', f'/products/{product.pk}', {'price': 55000.5, 'colors': 'Rojo'}, auth_headers)
    assert response.status_code == 200
    assert response.json()['data']['price'] == 55000.5
    assert response.json()['data']['colors'] == ['ROJO']

    assert send(client, 'put', f'/products/{product.pk}', {}, auth_headers).status_code == 400
    assert send(client, 'put', '/products/999999', {'name': 'x'}, auth_headers).status_code == 404

    assert client.delete(f'/products/{product.pk}', **auth_headers).status_code == 200
    assert client.get(f'/products/{product.pk}').status_code == 404


def test_category_crud(client, auth_headers, db):
    response = send(client, 'post', '/categories', {'name': 'Murals'}, auth_headers)
    assert response.status_code == 201
    category_id = response.json()['data']['id']

    assert send(client, 'post', '/categories', {'name': 'murals'}, auth_headers).status_code == 409

    response = send(client, 'put', f'/categories/{category_id}', {'description': 'Big walls'}, auth_headers)
    assert response.json()['data']['description'] == 'Big walls'

    assert client.get(f'/categories/{category_id}').status_code == 200
    assert client.delete(f'/categories/{category_id}', **auth_headers).status_code == 200
    assert not Category.objects.filter(pk=category_id).exists()


def test_category_with_products_cannot_be_deleted(client, make_product, category, auth_headers):
    make_product()
    response = client.delete(f'/categories/{category.pk}', **auth_headers)
    assert response.status_code == 409


def test_unsupported_method(client, db):
    assert client.patch('/products').status_code == 405
