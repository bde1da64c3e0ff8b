import json
from decimal import Decimal

import pytest

from customers.models import Client, Quote


def send(client, method, url, payload, headers):
    return getattr(client, method)(url, data=json.dumps(payload), content_type='application/json', **headers)


def client_payload(**overrides):
    payload = {
        'name': 'Acme SAS',
        'email': 'billing@acme.co',
        'phone': '+57 300 123 4567',
        'country': 'Colombia',
        'companyName': 'Acme',
        'monthlyAmount': 1500000,
        'paymentDayMonth': 5,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def acme(db):
    return Client.objects.create(name='Acme SAS', email='billing@acme.co', phone='3001234567', country='Colombia')


def services(*values):
    return [
        {'name': f'Service {i}', 'quantity': qty, 'billingType': 'MONTHLY', 'value': value}
        for i, (qty, value) in enumerate(values)
    ]


def test_clients_require_token(client, db):
    assert client.get('/clients').status_code == 401


def test_create_and_fetch_client(client, auth_headers):
    response = send(client, 'post', '/clients', client_payload(), auth_headers)

    assert response.status_code == 201
    data = response.json()['data']
    assert data['monthlyAmount'] == 1500000
    assert client.get(f"/clients/{data['id']}", **auth_headers).json()['data']['email'] == 'billing@acme.co'


def test_duplicate_email_conflicts(client, auth_headers, acme):
    response = send(client, 'post', '/clients', client_payload(email='BILLING@acme.co'), auth_headers)
    assert response.status_code == 409


@pytest.mark.parametrize('overrides', [
    {'name': ''},
    {'email': 'not-an-email'},
    {'country': None},
    {'paymentDayMonth': 40},
])
def test_client_validation(client, auth_headers, db, overrides):
    response = send(client, 'post', '/clients', client_payload(**overrides), auth_headers)
    assert response.status_code == 400


def test_client_pagination_and_search(client, auth_headers, db):
    for i in range(12):
        Client.objects.create(name=f'Client {i}', email=f'c{i}@example.com', phone='300', country='CO')

    page = client.get('/clients', {'page': 2, 'limit': 5}, **auth_headers).json()['data']
    assert len(page['clients']) == 5
    assert page['pagination'] == {
        'page': 2, 'limit': 5, 'total': 12, 'totalPages': 3, 'hasNext': True, 'hasPrevious': True,
    }

    found = client.get('/clients', {'search': 'c11@'}, **auth_headers).json()['data']
    assert [c['name'] for c in found['clients']] == ['Client 11']

    beyond = client.get('/clients', {'page': 9}, **auth_headers).json()['data']
    assert beyond['clients'] == []


def test_update_client_email_clash(client, auth_headers, acme):
    other = Client.objects.create(name='Other', email='other@example.com', phone='1', country='CO')

    response = send(client, 'patch', f'/clients/{other.pk}', {'email': 'billing@acme.co'}, auth_headers)
    assert response.status_code == 409

    response = send(client, 'patch', f'/clients/{other.pk}', {'notes': 'VIP'}, auth_headers)
    assert response.json()['data']['notes'] == 'VIP'


def test_deleting_client_removes_quotes(client, auth_headers, acme):
    Quote.objects.create(client=acme, services=services((1, 100)), total_amount=Decimal('100'))

    assert client.delete(f'/clients/{acme.pk}', **auth_headers).status_code == 200
    assert Quote.objects.count() == 0
    assert client.get(f'/clients/{acme.pk}', **auth_headers).status_code == 404


def test_create_quote_computes_total(client, auth_headers, acme):
    response = send(client, 'post', '/quotes',
                    {'clientId': acme.pk, 'services': services((2, 150000), (1, 99.5))}, auth_headers)

    assert response.status_code == 201
    data = response.json()['data']
    assert data['totalAmount'] == 300099.5
    assert data['client']['email'] == 'billing@acme.co'


def test_quote_for_missing_client(client, auth_headers, db):
    response = send(client, 'post', '/quotes', {'clientId': 424242, 'services': services((1, 10))}, auth_headers)
    assert response.status_code == 404


def test_quote_service_errors_are_collected(client, auth_headers, acme):
    bad = [{'name': '', 'quantity': 0, 'billingType': 'WEEKLY', 'value': -1}]

    response = send(client, 'post', '/quotes', {'clientId': acme.pk, 'services': bad}, auth_headers)

    assert response.status_code == 400
    assert len(response.json()['errors']) == 4
    assert send(client, 'post', '/quotes', {'clientId': acme.pk, 'services': []}, auth_headers).status_code == 400


def test_quote_update_listing_and_delete(client, auth_headers, acme):
    quote = Quote.objects.create(client=acme, services=services((1, 100)), total_amount=Decimal('100'))

    response = send(client, 'patch', f'/quotes/{quote.pk}', {'services': services((3, 100))}, auth_headers)
    assert response.json()['data']['totalAmount'] == 300

    by_client = client.get('/quotes', {'clientId': acme.pk}, **auth_headers).json()['data']
    assert by_client['pagination']['total'] == 1
    searched = client.get('/quotes', {'search': 'acme'}, **auth_headers).json()['data']
    assert [q['id'] for q in searched['quotes']] == [quote.pk]

    assert client.delete(f'/quotes/{quote.pk}', **auth_headers).status_code == 200
    assert client.get(f'/quotes/{quote.pk}', **auth_headers).status_code == 404


@pytest.mark.parametrize('overrides, message', [
    ({'email': 123}, 'email must be a string'),
    ({'name': ['Acme']}, 'name must be a string'),
])
def test_non_string_client_fields(client, auth_headers, db, overrides, message):
    response = send(client, 'post', '/clients', client_payload(**overrides), auth_headers)

    assert response.status_code == 400
    assert message in response.json()['errors']
    assert Client.objects.count() == 0


def test_non_string_email_on_update(client, auth_headers, acme):
    response = send(client, 'patch', f'/clients/{acme.pk}', {'email': 42}, auth_headers)
    assert response.status_code == 400
