import hashlib
import json

import pytest

from purchases.models import PaymentStatus, Purchase

URL = '/payment/webhook'


@pytest.fixture
def purchase(db):
    return Purchase.objects.create(
        buyer_email='ana@example.com',
        buyer_name='Ana',
        buyer_identification_number='1020304050',
        buyer_contact_number='3001234567',
        amount=30000,
        payment_provider='WOMPI',
        external_reference='REF-1700000000000-abcdefghi',
        preference_id='link_1',
        wompi_transaction_id='link_1',
    )


def event(status, transaction_id='trx_1', reference='REF-1700000000000-abcdefghi', **extra):
    transaction = {'id': transaction_id, 'status': status, 'reference': reference,
                   'amount_in_cents': 3000000}
    transaction.update(extra)
    return {
        'event': 'transaction.updated',
        'data': {'transaction': transaction},
        'signature': {'properties': ['transaction.id', 'transaction.status', 'transaction.amount_in_cents']},
        'timestamp': 1700000000,
    }


def sign(payload, secret):
    tx = payload['data']['transaction']
    raw = f"{tx['id']}{tx['status']}{tx['amount_in_cents']}{payload['timestamp']}{secret}"
    payload['signature']['checksum'] = hashlib.sha256(raw.encode()).hexdigest()
    return payload


def post(client, payload):
    return client.post(URL, data=json.dumps(payload), content_type='application/json')


def test_approves_purchase_by_reference(client, purchase):
    response = post(client, event('APPROVED'))

    assert response.status_code == 200
    purchase.refresh_from_db()
    assert purchase.status == PaymentStatus.APPROVED


def test_payment_link_id_takes_precedence(client, purchase):
    response = post(client, event('DECLINED', reference='other', payment_link_id='link_1'))

    assert response.status_code == 200
    purchase.refresh_from_db()
    assert purchase.status == PaymentStatus.REJECTED


def test_unknown_purchase_still_acknowledged(client, db):
    response = post(client, event('APPROVED', transaction_id='nope', reference='nope'))

    assert response.status_code == 200
    assert response.json()['data']['purchaseId'] is None


def test_malformed_event(client, db):
    response = client.post(URL, data=json.dumps({'event': 'x', 'data': {}}), content_type='application/json')
    assert response.status_code == 400


def test_checksum_enforced_when_secret_configured(client, purchase, settings):
    settings.WOMPI_EVENTS_SECRET = 'events-secret'

    bad = event('APPROVED')
    bad['signature']['checksum'] = 'deadbeef'
    assert post(client, bad).status_code == 401

    good = sign(event('APPROVED'), 'events-secret')
    assert post(client, good).status_code == 200
    purchase.refresh_from_db()
    assert purchase.status == PaymentStatus.APPROVED
