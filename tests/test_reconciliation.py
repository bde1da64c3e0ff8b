import pytest

from backoffice.exceptions import ValidationError
from purchases.cart import CartItem
from purchases.models import PaymentStatus, Purchase
from .test_purchase_service import make_request


@pytest.fixture
def pending(purchase_service, make_product):
    product = make_product()
    result = purchase_service.create_purchase(make_request([CartItem(product.pk, 1)]))
    return Purchase.objects.get(pk=result.purchase_id)


def test_approves_by_transaction_id(purchase_service, pending):
    purchase = purchase_service.update_payment_status('link_test_123', 'approved')

    assert purchase.pk == pending.pk
    pending.refresh_from_db()
    assert pending.status == PaymentStatus.APPROVED


def test_falls_back_to_external_reference(purchase_service, pending):
    purchase = purchase_service.update_payment_status(
        'trx_999', 'APPROVED', external_reference=pending.external_reference)

    assert purchase.pk == pending.pk
    pending.refresh_from_db()
    assert pending.wompi_transaction_id == 'trx_999'


@pytest.mark.parametrize('reported, stored', [
    ('DECLINED', PaymentStatus.REJECTED),
    ('VOIDED', PaymentStatus.CANCELLED),
    ('ERROR', PaymentStatus.FAILED),
])
def test_maps_gateway_vocabulary(purchase_service, pending, reported, stored):
    purchase_service.update_payment_status('link_test_123', reported)
    pending.refresh_from_db()
    assert pending.status == stored


def test_unknown_purchase_is_not_an_error(purchase_service, db, caplog):
    assert purchase_service.update_payment_status('missing', 'APPROVED', external_reference='REF-x') is None
    assert 'Purchase not found' in caplog.text


def test_terminal_status_is_not_reopened(purchase_service, pending):
    purchase_service.update_payment_status('link_test_123', 'DECLINED')

    assert purchase_service.update_payment_status('link_test_123', 'APPROVED') is None
    pending.refresh_from_db()
    assert pending.status == PaymentStatus.REJECTED


def test_approved_can_complete_and_repeat(purchase_service, pending):
    purchase_service.update_payment_status('link_test_123', 'APPROVED')
    assert purchase_service.update_payment_status('link_test_123', 'APPROVED') is not None
    purchase_service.update_payment_status('link_test_123', 'COMPLETED')
    pending.refresh_from_db()
    assert pending.status == PaymentStatus.COMPLETED


def test_unknown_status_raises(purchase_service, pending):
    with pytest.raises(ValidationError):
        purchase_service.update_payment_status('link_test_123', 'MAYBE')
