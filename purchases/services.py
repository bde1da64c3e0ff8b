"""
Purchase workflow: validate the buyer and cart, price the order from the
catalog, persist it and open a payment with the gateway inside one database
transaction, then keep the payment status in step with the gateway's events.
"""
import logging
import random
import re
import string
import threading
import time
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from django.conf import settings
from django.utils import timezone

from backoffice.exceptions import (
    EmptyCart, InvalidContact, InvalidEmail, InvalidIdentification, InvalidName,
    NotFoundError, ValidationError,
)
from backoffice.http import as_number
from catalog.store import CatalogStore
from payments.gateway import PaymentRequest, get_payment_gateway
from .cart import CartItem, CartValidator
from .models import PaymentStatus
from .store import PurchaseStore

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

_REFERENCE_ALPHABET = string.digits + string.ascii_lowercase
_references_lock = threading.Lock()
# Suffixes handed out during the current millisecond; older ones can never
# collide again because the millisecond is part of the reference.
_issued_suffixes = set()
_issued_ms = 0


def generate_external_reference():
    """``REF-<epoch ms>-<9 base36 chars>``, never handed out twice by this process."""
    global _issued_ms
    with _references_lock:
        # Never step back in time, so a clock adjustment cannot reuse a millisecond
        now_ms = max(int(time.time() * 1000), _issued_ms)
        if now_ms != _issued_ms:
            _issued_ms = now_ms
            _issued_suffixes.clear()
        while True:
            suffix = ''.join(random.choices(_REFERENCE_ALPHABET, k=9))
            if suffix not in _issued_suffixes:
                _issued_suffixes.add(suffix)
                return f'REF-{now_ms}-{suffix}'


@dataclass
class CreatePurchaseRequest:
    buyer_email: str
    buyer_name: str
    buyer_identification_number: str
    buyer_contact_number: str
    items: List[CartItem] = field(default_factory=list)
    shipping_address: Optional[str] = None


@dataclass
class CreatePurchaseResult:
    purchase_id: int
    transaction_id: str
    payment_url: str
    total_amount: int
    currency: str
    provider: str
    items: list


def validate_purchase_request(request):
    if not request.items:
        raise EmptyCart('At least one item is required')
    if not request.buyer_email or not EMAIL_RE.match(request.buyer_email):
        raise InvalidEmail('Invalid email format')
    if not request.buyer_name or len(request.buyer_name.strip()) < 2:
        raise InvalidName('Buyer name must be at least 2 characters long')
    if not request.buyer_identification_number or len(request.buyer_identification_number) < 6:
        raise InvalidIdentification('Identification number must be at least 6 characters long')
    if not request.buyer_contact_number or len(request.buyer_contact_number) < 10:
        raise InvalidContact('Contact number must be at least 10 characters long')


def format_purchase(purchase):
    details = list(purchase.order_details.all())
    return {
        'id': purchase.pk,
        'buyerEmail': purchase.buyer_email,
        'buyerName': purchase.buyer_name,
        'buyerContactNumber': purchase.buyer_contact_number,
        'shippingAddress': purchase.shipping_address,
        'status': purchase.status,
        'orderStatus': purchase.order_status,
        'amount': purchase.amount,
        'currency': purchase.currency,
        'mercadopagoPaymentId': purchase.mercadopago_payment_id,
        'wompiTransactionId': purchase.wompi_transaction_id,
        'externalReference': purchase.external_reference,
        'items': [
            {
                'productName': d.product_name,
                'quantity': d.quantity,
                'unitPrice': as_number(d.unit_price),
                'totalPrice': as_number(d.total_price),
                'selectedColor': d.selected_color,
            }
            for d in details
        ],
        'createdAt': purchase.created_at.isoformat(),
        'updatedAt': purchase.updated_at.isoformat(),
    }


class PurchaseService:
    def __init__(self, catalog, store, gateway):
        self.catalog = catalog
        self.store = store
        self.gateway = gateway
        self.validator = CartValidator(catalog)

    def create_purchase(self, request):
        """
        Create a purchase and its payment.

        Nothing is written when validation fails. Once writing starts, the
        purchase, its order lines and the gateway transaction id commit
        together or not at all; gateway errors roll everything back and are
        re-raised unchanged.

        Returns:
            CreatePurchaseResult
        """
        logger.info('Creating purchase for %s with %s item(s)', request.buyer_email, len(request.items or []))
        validate_purchase_request(request)

        validated_items = self.validator.validate_and_price(request.items)
        items_sum = sum((item.total_price for item in validated_items), Decimal('0'))
        total_amount = int(items_sum.quantize(Decimal('1'), rounding=ROUND_HALF_UP))
        external_reference = generate_external_reference()
        currency = getattr(settings, 'PURCHASE_CURRENCY', 'COP')

        logger.info('Cart validated: %s line(s), total %s %s, reference %s',
                    len(validated_items), total_amount, currency, external_reference)

        try:
            with self.store.unit_of_work():
                purchase = self.store.create_purchase(
                    buyer_email=request.buyer_email,
                    buyer_name=request.buyer_name,
                    buyer_identification_number=request.buyer_identification_number,
                    buyer_contact_number=request.buyer_contact_number,
                    shipping_address=request.shipping_address,
                    status=PaymentStatus.PENDING,
                    amount=total_amount,
                    currency=currency,
                    payment_provider=self.gateway.name,
                    external_reference=external_reference,
                    preference_id='',
                )
                logger.info('Purchase %s created in transaction', purchase.pk)

                details = self.store.add_order_details(purchase, validated_items)
                logger.info('%s order detail(s) created for purchase %s', len(details), purchase.pk)

                payment = self.gateway.create_payment(PaymentRequest(
                    external_reference=external_reference,
                    amount=total_amount,
                    buyer_email=request.buyer_email,
                    buyer_name=request.buyer_name,
                    buyer_identification_number=request.buyer_identification_number,
                    buyer_contact_number=request.buyer_contact_number,
                    currency=currency,
                ))
                logger.info('Gateway transaction %s created for purchase %s',
                            payment.transaction_id, purchase.pk)

                self.store.attach_transaction(purchase, payment.transaction_id)
        except Exception:
            logger.exception('Error creating purchase %s (transaction rolled back)', external_reference)
            raise

        logger.info('Purchase %s committed with transaction %s', purchase.pk, payment.transaction_id)
        return CreatePurchaseResult(
            purchase_id=purchase.pk,
            transaction_id=payment.transaction_id,
            payment_url=payment.payment_url,
            total_amount=total_amount,
            currency=currency,
            provider=self.gateway.name,
            items=[
                {
                    'productName': item.product.name,
                    'quantity': item.quantity,
                    'unitPrice': as_number(item.unit_price),
                    'totalPrice': as_number(item.total_price),
                    'selectedColor': item.selected_color,
                }
                for item in validated_items
            ],
        )

    def update_payment_status(self, transaction_id, status, external_reference=None):
        """
        Apply a gateway-reported status to the matching purchase.

        Returns the updated purchase, or None when no purchase matches or the
        transition is not allowed from the current status.
        """
        new_status = PaymentStatus.normalize(status)
        logger.info('Updating payment status: transaction %s, status %s, reference %s',
                    transaction_id, new_status, external_reference)
        if new_status not in PaymentStatus.ALL:
            raise ValidationError(f'Unknown payment status: {status}')

        purchase = self.store.find_by_transaction_id(transaction_id)
        if purchase is None and external_reference:
            purchase = self.store.find_by_external_reference(external_reference)
        if purchase is None:
            logger.warning('Purchase not found for payment: transaction %s, reference %s',
                           transaction_id, external_reference)
            return None

        if not PaymentStatus.can_transition(purchase.status, new_status):
            logger.warning('Ignoring status change %s -> %s for purchase %s',
                           purchase.status, new_status, purchase.pk)
            return None

        previous = purchase.status
        fields = {'status': new_status}
        if transaction_id:
            fields['wompi_transaction_id'] = transaction_id
        self.store.update_purchase(purchase, **fields)
        logger.info('Payment status updated for purchase %s: %s -> %s', purchase.pk, previous, new_status)
        return purchase

    def get_purchases_by_email(self, email):
        logger.info('Getting purchases by email %s', email)
        purchases = [format_purchase(p) for p in self.store.list_with_details(buyer_email=email)]
        logger.info('Retrieved %s purchase(s) for %s', len(purchases), email)
        return purchases

    def get_all_purchases(self):
        logger.info('Getting all purchases')
        purchases = [format_purchase(p) for p in self.store.list_with_details()]
        logger.info('Retrieved %s purchase(s)', len(purchases))
        return purchases

    def get_purchase(self, purchase_id):
        purchase = self.store.find_by_id_with_details(purchase_id)
        if purchase is None:
            raise NotFoundError('Purchase not found')
        return format_purchase(purchase)

    def update_purchase(self, purchase_id, buyer_email=None, buyer_name=None, buyer_contact_number=None):
        logger.info('Updating purchase %s', purchase_id)
        purchase = self.store.find_by_id_with_details(purchase_id)
        if purchase is None:
            raise NotFoundError('Purchase not found')

        fields = {}
        if buyer_email:
            if not EMAIL_RE.match(buyer_email):
                raise InvalidEmail('Invalid email format')
            fields['buyer_email'] = buyer_email
        if buyer_name:
            if len(buyer_name.strip()) < 2:
                raise InvalidName('Buyer name must be at least 2 characters long')
            fields['buyer_name'] = buyer_name.strip()
        if buyer_contact_number:
            fields['buyer_contact_number'] = buyer_contact_number
        if not fields:
            raise ValidationError('At least one field must be provided for update')

        self.store.update_purchase(purchase, **fields)
        logger.info('Purchase %s updated: %s', purchase_id, ', '.join(sorted(fields)))
        return format_purchase(purchase)

    def generate_backup_data(self):
        logger.info('Generating backup data')
        purchases = self.store.list_with_details(order_by='-created_at')

        counts = {s: 0 for s in PaymentStatus.ALL}
        total_revenue = 0
        sold_products = set()
        for purchase in purchases:
            status = purchase.status.upper()
            if status in counts:
                counts[status] += 1
            if status in PaymentStatus.SUCCESSFUL:
                total_revenue += purchase.amount
                sold_products.update(d.product_name for d in purchase.order_details.all())

        statistics = {
            'totalPurchases': len(purchases),
            'approvedCount': counts[PaymentStatus.APPROVED],
            'completedCount': counts[PaymentStatus.COMPLETED],
            'pendingCount': counts[PaymentStatus.PENDING],
            'cancelledCount': counts[PaymentStatus.CANCELLED],
            'rejectedCount': counts[PaymentStatus.REJECTED],
            'failedCount': counts[PaymentStatus.FAILED],
            'totalRevenue': total_revenue,
            'uniqueProductsSold': len(sold_products),
        }
        logger.info('Backup data generated for %s purchase(s)', len(purchases))
        return {
            'statistics': statistics,
            'allPurchases': [format_purchase(p) for p in purchases],
            'generatedAt': timezone.now().isoformat(),
        }


def get_purchase_service():
    return PurchaseService(CatalogStore(), PurchaseStore(), get_payment_gateway())
