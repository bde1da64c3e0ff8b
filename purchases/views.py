import json
import logging

from django.conf import settings
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from backoffice.auth import token_required
from backoffice.exceptions import ValidationError
from backoffice.http import (
    api_view, error_response, method_not_allowed, parse_int, parse_json_body,
    success_response, validation_error_response,
)
from payments.wompi import verify_event_signature
from .cart import CartItem
from .services import CreatePurchaseRequest, get_purchase_service

logger = logging.getLogger(__name__)

PAYMENT_ERROR_MESSAGE = "Failed to create payment. Please try again later."
BUYER_FIELDS = ('buyerEmail', 'buyerName', 'buyerIdentificationNumber', 'buyerContactNumber')
MAX_ITEM_QUANTITY = 1000


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def build_purchase_request(payload):
    """Check the shape of a create-payment body and turn it into a request object."""
    if any(not payload.get(f) for f in BUYER_FIELDS) or not payload.get('items'):
        raise ValidationError(
            'Missing required fields: buyerEmail, buyerName, buyerIdentificationNumber, '
            'buyerContactNumber, items'
        )

    items = payload['items']
    if not isinstance(items, list) or not items:
        raise ValidationError('items must be a non-empty array')

    cart = []
    for position, item in enumerate(items, start=1):
        if not isinstance(item, dict) or item.get('productId') is None or item.get('quantity') is None:
            raise ValidationError(f'Item {position}: productId and quantity are required')
        if not _is_int(item['productId']) or item['productId'] <= 0:
            raise ValidationError(f'Item {position}: productId must be a positive integer')
        if not _is_int(item['quantity']):
            raise ValidationError(f'Item {position}: quantity must be an integer')
        if item['quantity'] > MAX_ITEM_QUANTITY:
            raise ValidationError(f'Item {position}: quantity cannot exceed {MAX_ITEM_QUANTITY}')
        color = item.get('selectedColor')
        if color is not None and not isinstance(color, str):
            raise ValidationError(f'Item {position}: selectedColor must be a string if provided')
        cart.append(CartItem(
            product_id=item['productId'],
            quantity=item['quantity'],
            selected_color=(color or '').strip() or None,
        ))

    if not all(isinstance(payload[f], str) for f in BUYER_FIELDS):
        raise ValidationError(
            'buyerEmail, buyerName, buyerIdentificationNumber, and buyerContactNumber must be strings'
        )
    shipping = payload.get('shippingAddress')
    if shipping is not None and not isinstance(shipping, str):
        raise ValidationError('shippingAddress must be a string if provided')

    return CreatePurchaseRequest(
        buyer_email=payload['buyerEmail'].strip(),
        buyer_name=payload['buyerName'].strip(),
        buyer_identification_number=payload['buyerIdentificationNumber'].strip(),
        buyer_contact_number=payload['buyerContactNumber'].strip(),
        shipping_address=shipping.strip() if shipping else None,
        items=cart,
    )


@csrf_exempt
@require_POST
def create_payment(request):
    try:
        purchase_request = build_purchase_request(parse_json_body(request))
    except ValidationError as e:
        return validation_error_response(e.errors)

    try:
        result = get_purchase_service().create_purchase(purchase_request)
    except ValidationError as e:
        logger.info('Purchase rejected for %s: %s', purchase_request.buyer_email, e.message)
        return validation_error_response(e.errors)
    except Exception:
        logger.exception('Error creating purchase for %s', purchase_request.buyer_email)
        return error_response(PAYMENT_ERROR_MESSAGE, 500)

    logger.info('Purchase %s created (transaction %s, total %s, %s item(s))',
                result.purchase_id, result.transaction_id, result.total_amount, len(result.items))
    return success_response(
        {
            'message': 'Payment created successfully',
            'purchase': {
                'id': result.purchase_id,
                'totalAmount': result.total_amount,
                'currency': result.currency,
                'status': 'PENDING',
                'orderStatus': 'PENDING',
                'items': result.items,
            },
            'payment': {
                'wompiTransactionId': result.transaction_id,
                'paymentUrl': result.payment_url,
                'provider': result.provider,
            },
        },
        'Payment created successfully with Wompi',
    )


@require_POST
@api_view
def payment_webhook(request):
    try:
        event = json.loads(request.body.decode('utf-8'))
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError('Invalid JSON payload.')

    transaction = (event.get('data') or {}).get('transaction') if isinstance(event, dict) else None
    if not isinstance(transaction, dict) or not transaction.get('status') or not (
            transaction.get('id') or transaction.get('reference')):
        raise ValidationError('Event must include data.transaction with id and status')

    secret = settings.WOMPI_EVENTS_SECRET
    if secret and not verify_event_signature(event, secret):
        logger.warning('Rejected payment event with bad checksum for transaction %s', transaction.get('id'))
        return error_response('Invalid event signature', 401)

    # Payment-link checkouts are tracked by the link id we stored at creation
    transaction_id = transaction.get('payment_link_id') or transaction.get('id')
    logger.info('Payment event %s: transaction %s -> %s',
                event.get('event'), transaction_id, transaction.get('status'))

    purchase = get_purchase_service().update_payment_status(
        transaction_id, transaction['status'], external_reference=transaction.get('reference'),
    )
    return success_response(
        {'purchaseId': purchase.pk if purchase else None, 'status': purchase.status if purchase else None},
        'Event processed',
    )


@require_GET
@api_view
@token_required
def purchase_list(request):
    service = get_purchase_service()
    email = request.GET.get('email', '').strip()
    if email:
        purchases = service.get_purchases_by_email(email)
    else:
        purchases = service.get_all_purchases()
    return success_response(
        {'count': len(purchases), 'purchases': purchases},
        'Purchases retrieved successfully',
    )


@require_GET
@api_view
@token_required
def purchase_backup(request):
    backup = get_purchase_service().generate_backup_data()
    return success_response(backup, 'Backup data generated successfully')


@api_view
@token_required
def purchase_detail(request, purchase_id):
    service = get_purchase_service()

    if request.method == 'GET':
        return success_response(service.get_purchase(purchase_id), 'Purchase retrieved successfully')

    if request.method in ('PATCH', 'PUT'):
        payload = parse_json_body(request)
        for key in ('buyerEmail', 'buyerName', 'buyerContactNumber'):
            if payload.get(key) is not None and not isinstance(payload[key], str):
                raise ValidationError(f'{key} must be a string')
        purchase = service.update_purchase(
            parse_int(purchase_id, 'purchaseId'),
            buyer_email=(payload.get('buyerEmail') or '').strip() or None,
            buyer_name=payload.get('buyerName'),
            buyer_contact_number=(payload.get('buyerContactNumber') or '').strip() or None,
        )
        return success_response(purchase, 'Purchase updated successfully')

    return method_not_allowed(request)
