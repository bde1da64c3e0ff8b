import hashlib
import hmac
import logging

import requests
from django.conf import settings

from .exceptions import PaymentGatewayError
from .gateway import PaymentResult

logger = logging.getLogger(__name__)


class WompiGateway:
    """Creates single-use Wompi payment links for checkout."""

    name = 'WOMPI'

    def __init__(self, api_url=None, checkout_url=None, private_key=None,
                 redirect_url=None, timeout=None, session=None):
        self.api_url = (api_url or settings.WOMPI_API_URL).rstrip('/')
        self.checkout_url = (checkout_url or settings.WOMPI_CHECKOUT_URL).rstrip('/')
        self.private_key = private_key if private_key is not None else settings.WOMPI_PRIVATE_KEY
        self.redirect_url = redirect_url if redirect_url is not None else settings.WOMPI_REDIRECT_URL
        self.timeout = timeout or settings.WOMPI_TIMEOUT
        self.session = session or requests.Session()

    def build_payload(self, request):
        payload = {
            'name': f'Order {request.external_reference}',
            'description': request.description or f'Purchase by {request.buyer_name}',
            'single_use': True,
            'collect_shipping': False,
            'currency': request.currency,
            # Wompi amounts are always in cents
            'amount_in_cents': int(request.amount) * 100,
            'sku': request.external_reference,
        }
        if self.redirect_url:
            payload['redirect_url'] = self.redirect_url
        return payload

    def create_payment(self, request):
        if not self.private_key:
            raise PaymentGatewayError('WOMPI_PRIVATE_KEY is not configured')

        url = f'{self.api_url}/payment_links'
        logger.info('Creating Wompi payment link for %s (amount %s %s)',
                    request.external_reference, request.amount, request.currency)
        try:
            response = self.session.post(
                url,
                json=self.build_payload(request),
                headers={'Authorization': f'Bearer {self.private_key}'},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error('Wompi request failed for %s: %s', request.external_reference, e)
            raise PaymentGatewayError(f'Wompi request failed: {e}') from e

        if not response.ok:
            logger.error('Wompi rejected payment link for %s: %s %s',
                         request.external_reference, response.status_code, response.text[:500])
            raise PaymentGatewayError(
                f'Wompi responded with status {response.status_code}',
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise PaymentGatewayError('Wompi returned an invalid JSON body') from e

        link_id = (body.get('data') or {}).get('id') if isinstance(body, dict) else None
        if not link_id:
            raise PaymentGatewayError('Wompi response did not include a payment link id')

        link_id = str(link_id)
        logger.info('Wompi payment link %s created for %s', link_id, request.external_reference)
        return PaymentResult(transaction_id=link_id, payment_url=f'{self.checkout_url}/l/{link_id}')


def _lookup(data, dotted_path):
    value = data
    for part in dotted_path.split('.'):
        if not isinstance(value, dict) or part not in value:
            return None
        value = value[part]
    return value


def event_checksum(event, secret):
    """
    SHA-256 over the values named in ``signature.properties`` (looked up in
    ``data``), then the event timestamp, then the events secret.
    """
    signature = event.get('signature') or {}
    data = event.get('data') or {}
    parts = []
    for prop in signature.get('properties') or []:
        value = _lookup(data, prop)
        parts.append('' if value is None else str(value))
    parts.append(str(event.get('timestamp', '')))
    parts.append(secret)
    return hashlib.sha256(''.join(parts).encode('utf-8')).hexdigest()


def verify_event_signature(event, secret):
    signature = event.get('signature')
    if not isinstance(signature, dict) or not signature.get('checksum'):
        return False
    expected = event_checksum(event, secret)
    return hmac.compare_digest(expected.lower(), str(signature['checksum']).lower())
