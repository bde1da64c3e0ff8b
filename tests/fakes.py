"""In-memory stand-ins for the catalog and the payment gateway."""
from decimal import Decimal

from catalog.store import ProductSnapshot
from payments.exceptions import PaymentGatewayError
from payments.gateway import PaymentResult


class FakeCatalog:
    def __init__(self, products=()):
        self.products = {p.id: p for p in products}
        self.lookups = []

    def get_product_by_id(self, product_id):
        self.lookups.append(product_id)
        return self.products.get(product_id)


def snapshot(id, name='Product', price='10000', status='available', colors=()):
    return ProductSnapshot(id=id, name=name, price=Decimal(price), status=status, colors=list(colors))


class FakeGateway:
    name = 'WOMPI'

    def __init__(self, transaction_id='link_test_123'):
        self.transaction_id = transaction_id
        self.requests = []

    def create_payment(self, request):
        self.requests.append(request)
        return PaymentResult(
            transaction_id=self.transaction_id,
            payment_url=f'https://checkout.wompi.co/l/{self.transaction_id}',
        )


class FailingGateway(FakeGateway):
    def create_payment(self, request):
        self.requests.append(request)
        raise PaymentGatewayError('Wompi responded with status 503', status_code=503)
