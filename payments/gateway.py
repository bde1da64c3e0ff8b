"""
Boundary between checkout and whichever payment provider is configured.

Checkout only sees ``PaymentRequest`` going in and ``PaymentResult`` coming
back; the provider class itself is chosen by the ``PAYMENT_GATEWAY_CLASS``
setting.
"""
from dataclasses import dataclass
from typing import Optional, Protocol

from django.conf import settings
from django.utils.module_loading import import_string


@dataclass(frozen=True)
class PaymentRequest:
    external_reference: str
    amount: int
    buyer_email: str
    buyer_name: str
    buyer_identification_number: str
    buyer_contact_number: str
    currency: str = 'COP'
    description: Optional[str] = None


@dataclass(frozen=True)
class PaymentResult:
    transaction_id: str
    payment_url: str


class PaymentGateway(Protocol):
    name: str

    def create_payment(self, request: PaymentRequest) -> PaymentResult:
        ...


def get_payment_gateway():
    gateway_class = import_string(settings.PAYMENT_GATEWAY_CLASS)
    return gateway_class()
