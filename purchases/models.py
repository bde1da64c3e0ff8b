# purchases/models.py
from decimal import Decimal

from django.db import models
from django.db.models import Sum


class PaymentStatus:
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    COMPLETED = 'COMPLETED'
    REJECTED = 'REJECTED'
    FAILED = 'FAILED'
    CANCELLED = 'CANCELLED'

    ALL = (PENDING, APPROVED, COMPLETED, REJECTED, FAILED, CANCELLED)
    SUCCESSFUL = (APPROVED, COMPLETED)

    # Wompi transaction statuses that do not share our name
    ALIASES = {
        'DECLINED': REJECTED,
        'VOIDED': CANCELLED,
        'ERROR': FAILED,
    }

    TRANSITIONS = {
        PENDING: {APPROVED, REJECTED, FAILED, CANCELLED},
        APPROVED: {COMPLETED},
    }

    @classmethod
    def normalize(cls, status):
        value = str(status or '').strip().upper()
        return cls.ALIASES.get(value, value)

    @classmethod
    def can_transition(cls, current, new):
        return current == new or new in cls.TRANSITIONS.get(current, set())


class OrderStatus:
    PENDING = 'PENDING'
    PROCESSING = 'PROCESSING'
    SHIPPED = 'SHIPPED'
    DELIVERED = 'DELIVERED'
    CANCELLED = 'CANCELLED'

    ALL = (PENDING, PROCESSING, SHIPPED, DELIVERED, CANCELLED)


class Purchase(models.Model):
    """
    One checkout. ``amount`` is the whole-peso total charged through the
    gateway; the lines that make it up live in ``order_details``.
    """
    buyer_email                 = models.EmailField(db_index=True)
    buyer_name                  = models.CharField(max_length=200)
    buyer_identification_number = models.CharField(max_length=50)
    buyer_contact_number        = models.CharField(max_length=50)
    shipping_address            = models.TextField(null=True, blank=True)
    status                      = models.CharField(
        max_length=20, default=PaymentStatus.PENDING,
        choices=[(s, s.title()) for s in PaymentStatus.ALL],
    )
    order_status                = models.CharField(
        max_length=20, default=OrderStatus.PENDING,
        choices=[(s, s.title()) for s in OrderStatus.ALL],
    )
    amount                      = models.PositiveBigIntegerField()
    currency                    = models.CharField(max_length=3, default='COP')
    payment_provider            = models.CharField(max_length=30)
    external_reference          = models.CharField(max_length=64, unique=True)
    preference_id               = models.CharField(max_length=100, blank=True, default='')
    wompi_transaction_id        = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    mercadopago_payment_id      = models.CharField(max_length=100, null=True, blank=True)
    created_at                  = models.DateTimeField(auto_now_add=True)
    updated_at                  = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'purchases'
        ordering = ['-updated_at']

    def __str__(self):
        return f"Purchase {self.pk} ({self.external_reference})"

    @property
    def items_total(self):
        return (
            self.order_details.aggregate(total=Sum("total_price"))["total"]
            or Decimal("0")
        )


class OrderDetail(models.Model):
    purchase       = models.ForeignKey(Purchase, related_name="order_details",
                                       on_delete=models.CASCADE)
    # Name frozen at checkout; the product may change or disappear later
    product_name   = models.CharField(max_length=200)
    quantity       = models.PositiveIntegerField()
    unit_price     = models.DecimalField(max_digits=10, decimal_places=2)
    total_price    = models.DecimalField(max_digits=15, decimal_places=2)
    selected_color = models.CharField(max_length=100, null=True, blank=True)

    class Meta:
        db_table = 'order_details'
        ordering = ['id']

    def __str__(self):
        return f"{self.quantity} x {self.product_name}"
