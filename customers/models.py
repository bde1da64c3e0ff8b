# customers/models.py
from decimal import Decimal

from django.db import models


class Client(models.Model):
    """
    A business client of the back office. Quotes hang off a client and are
    removed with it.
    """
    name              = models.CharField(max_length=200)
    email             = models.EmailField(unique=True)
    phone             = models.CharField(max_length=50)
    country           = models.CharField(max_length=100)
    company_name      = models.CharField(max_length=200, null=True, blank=True)
    notes             = models.TextField(null=True, blank=True)
    monthly_amount    = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    payment_day_month = models.PositiveSmallIntegerField(null=True, blank=True)
    created_at        = models.DateTimeField(auto_now_add=True)
    updated_at        = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'clients'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} <{self.email}>"


class Quote(models.Model):
    BILLING_MONTHLY = 'MONTHLY'
    BILLING_ANNUAL = 'ANNUAL'
    BILLING_ONETIME = 'ONETIME'
    BILLING_TYPES = (BILLING_MONTHLY, BILLING_ANNUAL, BILLING_ONETIME)

    client       = models.ForeignKey(Client, on_delete=models.CASCADE, related_name='quotes')
    # [{name, quantity, billingType, description?, value}]
    services     = models.JSONField(default=list)
    total_amount = models.DecimalField(max_digits=15, decimal_places=2)
    created_at   = models.DateTimeField(auto_now_add=True)
    updated_at   = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'quotes'
        ordering = ['-created_at']

    def __str__(self):
        return f"Quote {self.pk} - {self.client_id}"

    @staticmethod
    def compute_total(services):
        return sum(
            (Decimal(str(s['value'])) * int(s['quantity']) for s in services),
            Decimal('0'),
        )
