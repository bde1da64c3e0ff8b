"""Persistence for purchases and their order lines."""
from django.db import transaction as db_transaction
from django.db.models import Q

from .models import OrderDetail, PaymentStatus, Purchase


class PurchaseStore:
    def __init__(self, using='default'):
        self.using = using

    def unit_of_work(self):
        """Atomic block; every write made inside commits or rolls back together."""
        return db_transaction.atomic(using=self.using)

    def _purchases(self):
        return Purchase.objects.using(self.using)

    def create_purchase(self, **fields):
        return self._purchases().create(**fields)

    def add_order_details(self, purchase, validated_items):
        details = [
            OrderDetail(
                purchase=purchase,
                product_name=item.product.name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
                selected_color=item.selected_color,
            )
            for item in validated_items
        ]
        # One INSERT per line so every row gets its primary key on all backends
        for detail in details:
            detail.save(using=self.using)
        return details

    def attach_transaction(self, purchase, transaction_id):
        purchase.preference_id = transaction_id
        purchase.wompi_transaction_id = transaction_id
        purchase.save(using=self.using,
                      update_fields=['preference_id', 'wompi_transaction_id', 'updated_at'])
        return purchase

    def update_purchase(self, purchase, **fields):
        for attr, value in fields.items():
            setattr(purchase, attr, value)
        purchase.save(using=self.using, update_fields=list(fields) + ['updated_at'])
        return purchase

    def find_by_transaction_id(self, transaction_id):
        if not transaction_id:
            return None
        return self._purchases().filter(wompi_transaction_id=transaction_id).first()

    def find_by_external_reference(self, external_reference):
        if not external_reference:
            return None
        return self._purchases().filter(external_reference=external_reference).first()

    def find_by_id_with_details(self, purchase_id):
        return (
            self._purchases()
            .prefetch_related('order_details')
            .filter(pk=purchase_id)
            .first()
        )

    def list_with_details(self, buyer_email=None, order_by='-updated_at', status=None):
        purchases = self._purchases().prefetch_related('order_details')
        if buyer_email:
            purchases = purchases.filter(buyer_email=buyer_email)
        if status:
            purchases = purchases.filter(status=status)
        return list(purchases.order_by(order_by, '-id'))

    def find_orphans(self, older_than):
        """Pending purchases that never got a gateway transaction attached."""
        return (
            self._purchases()
            .filter(status=PaymentStatus.PENDING, created_at__lt=older_than)
            .filter(Q(wompi_transaction_id__isnull=True) | Q(wompi_transaction_id=''))
        )
