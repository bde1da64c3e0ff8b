"""
Django management command to export purchases and their order lines to CSV,
one row per order detail.
"""
import pandas as pd
from django.core.management.base import BaseCommand, CommandError

from purchases.models import PaymentStatus
from purchases.store import PurchaseStore

COLUMNS = [
    'purchase_id', 'external_reference', 'buyer_email', 'buyer_name', 'status',
    'order_status', 'amount', 'currency', 'wompi_transaction_id', 'created_at',
    'product_name', 'quantity', 'unit_price', 'total_price', 'selected_color',
]


def purchases_dataframe(purchases):
    rows = []
    for purchase in purchases:
        header = {
            'purchase_id': purchase.pk,
            'external_reference': purchase.external_reference,
            'buyer_email': purchase.buyer_email,
            'buyer_name': purchase.buyer_name,
            'status': purchase.status,
            'order_status': purchase.order_status,
            'amount': purchase.amount,
            'currency': purchase.currency,
            'wompi_transaction_id': purchase.wompi_transaction_id,
            'created_at': purchase.created_at.isoformat(),
        }
        for detail in purchase.order_details.all():
            rows.append({
                **header,
                'product_name': detail.product_name,
                'quantity': detail.quantity,
                'unit_price': float(detail.unit_price),
                'total_price': float(detail.total_price),
                'selected_color': detail.selected_color,
            })
    return pd.DataFrame(rows, columns=COLUMNS)


class Command(BaseCommand):
    help = 'Export purchases with their order details to a CSV file'

    def add_arguments(self, parser):
        parser.add_argument('--output', type=str, default='purchases.csv',
                            help='Path of the CSV file to write')
        parser.add_argument('--status', type=str,
                            help='Only export purchases with this payment status')

    def handle(self, *args, **options):
        status = options.get('status')
        if status:
            status = PaymentStatus.normalize(status)
            if status not in PaymentStatus.ALL:
                raise CommandError(f"Unknown status '{options['status']}'")

        purchases = PurchaseStore().list_with_details(order_by='-created_at', status=status)
        df = purchases_dataframe(purchases)
        df.to_csv(options['output'], index=False)

        self.stdout.write(self.style.SUCCESS(
            f"Exported {len(purchases)} purchase(s) / {len(df)} line(s) to {options['output']}"
        ))
