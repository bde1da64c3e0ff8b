from datetime import timedelta
from io import StringIO

import pandas as pd
from django.core.management import call_command
from django.utils import timezone

from purchases.models import OrderDetail, PaymentStatus, Purchase


def make_purchase(reference, transaction_id=None, status=PaymentStatus.PENDING, age_minutes=0):
    purchase = Purchase.objects.create(
        buyer_email='ana@example.com',
        buyer_name='Ana',
        buyer_identification_number='1020304050',
        buyer_contact_number='3001234567',
        amount=20000,
        payment_provider='WOMPI',
        external_reference=reference,
        wompi_transaction_id=transaction_id,
        status=status,
    )
    OrderDetail.objects.create(purchase=purchase, product_name='Forest', quantity=2,
                               unit_price=10000, total_price=20000, selected_color='AZUL')
    if age_minutes:
        Purchase.objects.filter(pk=purchase.pk).update(
            created_at=timezone.now() - timedelta(minutes=age_minutes))
    return purchase


def test_sweep_removes_only_old_orphans(db):
    orphan = make_purchase('REF-old', age_minutes=90)
    recent = make_purchase('REF-new', age_minutes=5)
    attached = make_purchase('REF-paid', transaction_id='link_1', age_minutes=90)

    out = StringIO()
    call_command('sweep_orphan_purchases', '--minutes', '30', stdout=out)

    assert 'Deleted 1 orphan purchase(s)' in out.getvalue()
    remaining = set(Purchase.objects.values_list('pk', flat=True))
    assert remaining == {recent.pk, attached.pk}
    assert not OrderDetail.objects.filter(purchase_id=orphan.pk).exists()


def test_sweep_dry_run_keeps_rows(db):
    make_purchase('REF-old', age_minutes=90)

    out = StringIO()
    call_command('sweep_orphan_purchases', '--dry-run', stdout=out)

    assert 'REF-old' in out.getvalue()
    assert Purchase.objects.count() == 1


def test_export_purchases_writes_csv(db, tmp_path):
    make_purchase('REF-a', transaction_id='link_a', status=PaymentStatus.APPROVED)
    make_purchase('REF-b', transaction_id='link_b')
    target = tmp_path / 'purchases.csv'

    call_command('export_purchases', '--output', str(target), '--status', 'approved', stdout=StringIO())

    df = pd.read_csv(target)
    assert list(df['external_reference']) == ['REF-a']
    assert df.loc[0, 'product_name'] == 'Forest'
    assert df.loc[0, 'total_price'] == 20000
