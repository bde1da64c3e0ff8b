"""
Django management command to delete pending purchases that never got a
payment transaction attached, e.g. after a crash between the database write
and the gateway call on a backend without transactional DDL.
"""
from datetime import timedelta

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction as db_transaction
from django.utils import timezone

from purchases.store import PurchaseStore


class Command(BaseCommand):
    help = 'Delete PENDING purchases without a gateway transaction id older than --minutes'

    def add_arguments(self, parser):
        parser.add_argument(
            '--minutes',
            type=int,
            default=30,
            help='Only sweep purchases created more than this many minutes ago (default 30)'
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without actually deleting'
        )

    def handle(self, *args, **options):
        minutes = options['minutes']
        if minutes < 0:
            raise CommandError('--minutes must be zero or positive')

        cutoff = timezone.now() - timedelta(minutes=minutes)
        orphans = PurchaseStore().find_orphans(cutoff)

        if options['dry_run']:
            self.stdout.write("DRY RUN MODE - No data will be deleted")
            for purchase in orphans:
                self.stdout.write(
                    f"  {purchase.pk}: {purchase.external_reference} "
                    f"({purchase.buyer_email}, {purchase.amount} {purchase.currency})"
                )
            self.stdout.write(f"Orphan purchases found: {orphans.count()}")
            return

        with db_transaction.atomic():
            deleted, per_model = orphans.delete()

        purchases_deleted = per_model.get('purchases.Purchase', 0)
        self.stdout.write(self.style.SUCCESS(
            f"Deleted {purchases_deleted} orphan purchase(s) ({deleted} rows including order details)"
        ))
