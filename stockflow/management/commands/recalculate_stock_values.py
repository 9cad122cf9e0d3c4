"""
Management command to audit and repair stock item values.

Usage:
    python manage.py recalculate_stock_values
    python manage.py recalculate_stock_values --tenant 7 --dry-run
"""

from django.core.management.base import BaseCommand, CommandError

from stockflow import inventory
from stockflow.exceptions import ValidationError
from stockflow.tenancy import Tenant


class Command(BaseCommand):
    """Recalculate total_value = quantity * unit_price."""

    help = 'Recalculates stock item total values that drifted from quantity * unit price'

    def add_arguments(self, parser):
        parser.add_argument(
            '--tenant',
            type=int,
            help='Only check the items of this tenant (user id)',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be fixed without writing',
        )

    def handle(self, *args, **options):
        tenant = None
        if options['tenant'] is not None:
            try:
                tenant = Tenant(options['tenant'])
            except ValidationError as exc:
                raise CommandError(exc.message) from exc

        drifted = inventory.ledger.recalculate_values(tenant=tenant, dry_run=options['dry_run'])

        for item, stored, expected in drifted:
            self.stdout.write(f'{item.product_name} (#{item.pk}): {stored} -> {expected}')

        if options['dry_run']:
            self.stdout.write(f'{len(drifted)} item(s) would be fixed')
        else:
            self.stdout.write(self.style.SUCCESS(f'{len(drifted)} item(s) fixed'))
