"""
Initial migration for Stockflow models.
"""

from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


RECEIPT_STATUS = [('draft', 'Draft'), ('ready', 'Ready'), ('done', 'Done')]
DELIVERY_STATUS = [('draft', 'Draft'), ('waiting', 'Waiting'), ('ready', 'Ready'), ('done', 'Done')]
HISTORY_TYPE = [('Receipt', 'Receipt'), ('Delivery', 'Delivery'), ('Inventory', 'Inventory')]


def document_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('tenant_id', models.PositiveIntegerField(db_index=True, verbose_name='Tenant')),
        ('reference', models.CharField(max_length=64, verbose_name='Reference')),
        ('responsible', models.CharField(blank=True, default='', max_length=200, verbose_name='Responsible')),
        ('scheduled_date', models.DateField(blank=True, null=True, verbose_name='Scheduled date')),
        ('contact', models.CharField(blank=True, default='', max_length=200, verbose_name='Contact')),
        ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


def line_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('position', models.PositiveIntegerField(default=0, verbose_name='Position')),
        ('product_name', models.CharField(max_length=200, verbose_name='Product')),
        ('product_code', models.CharField(blank=True, max_length=64, null=True, verbose_name='Product code')),
        ('quantity', models.PositiveIntegerField(verbose_name='Quantity')),
        ('unit_price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, verbose_name='Unit price')),
        ('total_price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=16, verbose_name='Total price')),
    ]


class Migration(migrations.Migration):
    """Create Stockflow models: StockItem, Receipt, Delivery, HistoryEntry, Warehouse, Location."""

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='StockItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.PositiveIntegerField(db_index=True, verbose_name='Tenant')),
                ('product_name', models.CharField(max_length=200, verbose_name='Product')),
                ('product_code', models.CharField(blank=True, max_length=64, null=True, verbose_name='Product code')),
                ('category', models.CharField(blank=True, default='', max_length=100, verbose_name='Category')),
                ('quantity', models.IntegerField(default=0, verbose_name='Quantity')),
                ('unit_price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, verbose_name='Unit price')),
                ('total_value', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=16, verbose_name='Total value')),
                ('supplier_name', models.CharField(blank=True, default='', max_length=200, verbose_name='Supplier')),
                ('location', models.CharField(blank=True, default='', max_length=200, verbose_name='Location')),
                ('min_stock_level', models.IntegerField(default=0, verbose_name='Minimum stock')),
                ('max_stock_level', models.IntegerField(blank=True, null=True, verbose_name='Maximum stock')),
                ('status', models.CharField(default='in_stock', max_length=30, verbose_name='Status')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Stock item',
                'verbose_name_plural': 'Stock items',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['tenant_id', 'status'], name='stock_item_tenant_status_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('tenant_id', 'product_code'), name='unique_stock_item_code_per_tenant'),
                    models.CheckConstraint(condition=models.Q(('quantity__gte', 0)), name='stock_item_quantity_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Receipt',
            fields=document_fields() + [
                ('receive_from', models.CharField(max_length=200, verbose_name='Receive from')),
                ('to_location', models.CharField(blank=True, default='', max_length=200, verbose_name='To location')),
                ('status', models.CharField(choices=RECEIPT_STATUS, db_index=True, default='draft', max_length=20, verbose_name='Status')),
            ],
            options={
                'verbose_name': 'Receipt',
                'verbose_name_plural': 'Receipts',
                'ordering': ['-created_at', '-id'],
                'abstract': False,
                'constraints': [
                    models.UniqueConstraint(fields=('tenant_id', 'reference'), name='stockflow_receipt_unique_reference'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ReceiptLine',
            fields=line_fields() + [
                ('receipt', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='stockflow.receipt', verbose_name='Receipt')),
            ],
            options={
                'verbose_name': 'Receipt line',
                'verbose_name_plural': 'Receipt lines',
                'ordering': ['position', 'id'],
                'abstract': False,
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity__gt', 0)), name='stockflow_receiptline_quantity_positive'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Delivery',
            fields=document_fields() + [
                ('delivery_address', models.CharField(max_length=255, verbose_name='Delivery address')),
                ('operation_type', models.CharField(blank=True, default='', max_length=50, verbose_name='Operation type')),
                ('from_location', models.CharField(blank=True, default='', max_length=200, verbose_name='From location')),
                ('to_location', models.CharField(blank=True, default='', max_length=200, verbose_name='To location')),
                ('status', models.CharField(choices=DELIVERY_STATUS, db_index=True, default='draft', max_length=20, verbose_name='Status')),
            ],
            options={
                'verbose_name': 'Delivery',
                'verbose_name_plural': 'Deliveries',
                'ordering': ['-created_at', '-id'],
                'abstract': False,
                'constraints': [
                    models.UniqueConstraint(fields=('tenant_id', 'reference'), name='stockflow_delivery_unique_reference'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DeliveryLine',
            fields=line_fields() + [
                ('delivery', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='stockflow.delivery', verbose_name='Delivery')),
            ],
            options={
                'verbose_name': 'Delivery line',
                'verbose_name_plural': 'Delivery lines',
                'ordering': ['position', 'id'],
                'abstract': False,
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity__gt', 0)), name='stockflow_deliveryline_quantity_positive'),
                ],
            },
        ),
        migrations.CreateModel(
            name='HistoryEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.PositiveIntegerField(db_index=True, verbose_name='Tenant')),
                ('type', models.CharField(choices=HISTORY_TYPE, db_index=True, max_length=20, verbose_name='Type')),
                ('operation', models.CharField(max_length=100, verbose_name='Operation')),
                ('product_name', models.CharField(blank=True, default='', max_length=200, verbose_name='Product')),
                ('product_code', models.CharField(blank=True, max_length=64, null=True, verbose_name='Product code')),
                ('quantity', models.IntegerField(blank=True, null=True, verbose_name='Quantity')),
                ('previous_quantity', models.IntegerField(blank=True, null=True, verbose_name='Previous quantity')),
                ('new_quantity', models.IntegerField(blank=True, null=True, verbose_name='New quantity')),
                ('price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, verbose_name='Price')),
                ('related_id', models.PositiveIntegerField(blank=True, null=True, verbose_name='Related id')),
                ('description', models.TextField(blank=True, default='', verbose_name='Description')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Created at')),
            ],
            options={
                'verbose_name': 'History entry',
                'verbose_name_plural': 'History',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['tenant_id', 'created_at'], name='history_tenant_created_idx'),
                    models.Index(fields=['tenant_id', 'type'], name='history_tenant_type_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Warehouse',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.PositiveIntegerField(db_index=True, verbose_name='Tenant')),
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('short_code', models.CharField(max_length=20, validators=[django.core.validators.RegexValidator('^[A-Z0-9]+$', code='invalid_short_code', message='Short code must be upper-case letters and digits.')], verbose_name='Short code')),
                ('address', models.CharField(blank=True, default='', max_length=255, verbose_name='Address')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Warehouse',
                'verbose_name_plural': 'Warehouses',
                'ordering': ['-created_at', '-id'],
                'constraints': [
                    models.UniqueConstraint(fields=('tenant_id', 'short_code'), name='unique_warehouse_code_per_tenant'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Location',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.PositiveIntegerField(db_index=True, verbose_name='Tenant')),
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('short_code', models.CharField(max_length=20, verbose_name='Short code')),
                ('warehouse_name', models.CharField(blank=True, default='', max_length=100, verbose_name='Warehouse name')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('warehouse', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='locations', to='stockflow.warehouse', verbose_name='Warehouse')),
            ],
            options={
                'verbose_name': 'Location',
                'verbose_name_plural': 'Locations',
                'ordering': ['-created_at', '-id'],
                'constraints': [
                    models.UniqueConstraint(fields=('tenant_id', 'short_code'), name='unique_location_code_per_tenant'),
                ],
            },
        ),
    ]
