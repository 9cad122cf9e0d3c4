"""
Stockflow Admin.

Provides views for production debugging:
- Warehouse, Location: list + edit
- StockItem: read-only (quantity only changes via StockLedger)
- Receipt, Delivery: read-only with inline lines and an "advance status" action
- HistoryEntry: read-only audit trail
"""

import logging

from django import forms
from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from stockflow.exceptions import InventoryError
from stockflow.models import (
    Delivery,
    DeliveryLine,
    HistoryEntry,
    Location,
    Receipt,
    ReceiptLine,
    StockItem,
    Warehouse,
)

logger = logging.getLogger(__name__)


class ReadOnlyAdminMixin:
    """Nothing can be added, changed or deleted from the admin."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# SITES (editable)
# =========================================================================

class WarehouseAdminForm(forms.ModelForm):
    """Normalizes the short code the way Warehouses.create() does."""

    class Meta:
        model = Warehouse
        fields = ['tenant_id', 'name', 'short_code', 'address']

    def clean_short_code(self):
        return self.cleaned_data['short_code'].strip().upper()


@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    form = WarehouseAdminForm
    list_display = ['short_code', 'name', 'tenant_id', 'address']
    list_filter = ['tenant_id']
    search_fields = ['short_code', 'name']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ['short_code', 'name', 'tenant_id', 'warehouse_name', 'warehouse']
    list_filter = ['tenant_id']
    search_fields = ['short_code', 'name', 'warehouse_name']
    readonly_fields = ['created_at', 'updated_at']


# =========================================================================
# STOCK ITEM ADMIN (read-only)
# =========================================================================

@admin.register(StockItem)
class StockItemAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """StockItem admin — read-only. Stock only changes via StockLedger."""

    list_display = ['product_name', 'product_code', 'tenant_id', 'quantity',
                    'unit_price', 'total_value', 'below_minimum_display']
    list_filter = ['tenant_id', 'status', 'category']
    search_fields = ['product_name', 'product_code', 'supplier_name']

    @admin.display(description=_('Below minimum?'), boolean=True)
    def below_minimum_display(self, obj):
        return obj.min_stock_level > 0 and obj.quantity < obj.min_stock_level


# =========================================================================
# DOCUMENT ADMINS (read-only with advance action)
# =========================================================================

class ReadOnlyLineInline(ReadOnlyAdminMixin, admin.TabularInline):
    fields = ['position', 'product_name', 'product_code', 'quantity',
              'unit_price', 'total_price']
    readonly_fields = fields
    extra = 0


class ReceiptLineInline(ReadOnlyLineInline):
    model = ReceiptLine


class DeliveryLineInline(ReadOnlyLineInline):
    model = DeliveryLine


class DocumentAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_filter = ['status', 'tenant_id', 'scheduled_date']
    search_fields = ['reference', 'responsible', 'contact']
    date_hierarchy = 'created_at'
    actions = ['advance_status']
    documents = None

    @admin.action(description=_('Advance selected documents to their next status'))
    def advance_status(self, request, queryset):
        from stockflow.tenancy import Tenant

        count = 0
        for doc in queryset:
            try:
                self.documents.advance(Tenant(doc.tenant_id), doc.pk)
                count += 1
            except InventoryError as exc:
                logger.warning("advance_status: %s not advanced: %s", doc.reference, exc.code)

        self.message_user(request, _('{count} document(s) advanced.').format(count=count))


@admin.register(Receipt)
class ReceiptAdmin(DocumentAdmin):
    list_display = ['reference', 'receive_from', 'tenant_id', 'status', 'scheduled_date']
    inlines = [ReceiptLineInline]

    @property
    def documents(self):
        from stockflow.services.documents import Receipts
        return Receipts


@admin.register(Delivery)
class DeliveryAdmin(DocumentAdmin):
    list_display = ['reference', 'delivery_address', 'tenant_id', 'status', 'scheduled_date']
    inlines = [DeliveryLineInline]

    @property
    def documents(self):
        from stockflow.services.documents import Deliveries
        return Deliveries


# =========================================================================
# HISTORY ADMIN (read-only audit trail)
# =========================================================================

@admin.register(HistoryEntry)
class HistoryEntryAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """HistoryEntry admin — read-only. Immutable audit trail."""

    list_display = ['created_at', 'type', 'operation', 'product_name', 'quantity', 'tenant_id']
    list_filter = ['type', 'tenant_id']
    search_fields = ['operation', 'product_name', 'product_code', 'description']
    date_hierarchy = 'created_at'
