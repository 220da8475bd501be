"""
Admin configuration for Inventory models.
"""

from django.contrib import admin
from django.utils.html import format_html

from cascades.admin import CASCADE_FIELDSET, CASCADE_READONLY_FIELDS, CascadeStatusAdminMixin
from .models import InventoryItem, InventoryLossRecord


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'quantity_display', 'unit', 'cost_price', 'total_consumed']
    list_filter = ['category']
    search_fields = ['name', 'category']
    list_per_page = 50
    readonly_fields = ['total_consumed', 'created_at', 'updated_at']

    fieldsets = (
        ('Item', {
            'fields': ('name', 'category', 'unit', 'date_added')
        }),
        ('Stock', {
            'fields': ('quantity', 'min_stock', 'total_consumed')
        }),
        ('Pricing', {
            'fields': ('cost_price', 'price')
        }),
        ('Notes', {
            'fields': ('notes', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def quantity_display(self, obj):
        if obj.is_low_stock:
            return format_html('<strong style="color: #c0392b;">{}</strong>', obj.quantity)
        return obj.quantity
    quantity_display.short_description = 'Quantity'


@admin.register(InventoryLossRecord)
class InventoryLossRecordAdmin(CascadeStatusAdminMixin, admin.ModelAdmin):
    list_display = ['item_name', 'loss_type', 'quantity', 'unit_cost', 'total_loss', 'date', 'cascade_badge']
    list_filter = ['loss_type', 'cascade_status', 'date']
    search_fields = ['item_name', 'reason', 'reported_by']
    date_hierarchy = 'date'
    readonly_fields = ['item_name', 'total_loss', 'created_at', 'updated_at'] + CASCADE_READONLY_FIELDS

    fieldsets = (
        ('Loss', {
            'fields': ('inventory_item', 'item_name', 'loss_type', 'quantity',
                       'unit_cost', 'total_loss', 'date')
        }),
        ('Details', {
            'fields': ('reason', 'reported_by', 'notes')
        }),
        CASCADE_FIELDSET,
    )
