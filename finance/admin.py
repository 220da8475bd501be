"""
Admin configuration for the finance ledger.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import FinanceRecord


@admin.register(FinanceRecord)
class FinanceRecordAdmin(admin.ModelAdmin):
    list_display = ['date', 'type_badge', 'category', 'title', 'amount_display', 'source_reference']
    list_filter = ['type', 'category', 'status', 'date']
    search_fields = ['title', 'description', 'vendor', 'source_reference']
    date_hierarchy = 'date'
    list_per_page = 50
    ordering = ['-date', '-created_at']
    readonly_fields = ['source_reference', 'created_at', 'updated_at']

    fieldsets = (
        ('Entry', {
            'fields': ('date', 'type', 'category', 'title', 'description', 'amount')
        }),
        ('Payment', {
            'fields': ('payment_method', 'vendor', 'invoice_number', 'status')
        }),
        ('Links', {
            'fields': ('related_animal', 'related_inventory', 'source_reference')
        }),
        ('Metadata', {
            'fields': ('recorded_by', 'notes', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def type_badge(self, obj):
        color = '#27ae60' if obj.type == 'Income' else '#c0392b'
        return format_html(
            '<span style="background-color: {}; color: white; padding: 2px 8px; border-radius: 3px;">{}</span>',
            color, obj.type
        )
    type_badge.short_description = 'Type'

    def amount_display(self, obj):
        return format_html('<strong>{}</strong>', f'{obj.amount:,.2f}')
    amount_display.short_description = 'Amount'
