"""
Admin configuration for Livestock models.
"""

from django.contrib import admin
from django.utils.html import format_html

from cascades.admin import CASCADE_FIELDSET, CASCADE_READONLY_FIELDS, CascadeStatusAdminMixin
from .models import Animal, HealthRecord, Location, MortalityRecord, WeightRecord


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ['name', 'description', 'created_at']
    search_fields = ['name']


@admin.register(Animal)
class AnimalAdmin(admin.ModelAdmin):
    """Admin for animals. Deletion is replaced by archiving."""
    list_display = [
        'tag_id', 'name', 'species', 'breed', 'status_badge',
        'current_weight', 'location', 'is_archived', 'created_at'
    ]
    list_filter = ['status', 'species', 'is_archived', 'location']
    search_fields = ['tag_id', 'name', 'breed']
    date_hierarchy = 'created_at'
    list_per_page = 50
    readonly_fields = ['current_weight', 'weight_date', 'archived_at', 'created_at', 'updated_at']

    fieldsets = (
        ('Identification', {
            'fields': ('tag_id', 'name', 'species', 'breed', 'animal_class', 'gender',
                       'date_of_birth', 'color', 'location')
        }),
        ('Acquisition', {
            'fields': ('acquisition_type', 'acquisition_date')
        }),
        ('Status', {
            'fields': ('status', 'is_archived', 'archived_at', 'archived_reason')
        }),
        ('Weight', {
            'fields': ('current_weight', 'weight_date', 'recorded_by')
        }),
        ('Financials', {
            'fields': ('purchase_cost', 'margin_percent', 'projected_sales_price',
                       'total_feed_cost', 'total_medication_cost')
        }),
        ('Notes', {
            'fields': ('notes', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def status_badge(self, obj):
        colors = {
            'Alive': '#27ae60',
            'Dead': '#c0392b',
            'Sold': '#2980b9',
            'Archived': '#7f8c8d',
        }
        return format_html(
            '<span style="background-color: {}; color: white; padding: 2px 8px; border-radius: 3px;">{}</span>',
            colors.get(obj.status, '#34495e'), obj.status
        )
    status_badge.short_description = 'Status'

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(WeightRecord)
class WeightRecordAdmin(CascadeStatusAdminMixin, admin.ModelAdmin):
    list_display = ['animal', 'weight_kg', 'date', 'recorded_by', 'cascade_badge']
    list_filter = ['cascade_status', 'date']
    search_fields = ['animal__tag_id', 'recorded_by']
    readonly_fields = ['created_at', 'updated_at'] + CASCADE_READONLY_FIELDS

    fieldsets = (
        ('Weight', {
            'fields': ('animal', 'weight_kg', 'date', 'recorded_by', 'notes')
        }),
        CASCADE_FIELDSET,
    )


@admin.register(HealthRecord)
class HealthRecordAdmin(CascadeStatusAdminMixin, admin.ModelAdmin):
    list_display = [
        'animal', 'date', 'diagnosis', 'treatment_a_medication_name',
        'recovery_status', 'cascade_badge'
    ]
    list_filter = ['cascade_status', 'recovery_status', 'is_routine', 'date']
    search_fields = ['animal__tag_id', 'diagnosis', 'treated_by']
    readonly_fields = ['created_at', 'updated_at'] + CASCADE_READONLY_FIELDS

    fieldsets = (
        ('Examination', {
            'fields': ('animal', 'date', 'is_routine', 'symptoms', 'possible_cause',
                       'diagnosis', 'prescribed_days', 'vaccines', 'pre_weight')
        }),
        ('Treatment A', {
            'fields': ('treatment_a_type', 'treatment_a_medication', 'treatment_a_medication_name',
                       'treatment_a_dosage', 'treatment_a_route')
        }),
        ('Treatment B', {
            'fields': ('needs_multiple_treatments', 'treatment_b_type', 'treatment_b_medication',
                       'treatment_b_medication_name', 'treatment_b_dosage', 'treatment_b_route'),
            'classes': ('collapse',)
        }),
        ('Outcome', {
            'fields': ('treated_by', 'post_observation', 'completion_date',
                       'recovery_status', 'post_weight', 'notes')
        }),
        CASCADE_FIELDSET,
    )


@admin.register(MortalityRecord)
class MortalityRecordAdmin(CascadeStatusAdminMixin, admin.ModelAdmin):
    list_display = ['animal', 'date_of_death', 'cause', 'loss_display', 'cascade_badge']
    list_filter = ['cascade_status', 'date_of_death']
    search_fields = ['animal__tag_id', 'cause', 'reported_by']
    date_hierarchy = 'date_of_death'
    readonly_fields = ['value_lost', 'created_at', 'updated_at'] + CASCADE_READONLY_FIELDS

    fieldsets = (
        ('Death', {
            'fields': ('animal', 'date_of_death', 'cause', 'symptoms', 'days_sick', 'weight')
        }),
        ('Financial Impact', {
            'fields': ('estimated_value', 'value_lost')
        }),
        ('Disposal', {
            'fields': ('disposal_method', 'reported_by', 'notes')
        }),
        CASCADE_FIELDSET,
    )

    def loss_display(self, obj):
        return format_html('<strong style="color: #c0392b;">{}</strong>', f'{obj.value_lost:,.2f}')
    loss_display.short_description = 'Value Lost'
