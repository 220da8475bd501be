"""
Admin helpers shared by trigger-record admins.
"""

from django.contrib import admin
from django.utils.html import format_html

from .engine import registry
from .models import CascadeStatus

CASCADE_READONLY_FIELDS = [
    'cascade_status', 'cascade_steps_applied', 'cascade_error',
    'cascade_attempts', 'cascade_last_attempt_at',
]

CASCADE_FIELDSET = ('Cascade', {
    'fields': tuple(CASCADE_READONLY_FIELDS),
    'classes': ('collapse',),
})


class CascadeStatusAdminMixin:
    """Cascade status badge, read-only cascade fields and a replay action."""

    actions = ['replay_cascade']

    def cascade_badge(self, obj):
        colors = {
            CascadeStatus.PENDING: '#95a5a6',
            CascadeStatus.APPLIED: '#27ae60',
            CascadeStatus.PARTIAL: '#e67e22',
            CascadeStatus.FAILED: '#c0392b',
        }
        return format_html(
            '<span style="background-color: {}; color: white; padding: 2px 8px; border-radius: 3px;">{}</span>',
            colors.get(obj.cascade_status, '#34495e'), obj.get_cascade_status_display()
        )
    cascade_badge.short_description = 'Cascade'

    @admin.action(description="Replay cascade for selected records")
    def replay_cascade(self, request, queryset):
        cascade = registry.for_model(queryset.model)
        completed = 0
        for record in queryset.exclude(cascade_status=CascadeStatus.APPLIED):
            if cascade.run(record) == CascadeStatus.APPLIED:
                completed += 1
        self.message_user(request, f"Replayed cascades: {completed} completed")
