"""
Cascade tracking base model.

Trigger-source records (health, mortality, inventory loss, weight) inherit
from CascadeTrackedModel. The fields record which cascade steps have already
been applied for the record, so a replay can finish a partially applied
cascade without repeating the steps that already took effect.
"""

from django.db import models


class CascadeStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    APPLIED = 'APPLIED', 'Applied'
    PARTIAL = 'PARTIAL', 'Partially Applied'
    FAILED = 'FAILED', 'Failed'


class CascadeTrackedModel(models.Model):
    """
    Abstract base for records whose creation propagates side effects into
    other aggregates.
    """

    cascade_status = models.CharField(
        max_length=10,
        choices=CascadeStatus.choices,
        default=CascadeStatus.PENDING,
        db_index=True,
        help_text="Outcome of the last cascade run for this record"
    )
    cascade_steps_applied = models.JSONField(
        default=list,
        blank=True,
        help_text="Names of cascade steps already applied (JSON array)"
    )
    cascade_error = models.TextField(
        blank=True,
        help_text="Error from the last failed cascade step"
    )
    cascade_attempts = models.PositiveIntegerField(default=0)
    cascade_last_attempt_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        abstract = True

    @property
    def cascade_complete(self):
        return self.cascade_status == CascadeStatus.APPLIED
