"""
Livestock Signals

Runs the livestock cascades when a trigger record is first saved:
1. WeightRecord → animal weight
2. HealthRecord → medication stock and animal weight
3. MortalityRecord → animal status, loss valuation and finance ledger

The trigger record is already written when these run. Cascade failures are
logged and recorded on the trigger record; they never fail the save.
"""

from django.db.models.signals import post_save
from django.dispatch import receiver

from .cascades import HEALTH_RECORD_CASCADE, MORTALITY_RECORD_CASCADE, WEIGHT_RECORD_CASCADE
from .models import HealthRecord, MortalityRecord, WeightRecord


@receiver(post_save, sender=WeightRecord)
def apply_weight_record(sender, instance, created, raw=False, **kwargs):
    if not created or raw:
        return
    WEIGHT_RECORD_CASCADE.run(instance)


@receiver(post_save, sender=HealthRecord)
def apply_health_record(sender, instance, created, raw=False, **kwargs):
    if not created or raw:
        return
    HEALTH_RECORD_CASCADE.run(instance)


@receiver(post_save, sender=MortalityRecord)
def apply_mortality_record(sender, instance, created, raw=False, **kwargs):
    """
    Mark the animal dead and book the loss.

    Only runs for NEW mortality records; edits never touch the animal or
    the ledger again.
    """
    if not created or raw:
        return
    MORTALITY_RECORD_CASCADE.run(instance)
