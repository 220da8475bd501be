"""
Livestock cascades.

Side effects of creating weight, health and mortality records:
1. WeightRecord → Animal.current_weight / weight_date
2. HealthRecord → medication stock (one unit per treatment entry) and,
   with a post-treatment weight, Animal.current_weight / weight_date
3. MortalityRecord → Animal.status = Dead, loss valuation and one
   "Mortality Loss" expense in the finance ledger
"""

from cascades.engine import Cascade, CascadeStep, fetch_or_missing, registry
from finance.models import FinanceCategory
from finance.services import record_cascade_expense, source_reference_for
from inventory.services import StockLedger
from .models import Animal, HealthRecord, MortalityRecord, WeightRecord
from .services import AnimalStateWriter, mortality_loss_value

# Units of medication one treatment entry consumes
TREATMENT_UNIT = 1


# =============================================================================
# WEIGHT RECORD
# =============================================================================

def _apply_weight(record):
    AnimalStateWriter.overwrite_weight(
        record.animal_id,
        record.weight_kg,
        record.date,
        recorded_by=record.recorded_by,
    )


WEIGHT_RECORD_CASCADE = Cascade('weight_record', [
    CascadeStep('apply_weight', _apply_weight),
])


# =============================================================================
# HEALTH RECORD
# =============================================================================

def _consume_treatment_a(record):
    StockLedger().consume(record.treatment_a_medication_id, TREATMENT_UNIT, count_consumption=True)


def _consume_treatment_b(record):
    StockLedger().consume(record.treatment_b_medication_id, TREATMENT_UNIT, count_consumption=True)


def _apply_post_weight(record):
    AnimalStateWriter.overwrite_weight(record.animal_id, record.post_weight, record.date)


HEALTH_RECORD_CASCADE = Cascade('health_record', [
    CascadeStep(
        'consume_treatment_a',
        _consume_treatment_a,
        condition=lambda record: record.treatment_a_medication_id is not None,
    ),
    CascadeStep(
        'consume_treatment_b',
        _consume_treatment_b,
        condition=lambda record: (
            record.needs_multiple_treatments and record.treatment_b_medication_id is not None
        ),
    ),
    CascadeStep(
        'apply_post_weight',
        _apply_post_weight,
        condition=lambda record: record.post_weight is not None and record.post_weight > 0,
    ),
])


# =============================================================================
# MORTALITY RECORD
# =============================================================================

def _mark_animal_dead(record):
    AnimalStateWriter.mark_dead(record.animal_id)


def _derive_loss_value(record):
    animal = fetch_or_missing(Animal, record.animal_id)
    value = mortality_loss_value(animal, record.estimated_value)

    MortalityRecord.objects.filter(pk=record.pk).update(estimated_value=value, value_lost=value)
    record.estimated_value = value
    record.value_lost = value


def _record_loss_expense(record):
    animal = fetch_or_missing(Animal, record.animal_id)
    record_cascade_expense(
        source_reference_for('mortality', record.pk),
        category=FinanceCategory.MORTALITY_LOSS,
        title=f"Mortality - {animal.tag_id}",
        description=record.cause or f"Death of {animal.tag_id}",
        amount=record.value_lost,
        date=record.date_of_death,
        related_animal_id=animal.pk,
        recorded_by=record.reported_by,
    )


MORTALITY_RECORD_CASCADE = Cascade('mortality_record', [
    CascadeStep('mark_animal_dead', _mark_animal_dead),
    CascadeStep('derive_loss_value', _derive_loss_value),
    CascadeStep(
        'record_loss_expense',
        _record_loss_expense,
        condition=lambda record: record.value_lost > 0,
    ),
])


registry.register(WeightRecord, WEIGHT_RECORD_CASCADE)
registry.register(HealthRecord, HEALTH_RECORD_CASCADE)
registry.register(MortalityRecord, MORTALITY_RECORD_CASCADE)
