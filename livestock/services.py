"""
Livestock Services

Writes to the Animal aggregate made on behalf of cascades, and the mortality
loss valuation rule.
"""

from decimal import Decimal

from django.utils import timezone

from cascades.exceptions import RelatedAggregateMissing
from .models import Animal, AnimalStatus


class AnimalStateWriter:
    """
    Single-statement updates of cascade-owned Animal fields.

    All writes are unconditional overwrites (last write wins). No check is
    made against a more recent weight capture.
    """

    @staticmethod
    def mark_dead(animal_id):
        updated = Animal.objects.filter(pk=animal_id).update(
            status=AnimalStatus.DEAD,
            updated_at=timezone.now(),
        )
        if updated == 0:
            raise RelatedAggregateMissing('Animal', animal_id)

    @staticmethod
    def overwrite_weight(animal_id, weight, weight_date, recorded_by=''):
        fields = {
            'current_weight': weight,
            'weight_date': weight_date,
            'updated_at': timezone.now(),
        }
        if recorded_by:
            fields['recorded_by'] = recorded_by

        updated = Animal.objects.filter(pk=animal_id).update(**fields)
        if updated == 0:
            raise RelatedAggregateMissing('Animal', animal_id)


def mortality_loss_value(animal, estimated_value=None) -> Decimal:
    """
    Value lost when ``animal`` dies.

    Uses the supplied estimate when it is non-zero, otherwise the animal's
    projected sales price, otherwise the sum of what has been spent on it
    (purchase + feed + medication).
    """
    if estimated_value:
        return Decimal(estimated_value)
    if animal.projected_sales_price:
        return Decimal(animal.projected_sales_price)
    return animal.total_investment
