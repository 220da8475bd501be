"""
Finance Services

Ledger writes performed by cascades.
"""

import logging

from .models import FinanceRecord, FinanceType

logger = logging.getLogger(__name__)


def source_reference_for(kind, record_id):
    """Idempotency key tying a ledger line to the trigger record behind it."""
    return f"{kind}:{record_id}"


def record_cascade_expense(source_reference, *, category, title, amount, date,
                           description='', related_animal_id=None,
                           related_inventory_id=None, recorded_by='System'):
    """
    Create the expense line for a trigger record, once.

    A second call with the same ``source_reference`` returns the existing
    line untouched.

    Returns:
        Tuple of (FinanceRecord, created)
    """
    record, created = FinanceRecord.objects.get_or_create(
        source_reference=source_reference,
        defaults={
            'type': FinanceType.EXPENSE,
            'category': category,
            'title': title,
            'description': description,
            'amount': amount,
            'date': date,
            'related_animal_id': related_animal_id,
            'related_inventory_id': related_inventory_id,
            'recorded_by': recorded_by or 'System',
            'status': 'Completed',
        },
    )

    if created:
        logger.info(f"Booked {category} expense {record.id} ({amount}) for {source_reference}")
    else:
        logger.debug(f"{category} expense for {source_reference} already exists ({record.id}), skipping")
    return record, created
