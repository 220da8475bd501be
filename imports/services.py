"""
Bulk Reconciliation

Reconciles a batch of external rows against what already exists in one
target collection:

1. Normalize rows (trim keys and string values, drop blank keys)
2. Shape each row into model fields; rows that cannot be shaped are errors
3. One existence query for every unique-key value in the batch
4. Rows whose key already exists are skipped, the rest are inserted together

The insert is best-effort. When the database rejects the batch, the
IMPORT_BATCH_MODE setting decides what happens: ``continue`` retries each
row on its own and reports the rows that still fail, ``abort`` reports one
batch-level error and imports nothing. A result is never reported as a full
success while any row failed.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured, ValidationError
from django.db import DatabaseError, transaction

from .exceptions import RowValidationError
from .registry import ImportTarget

logger = logging.getLogger(__name__)


class BatchMode:
    CONTINUE = 'continue'
    ABORT = 'abort'

    CHOICES = (CONTINUE, ABORT)


def configured_batch_mode():
    mode = (getattr(settings, 'IMPORT_BATCH_MODE', BatchMode.CONTINUE) or BatchMode.CONTINUE).lower()
    if mode not in BatchMode.CHOICES:
        raise ImproperlyConfigured(f"IMPORT_BATCH_MODE must be one of {BatchMode.CHOICES}, got '{mode}'")
    return mode


class RowStatus:
    INSERTED = 'inserted'
    SKIPPED = 'skipped'
    FAILED = 'failed'


@dataclass
class RowOutcome:
    row: int
    status: str
    key: Any = None
    error: str = ''


@dataclass
class ImportResult:
    target: str
    outcomes: List[RowOutcome] = field(default_factory=list)
    batch_errors: List[str] = field(default_factory=list)

    @property
    def imported(self):
        return sum(1 for outcome in self.outcomes if outcome.status == RowStatus.INSERTED)

    @property
    def skipped(self):
        return sum(1 for outcome in self.outcomes if outcome.status == RowStatus.SKIPPED)

    @property
    def errors(self):
        """Error entries: one per batch-level failure, then one per failed row."""
        entries = [{'row': None, 'key': None, 'error': message} for message in self.batch_errors]
        entries.extend(
            {'row': outcome.row, 'key': outcome.key, 'error': outcome.error}
            for outcome in self.outcomes
            if outcome.status == RowStatus.FAILED
        )
        return entries

    def record(self, row, status, key=None, error=''):
        self.outcomes.append(RowOutcome(row=row, status=status, key=key, error=error))

    def to_dict(self):
        return {
            'target': self.target,
            'imported': self.imported,
            'skipped': self.skipped,
            'errors': self.errors,
        }


def normalize_row(row) -> dict:
    """Trim keys and string values; drop columns without a header."""
    normalized = {}
    for key, value in row.items():
        if key is None:
            continue
        key = str(key).strip()
        if not key:
            continue
        normalized[key] = value.strip() if isinstance(value, str) else value
    return normalized


class BulkReconciler:
    """
    Example Usage:
        result = BulkReconciler().reconcile(ImportTargets.lookup('inventory'), rows)
        result.to_dict()   # {'target': 'inventory', 'imported': 1, 'skipped': 1, 'errors': []}
    """

    def __init__(self, batch_mode: Optional[str] = None):
        self.batch_mode = batch_mode or configured_batch_mode()

    def reconcile(self, target: ImportTarget, rows) -> ImportResult:
        result = ImportResult(target=target.name)

        # Shape
        candidates = []
        for index, raw in enumerate(rows, start=1):
            row = normalize_row(raw)
            try:
                values = target.shape_row(row)
            except RowValidationError as e:
                result.record(index, RowStatus.FAILED, key=target.key_from(row), error=str(e))
                continue
            candidates.append((index, values.get(target.unique_field), values))

        # Partition against existing keys (single query)
        keys = {key for _, key, _ in candidates if key not in (None, '')}
        existing = set()
        if keys:
            existing = set(
                target.model.objects
                .filter(**{f'{target.unique_field}__in': keys})
                .values_list(target.unique_field, flat=True)
            )

        pending = []
        for index, key, values in candidates:
            if key not in (None, '') and key in existing:
                result.record(index, RowStatus.SKIPPED, key=key)
            else:
                pending.append((index, key, target.model(**values)))

        self._insert(target, pending, result)
        result.outcomes.sort(key=lambda outcome: outcome.row)

        logger.info(
            f"Import into {target.name}: {result.imported} imported, {result.skipped} skipped, "
            f"{len(result.errors)} error(s)"
        )
        return result

    def _insert(self, target, pending, result):
        if not pending:
            return

        try:
            with transaction.atomic():
                target.model.objects.bulk_create([instance for _, _, instance in pending])
        except (DatabaseError, ValidationError) as e:
            if self.batch_mode == BatchMode.ABORT:
                logger.warning(f"Batch insert into {target.name} rejected, aborting: {str(e)}")
                result.batch_errors.append(f"Batch insert rejected, no rows imported: {e}")
                return

            logger.warning(f"Batch insert into {target.name} rejected, retrying row by row: {str(e)}")
            self._insert_rows(pending, result)
            return

        for index, key, _ in pending:
            result.record(index, RowStatus.INSERTED, key=key)

    def _insert_rows(self, pending, result):
        for index, key, instance in pending:
            try:
                with transaction.atomic():
                    instance.save(force_insert=True)
            except (DatabaseError, ValidationError) as e:
                result.record(index, RowStatus.FAILED, key=key, error=str(e))
            else:
                result.record(index, RowStatus.INSERTED, key=key)
