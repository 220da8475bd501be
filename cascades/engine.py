"""
Cascade Engine

Runs the side effects of a trigger-source record (HealthRecord,
MortalityRecord, InventoryLossRecord, WeightRecord) against the aggregates it
references: animal status/weight, inventory stock and the finance ledger.

Each cascade is an ordered list of named steps. For every step the runner:
1. Skips it if the step name is already in record.cascade_steps_applied
2. Applies it inside its own transaction together with the marker update
3. Stops at the first failure, logs it and records the outcome on the record

Failures never propagate to the caller. The trigger record is already
persisted when the cascade runs and stays persisted; the replay_cascades
management command finishes cascades that stopped part way.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from .exceptions import RelatedAggregateMissing
from .models import CascadeStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CascadeStep:
    """
    A single named side effect.

    ``condition`` decides whether the step has anything to do for a record.
    A step whose condition is false still counts as applied, so a replay
    does not revisit it.
    """
    name: str
    apply: Callable
    condition: Optional[Callable] = None

    def is_needed(self, record) -> bool:
        return self.condition is None or bool(self.condition(record))


class Cascade:
    """An ordered, replayable sequence of cascade steps for one trigger type."""

    def __init__(self, name: str, steps: List[CascadeStep]):
        step_names = [step.name for step in steps]
        if len(set(step_names)) != len(step_names):
            raise ValueError(f"Cascade '{name}' has duplicate step names: {step_names}")
        self.name = name
        self.steps = list(steps)

    def __repr__(self):
        return f"<Cascade {self.name} ({len(self.steps)} steps)>"

    @property
    def step_names(self) -> List[str]:
        return [step.name for step in self.steps]

    def pending_steps(self, record) -> List[CascadeStep]:
        applied = set(record.cascade_steps_applied or [])
        return [step for step in self.steps if step.name not in applied]

    def run(self, record) -> str:
        """
        Apply every step not yet applied for ``record``.

        The applied-step list is re-read under a row lock before each step,
        so two runners holding the same record never apply a step twice.

        Returns the resulting cascade status. Never raises for step failures.
        """
        model = type(record)
        applied = list(record.cascade_steps_applied or [])
        error = ''

        for step in self.pending_steps(record):
            try:
                with transaction.atomic():
                    applied = self._lock_markers(record, applied)
                    if step.name in applied:
                        continue
                    if step.is_needed(record):
                        step.apply(record)
                    applied = applied + [step.name]
                    model.objects.filter(pk=record.pk).update(cascade_steps_applied=applied)
            except RelatedAggregateMissing as e:
                error = f"{step.name}: {e}"
                logger.warning(
                    f"Cascade {self.name} stopped at step '{step.name}' for "
                    f"{model.__name__} {record.pk}: {e}"
                )
                break
            except Exception as e:
                error = f"{step.name}: {e}"
                logger.error(
                    f"Cascade {self.name} failed at step '{step.name}' for "
                    f"{model.__name__} {record.pk}: {str(e)}",
                    exc_info=True
                )
                break

        status = self._status_for(applied)
        now = timezone.now()
        model.objects.filter(pk=record.pk).update(
            cascade_status=status,
            cascade_error=error,
            cascade_attempts=F('cascade_attempts') + 1,
            cascade_last_attempt_at=now,
        )

        record.cascade_steps_applied = applied
        record.cascade_status = status
        record.cascade_error = error
        record.cascade_attempts = (record.cascade_attempts or 0) + 1
        record.cascade_last_attempt_at = now

        if status == CascadeStatus.APPLIED:
            logger.info(f"Cascade {self.name} applied for {model.__name__} {record.pk}")
        return status

    @staticmethod
    def _lock_markers(record, applied):
        """Lock the trigger row and return its stored applied-step list."""
        model = type(record)
        stored = (
            model.objects.select_for_update()
            .filter(pk=record.pk)
            .values_list('cascade_steps_applied', flat=True)
            .first()
        )
        if stored is None and not model.objects.filter(pk=record.pk).exists():
            raise RelatedAggregateMissing(model.__name__, record.pk)
        stored = list(stored or [])
        if set(stored) - set(applied):
            # Another runner got further; pick up what its steps wrote
            record.refresh_from_db()
        return stored

    def _status_for(self, applied: List[str]) -> str:
        done = [name for name in self.step_names if name in applied]
        if len(done) == len(self.steps):
            return CascadeStatus.APPLIED
        if done:
            return CascadeStatus.PARTIAL
        return CascadeStatus.FAILED


class CascadeRegistry:
    """Maps trigger models to their cascade, for replay and inspection."""

    def __init__(self):
        self._cascades: Dict[type, Cascade] = {}

    def register(self, model, cascade: Cascade):
        self._cascades[model] = cascade

    def for_model(self, model) -> Cascade:
        return self._cascades[model]

    def items(self):
        return list(self._cascades.items())

    def labels(self):
        return sorted(model._meta.label_lower for model in self._cascades)


registry = CascadeRegistry()


def fetch_or_missing(model, pk, queryset=None):
    """Fetch an aggregate by id, raising RelatedAggregateMissing if it is gone."""
    queryset = queryset if queryset is not None else model.objects.all()
    try:
        return queryset.get(pk=pk)
    except model.DoesNotExist:
        raise RelatedAggregateMissing(model.__name__, pk)
