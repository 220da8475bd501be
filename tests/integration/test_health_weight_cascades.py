"""
Tests for the health record and weight record cascades.

HealthRecord: one unit of medication consumed per treatment entry (entry B
only with needs_multiple_treatments), post-treatment weight copied to the
animal. WeightRecord: the animal's current weight is overwritten.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

pytestmark = pytest.mark.django_db


@pytest.fixture
def dewormer(make_item):
    return make_item(name='Albendazole', quantity=Decimal('20'), cost_price=Decimal('12.00'))


# =============================================================================
# HEALTH RECORD CASCADE
# =============================================================================

class TestMedicationConsumption:
    """Tests for stock consumption by treatment entries."""

    def test_treatment_a_consumes_one_unit(self, animal, medication):
        from livestock.models import HealthRecord

        record = HealthRecord.objects.create(
            animal=animal,
            diagnosis='Pneumonia',
            treatment_a_medication=medication,
        )

        medication.refresh_from_db()
        assert medication.quantity == Decimal('9')
        assert medication.total_consumed == Decimal('1')
        assert record.cascade_status == 'APPLIED'

    def test_treatment_b_ignored_without_multiple_treatments(self, animal, medication, dewormer):
        from livestock.models import HealthRecord

        HealthRecord.objects.create(
            animal=animal,
            treatment_a_medication=medication,
            treatment_b_medication=dewormer,
            needs_multiple_treatments=False,
        )

        dewormer.refresh_from_db()
        assert dewormer.quantity == Decimal('20')
        assert dewormer.total_consumed == Decimal('0')

    def test_both_entries_consume_when_multiple_treatments(self, animal, medication, dewormer):
        from livestock.models import HealthRecord

        record = HealthRecord.objects.create(
            animal=animal,
            treatment_a_medication=medication,
            treatment_b_medication=dewormer,
            needs_multiple_treatments=True,
        )

        medication.refresh_from_db()
        dewormer.refresh_from_db()
        assert medication.quantity == Decimal('9')
        assert dewormer.quantity == Decimal('19')
        assert dewormer.total_consumed == Decimal('1')
        assert record.consumed_medication_ids() == [medication.id, dewormer.id]

    def test_same_medication_in_both_entries_consumes_twice(self, animal, medication):
        from livestock.models import HealthRecord

        HealthRecord.objects.create(
            animal=animal,
            treatment_a_medication=medication,
            treatment_b_medication=medication,
            needs_multiple_treatments=True,
        )

        medication.refresh_from_db()
        assert medication.quantity == Decimal('8')
        assert medication.total_consumed == Decimal('2')

    def test_record_without_treatments_marks_every_step(self, animal):
        from livestock.cascades import HEALTH_RECORD_CASCADE
        from livestock.models import HealthRecord

        record = HealthRecord.objects.create(animal=animal, is_routine=True)

        record.refresh_from_db()
        assert record.cascade_status == 'APPLIED'
        assert record.cascade_steps_applied == HEALTH_RECORD_CASCADE.step_names

    def test_api_create_fills_medication_name(self, api_client, animal, medication):
        response = api_client.post('/api/health-records/', {
            'animal': str(animal.id),
            'diagnosis': 'Foot rot',
            'treatment_a_medication': str(medication.id),
            'treatment_a_dosage': '5ml',
            'treatment_a_route': 'IM',
        }, format='json')

        assert response.status_code == 201
        assert response.data['treatment_a_medication_name'] == 'Oxytetracycline'
        assert response.data['cascade_status'] == 'APPLIED'

    def test_api_rejects_unknown_medication(self, api_client, animal):
        import uuid

        response = api_client.post('/api/health-records/', {
            'animal': str(animal.id),
            'treatment_a_medication': str(uuid.uuid4()),
        }, format='json')

        assert response.status_code == 400
        assert 'treatment_a_medication' in response.data


class TestPostTreatmentWeight:
    """Tests for post_weight propagation."""

    def test_post_weight_overwrites_current_weight(self, animal):
        from livestock.models import HealthRecord

        record = HealthRecord.objects.create(animal=animal, post_weight=Decimal('45.50'))

        animal.refresh_from_db()
        assert animal.current_weight == Decimal('45.50')
        assert animal.weight_date == record.date

    def test_zero_post_weight_is_ignored(self, make_animal):
        from livestock.models import HealthRecord

        animal = make_animal(current_weight=Decimal('30.00'))
        HealthRecord.objects.create(animal=animal, post_weight=Decimal('0'))

        animal.refresh_from_db()
        assert animal.current_weight == Decimal('30.00')


# =============================================================================
# WEIGHT RECORD CASCADE
# =============================================================================

class TestWeightRecordCascade:
    """Tests for weight captures."""

    def test_api_weight_capture_updates_animal(self, api_client, animal):
        response = api_client.post('/api/weight/', {
            'animal': str(animal.id),
            'weight_kg': '52.30',
            'recorded_by': 'Ama',
        }, format='json')

        assert response.status_code == 201
        assert response.data['cascade_status'] == 'APPLIED'

        animal.refresh_from_db()
        assert animal.current_weight == Decimal('52.30')
        assert animal.recorded_by == 'Ama'

    def test_last_write_wins(self, animal):
        from livestock.models import WeightRecord

        now = timezone.now()
        WeightRecord.objects.create(animal=animal, weight_kg=Decimal('40'), date=now)
        WeightRecord.objects.create(animal=animal, weight_kg=Decimal('38'), date=now - timedelta(days=7))

        animal.refresh_from_db()
        assert animal.current_weight == Decimal('38.00')

    def test_rejects_non_positive_weight(self, api_client, animal):
        response = api_client.post('/api/weight/', {
            'animal': str(animal.id),
            'weight_kg': '0',
        }, format='json')

        assert response.status_code == 400
