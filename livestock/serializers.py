"""
Serializers for Livestock models.

Provides serialization for:
- Animals and locations
- Trigger records (weight, health, mortality) including their cascade status
"""

from rest_framework import serializers

from .models import Animal, HealthRecord, Location, MortalityRecord, WeightRecord

CASCADE_FIELDS = ['cascade_status', 'cascade_steps_applied', 'cascade_error']


# =============================================================================
# LOCATION SERIALIZERS
# =============================================================================

class LocationSerializer(serializers.ModelSerializer):
    animal_count = serializers.SerializerMethodField()

    class Meta:
        model = Location
        fields = ['id', 'name', 'description', 'animal_count', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_animal_count(self, obj):
        return obj.animals.filter(is_archived=False).count()


# =============================================================================
# ANIMAL SERIALIZERS
# =============================================================================

class AnimalSerializer(serializers.ModelSerializer):
    """
    Animal read/write serializer.

    Duplicate tag_id is left to the database unique constraint so the view
    can answer 409 instead of a validation 400.
    """
    location_name = serializers.CharField(source='location.name', read_only=True, allow_null=True)
    total_investment = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Animal
        fields = [
            'id', 'tag_id', 'name', 'species', 'breed', 'animal_class', 'gender',
            'date_of_birth', 'color', 'acquisition_type', 'acquisition_date',
            'status', 'is_archived', 'archived_at', 'archived_reason',
            'location', 'location_name',
            'current_weight', 'weight_date', 'recorded_by',
            'purchase_cost', 'margin_percent', 'projected_sales_price',
            'total_feed_cost', 'total_medication_cost', 'total_investment',
            'notes', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'is_archived', 'archived_at', 'archived_reason', 'updated_at']
        extra_kwargs = {
            'tag_id': {'validators': []},
            'created_at': {'required': False},
        }

    def validate_tag_id(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("tag_id cannot be blank")
        return value


# =============================================================================
# TRIGGER RECORD SERIALIZERS
# =============================================================================

class WeightRecordSerializer(serializers.ModelSerializer):
    animal_tag = serializers.CharField(source='animal.tag_id', read_only=True)

    class Meta:
        model = WeightRecord
        fields = [
            'id', 'animal', 'animal_tag', 'weight_kg', 'date', 'recorded_by', 'notes',
            'created_at', 'updated_at',
        ] + CASCADE_FIELDS
        read_only_fields = ['id', 'created_at', 'updated_at'] + CASCADE_FIELDS


class HealthRecordSerializer(serializers.ModelSerializer):
    animal_tag = serializers.CharField(source='animal.tag_id', read_only=True)

    class Meta:
        model = HealthRecord
        fields = [
            'id', 'animal', 'animal_tag', 'date', 'is_routine', 'symptoms',
            'possible_cause', 'diagnosis', 'prescribed_days', 'vaccines', 'pre_weight',
            'treatment_a_type', 'treatment_a_medication', 'treatment_a_medication_name',
            'treatment_a_dosage', 'treatment_a_route',
            'needs_multiple_treatments',
            'treatment_b_type', 'treatment_b_medication', 'treatment_b_medication_name',
            'treatment_b_dosage', 'treatment_b_route',
            'treated_by', 'post_observation', 'completion_date', 'recovery_status',
            'post_weight', 'notes', 'created_at', 'updated_at',
        ] + CASCADE_FIELDS
        read_only_fields = ['id', 'created_at', 'updated_at'] + CASCADE_FIELDS

    def validate(self, attrs):
        # Fill display names from the referenced medication when omitted
        for slot in ('a', 'b'):
            medication = attrs.get(f'treatment_{slot}_medication')
            name_key = f'treatment_{slot}_medication_name'
            if medication is not None and not attrs.get(name_key):
                attrs[name_key] = medication.name

        post_weight = attrs.get('post_weight')
        if post_weight is not None and post_weight < 0:
            raise serializers.ValidationError({'post_weight': "Weight cannot be negative"})
        return attrs


class MortalityRecordSerializer(serializers.ModelSerializer):
    """
    estimated_value may be omitted; the cascade derives it (and value_lost)
    from the animal after the record is saved.
    """
    animal_tag = serializers.CharField(source='animal.tag_id', read_only=True)

    class Meta:
        model = MortalityRecord
        fields = [
            'id', 'animal', 'animal_tag', 'date_of_death', 'cause', 'symptoms',
            'days_sick', 'weight', 'estimated_value', 'value_lost',
            'disposal_method', 'reported_by', 'notes', 'created_at', 'updated_at',
        ] + CASCADE_FIELDS
        read_only_fields = ['id', 'value_lost', 'created_at', 'updated_at'] + CASCADE_FIELDS
