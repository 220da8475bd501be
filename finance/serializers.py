"""
Serializers for the finance ledger.
"""

from rest_framework import serializers

from .models import FinanceRecord


class FinanceRecordSerializer(serializers.ModelSerializer):
    related_animal_tag = serializers.CharField(
        source='related_animal.tag_id', read_only=True, allow_null=True
    )
    related_inventory_name = serializers.CharField(
        source='related_inventory.name', read_only=True, allow_null=True
    )

    class Meta:
        model = FinanceRecord
        fields = [
            'id', 'date', 'type', 'category', 'title', 'description', 'amount',
            'payment_method', 'vendor', 'invoice_number', 'status',
            'related_animal', 'related_animal_tag',
            'related_inventory', 'related_inventory_name',
            'source_reference', 'recorded_by', 'notes', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'source_reference', 'created_at', 'updated_at']

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be greater than zero")
        return value
