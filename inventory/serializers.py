"""
Serializers for Inventory models.
"""

from decimal import Decimal

from rest_framework import serializers

from .models import InventoryItem, InventoryLossRecord


# =============================================================================
# INVENTORY ITEM SERIALIZERS
# =============================================================================

class InventoryItemSerializer(serializers.ModelSerializer):
    """Item create/read. ``quantity`` is the opening stock on create."""
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = InventoryItem
        fields = [
            'id', 'name', 'category', 'quantity', 'unit', 'cost_price', 'price',
            'min_stock', 'total_consumed', 'is_low_stock', 'date_added', 'notes',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'total_consumed', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name cannot be blank")
        return value


class InventoryItemUpdateSerializer(InventoryItemSerializer):
    """Item edits. Stock only moves through restock, treatments and losses."""

    class Meta(InventoryItemSerializer.Meta):
        read_only_fields = ['id', 'quantity', 'total_consumed', 'created_at', 'updated_at']


class RestockSerializer(serializers.Serializer):
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))


# =============================================================================
# INVENTORY LOSS SERIALIZERS
# =============================================================================

class InventoryLossRecordSerializer(serializers.ModelSerializer):
    """
    Loss create/read.

    ``unit_cost`` defaults to the item's cost price (or sale price) when
    omitted or zero; ``total_loss`` is always quantity x unit_cost.
    """
    unit_cost = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False
    )

    class Meta:
        model = InventoryLossRecord
        fields = [
            'id', 'inventory_item', 'item_name', 'loss_type', 'quantity', 'unit_cost',
            'total_loss', 'date', 'reason', 'reported_by', 'notes',
            'created_at', 'updated_at',
            'cascade_status', 'cascade_steps_applied', 'cascade_error',
        ]
        read_only_fields = [
            'id', 'item_name', 'total_loss', 'created_at', 'updated_at',
            'cascade_status', 'cascade_steps_applied', 'cascade_error',
        ]

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("Quantity must be greater than zero")
        return value

    def validate(self, attrs):
        item = attrs['inventory_item']
        attrs['item_name'] = item.name
        if not attrs.get('unit_cost'):
            attrs['unit_cost'] = item.loss_unit_cost
        return attrs
