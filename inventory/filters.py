"""Query filters for inventory endpoints."""

import django_filters

from .models import InventoryLossRecord, InventoryLossType


class InventoryLossRecordFilter(django_filters.FilterSet):
    type = django_filters.ChoiceFilter(field_name='loss_type', choices=InventoryLossType.choices)
    date_from = django_filters.IsoDateTimeFilter(field_name='date', lookup_expr='gte')
    date_to = django_filters.IsoDateTimeFilter(field_name='date', lookup_expr='lte')

    class Meta:
        model = InventoryLossRecord
        fields = ['inventory_item', 'type', 'cascade_status']
