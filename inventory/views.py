"""
Inventory API Views

API Endpoints:
- /api/inventory/ - List/create stock items
- /api/inventory/{id}/ - Retrieve/update/delete a stock item
- /api/inventory/{id}/restock/ - Add stock (atomic increment)
- /api/inventory-loss/ - List/create loss records (deduct stock, book expense)
- /api/inventory-loss/{id}/ - Retrieve a loss record
"""

import logging

from django.shortcuts import get_object_or_404
from rest_framework import filters, generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from django_filters.rest_framework import DjangoFilterBackend

from .filters import InventoryLossRecordFilter
from .models import InventoryItem, InventoryLossRecord
from .serializers import (
    InventoryItemSerializer,
    InventoryItemUpdateSerializer,
    InventoryLossRecordSerializer,
    RestockSerializer,
)
from .services import StockLedger

logger = logging.getLogger(__name__)


# =============================================================================
# INVENTORY ITEM VIEWS
# =============================================================================

class InventoryItemListCreateView(generics.ListCreateAPIView):
    """
    GET /api/inventory/?category=&search=
    POST /api/inventory/
    """
    queryset = InventoryItem.objects.all()
    serializer_class = InventoryItemSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['category']
    search_fields = ['name', 'category']
    ordering_fields = ['name', 'quantity', 'created_at']
    ordering = ['name']


class InventoryItemDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET /api/inventory/{id}/
    PATCH /api/inventory/{id}/
    DELETE /api/inventory/{id}/
    """
    queryset = InventoryItem.objects.all()
    permission_classes = [IsAuthenticated]

    def get_serializer_class(self):
        if self.request.method in ('PUT', 'PATCH'):
            return InventoryItemUpdateSerializer
        return InventoryItemSerializer


class InventoryRestockView(APIView):
    """
    POST /api/inventory/{id}/restock/

    Body: {"quantity": "25"}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        item = get_object_or_404(InventoryItem, pk=pk)
        serializer = RestockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        quantity = serializer.validated_data['quantity']
        StockLedger().restock(item.pk, quantity)
        item.refresh_from_db()

        logger.info(f"Restocked {item.name} by {quantity}, now {item.quantity}")
        return Response(InventoryItemSerializer(item).data, status=status.HTTP_200_OK)


# =============================================================================
# INVENTORY LOSS VIEWS
# =============================================================================

class InventoryLossRecordListCreateView(generics.ListCreateAPIView):
    """
    GET /api/inventory-loss/?inventory_item=&type=&date_from=&date_to=
    POST /api/inventory-loss/
    """
    queryset = InventoryLossRecord.objects.select_related('inventory_item')
    serializer_class = InventoryLossRecordSerializer
    permission_classes = [IsAuthenticated]
    filterset_class = InventoryLossRecordFilter

    def perform_create(self, serializer):
        record = serializer.save()
        logger.info(
            f"Recorded {record.loss_type} loss of {record.quantity} x {record.item_name} "
            f"({record.total_loss})"
        )


class InventoryLossRecordDetailView(generics.RetrieveAPIView):
    queryset = InventoryLossRecord.objects.select_related('inventory_item')
    serializer_class = InventoryLossRecordSerializer
    permission_classes = [IsAuthenticated]
