"""
Finance API Views

API Endpoints:
- /api/finance/ - List/create ledger lines
- /api/finance/{id}/ - Retrieve/update/delete a ledger line

Lines booked by cascades carry a source_reference; they can be edited and
deleted like any other line.
"""

import logging

from django.db.models import Sum
from rest_framework import filters, generics
from rest_framework.permissions import IsAuthenticated
from django_filters.rest_framework import DjangoFilterBackend

from .models import FinanceRecord
from .serializers import FinanceRecordSerializer

logger = logging.getLogger(__name__)


class FinanceRecordListCreateView(generics.ListCreateAPIView):
    """
    GET /api/finance/?type=&category=&related_animal=&related_inventory=
    POST /api/finance/
    """
    queryset = FinanceRecord.objects.select_related('related_animal', 'related_inventory')
    serializer_class = FinanceRecordSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['type', 'category', 'status', 'related_animal', 'related_inventory']
    search_fields = ['title', 'description', 'vendor', 'invoice_number']
    ordering_fields = ['date', 'amount', 'created_at']
    ordering = ['-date', '-created_at']

    def list(self, request, *args, **kwargs):
        response = super().list(request, *args, **kwargs)
        totals = self.filter_queryset(self.get_queryset()).order_by().values('type').annotate(total=Sum('amount'))
        response.data['totals'] = {row['type']: row['total'] for row in totals}
        return response

    def perform_create(self, serializer):
        record = serializer.save()
        logger.info(f"Recorded {record.type} '{record.title}' ({record.amount})")


class FinanceRecordDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET /api/finance/{id}/
    PATCH /api/finance/{id}/
    DELETE /api/finance/{id}/
    """
    queryset = FinanceRecord.objects.select_related('related_animal', 'related_inventory')
    serializer_class = FinanceRecordSerializer
    permission_classes = [IsAuthenticated]

    def perform_destroy(self, instance):
        logger.info(f"Deleted finance record {instance.id} ({instance.title})")
        instance.delete()
