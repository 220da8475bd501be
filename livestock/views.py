"""
Livestock API Views

API Endpoints:
- /api/animals/ - Keyset-paginated animal list, create
- /api/animals/{id}/ - Retrieve, update, archive (DELETE)
- /api/locations/ - List/create locations
- /api/weight/ - Weight records (cascade into the animal's current weight)
- /api/health-records/ - Health records (consume medication stock)
- /api/mortality/ - Mortality records (mark dead, book loss)
"""

import logging
from urllib.parse import urlencode

from django.conf import settings
from django.db import IntegrityError, transaction
from django.shortcuts import get_object_or_404
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.cache import SingleFlightCache
from core.pagination import KeysetPagination, KeysetQueryPlanner
from .models import Animal, HealthRecord, Location, MortalityRecord, WeightRecord
from .serializers import (
    AnimalSerializer,
    HealthRecordSerializer,
    LocationSerializer,
    MortalityRecordSerializer,
    WeightRecordSerializer,
)

logger = logging.getLogger(__name__)


ANIMAL_SORT_PLANNER = KeysetQueryPlanner(
    sortable_fields=[
        'created_at', 'tag_id', 'name', 'species', 'status',
        'current_weight', 'purchase_cost', 'projected_sales_price',
    ],
    aliases={
        'createdAt': 'created_at',
        'tagId': 'tag_id',
        'tag': 'tag_id',
        'currentWeight': 'current_weight',
        'purchaseCost': 'purchase_cost',
        'projectedSalesPrice': 'projected_sales_price',
    },
    null_fallbacks={'current_weight': 0},
)

# Shared by list and detail views so writes invalidate cached totals
animal_count_cache = SingleFlightCache(
    ttl=settings.ANIMAL_COUNT_CACHE_TTL,
    key_prefix='animals:count',
)

ANIMAL_FILTER_PARAMS = ('status', 'species', 'archived')


def filter_animals(queryset, params):
    """
    Apply list filters.

    ``archived``: ``true`` lists archived animals only, ``all`` lists both,
    anything else (the default) hides archived animals.
    """
    status_filter = params.get('status')
    if status_filter:
        queryset = queryset.filter(status=status_filter)

    species = params.get('species')
    if species:
        queryset = queryset.filter(species__iexact=species)

    archived = (params.get('archived') or '').lower()
    if archived in ('true', '1'):
        queryset = queryset.filter(is_archived=True)
    elif archived != 'all':
        queryset = queryset.filter(is_archived=False)
    return queryset


# =============================================================================
# ANIMAL VIEWS
# =============================================================================

class AnimalListCreateView(APIView):
    """
    GET /api/animals/?sortBy=&sortDir=&cursor=&limit=&includeTotal=
    POST /api/animals/

    Sort fields outside the allow-list fall back to created_at desc.
    A tampered or stale cursor restarts from the first page.
    """
    permission_classes = [IsAuthenticated]
    pagination = KeysetPagination(ANIMAL_SORT_PLANNER)
    count_cache = animal_count_cache

    def get(self, request):
        params = request.query_params
        queryset = filter_animals(Animal.objects.select_related('location'), params)

        count_key = urlencode(sorted(
            (name, params.get(name)) for name in ANIMAL_FILTER_PARAMS if params.get(name)
        )) or 'all'

        data = self.pagination.paginate(
            queryset,
            params,
            serialize=lambda animal: AnimalSerializer(animal).data,
            count=lambda: self.count_cache.get_or_compute(count_key, queryset.count),
        )
        return Response(data)

    def post(self, request):
        serializer = AnimalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            with transaction.atomic():
                animal = serializer.save()
        except IntegrityError:
            tag_id = serializer.validated_data.get('tag_id')
            return Response(
                {'error': f"An animal with tag '{tag_id}' already exists"},
                status=status.HTTP_409_CONFLICT
            )

        self.count_cache.clear()
        logger.info(f"Created animal {animal.tag_id} ({animal.id})")
        return Response(AnimalSerializer(animal).data, status=status.HTTP_201_CREATED)


class AnimalDetailView(APIView):
    """
    GET /api/animals/{id}/
    PATCH /api/animals/{id}/
    DELETE /api/animals/{id}/  (archives; animals are never deleted)
    """
    permission_classes = [IsAuthenticated]
    count_cache = animal_count_cache

    def get(self, request, pk):
        animal = get_object_or_404(Animal.objects.select_related('location'), pk=pk)
        return Response(AnimalSerializer(animal).data)

    def patch(self, request, pk):
        animal = get_object_or_404(Animal, pk=pk)
        serializer = AnimalSerializer(animal, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            with transaction.atomic():
                animal = serializer.save()
        except IntegrityError:
            return Response(
                {'error': f"An animal with tag '{serializer.validated_data.get('tag_id')}' already exists"},
                status=status.HTTP_409_CONFLICT
            )

        self.count_cache.clear()
        return Response(AnimalSerializer(animal).data)

    def delete(self, request, pk):
        animal = get_object_or_404(Animal, pk=pk)
        if animal.is_archived:
            return Response(
                {'error': 'Animal is already archived'},
                status=status.HTTP_400_BAD_REQUEST
            )

        reason = request.data.get('reason') or request.query_params.get('reason', '')
        animal.archive(reason)
        self.count_cache.clear()

        logger.info(f"Archived animal {animal.tag_id} ({animal.id})")
        return Response(AnimalSerializer(animal).data)


# =============================================================================
# LOCATION VIEWS
# =============================================================================

class LocationListCreateView(generics.ListCreateAPIView):
    """
    GET /api/locations/
    POST /api/locations/
    """
    queryset = Location.objects.all()
    serializer_class = LocationSerializer
    permission_classes = [IsAuthenticated]


# =============================================================================
# TRIGGER RECORD VIEWS
# =============================================================================
# Creating any of these runs its cascade in post_save. The response carries
# the record and its cascade status; re-fetch the animal to see the effects.

class WeightRecordListCreateView(generics.ListCreateAPIView):
    """
    GET /api/weight/?animal={id}
    POST /api/weight/
    """
    queryset = WeightRecord.objects.select_related('animal')
    serializer_class = WeightRecordSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['animal', 'cascade_status']


class WeightRecordDetailView(generics.RetrieveAPIView):
    queryset = WeightRecord.objects.select_related('animal')
    serializer_class = WeightRecordSerializer
    permission_classes = [IsAuthenticated]


class HealthRecordListCreateView(generics.ListCreateAPIView):
    """
    GET /api/health-records/?animal={id}
    POST /api/health-records/
    """
    queryset = HealthRecord.objects.select_related('animal')
    serializer_class = HealthRecordSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['animal', 'recovery_status', 'cascade_status']


class HealthRecordDetailView(generics.RetrieveAPIView):
    queryset = HealthRecord.objects.select_related('animal')
    serializer_class = HealthRecordSerializer
    permission_classes = [IsAuthenticated]


class MortalityRecordListCreateView(generics.ListCreateAPIView):
    """
    GET /api/mortality/?animal={id}
    POST /api/mortality/
    """
    queryset = MortalityRecord.objects.select_related('animal')
    serializer_class = MortalityRecordSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['animal', 'cascade_status']

    def perform_create(self, serializer):
        record = serializer.save()
        animal_count_cache.clear()
        logger.info(f"Recorded death of {record.animal.tag_id}: {record.cause or 'unknown cause'}")


class MortalityRecordDetailView(generics.RetrieveAPIView):
    queryset = MortalityRecord.objects.select_related('animal')
    serializer_class = MortalityRecordSerializer
    permission_classes = [IsAuthenticated]
