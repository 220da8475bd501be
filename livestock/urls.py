"""
Livestock URLs

Animals, locations and the trigger records that cascade into them.
"""
from django.urls import path

from .views import (
    AnimalDetailView,
    AnimalListCreateView,
    HealthRecordDetailView,
    HealthRecordListCreateView,
    LocationListCreateView,
    MortalityRecordDetailView,
    MortalityRecordListCreateView,
    WeightRecordDetailView,
    WeightRecordListCreateView,
)

app_name = 'livestock'

urlpatterns = [
    # Animals
    path('animals/', AnimalListCreateView.as_view(), name='animals'),
    path('animals/<uuid:pk>/', AnimalDetailView.as_view(), name='animal-detail'),

    path('locations/', LocationListCreateView.as_view(), name='locations'),

    # Trigger records
    path('weight/', WeightRecordListCreateView.as_view(), name='weight-records'),
    path('weight/<uuid:pk>/', WeightRecordDetailView.as_view(), name='weight-record-detail'),
    path('health-records/', HealthRecordListCreateView.as_view(), name='health-records'),
    path('health-records/<uuid:pk>/', HealthRecordDetailView.as_view(), name='health-record-detail'),
    path('mortality/', MortalityRecordListCreateView.as_view(), name='mortality'),
    path('mortality/<uuid:pk>/', MortalityRecordDetailView.as_view(), name='mortality-detail'),
]
