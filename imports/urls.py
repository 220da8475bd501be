"""Bulk import URLs."""
from django.urls import path

from .views import ImportView

app_name = 'imports'

urlpatterns = [
    path('import/', ImportView.as_view(), name='import'),
]
