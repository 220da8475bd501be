"""
Finance URLs

The income/expense ledger.
"""
from django.urls import path

from .views import FinanceRecordDetailView, FinanceRecordListCreateView

app_name = 'finance'

urlpatterns = [
    path('finance/', FinanceRecordListCreateView.as_view(), name='records'),
    path('finance/<uuid:pk>/', FinanceRecordDetailView.as_view(), name='record-detail'),
]
