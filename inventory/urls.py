"""
Inventory URLs

Stock items, restocking and loss records.
"""
from django.urls import path

from .views import (
    InventoryItemDetailView,
    InventoryItemListCreateView,
    InventoryLossRecordDetailView,
    InventoryLossRecordListCreateView,
    InventoryRestockView,
)

app_name = 'inventory'

urlpatterns = [
    path('inventory/', InventoryItemListCreateView.as_view(), name='items'),
    path('inventory/<uuid:pk>/', InventoryItemDetailView.as_view(), name='item-detail'),
    path('inventory/<uuid:pk>/restock/', InventoryRestockView.as_view(), name='item-restock'),

    path('inventory-loss/', InventoryLossRecordListCreateView.as_view(), name='losses'),
    path('inventory-loss/<uuid:pk>/', InventoryLossRecordDetailView.as_view(), name='loss-detail'),
]
