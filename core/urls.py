"""
URL configuration for the herdbook project.

All API routes are mounted under /api/.
"""
from django.contrib import admin
from django.urls import include, path
from django.views.generic import RedirectView

urlpatterns = [
    path('', RedirectView.as_view(url='/admin/', permanent=False)),
    path('admin/', admin.site.urls),
    path('api/', include('livestock.urls')),  # Animals, locations, weight/health/mortality records
    path('api/', include('inventory.urls')),  # Stock items, restock, inventory losses
    path('api/', include('finance.urls')),  # Income/expense ledger
    path('api/', include('imports.urls')),  # Bulk spreadsheet/CSV import
]
