"""
Retur Service URL Configuration

URL Routing:
    /admin/       → Django admin panel (for internal ops team)
    /api/schema/  → OpenAPI schema
    /retur        → Return record APIs
"""

from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('', include('retur.urls')),
]
