"""
URL configuration for the diagnostic center booking project.

The `urlpatterns` list routes URLs to views. This module includes the
Django admin, the API routes provided by the centers app and the
Prometheus exporter. OpenAPI documentation is exposed at ``/swagger/``
and ``/redoc/``.
"""
from django.contrib import admin
from django.urls import path, include

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

api_info = openapi.Info(
    title="Diagnostic Center Booking API",
    default_version='v1',
    description="Bookings, test catalogue and center administration for diagnostic centers.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('centers.routers')),
    path('', include('django_prometheus.urls')),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]
