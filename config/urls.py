"""URL configuration for ParkEase.

Routes the Django admin, the versioned REST API of each app, the
OpenAPI schema and the health check.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView  # type: ignore

from shared.api.health import healthz

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    path('healthz/', healthz, name='healthz'),
    # Application URLs
    path('api/v1/users/', include('apps.users.urls')),
    path('api/v1/parking/', include('apps.parking.urls')),
    path('api/v1/bookings/', include('apps.bookings.urls')),
    path('api/v1/schema/', SpectacularAPIView.as_view(), name='schema'),
]
