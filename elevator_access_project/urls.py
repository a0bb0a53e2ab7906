"""
URL configuration for elevator_access_project project.
"""
import logging

from django.conf import settings
from django.contrib import admin
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.urls import include, path
from django.utils import timezone
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

logger = logging.getLogger(__name__)


def health_check(request):
    """Health check del proceso, independiente de la autenticación"""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
        database = 'healthy'
    except DatabaseError as e:
        logger.error(f"Health check sin base de datos: {e}")
        database = 'unhealthy'

    return JsonResponse({
        'status': 'OK',
        'message': 'Sistema de Control de Acceso de Ascensores API',
        'timestamp': timezone.now().isoformat(),
        'version': settings.API_VERSION,
        'database': database,
    })


urlpatterns = [
    # Health checks
    path('health/', health_check, name='health_check_alt'),
    path('api/health/', health_check, name='health_check'),

    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/swagger/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),

    # API endpoints
    path('api/auth/', include('apps.authentication.urls')),
    path('api/users/', include('apps.users.urls')),
    path('api/', include('apps.apartments.urls')),
    path('api/', include('apps.cards.urls')),
    path('api/elevator/', include('apps.elevator.urls')),
]
