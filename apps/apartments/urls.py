from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import ApartmentViewSet

app_name = 'apartments'

router = DefaultRouter()
router.register(r'apartments', ApartmentViewSet, basename='apartment')

urlpatterns = [
    path('', include(router.urls)),
]
