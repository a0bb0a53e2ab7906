from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import CardViewSet

app_name = 'cards'

router = DefaultRouter()
router.register(r'cards', CardViewSet, basename='card')

urlpatterns = [
    path('', include(router.urls)),
]
