from django.urls import path

from .views import profile, user_stats

app_name = 'users'

urlpatterns = [
    path('profile/', profile, name='profile'),
    path('stats/', user_stats, name='stats'),
]
