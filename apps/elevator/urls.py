from django.urls import path

from .views import elevator_logs, elevator_stats, elevator_status, send_command

app_name = 'elevator'

urlpatterns = [
    path('command/', send_command, name='command'),
    path('status/', elevator_status, name='status'),
    path('logs/', elevator_logs, name='logs'),
    path('stats/', elevator_stats, name='stats'),
]
