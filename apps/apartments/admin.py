from django.contrib import admin

from .models import Apartment


@admin.register(Apartment)
class ApartmentAdmin(admin.ModelAdmin):
    list_display = ['unit_number', 'floor', 'created_at']
    list_filter = ['floor']
    search_fields = ['unit_number']
    ordering = ['floor', 'unit_number']
