from django.contrib import admin

from .models import Card


@admin.register(Card)
class CardAdmin(admin.ModelAdmin):
    list_display = ['apartment_identifier', 'card_type', 'name', 'is_active', 'last_used_at']
    list_filter = ['card_type', 'is_active']
    search_fields = ['apartment_identifier', 'name']
    readonly_fields = ['last_used_at', 'created_at', 'updated_at']
    ordering = ['apartment_identifier', 'card_type']
