from django.contrib import admin

from .models import CommandLedgerEntry


@admin.register(CommandLedgerEntry)
class CommandLedgerEntryAdmin(admin.ModelAdmin):
    """
    Bitácora de comandos en modo solo lectura
    """
    list_display = ['created_at', 'unit_number', 'card_type', 'action', 'success']
    list_filter = ['success', 'card_type', 'action', 'created_at']
    search_fields = ['unit_number']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
