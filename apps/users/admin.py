from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Administración de residentes (login por email)
    """
    list_display = ['email', 'name', 'apartment_identifier', 'is_active', 'is_staff', 'created_at']
    list_filter = ['is_active', 'is_staff', 'floor']
    search_fields = ['email', 'name', 'apartment_identifier']
    ordering = ['-created_at']
    readonly_fields = ['created_at', 'updated_at', 'last_login', 'date_joined']
    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Residente', {'fields': ('name', 'apartment_identifier', 'floor', 'unit_number')}),
        ('Permisos', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Auditoría', {'fields': ('last_login', 'date_joined', 'created_at', 'updated_at')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'password1', 'password2'),
        }),
    )
