# apps/core/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html

from .models import Usuario


@admin.register(Usuario)
class UsuarioAdmin(BaseUserAdmin):
    """Admin customizado para o modelo Usuario"""

    list_display = [
        'username', 'email', 'get_full_name', 'tipo_badge',
        'is_active', 'date_joined'
    ]
    list_filter = ['tipo', 'is_staff', 'is_active', 'date_joined']
    search_fields = ['username', 'first_name', 'last_name', 'email']
    ordering = ['-date_joined']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Gabinete', {
            'fields': ('tipo', 'telefone')
        }),
    )

    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Gabinete', {
            'fields': ('tipo', 'telefone')
        }),
    )

    def tipo_badge(self, obj):
        """Exibe o tipo de usuário com badge colorido"""
        cores = {
            'admin': '#EF4444',  # vermelho
            'gestor': '#F59E0B',  # amarelo
            'assessor': '#3B82F6'  # azul
        }
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 3px 8px; border-radius: 4px; font-size: 11px;">{}</span>',
            cores.get(obj.tipo, '#6B7280'), obj.get_tipo_display()
        )

    tipo_badge.short_description = 'Tipo'
