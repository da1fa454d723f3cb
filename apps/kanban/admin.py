# apps/kanban/admin.py

from django.contrib import admin
from django.utils.html import format_html

from .models import HistoricoKanban, ItemKanban


@admin.register(ItemKanban)
class ItemKanbanAdmin(admin.ModelAdmin):
    """Admin dos itens posicionados nos kanbans"""

    list_display = ['titulo', 'item_tipo', 'item_id', 'kanban_type', 'posicao', 'ordem', 'atualizado_em']
    list_filter = ['item_tipo', 'posicao', 'kanban_type']
    search_fields = ['titulo', 'item_id', 'kanban_type']
    readonly_fields = ['criado_em', 'atualizado_em']


@admin.register(HistoricoKanban)
class HistoricoKanbanAdmin(admin.ModelAdmin):
    """
    Admin somente leitura do log de movimentações
    O histórico é append-only: não pode ser criado, editado nem apagado aqui
    """

    list_display = [
        'created_at', 'kanban_type', 'item_titulo', 'item_tipo',
        'acao_badge', 'posicao_anterior', 'posicao_nova', 'movido_por'
    ]
    list_filter = ['acao', 'item_tipo', 'kanban_type']
    search_fields = ['item_titulo', 'item_id', 'kanban_type']
    date_hierarchy = 'created_at'
    list_select_related = ['movido_por']

    def acao_badge(self, obj):
        """Exibe a ação com badge colorido"""
        cores = {
            'adicionado': '#10B981',  # verde
            'movido': '#3B82F6',  # azul
            'removido': '#EF4444',  # vermelho
        }
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 3px 8px; border-radius: 4px; font-size: 11px;">{}</span>',
            cores.get(obj.acao, '#6B7280'), obj.get_acao_display()
        )

    acao_badge.short_description = 'Ação'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
