# apps/kanban/urls.py

from django.urls import path
from . import views

app_name = 'kanban'

urlpatterns = [
    # AJAX - Movimentação de items
    path('mover-item/', views.mover_item_ajax, name='mover_item'),
    path('remover-item/', views.remover_item_ajax, name='remover_item'),

    # Board atual
    path('<str:kanban_type>/', views.api_board, name='board'),
    path('<str:kanban_type>/adicionar/', views.adicionar_itens_ajax, name='adicionar_itens'),

    # Histórico por período
    path('<str:kanban_type>/historico/', views.historico_view, name='historico'),
    path('<str:kanban_type>/historico/api/', views.api_historico, name='api_historico'),
]
