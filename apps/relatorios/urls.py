# apps/relatorios/urls.py

from django.urls import path
from . import views

app_name = 'relatorios'

urlpatterns = [
    # Exports do histórico do kanban (aceitam ?periodo=semana|mes&data=AAAA-MM-DD)
    path('historico/<str:kanban_type>/csv/', views.exportar_historico_csv, name='historico_csv'),
    path('historico/<str:kanban_type>/excel/', views.exportar_historico_excel, name='historico_excel'),
]
