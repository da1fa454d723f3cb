# apps/core/urls.py

from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    # === AUTENTICAÇÃO ===
    path('login/', views.login_view, name='login'),
    path('logout/', views.logout_view, name='logout'),

    # === PAINEL PRINCIPAL ===
    path('painel/', views.painel_principal, name='painel'),
    path('', views.painel_principal, name='home'),

    # === MONITORAMENTO ===
    path('health/', views.health_check, name='health'),
]
