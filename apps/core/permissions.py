# apps/core/permissions.py

from functools import wraps
from django.conf import settings
from django.shortcuts import redirect
from django.contrib import messages
from django.http import JsonResponse


class GabinetePermissions:
    """
    Sistema de permissões do gabinete
    Baseado nos tipos de usuário: admin, gestor, assessor
    """

    @staticmethod
    def is_admin(user):
        """Verifica se é administrador"""
        return user.is_authenticated and user.tipo == 'admin'

    @staticmethod
    def is_gestor_ou_admin(user):
        """Verifica se é gestor ou admin"""
        return user.is_authenticated and user.tipo in ['admin', 'gestor']

    @staticmethod
    def kanbans_compartilhados():
        return list(getattr(settings, 'GABINETE_KANBANS_COMPARTILHADOS', []))

    @staticmethod
    def pode_acessar_kanban(user, kanban_type):
        """
        Verifica se o usuário pode ver um kanban

        Regras:
        1. Admin e gestor veem qualquer kanban
        2. Todos veem o próprio kanban pessoal
        3. Todos veem os kanbans compartilhados do gabinete
        """
        if not user.is_authenticated:
            return False

        if user.tipo in ['admin', 'gestor']:
            return True

        if kanban_type == str(user.pk):
            return True

        return kanban_type in GabinetePermissions.kanbans_compartilhados()

    @staticmethod
    def pode_mover_item(user, item):
        """Verifica se pode adicionar, mover ou remover itens de um kanban"""
        return GabinetePermissions.pode_acessar_kanban(user, item.kanban_type)


# Decoradores para views

def requer_acesso_kanban(view_func):
    """
    Decorador que verifica acesso ao kanban
    Espera que a view receba kanban_type como parâmetro
    """

    @wraps(view_func)
    def wrapped_view(request, kanban_type, *args, **kwargs):
        if not GabinetePermissions.pode_acessar_kanban(request.user, kanban_type):
            messages.error(request, 'Você não tem acesso a este kanban.')
            return redirect('core:painel')

        return view_func(request, kanban_type, *args, **kwargs)

    return wrapped_view


def ajax_requer_acesso_kanban(view_func):
    """
    Variante para views AJAX
    Retorna 403 em JSON ao invés de redirecionar
    """

    @wraps(view_func)
    def wrapped_view(request, kanban_type, *args, **kwargs):
        if not GabinetePermissions.pode_acessar_kanban(request.user, kanban_type):
            return JsonResponse({'success': False, 'error': 'Sem acesso ao kanban'}, status=403)

        return view_func(request, kanban_type, *args, **kwargs)

    return wrapped_view
