# apps/core/views.py

import logging

from django.contrib import messages
from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.decorators import login_required
from django.core.cache import cache
from django.db import DatabaseError
from django.db.models import Count
from django.http import JsonResponse
from django.shortcuts import render, redirect
from django.utils import timezone
from django.utils.http import url_has_allowed_host_and_scheme

from apps.kanban.models import ItemKanban
from .forms import LoginForm
from .models import Usuario
from .permissions import GabinetePermissions

logger = logging.getLogger(__name__)


def login_view(request):
    """View de login"""
    if request.user.is_authenticated:
        return redirect('core:painel')

    form = LoginForm(request.POST or None)

    if request.method == 'POST' and form.is_valid():
        usuario = authenticate(
            request,
            username=form.cleaned_data['username'],
            password=form.cleaned_data['password']
        )

        if usuario is None:
            messages.error(request, 'Usuário ou senha inválidos.')
        else:
            login(request, usuario)
            if not form.cleaned_data['lembrar_me']:
                request.session.set_expiry(0)

            logger.info("Login de %s", usuario.username)
            messages.success(request, f'Bem-vindo, {usuario.get_nome_exibicao()}!')

            next_url = request.GET.get('next')
            if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
                return redirect(next_url)
            return redirect('core:painel')

    context = {
        'title': 'Login - Gabinete',
        'form': form,
    }
    return render(request, 'core/login.html', context)


def logout_view(request):
    """View de logout"""
    logout(request)
    messages.info(request, 'Você foi desconectado com sucesso.')
    return redirect('core:login')


@login_required
def painel_principal(request):
    """
    Painel principal
    Lista os kanbans que o usuário pode abrir e quantos itens cada um tem
    """
    user = request.user

    if GabinetePermissions.is_gestor_ou_admin(user):
        pessoais = [
            (str(u.pk), u.get_nome_exibicao())
            for u in Usuario.objects.filter(is_active=True).order_by('first_name', 'username')
        ]
    else:
        pessoais = [(user.kanban_pessoal, 'Meu kanban')]

    compartilhados = [
        (nome, nome.replace('-', ' ').title())
        for nome in GabinetePermissions.kanbans_compartilhados()
    ]

    contagem = dict(
        ItemKanban.objects.values_list('kanban_type').annotate(total=Count('id')).order_by()
    )

    kanbans = [
        {'kanban_type': kanban_type, 'nome': nome, 'total_itens': contagem.get(kanban_type, 0)}
        for kanban_type, nome in pessoais + compartilhados
    ]

    context = {
        'title': 'Painel - Gabinete',
        'kanbans': kanbans,
    }
    return render(request, 'core/painel.html', context)


def health_check(request):
    """
    Health check para monitoramento
    """
    try:
        # Verificar conexão com banco
        Usuario.objects.exists()

        # Verificar cache
        cache.set('health_check', 'ok', 60)
        cache.get('health_check')

    except DatabaseError as e:
        logger.error("Health check falhou: %s", e)
        return JsonResponse({
            'status': 'unhealthy',
            'error': str(e),
            'timestamp': timezone.now().isoformat(),
            'version': '0.1.0'
        }, status=500)

    return JsonResponse({
        'status': 'healthy',
        'database': 'ok',
        'cache': 'ok',
        'timestamp': timezone.now().isoformat(),
        'version': '0.1.0'
    })
