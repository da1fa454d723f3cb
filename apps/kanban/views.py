# apps/kanban/views.py

import json
import logging

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.shortcuts import render
from django.utils.http import urlencode
from django.views.decorators.http import require_GET, require_POST

from apps.core.permissions import (
    GabinetePermissions,
    requer_acesso_kanban,
    ajax_requer_acesso_kanban
)
from .exceptions import HistoricoIndisponivel, MovimentacaoInvalida
from .historico import COLUNA_REMOVIDO, SeletorPeriodo
from .models import ItemKanban, PosicaoKanban
from .services import HistoricoService, adicionar_itens, mover_item, remover_item

logger = logging.getLogger(__name__)


def _ler_json(request):
    try:
        data = json.loads(request.body or b'{}')
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def _seletor_da_requisicao(request):
    return SeletorPeriodo.from_query(
        request.GET,
        getattr(settings, 'GABINETE_PERIODO_PADRAO', 'mes')
    )


def _card(item, nomes):
    return {
        'item': item,
        'movimentos': [
            {'evento': movimento, 'movido_por_nome': nomes.get(movimento.movido_por, '')}
            for movimento in item.movimentos
        ],
    }


@login_required
@requer_acesso_kanban
def historico_view(request, kanban_type):
    """
    Histórico do kanban por semana ou mês
    Reconstrói o board do período a partir do log de movimentações
    """
    seletor = _seletor_da_requisicao(request)
    service = HistoricoService()

    quadro = None
    nomes = {}
    erro = None

    try:
        quadro = service.carregar(kanban_type, seletor)
        nomes = service.nomes_responsaveis(quadro)
    except HistoricoIndisponivel as e:
        logger.error("Erro ao carregar histórico do kanban %s: %s", kanban_type, e)
        erro = str(e)

    colunas = []
    removidos = []
    inconsistentes = []
    if quadro is not None:
        colunas = [
            {
                'id': posicao.value,
                'titulo': posicao.label,
                'cards': [_card(item, nomes) for item in quadro.colunas[posicao.value]],
            }
            for posicao in PosicaoKanban
        ]
        removidos = [_card(item, nomes) for item in quadro.colunas[COLUNA_REMOVIDO]]
        inconsistentes = [_card(item, nomes) for item in quadro.inconsistentes]

    context = {
        'title': f'Histórico - {seletor.rotulo}',
        'kanban_type': kanban_type,
        'seletor': seletor,
        'quadro': quadro,
        'colunas': colunas,
        'removidos': removidos,
        'inconsistentes': inconsistentes,
        'erro': erro,
        'query_atual': urlencode(seletor.to_query()),
        'query_anterior': urlencode(seletor.avancar(-1).to_query()),
        'query_proximo': urlencode(seletor.avancar(1).to_query()),
        'query_hoje': urlencode(seletor.ir_para_hoje().to_query()),
        'query_semana': urlencode({'periodo': 'semana', 'data': seletor.referencia.isoformat()}),
        'query_mes': urlencode({'periodo': 'mes', 'data': seletor.referencia.isoformat()}),
    }

    # htmx só aplica respostas 2xx: o fragmento de erro volta com 200
    if request.htmx:
        return render(request, 'kanban/partials/historico_conteudo.html', context)

    return render(request, 'kanban/historico.html', context, status=503 if erro else 200)


@login_required
@require_GET
@ajax_requer_acesso_kanban
def api_historico(request, kanban_type):
    """API JSON do histórico (mesmos parâmetros da página)"""
    seletor = _seletor_da_requisicao(request)
    service = HistoricoService()

    try:
        quadro = service.carregar(kanban_type, seletor)
    except HistoricoIndisponivel as e:
        return JsonResponse({'success': False, 'error': str(e)}, status=503)

    return JsonResponse({
        'success': True,
        'historico': quadro.to_dict(service.nomes_responsaveis(quadro)),
    })


@login_required
@require_GET
@ajax_requer_acesso_kanban
def api_board(request, kanban_type):
    """Estado atual do kanban, item a item, por coluna"""
    itens = ItemKanban.objects.filter(kanban_type=kanban_type).order_by('ordem', 'criado_em')

    colunas = {posicao: [] for posicao in PosicaoKanban.values}
    for item in itens:
        colunas[item.posicao].append(item.to_dict())

    return JsonResponse({
        'kanban_type': kanban_type,
        'colunas': colunas,
        'total_itens': sum(len(c) for c in colunas.values()),
    })


@login_required
@require_POST
@ajax_requer_acesso_kanban
def adicionar_itens_ajax(request, kanban_type):
    """
    Adiciona demandas, tarefas ou rotas ao kanban
    Corpo: {"itens": [{"item_id": ..., "item_tipo": ..., "titulo": ...}]}
    """
    data = _ler_json(request)
    if data is None or not isinstance(data.get('itens'), list):
        return JsonResponse({'success': False, 'error': 'Parâmetros inválidos'}, status=400)

    try:
        adicionados = adicionar_itens(kanban_type, data['itens'], request.user)
    except MovimentacaoInvalida as e:
        return JsonResponse({'success': False, 'error': str(e)}, status=400)

    return JsonResponse({
        'success': True,
        'adicionados': [item.to_dict() for item in adicionados],
        'message': f'{len(adicionados)} item(ns) adicionado(s)'
    })


def _buscar_item_autorizado(request, data):
    """Retorna (item, resposta_de_erro)"""
    if data is None or not data.get('id'):
        return None, JsonResponse({'success': False, 'error': 'Parâmetros inválidos'}, status=400)

    try:
        item = ItemKanban.objects.get(pk=data['id'])
    except (ItemKanban.DoesNotExist, ValueError):
        return None, JsonResponse({'success': False, 'error': 'Item não encontrado'}, status=404)

    if not GabinetePermissions.pode_mover_item(request.user, item):
        return None, JsonResponse({'success': False, 'error': 'Sem permissão para mover item'}, status=403)

    return item, None


@login_required
@require_POST
def mover_item_ajax(request):
    """
    Move item entre colunas (drag-and-drop)
    Corpo: {"id": <ItemKanban.id>, "nova_posicao": "...", "nova_ordem": 0}
    """
    data = _ler_json(request)
    item, erro = _buscar_item_autorizado(request, data)
    if erro:
        return erro

    ordem = data.get('nova_ordem')
    if ordem is not None and not isinstance(ordem, int):
        return JsonResponse({'success': False, 'error': 'Ordem inválida'}, status=400)

    try:
        movido = mover_item(item, data.get('nova_posicao'), request.user, ordem)
    except MovimentacaoInvalida as e:
        return JsonResponse({'success': False, 'error': str(e)}, status=400)

    return JsonResponse({
        'success': True,
        'movido': movido,
        'item': item.to_dict(),
    })


@login_required
@require_POST
def remover_item_ajax(request):
    """
    Remove item do kanban
    Corpo: {"id": <ItemKanban.id>}
    """
    data = _ler_json(request)
    item, erro = _buscar_item_autorizado(request, data)
    if erro:
        return erro

    remover_item(item, request.user)

    return JsonResponse({'success': True, 'message': 'Item removido do kanban'})
