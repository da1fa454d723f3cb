# apps/kanban/registro.py

"""
Registro de movimentações no histórico do kanban

Chamado pelas ações de adicionar, mover e remover itens. Uma falha ao
gravar o histórico é registrada no log e nunca interrompe a operação
principal.
"""

import logging
from typing import Dict, Iterable, List, Optional

from django.db import DatabaseError, transaction

from .models import HistoricoKanban

logger = logging.getLogger(__name__)


def _montar_registro(dados: Dict, usuario=None) -> HistoricoKanban:
    return HistoricoKanban(
        item_id=str(dados['item_id']),
        item_tipo=dados['item_tipo'],
        item_titulo=dados.get('item_titulo') or '',
        kanban_type=dados['kanban_type'],
        posicao_anterior=dados.get('posicao_anterior') or None,
        posicao_nova=dados.get('posicao_nova') or None,
        acao=dados['acao'],
        movido_por=usuario if usuario is not None and usuario.is_authenticated else None,
    )


def registrar_historico(
        item_id,
        item_tipo: str,
        item_titulo: str,
        kanban_type: str,
        acao: str,
        posicao_anterior: Optional[str] = None,
        posicao_nova: Optional[str] = None,
        usuario=None
) -> Optional[HistoricoKanban]:
    """Registra uma movimentação; retorna None se a gravação falhar"""
    registro = _montar_registro({
        'item_id': item_id,
        'item_tipo': item_tipo,
        'item_titulo': item_titulo,
        'kanban_type': kanban_type,
        'acao': acao,
        'posicao_anterior': posicao_anterior,
        'posicao_nova': posicao_nova,
    }, usuario)

    try:
        with transaction.atomic():
            registro.save()
    except DatabaseError:
        logger.exception("Erro ao registrar histórico kanban (%s %s:%s)", acao, item_tipo, item_id)
        return None

    return registro


def registrar_historico_batch(registros: Iterable[Dict], usuario=None) -> List[HistoricoKanban]:
    """
    Registra várias movimentações de uma vez
    Usado quando vários itens entram no kanban simultaneamente
    """
    objetos = [_montar_registro(dados, usuario) for dados in registros]
    if not objetos:
        return []

    try:
        with transaction.atomic():
            return HistoricoKanban.objects.bulk_create(objetos)
    except DatabaseError:
        logger.exception("Erro ao registrar histórico batch (%d registros)", len(objetos))
        return []
