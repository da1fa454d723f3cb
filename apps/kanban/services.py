# apps/kanban/services.py

"""
Serviços do kanban

- HistoricoService: carrega os eventos e reconstrói o board de um período
- adicionar_itens / mover_item / remover_item: mutações do board, cada uma
  registrada no histórico e anunciada via WebSocket
"""

import asyncio
import logging
from typing import Dict, Iterable, List

from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from channels.layers import get_channel_layer
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from .exceptions import MovimentacaoInvalida
from .historico import QuadroHistorico, SeletorPeriodo, reconstruir_historico
from .models import AcaoHistorico, ItemKanban, PosicaoKanban, TipoItem
from .registro import registrar_historico, registrar_historico_batch
from .store import HistoricoStore

logger = logging.getLogger(__name__)


class HistoricoService:
    """
    Reconstrução do histórico de um kanban

    O store é injetado para que a reconstrução não dependa de estado global.
    Não há resultado parcial: se uma das duas consultas falhar, a exceção
    HistoricoIndisponivel chega ao chamador.
    """

    def __init__(self, store=None):
        self.store = store if store is not None else HistoricoStore()

    def carregar(self, kanban_type: str, seletor: SeletorPeriodo) -> QuadroHistorico:
        inicio, fim = seletor.intervalo
        anteriores = self.store.buscar_anteriores(kanban_type, inicio)
        no_periodo = self.store.buscar_no_periodo(kanban_type, inicio, fim)

        quadro = reconstruir_historico(anteriores, no_periodo, seletor, kanban_type)
        logger.debug(
            "Histórico %s (%s): %d itens, %d removidos, %d movimentos",
            kanban_type, seletor.rotulo, quadro.total_itens,
            quadro.total_removidos, quadro.total_movimentos
        )
        return quadro

    async def carregar_async(self, kanban_type: str, seletor: SeletorPeriodo) -> QuadroHistorico:
        """Mesma reconstrução, com as duas consultas disparadas em paralelo"""
        inicio, fim = seletor.intervalo
        anteriores, no_periodo = await asyncio.gather(
            database_sync_to_async(self.store.buscar_anteriores)(kanban_type, inicio),
            database_sync_to_async(self.store.buscar_no_periodo)(kanban_type, inicio, fim),
        )
        return reconstruir_historico(anteriores, no_periodo, seletor, kanban_type)

    @staticmethod
    def nomes_responsaveis(quadro: QuadroHistorico) -> Dict[int, str]:
        """Mapa id -> nome dos usuários que movimentaram itens no período"""
        ids = quadro.ids_responsaveis()
        if not ids:
            return {}

        Usuario = get_user_model()
        return {
            usuario.pk: usuario.get_full_name() or usuario.username
            for usuario in Usuario.objects.filter(pk__in=ids)
        }


# === MUTAÇÕES DO BOARD ===

def notificar_kanban(kanban_type: str, tipo_evento: str, mensagem: Dict):
    """Envia atualização para todos conectados ao kanban"""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return

    async_to_sync(channel_layer.group_send)(
        f'kanban_{kanban_type}',
        {
            'type': tipo_evento,
            'message': {**mensagem, 'timestamp': timezone.now().isoformat()}
        }
    )


def _nome_usuario(usuario):
    if usuario is None or not usuario.is_authenticated:
        return ''
    return usuario.get_full_name() or usuario.username


def adicionar_itens(kanban_type: str, itens: Iterable[Dict], usuario=None) -> List[ItemKanban]:
    """
    Coloca demandas, tarefas ou rotas na coluna "A Fazer" do kanban

    Itens que já estão no kanban são ignorados. Retorna apenas os itens
    efetivamente adicionados.
    """
    itens = list(itens)
    limite_id = ItemKanban._meta.get_field('item_id').max_length
    limite_titulo = ItemKanban._meta.get_field('titulo').max_length
    for dados in itens:
        if not isinstance(dados, dict):
            raise MovimentacaoInvalida("Cada item deve ser um objeto")
        if dados.get('item_tipo') not in TipoItem.values:
            raise MovimentacaoInvalida(f"Tipo de item inválido: {dados.get('item_tipo')!r}")
        if not dados.get('item_id'):
            raise MovimentacaoInvalida("Item sem identificador")
        if len(str(dados['item_id'])) > limite_id:
            raise MovimentacaoInvalida(f"Identificador com mais de {limite_id} caracteres")
        titulo = dados.get('titulo') or ''
        if not isinstance(titulo, str):
            raise MovimentacaoInvalida("Título deve ser texto")
        if len(titulo) > limite_titulo:
            raise MovimentacaoInvalida(f"Título com mais de {limite_titulo} caracteres")

    adicionados = []
    with transaction.atomic():
        for dados in itens:
            item, criado = ItemKanban.objects.get_or_create(
                item_id=str(dados['item_id']),
                item_tipo=dados['item_tipo'],
                kanban_type=kanban_type,
                defaults={
                    'titulo': dados.get('titulo') or '',
                    'posicao': PosicaoKanban.A_FAZER,
                }
            )
            if criado:
                adicionados.append(item)

        registrar_historico_batch([
            {
                'item_id': item.item_id,
                'item_tipo': item.item_tipo,
                'item_titulo': item.titulo,
                'kanban_type': kanban_type,
                'acao': AcaoHistorico.ADICIONADO,
                'posicao_nova': item.posicao,
            }
            for item in adicionados
        ], usuario)

    for item in adicionados:
        notificar_kanban(kanban_type, 'item_added', {
            'item': item.to_dict(),
            'usuario': _nome_usuario(usuario),
        })

    logger.info("%d item(ns) adicionados ao kanban %s", len(adicionados), kanban_type)
    return adicionados


def mover_item(item: ItemKanban, nova_posicao: str, usuario=None, ordem=None) -> bool:
    """
    Move item para outra coluna
    Retorna False (sem registrar histórico) se a coluna não mudou
    """
    if nova_posicao not in PosicaoKanban.values:
        raise MovimentacaoInvalida(f"Coluna inválida: {nova_posicao!r}")

    posicao_anterior = item.posicao
    if ordem is not None:
        item.ordem = ordem

    if posicao_anterior == nova_posicao:
        if ordem is not None:
            item.save(update_fields=['ordem', 'atualizado_em'])
        return False

    with transaction.atomic():
        item.posicao = nova_posicao
        item.save()

        registrar_historico(
            item_id=item.item_id,
            item_tipo=item.item_tipo,
            item_titulo=item.titulo,
            kanban_type=item.kanban_type,
            acao=AcaoHistorico.MOVIDO,
            posicao_anterior=posicao_anterior,
            posicao_nova=nova_posicao,
            usuario=usuario,
        )

    notificar_kanban(item.kanban_type, 'item_moved', {
        'item': item.to_dict(),
        'posicao_anterior': posicao_anterior,
        'posicao_nova': nova_posicao,
        'usuario': _nome_usuario(usuario),
    })
    return True


def remover_item(item: ItemKanban, usuario=None):
    """Retira o item do kanban, registrando de qual coluna ele saiu"""
    dados = item.to_dict()

    with transaction.atomic():
        item.delete()

        registrar_historico(
            item_id=dados['item_id'],
            item_tipo=dados['item_tipo'],
            item_titulo=dados['titulo'],
            kanban_type=dados['kanban_type'],
            acao=AcaoHistorico.REMOVIDO,
            posicao_anterior=dados['posicao'],
            usuario=usuario,
        )

    notificar_kanban(dados['kanban_type'], 'item_removed', {
        'item': dados,
        'usuario': _nome_usuario(usuario),
    })
