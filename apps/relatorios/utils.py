# apps/relatorios/utils.py

"""
Linhas tabulares do histórico reconstruído, compartilhadas pelos
exports CSV e Excel
"""

from typing import Dict, List

from django.utils import timezone

from apps.kanban.historico import COLUNA_REMOVIDO, QuadroHistorico, rotulo_posicao
from apps.kanban.models import AcaoHistorico

CABECALHO_MOVIMENTOS = [
    'Data', 'Tipo', 'ID', 'Título', 'Ação', 'De', 'Para', 'Responsável', 'Situação no fim do período'
]


def situacao_final(item) -> str:
    if item.removido:
        return 'Removido'
    return rotulo_posicao(item.posicao_final)


def linhas_movimentos(quadro: QuadroHistorico, nomes: Dict[int, str]) -> List[List]:
    """
    Uma linha por movimentação do período, em ordem cronológica

    A data é devolvida como datetime no fuso local; cada export formata.
    """
    linhas = []
    for item in quadro.itens():
        for movimento in item.movimentos:
            linhas.append([
                timezone.localtime(movimento.created_at),
                item.rotulo_tipo,
                item.item_id,
                item.titulo,
                AcaoHistorico(movimento.acao).label,
                rotulo_posicao(movimento.posicao_anterior) if movimento.posicao_anterior else '',
                rotulo_posicao(movimento.posicao_nova) if movimento.posicao_nova else '',
                nomes.get(movimento.movido_por, ''),
                situacao_final(item),
            ])

    linhas.sort(key=lambda linha: linha[0])
    return linhas


def linhas_resumo(quadro: QuadroHistorico) -> List[List]:
    """Pares (rótulo, quantidade) para a aba de resumo"""
    linhas = [
        [rotulo_posicao(coluna), len(itens)]
        for coluna, itens in quadro.colunas.items()
        if coluna != COLUNA_REMOVIDO
    ]
    linhas.append(['Removidos no período', quadro.total_removidos])
    linhas.append(['Movimentações', quadro.total_movimentos])
    if quadro.inconsistentes:
        linhas.append(['Itens sem coluna', len(quadro.inconsistentes)])
    return linhas
