# apps/kanban/historico.py

"""
Reconstrução do histórico do kanban

O board de um período é remontado a partir do log append-only de
movimentações (HistoricoKanban):

1. Seletor de período: semana (segunda a domingo) ou mês civil
2. Snapshot: estado de cada item imediatamente antes do período
3. Período: aplica os eventos do período sobre o snapshot
4. Agrupamento: distribui os itens pelas colunas + "removido"

Todas as funções deste módulo são puras: recebem listas de eventos já
carregadas e ordenadas e não consultam o banco.
"""

import calendar
import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from django.db import models
from django.utils import timezone

from .exceptions import EventoInvalido
from .models import AcaoHistorico, PosicaoKanban, TipoItem

logger = logging.getLogger(__name__)

MESES_PT = [
    'Janeiro',
    'Fevereiro',
    'Março',
    'Abril',
    'Maio',
    'Junho',
    'Julho',
    'Agosto',
    'Setembro',
    'Outubro',
    'Novembro',
    'Dezembro',
]

COLUNAS_KANBAN = list(PosicaoKanban.values)
COLUNA_REMOVIDO = 'removido'

ChaveItem = Tuple[str, str]


class PeriodoTipo(models.TextChoices):
    SEMANA = 'semana', 'Semana'
    MES = 'mes', 'Mês'


# === SELETOR DE PERÍODO ===

def _data_local(referencia) -> date:
    if isinstance(referencia, datetime):
        if timezone.is_aware(referencia):
            return timezone.localtime(referencia).date()
        return referencia.date()
    return referencia


def _inicio_do_dia(dia: date) -> datetime:
    return timezone.make_aware(datetime.combine(dia, time.min))


def _fim_do_dia(dia: date) -> datetime:
    return timezone.make_aware(datetime.combine(dia, time.max))


def intervalo_semana(referencia) -> Tuple[datetime, datetime]:
    """
    Segunda-feira 00:00 até domingo 23:59:59.999999 da semana da referência
    Domingo pertence à semana iniciada na segunda anterior
    """
    dia = _data_local(referencia)
    segunda = dia - timedelta(days=dia.weekday())
    domingo = segunda + timedelta(days=6)
    return _inicio_do_dia(segunda), _fim_do_dia(domingo)


def intervalo_mes(referencia) -> Tuple[datetime, datetime]:
    """Primeiro dia 00:00 até o último dia 23:59:59.999999 do mês"""
    dia = _data_local(referencia)
    ultimo_dia = calendar.monthrange(dia.year, dia.month)[1]
    return _inicio_do_dia(dia.replace(day=1)), _fim_do_dia(dia.replace(day=ultimo_dia))


def _somar_meses(dia: date, meses: int) -> date:
    indice = dia.month - 1 + meses
    ano = dia.year + indice // 12
    mes = indice % 12 + 1
    ultimo_dia = calendar.monthrange(ano, mes)[1]
    return dia.replace(year=ano, month=mes, day=min(dia.day, ultimo_dia))


def navegar_periodo(referencia, tipo: str, direcao: int) -> date:
    """
    Desloca a data de referência em `direcao` períodos
    Semana: 7 dias por período. Mês: o dia é limitado ao fim do mês destino.
    """
    dia = _data_local(referencia)
    if tipo == PeriodoTipo.SEMANA:
        return dia + timedelta(days=7 * direcao)
    return _somar_meses(dia, direcao)


def rotulo_semana(referencia) -> str:
    inicio, fim = intervalo_semana(referencia)
    inicio, fim = timezone.localtime(inicio), timezone.localtime(fim)
    return f"{inicio:%d/%m} — {fim:%d/%m}"


def rotulo_mes(referencia) -> str:
    dia = _data_local(referencia)
    return f"{MESES_PT[dia.month - 1]} {dia.year}"


@dataclass(frozen=True)
class SeletorPeriodo:
    """Período consultado: granularidade + data de referência"""

    tipo: str
    referencia: date

    def __post_init__(self):
        if self.tipo not in PeriodoTipo.values:
            raise ValueError(f"Tipo de período inválido: {self.tipo!r}")

    @classmethod
    def hoje(cls, tipo: str = PeriodoTipo.MES) -> 'SeletorPeriodo':
        return cls(tipo=tipo, referencia=timezone.localdate())

    @classmethod
    def from_query(cls, params, tipo_padrao: str = PeriodoTipo.MES) -> 'SeletorPeriodo':
        """
        Monta o seletor a partir de ?periodo=semana|mes&data=AAAA-MM-DD
        Valores inválidos caem no padrão (mês / hoje)
        """
        tipo = params.get('periodo') or tipo_padrao
        if tipo not in PeriodoTipo.values:
            tipo = tipo_padrao

        seletor = cls.hoje(tipo)
        data_param = params.get('data')
        if not data_param:
            return seletor

        try:
            candidato = cls(tipo=tipo, referencia=date.fromisoformat(data_param))
            # O período e os vizinhos (links anterior/próximo) precisam caber no calendário
            candidato.intervalo
            candidato.avancar(-1).intervalo
            candidato.avancar(1).intervalo
        except (TypeError, ValueError, OverflowError):
            logger.debug("Data de referência inválida ignorada: %r", data_param)
            return seletor

        return candidato

    @property
    def intervalo(self) -> Tuple[datetime, datetime]:
        if self.tipo == PeriodoTipo.SEMANA:
            return intervalo_semana(self.referencia)
        return intervalo_mes(self.referencia)

    @property
    def inicio(self) -> datetime:
        return self.intervalo[0]

    @property
    def fim(self) -> datetime:
        return self.intervalo[1]

    @property
    def rotulo(self) -> str:
        if self.tipo == PeriodoTipo.SEMANA:
            return rotulo_semana(self.referencia)
        return rotulo_mes(self.referencia)

    def avancar(self, direcao: int) -> 'SeletorPeriodo':
        if direcao not in (-1, 1):
            raise ValueError("Direção deve ser -1 ou +1")
        return replace(self, referencia=navegar_periodo(self.referencia, self.tipo, direcao))

    def ir_para_hoje(self) -> 'SeletorPeriodo':
        return replace(self, referencia=timezone.localdate())

    def to_query(self) -> Dict[str, str]:
        return {'periodo': self.tipo, 'data': self.referencia.isoformat()}

    def to_dict(self) -> Dict:
        return {
            'tipo': self.tipo,
            'referencia': self.referencia.isoformat(),
            'inicio': self.inicio.isoformat(),
            'fim': self.fim.isoformat(),
            'rotulo': self.rotulo,
        }


# === EVENTOS ===

def rotulo_posicao(posicao: Optional[str]) -> str:
    if posicao in PosicaoKanban.values:
        return PosicaoKanban(posicao).label
    return posicao or '—'


@dataclass(frozen=True)
class EventoHistorico:
    """Movimentação registrada no log, já materializada em memória"""

    id: Optional[int]
    item_id: str
    item_tipo: str
    item_titulo: str
    kanban_type: str
    posicao_anterior: Optional[str]
    posicao_nova: Optional[str]
    acao: str
    created_at: datetime
    movido_por: Optional[int] = None

    @property
    def chave(self) -> ChaveItem:
        return (self.item_id, self.item_tipo)

    @property
    def descricao(self) -> str:
        if self.acao == AcaoHistorico.ADICIONADO:
            return f"Adicionado em {rotulo_posicao(self.posicao_nova)}"
        if self.acao == AcaoHistorico.REMOVIDO:
            return f"Removido de {rotulo_posicao(self.posicao_anterior)}"
        return f"{rotulo_posicao(self.posicao_anterior)} → {rotulo_posicao(self.posicao_nova)}"

    def to_dict(self, nomes: Optional[Dict[int, str]] = None) -> Dict:
        nomes = nomes or {}
        return {
            'id': self.id,
            'acao': self.acao,
            'posicao_anterior': self.posicao_anterior,
            'posicao_nova': self.posicao_nova,
            'descricao': self.descricao,
            'movido_por': self.movido_por,
            'movido_por_nome': nomes.get(self.movido_por, ''),
            'created_at': self.created_at.isoformat(),
        }


def validar_evento(evento: EventoHistorico) -> EventoHistorico:
    """
    Garante que o evento pertence ao conjunto fechado de ações, tipos e colunas
    Levanta EventoInvalido caso contrário
    """
    if evento.acao not in AcaoHistorico.values:
        raise EventoInvalido(evento, f"ação desconhecida {evento.acao!r}")

    if evento.item_tipo not in TipoItem.values:
        raise EventoInvalido(evento, f"tipo de item desconhecido {evento.item_tipo!r}")

    # posicao_anterior é só informativa: uma remoção vinda de coluna antiga ainda remove o item
    if evento.posicao_nova is not None and evento.posicao_nova not in COLUNAS_KANBAN:
        raise EventoInvalido(evento, f"posicao_nova desconhecida {evento.posicao_nova!r}")

    if evento.acao != AcaoHistorico.REMOVIDO and evento.posicao_nova is None:
        raise EventoInvalido(evento, f"ação {evento.acao!r} sem posicao_nova")

    return evento


def _separar_validos(eventos: Iterable[EventoHistorico], quarentena: List[EventoInvalido]) -> List[EventoHistorico]:
    validos = []
    for evento in eventos:
        try:
            validos.append(validar_evento(evento))
        except EventoInvalido as erro:
            logger.warning("Evento do histórico em quarentena: %s", erro)
            quarentena.append(erro)
    return validos


# === REDUÇÃO ===

@dataclass
class ItemHistorico:
    """Estado reconstruído de um item ao fim da janela observada"""

    item_id: str
    item_tipo: str
    titulo: str
    posicao_final: Optional[str]
    removido: bool
    primeira_entrada: datetime
    ultima_atividade: datetime
    movimentos: List[EventoHistorico] = field(default_factory=list)

    @classmethod
    def novo(cls, evento: EventoHistorico) -> 'ItemHistorico':
        return cls(
            item_id=evento.item_id,
            item_tipo=evento.item_tipo,
            titulo=evento.item_titulo,
            posicao_final=None,
            removido=False,
            primeira_entrada=evento.created_at,
            ultima_atividade=evento.created_at,
        )

    @property
    def chave(self) -> ChaveItem:
        return (self.item_id, self.item_tipo)

    @property
    def rotulo_tipo(self) -> str:
        return TipoItem(self.item_tipo).label

    def aplicar(self, evento: EventoHistorico):
        if evento.item_titulo:
            self.titulo = evento.item_titulo
        self.ultima_atividade = evento.created_at

        if evento.acao == AcaoHistorico.REMOVIDO:
            self.posicao_final = evento.posicao_anterior
            self.removido = True
        else:
            self.posicao_final = evento.posicao_nova
            self.removido = False

    def to_dict(self, nomes: Optional[Dict[int, str]] = None) -> Dict:
        return {
            'item_id': self.item_id,
            'item_tipo': self.item_tipo,
            'titulo': self.titulo,
            'posicao_final': self.posicao_final,
            'removido': self.removido,
            'primeira_entrada': self.primeira_entrada.isoformat(),
            'ultima_atividade': self.ultima_atividade.isoformat(),
            'movimentos': [m.to_dict(nomes) for m in self.movimentos],
        }


def reduzir_snapshot(eventos: Iterable[EventoHistorico]) -> Dict[ChaveItem, ItemHistorico]:
    """
    Estado de cada item imediatamente antes do início do período

    Recebe apenas eventos anteriores ao período, em ordem crescente.
    Itens cujo último evento foi uma remoção são descartados: estavam fora
    do board quando o período começou.
    """
    itens: Dict[ChaveItem, ItemHistorico] = {}

    for evento in eventos:
        item = itens.get(evento.chave)
        if item is None:
            item = itens[evento.chave] = ItemHistorico.novo(evento)
        item.aplicar(evento)

    return {chave: item for chave, item in itens.items() if not item.removido}


def reduzir_periodo(
        snapshot: Dict[ChaveItem, ItemHistorico],
        eventos: Iterable[EventoHistorico]
) -> Dict[ChaveItem, ItemHistorico]:
    """
    Aplica os eventos do período sobre o snapshot

    O snapshot recebido não é alterado. Itens do snapshot mantêm a
    primeira_entrada anterior ao período; itens novos usam o primeiro
    evento do período. Apenas eventos do período entram em `movimentos`.
    """
    itens = {chave: replace(item, movimentos=list(item.movimentos)) for chave, item in snapshot.items()}

    for evento in eventos:
        item = itens.get(evento.chave)
        if item is None:
            item = itens[evento.chave] = ItemHistorico.novo(evento)
        item.movimentos.append(evento)
        item.aplicar(evento)

    return itens


def agrupar_por_coluna(itens: Iterable[ItemHistorico]) -> Tuple[Dict[str, List[ItemHistorico]], List[ItemHistorico]]:
    """
    Distribui os itens entre as colunas fixas e a coluna sintética "removido"

    Retorna (colunas, inconsistentes). Um item não removido e sem coluna
    reconhecida não tem lugar no board e vai para `inconsistentes`.
    """
    colunas: Dict[str, List[ItemHistorico]] = {coluna: [] for coluna in COLUNAS_KANBAN}
    colunas[COLUNA_REMOVIDO] = []
    inconsistentes: List[ItemHistorico] = []

    for item in itens:
        if item.removido:
            colunas[COLUNA_REMOVIDO].append(item)
        elif item.posicao_final in COLUNAS_KANBAN:
            colunas[item.posicao_final].append(item)
        else:
            logger.warning(
                "Item %s:%s sem coluna no fim do período (posicao_final=%r)",
                item.item_tipo, item.item_id, item.posicao_final
            )
            inconsistentes.append(item)

    return colunas, inconsistentes


@dataclass
class QuadroHistorico:
    """Board reconstruído de um período, pronto para exibição"""

    seletor: Optional[SeletorPeriodo]
    colunas: Dict[str, List[ItemHistorico]]
    inconsistentes: List[ItemHistorico] = field(default_factory=list)
    quarentena: List[EventoInvalido] = field(default_factory=list)
    total_movimentos: int = 0
    kanban_type: Optional[str] = None

    @property
    def total_itens(self) -> int:
        return sum(len(self.colunas[coluna]) for coluna in COLUNAS_KANBAN)

    @property
    def total_removidos(self) -> int:
        return len(self.colunas[COLUNA_REMOVIDO])

    @property
    def vazio(self) -> bool:
        return self.total_itens == 0 and self.total_removidos == 0

    def itens(self) -> List[ItemHistorico]:
        todos = []
        for coluna in COLUNAS_KANBAN + [COLUNA_REMOVIDO]:
            todos.extend(self.colunas[coluna])
        return todos + self.inconsistentes

    def ids_responsaveis(self) -> set:
        return {
            movimento.movido_por
            for item in self.itens()
            for movimento in item.movimentos
            if movimento.movido_por is not None
        }

    def to_dict(self, nomes: Optional[Dict[int, str]] = None) -> Dict:
        return {
            'kanban_type': self.kanban_type,
            'periodo': self.seletor.to_dict() if self.seletor else None,
            'colunas': {
                coluna: [item.to_dict(nomes) for item in itens]
                for coluna, itens in self.colunas.items()
            },
            'totais': {
                'itens': self.total_itens,
                'removidos': self.total_removidos,
                'movimentos': self.total_movimentos,
            },
            'inconsistentes': [item.to_dict(nomes) for item in self.inconsistentes],
            'quarentena': [
                {'evento_id': erro.evento.id, 'motivo': erro.motivo}
                for erro in self.quarentena
            ],
        }


def reconstruir_historico(
        eventos_anteriores: Iterable[EventoHistorico],
        eventos_periodo: Iterable[EventoHistorico],
        seletor: Optional[SeletorPeriodo] = None,
        kanban_type: Optional[str] = None,
) -> QuadroHistorico:
    """
    Reconstrói o board de um período

    `eventos_anteriores`: eventos com created_at < início, em ordem crescente
    `eventos_periodo`: eventos com início <= created_at <= fim, em ordem crescente
    """
    quarentena: List[EventoInvalido] = []
    anteriores = _separar_validos(eventos_anteriores, quarentena)
    no_periodo = _separar_validos(eventos_periodo, quarentena)

    snapshot = reduzir_snapshot(anteriores)
    itens = reduzir_periodo(snapshot, no_periodo)
    colunas, inconsistentes = agrupar_por_coluna(itens.values())

    return QuadroHistorico(
        seletor=seletor,
        colunas=colunas,
        inconsistentes=inconsistentes,
        quarentena=quarentena,
        total_movimentos=len(no_periodo),
        kanban_type=kanban_type,
    )
