# apps/kanban/store.py

import logging
from datetime import datetime
from typing import List, Optional

from django.db import DatabaseError

from .exceptions import HistoricoIndisponivel
from .historico import EventoHistorico
from .models import HistoricoKanban

logger = logging.getLogger(__name__)


class HistoricoStore:
    """
    Leitura do log de movimentações do kanban

    Os eventos saem sempre em ordem crescente de created_at, com o id
    (auto-incremento) como desempate para timestamps iguais.
    """

    def __init__(self, queryset=None):
        self._queryset = queryset if queryset is not None else HistoricoKanban.objects.all()

    def buscar_eventos(
            self,
            kanban_type: str,
            desde: Optional[datetime] = None,
            ate: Optional[datetime] = None,
            ate_exclusivo: bool = False
    ) -> List[EventoHistorico]:
        """
        Eventos de um kanban, opcionalmente limitados no tempo

        `desde` é sempre inclusivo; `ate` é inclusivo a menos que
        `ate_exclusivo` seja verdadeiro.
        """
        registros = self._queryset.filter(kanban_type=kanban_type)

        if desde is not None:
            registros = registros.filter(created_at__gte=desde)
        if ate is not None:
            filtro = 'created_at__lt' if ate_exclusivo else 'created_at__lte'
            registros = registros.filter(**{filtro: ate})

        try:
            return [registro.to_evento() for registro in registros.order_by('created_at', 'id')]
        except DatabaseError as e:
            logger.error("Erro ao buscar histórico do kanban %s: %s", kanban_type, e)
            raise HistoricoIndisponivel(f"Não foi possível carregar o histórico: {e}") from e

    def buscar_anteriores(self, kanban_type: str, inicio: datetime) -> List[EventoHistorico]:
        """Eventos estritamente anteriores ao início do período (snapshot)"""
        return self.buscar_eventos(kanban_type, ate=inicio, ate_exclusivo=True)

    def buscar_no_periodo(self, kanban_type: str, inicio: datetime, fim: datetime) -> List[EventoHistorico]:
        """Eventos do período, com os dois limites inclusivos"""
        return self.buscar_eventos(kanban_type, desde=inicio, ate=fim)
