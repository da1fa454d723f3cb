# tests/test_store.py

from datetime import date, timedelta

import pytest
from django.db import DatabaseError

from apps.kanban.exceptions import HistoricoImutavel, HistoricoIndisponivel
from apps.kanban.historico import PeriodoTipo, SeletorPeriodo
from apps.kanban.models import HistoricoKanban
from apps.kanban.store import HistoricoStore

from .factories import quando, registro

pytestmark = pytest.mark.django_db

SEMANA = SeletorPeriodo(tipo=PeriodoTipo.SEMANA, referencia=date(2025, 6, 2))


class QuerysetQuebrado:
    """Simula o banco fora do ar no momento da consulta"""

    def filter(self, **kwargs):
        return self

    def order_by(self, *campos):
        raise DatabaseError('conexão perdida')


class TestBuscarEventos:

    def test_ordem_crescente_com_desempate_pelo_id(self):
        mesmo_instante = quando(2025, 6, 3, 10)
        segundo = registro('1', 'demanda', 'movido', mesmo_instante, 'a_fazer', 'feito')
        primeiro = registro('1', 'demanda', 'adicionado', quando(2025, 6, 3, 9), posicao_nova='a_fazer')
        terceiro = registro('1', 'demanda', 'movido', mesmo_instante, 'feito', 'em_progresso')

        eventos = HistoricoStore().buscar_eventos('1')

        assert [e.id for e in eventos] == [primeiro.id, segundo.id, terceiro.id]

    def test_filtra_pelo_kanban(self):
        registro('1', 'demanda', 'adicionado', quando(2025, 6, 3), posicao_nova='a_fazer', kanban_type='1')
        registro('2', 'demanda', 'adicionado', quando(2025, 6, 3), posicao_nova='a_fazer', kanban_type='2')

        eventos = HistoricoStore().buscar_eventos('2')

        assert [e.item_id for e in eventos] == ['2']
        assert eventos[0].kanban_type == '2'

    def test_limites_do_periodo(self):
        inicio, fim = SEMANA.intervalo
        antes = registro('a', 'tarefa', 'adicionado', inicio - timedelta(microseconds=1), posicao_nova='a_fazer')
        no_inicio = registro('b', 'tarefa', 'adicionado', inicio, posicao_nova='a_fazer')
        no_fim = registro('c', 'tarefa', 'adicionado', fim, posicao_nova='a_fazer')
        depois = registro('d', 'tarefa', 'adicionado', fim + timedelta(microseconds=1), posicao_nova='a_fazer')

        store = HistoricoStore()
        anteriores = store.buscar_anteriores('1', inicio)
        no_periodo = store.buscar_no_periodo('1', inicio, fim)

        assert [e.id for e in anteriores] == [antes.id]
        assert [e.id for e in no_periodo] == [no_inicio.id, no_fim.id]
        assert depois.id not in {e.id for e in anteriores + no_periodo}

    def test_converte_para_evento(self, assessor):
        salvo = registro(
            '10', 'rota', 'movido', quando(2025, 6, 3), 'a_fazer', 'feito',
            titulo='Visita', movido_por=assessor
        )

        evento = HistoricoStore().buscar_eventos('1')[0]

        assert evento.id == salvo.id
        assert evento.item_titulo == 'Visita'
        assert evento.movido_por == assessor.pk
        assert evento.created_at == quando(2025, 6, 3)

    def test_falha_do_banco_vira_historico_indisponivel(self):
        store = HistoricoStore(queryset=QuerysetQuebrado())

        with pytest.raises(HistoricoIndisponivel):
            store.buscar_anteriores('1', quando(2025, 6, 2))


class TestImutabilidade:

    def test_nao_altera_evento_gravado(self):
        salvo = registro('1', 'demanda', 'adicionado', quando(2025, 6, 3), posicao_nova='a_fazer')
        salvo.posicao_nova = 'feito'

        with pytest.raises(HistoricoImutavel):
            salvo.save()

        assert HistoricoKanban.objects.get(pk=salvo.pk).posicao_nova == 'a_fazer'

    def test_nao_apaga_evento(self):
        salvo = registro('1', 'demanda', 'adicionado', quando(2025, 6, 3), posicao_nova='a_fazer')

        with pytest.raises(HistoricoImutavel):
            salvo.delete()

        assert HistoricoKanban.objects.filter(pk=salvo.pk).exists()
