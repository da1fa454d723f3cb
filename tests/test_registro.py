# tests/test_registro.py

import logging

import pytest
from django.contrib.auth.models import AnonymousUser
from django.db import DatabaseError

from apps.kanban.models import HistoricoKanban
from apps.kanban.registro import registrar_historico, registrar_historico_batch

pytestmark = pytest.mark.django_db


def test_registra_movimentacao(assessor):
    salvo = registrar_historico(
        item_id=42, item_tipo='demanda', item_titulo='Poda de árvore', kanban_type=str(assessor.pk),
        acao='movido', posicao_anterior='a_fazer', posicao_nova='feito', usuario=assessor
    )

    assert salvo.pk is not None
    assert salvo.item_id == '42'
    assert salvo.movido_por == assessor
    assert HistoricoKanban.objects.count() == 1


def test_posicoes_vazias_viram_nulas():
    salvo = registrar_historico('1', 'tarefa', '', '1', 'removido', posicao_anterior='em_progresso', posicao_nova='')

    salvo.refresh_from_db()
    assert salvo.posicao_nova is None
    assert salvo.posicao_anterior == 'em_progresso'


def test_usuario_anonimo_nao_e_responsavel():
    salvo = registrar_historico('1', 'tarefa', '', '1', 'adicionado', posicao_nova='a_fazer', usuario=AnonymousUser())

    assert salvo.movido_por is None


def test_falha_ao_gravar_nao_interrompe(monkeypatch, caplog):
    def quebrar(self, *args, **kwargs):
        raise DatabaseError('disco cheio')

    monkeypatch.setattr(HistoricoKanban, 'save', quebrar)

    with caplog.at_level(logging.ERROR, logger='apps.kanban'):
        resultado = registrar_historico('1', 'tarefa', '', '1', 'adicionado', posicao_nova='a_fazer')

    assert resultado is None
    assert 'Erro ao registrar histórico' in caplog.text


def test_batch(gestor):
    criados = registrar_historico_batch([
        {'item_id': '1', 'item_tipo': 'demanda', 'kanban_type': '7', 'acao': 'adicionado', 'posicao_nova': 'a_fazer'},
        {'item_id': '2', 'item_tipo': 'rota', 'kanban_type': '7', 'acao': 'adicionado', 'posicao_nova': 'a_fazer'},
    ], gestor)

    assert len(criados) == 2
    assert set(HistoricoKanban.objects.values_list('movido_por', flat=True)) == {gestor.pk}


def test_batch_vazio():
    assert registrar_historico_batch([]) == []


def test_batch_com_falha(monkeypatch):
    def quebrar(*args, **kwargs):
        raise DatabaseError('tabela bloqueada')

    monkeypatch.setattr(HistoricoKanban.objects, 'bulk_create', quebrar)

    resultado = registrar_historico_batch([
        {'item_id': '1', 'item_tipo': 'demanda', 'kanban_type': '7', 'acao': 'adicionado', 'posicao_nova': 'a_fazer'},
    ])

    assert resultado == []
