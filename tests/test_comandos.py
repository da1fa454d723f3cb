# tests/test_comandos.py

from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from apps.core.models import Usuario
from apps.kanban.models import HistoricoKanban, ItemKanban

from .factories import quando, registro

pytestmark = pytest.mark.django_db


def _executar(*args):
    saida = StringIO()
    call_command(*args, stdout=saida)
    return saida.getvalue()


class TestResumoHistorico:

    def test_resumo_da_semana(self):
        registro('1', 'demanda', 'adicionado', quando(2025, 5, 20), posicao_nova='a_fazer', titulo='Poda')
        registro('1', 'demanda', 'movido', quando(2025, 6, 3), 'a_fazer', 'em_progresso')

        saida = _executar('resumo_historico', '1', '--periodo', 'semana', '--data', '2025-06-04')

        assert 'Kanban 1 - 02/06 — 08/06' in saida
        assert '1 item(s) no board' in saida
        assert 'Em Progresso (1)' in saida
        assert '[Demanda] Poda' in saida

    def test_periodo_sem_atividade(self):
        saida = _executar('resumo_historico', '1', '--data', '2025-06-04')

        assert 'Nenhuma atividade neste período' in saida

    def test_data_invalida(self):
        with pytest.raises(CommandError):
            _executar('resumo_historico', '1', '--data', '04/06/2025')

    def test_data_fora_do_calendario(self):
        with pytest.raises(CommandError):
            _executar('resumo_historico', '1', '--periodo', 'semana', '--data', '9999-12-31')


class TestSeed:

    def test_cria_dados_de_demonstracao(self):
        saida = _executar('seed')

        assert Usuario.objects.filter(username__in=['gestora', 'assessor']).count() == 2
        assert ItemKanban.objects.filter(kanban_type='producao-legislativa').count() == 4
        assert HistoricoKanban.objects.filter(kanban_type='producao-legislativa').count() == 10
        assert 'producao-legislativa' in saida

    def test_nao_duplica(self):
        _executar('seed')

        saida = _executar('seed')

        assert 'já tem histórico' in saida
        assert HistoricoKanban.objects.count() == 10
