# tests/test_views.py

import json

import pytest
from django.urls import reverse
from django.utils import timezone

from apps.kanban.exceptions import HistoricoIndisponivel
from apps.kanban.models import HistoricoKanban, ItemKanban
from apps.kanban.store import HistoricoStore

from .factories import quando, registro

pytestmark = pytest.mark.django_db

SEMANA = {'periodo': 'semana', 'data': '2025-06-04'}


def _store_fora_do_ar(monkeypatch):
    def quebrar(self, *args, **kwargs):
        raise HistoricoIndisponivel('banco fora do ar')

    monkeypatch.setattr(HistoricoStore, 'buscar_anteriores', quebrar)


def _post_json(client, url, dados):
    return client.post(url, data=json.dumps(dados), content_type='application/json')


class TestHistoricoView:

    def test_board_reconstruido(self, cliente_assessor, assessor):
        kanban = assessor.kanban_pessoal
        registro('1', 'demanda', 'adicionado', quando(2025, 5, 20), posicao_nova='a_fazer',
                 titulo='Poda de árvore', kanban_type=kanban)
        registro('1', 'demanda', 'movido', quando(2025, 6, 3), 'a_fazer', 'em_progresso',
                 kanban_type=kanban, movido_por=assessor)
        registro('2', 'tarefa', 'removido', quando(2025, 6, 5), posicao_anterior='feito',
                 titulo='Ofício', kanban_type=kanban)

        response = cliente_assessor.get(reverse('kanban:historico', args=[kanban]), SEMANA)

        assert response.status_code == 200
        quadro = response.context['quadro']
        assert quadro.total_itens == 1
        assert quadro.total_removidos == 1
        conteudo = response.content.decode()
        assert 'Poda de árvore' in conteudo
        assert 'Removidos no período' in conteudo
        assert 'A Fazer → Em Progresso' in conteudo
        assert 'Bruno Lima' in conteudo
        assert '02/06 — 08/06' in conteudo

    def test_links_de_navegacao(self, cliente_assessor, assessor):
        response = cliente_assessor.get(reverse('kanban:historico', args=[assessor.kanban_pessoal]), SEMANA)

        assert response.context['query_anterior'] == 'periodo=semana&data=2025-05-28'
        assert response.context['query_proximo'] == 'periodo=semana&data=2025-06-11'
        assert response.context['query_mes'] == 'periodo=mes&data=2025-06-04'

    def test_navegacao_htmx_devolve_so_o_conteudo(self, cliente_assessor, assessor):
        response = cliente_assessor.get(
            reverse('kanban:historico', args=[assessor.kanban_pessoal]), SEMANA, HTTP_HX_REQUEST='true'
        )

        assert response.status_code == 200
        conteudo = response.content.decode()
        assert '02/06 — 08/06' in conteudo
        assert '<html' not in conteudo
        assert 'kanban/partials/historico_conteudo.html' in [t.name for t in response.templates]

    def test_periodo_padrao_e_o_mes_atual(self, cliente_assessor, assessor):
        response = cliente_assessor.get(reverse('kanban:historico', args=[assessor.kanban_pessoal]))

        assert response.context['seletor'].tipo == 'mes'

    def test_estado_vazio(self, cliente_assessor, assessor):
        response = cliente_assessor.get(reverse('kanban:historico', args=[assessor.kanban_pessoal]), SEMANA)

        assert response.status_code == 200
        assert 'Nenhuma atividade neste período' in response.content.decode()

    def test_estado_de_erro(self, cliente_assessor, assessor, monkeypatch):
        _store_fora_do_ar(monkeypatch)

        response = cliente_assessor.get(reverse('kanban:historico', args=[assessor.kanban_pessoal]), SEMANA)

        assert response.status_code == 503
        assert response.context['erro']
        assert 'Não foi possível carregar o histórico' in response.content.decode()

    def test_estado_de_erro_na_navegacao_htmx(self, cliente_assessor, assessor, monkeypatch):
        _store_fora_do_ar(monkeypatch)

        response = cliente_assessor.get(
            reverse('kanban:historico', args=[assessor.kanban_pessoal]), SEMANA, HTTP_HX_REQUEST='true'
        )

        assert response.status_code == 200
        conteudo = response.content.decode()
        assert 'Não foi possível carregar o histórico' in conteudo
        assert '<html' not in conteudo

    @pytest.mark.parametrize('data', ['9999-12-31', '0001-01-01'])
    def test_data_no_limite_do_calendario_cai_em_hoje(self, cliente_assessor, assessor, data):
        url = reverse('kanban:historico', args=[assessor.kanban_pessoal])

        response = cliente_assessor.get(url, {'periodo': 'semana', 'data': data})

        assert response.status_code == 200
        assert response.context['seletor'].referencia == timezone.localdate()

        api = cliente_assessor.get(
            reverse('kanban:api_historico', args=[assessor.kanban_pessoal]), {'periodo': 'mes', 'data': data}
        )
        assert api.status_code == 200

    def test_kanban_de_outro_assessor(self, cliente_assessor, outro_assessor):
        response = cliente_assessor.get(reverse('kanban:historico', args=[outro_assessor.kanban_pessoal]))

        assert response.status_code == 302
        assert response.url == reverse('core:painel')

    def test_kanban_compartilhado(self, cliente_assessor):
        response = cliente_assessor.get(reverse('kanban:historico', args=['producao-legislativa']))

        assert response.status_code == 200

    def test_gestor_ve_qualquer_kanban(self, cliente_gestor, assessor):
        response = cliente_gestor.get(reverse('kanban:historico', args=[assessor.kanban_pessoal]))

        assert response.status_code == 200

    def test_exige_login(self, client):
        response = client.get(reverse('kanban:historico', args=['producao-legislativa']))

        assert response.status_code == 302
        assert response.url.startswith('/login/')


class TestApiHistorico:

    def test_json(self, cliente_assessor, assessor):
        kanban = assessor.kanban_pessoal
        registro('1', 'rota', 'adicionado', quando(2025, 6, 3), posicao_nova='feito', kanban_type=kanban)

        response = cliente_assessor.get(reverse('kanban:api_historico', args=[kanban]), SEMANA)

        dados = response.json()
        assert dados['success'] is True
        assert dados['historico']['totais'] == {'itens': 1, 'removidos': 0, 'movimentos': 1}
        assert dados['historico']['colunas']['feito'][0]['item_id'] == '1'

    def test_erro(self, cliente_assessor, assessor, monkeypatch):
        _store_fora_do_ar(monkeypatch)

        response = cliente_assessor.get(reverse('kanban:api_historico', args=[assessor.kanban_pessoal]))

        assert response.status_code == 503
        assert response.json()['success'] is False

    def test_sem_acesso(self, cliente_assessor, outro_assessor):
        response = cliente_assessor.get(reverse('kanban:api_historico', args=[outro_assessor.kanban_pessoal]))

        assert response.status_code == 403


class TestMutacoes:

    def test_board_atual(self, cliente_assessor, assessor):
        ItemKanban.objects.create(item_id='1', item_tipo='demanda', kanban_type=assessor.kanban_pessoal, posicao='feito')

        response = cliente_assessor.get(reverse('kanban:board', args=[assessor.kanban_pessoal]))

        dados = response.json()
        assert dados['total_itens'] == 1
        assert dados['colunas']['feito'][0]['item_id'] == '1'
        assert dados['colunas']['a_fazer'] == []

    def test_adicionar(self, cliente_assessor, assessor):
        url = reverse('kanban:adicionar_itens', args=[assessor.kanban_pessoal])

        response = _post_json(cliente_assessor, url, {'itens': [{'item_id': 7, 'item_tipo': 'tarefa', 'titulo': 'Pauta'}]})

        assert response.status_code == 200
        assert len(response.json()['adicionados']) == 1
        assert HistoricoKanban.objects.filter(acao='adicionado').count() == 1

    def test_adicionar_com_titulo_nulo(self, cliente_assessor, assessor):
        url = reverse('kanban:adicionar_itens', args=[assessor.kanban_pessoal])

        response = _post_json(cliente_assessor, url, {'itens': [{'item_id': '1', 'item_tipo': 'demanda', 'titulo': None}]})

        assert response.status_code == 200
        assert ItemKanban.objects.get().titulo == ''

    @pytest.mark.parametrize('corpo', [
        {'itens': 'nada'},
        {'itens': [{'item_id': 7, 'item_tipo': 'projeto'}]},
        {'itens': [{'item_id': 7, 'item_tipo': 'tarefa', 'titulo': 'x' * 300}]},
        ['lista'],
    ])
    def test_adicionar_invalido(self, cliente_assessor, assessor, corpo):
        url = reverse('kanban:adicionar_itens', args=[assessor.kanban_pessoal])

        response = _post_json(cliente_assessor, url, corpo)

        assert response.status_code == 400

    def test_adicionar_sem_acesso(self, cliente_assessor, outro_assessor):
        url = reverse('kanban:adicionar_itens', args=[outro_assessor.kanban_pessoal])

        response = _post_json(cliente_assessor, url, {'itens': [{'item_id': 7, 'item_tipo': 'tarefa'}]})

        assert response.status_code == 403
        assert not ItemKanban.objects.exists()

    def test_mover(self, cliente_assessor, assessor):
        item = ItemKanban.objects.create(item_id='1', item_tipo='demanda', kanban_type=assessor.kanban_pessoal)

        response = _post_json(cliente_assessor, reverse('kanban:mover_item'), {
            'id': item.pk, 'nova_posicao': 'feito', 'nova_ordem': 0
        })

        assert response.status_code == 200
        assert response.json()['movido'] is True
        assert HistoricoKanban.objects.get().movido_por == assessor

    def test_mover_sem_id(self, cliente_assessor):
        response = _post_json(cliente_assessor, reverse('kanban:mover_item'), {'nova_posicao': 'feito'})

        assert response.status_code == 400

    def test_mover_item_inexistente(self, cliente_assessor):
        response = _post_json(cliente_assessor, reverse('kanban:mover_item'), {'id': 999, 'nova_posicao': 'feito'})

        assert response.status_code == 404

    def test_mover_para_coluna_invalida(self, cliente_assessor, assessor):
        item = ItemKanban.objects.create(item_id='1', item_tipo='demanda', kanban_type=assessor.kanban_pessoal)

        response = _post_json(cliente_assessor, reverse('kanban:mover_item'), {'id': item.pk, 'nova_posicao': 'arquivado'})

        assert response.status_code == 400
        assert not HistoricoKanban.objects.exists()

    def test_mover_com_ordem_invalida(self, cliente_assessor, assessor):
        item = ItemKanban.objects.create(item_id='1', item_tipo='demanda', kanban_type=assessor.kanban_pessoal)

        response = _post_json(cliente_assessor, reverse('kanban:mover_item'), {
            'id': item.pk, 'nova_posicao': 'feito', 'nova_ordem': 'primeiro'
        })

        assert response.status_code == 400

    def test_mover_item_de_outro_kanban(self, cliente_assessor, outro_assessor):
        item = ItemKanban.objects.create(item_id='1', item_tipo='demanda', kanban_type=outro_assessor.kanban_pessoal)

        response = _post_json(cliente_assessor, reverse('kanban:mover_item'), {'id': item.pk, 'nova_posicao': 'feito'})

        assert response.status_code == 403
        item.refresh_from_db()
        assert item.posicao == 'a_fazer'

    def test_remover(self, cliente_assessor):
        item = ItemKanban.objects.create(
            item_id='1', item_tipo='rota', kanban_type='producao-legislativa', posicao='em_progresso'
        )

        response = _post_json(cliente_assessor, reverse('kanban:remover_item'), {'id': item.pk})

        assert response.status_code == 200
        assert not ItemKanban.objects.exists()
        assert HistoricoKanban.objects.get().posicao_anterior == 'em_progresso'

    def test_mutacao_exige_post(self, cliente_assessor):
        response = cliente_assessor.get(reverse('kanban:mover_item'))

        assert response.status_code == 405
