# tests/conftest.py

import pytest

SENHA = 'senha-segura-123'


@pytest.fixture
def assessor(django_user_model):
    return django_user_model.objects.create_user(
        username='bruno', password=SENHA, first_name='Bruno', last_name='Lima', tipo='assessor'
    )


@pytest.fixture
def outro_assessor(django_user_model):
    return django_user_model.objects.create_user(
        username='carla', password=SENHA, first_name='Carla', tipo='assessor'
    )


@pytest.fixture
def gestor(django_user_model):
    return django_user_model.objects.create_user(
        username='ana', password=SENHA, first_name='Ana', last_name='Souza', tipo='gestor'
    )


@pytest.fixture
def cliente_assessor(client, assessor):
    client.force_login(assessor)
    return client


@pytest.fixture
def cliente_gestor(client, gestor):
    client.force_login(gestor)
    return client


@pytest.fixture
def notificacoes(monkeypatch):
    """Captura os broadcasts dos serviços em vez de enviá-los ao channel layer"""
    enviadas = []

    def registrar(kanban_type, tipo_evento, mensagem):
        enviadas.append((kanban_type, tipo_evento, mensagem))

    monkeypatch.setattr('apps.kanban.services.notificar_kanban', registrar)
    return enviadas
