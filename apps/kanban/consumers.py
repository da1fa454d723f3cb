# apps/kanban/consumers.py

import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.conf import settings
from django.utils import timezone

from apps.core.permissions import GabinetePermissions
from .exceptions import HistoricoIndisponivel
from .historico import SeletorPeriodo
from .services import HistoricoService

logger = logging.getLogger(__name__)


class KanbanConsumer(AsyncWebsocketConsumer):
    """
    Consumer WebSocket do kanban

    Funcionalidades:
    - Notificações de itens adicionados, movidos e removidos
    - Heartbeat (ping/pong)
    - Consulta do histórico de um período sem recarregar a página
    """

    async def connect(self):
        """
        Conecta usuário ao grupo do kanban
        Verifica permissões antes de aceitar conexão
        """
        self.kanban_type = self.scope['url_route']['kwargs']['kanban_type']
        self.kanban_group_name = f'kanban_{self.kanban_type}'
        self.user = self.scope.get('user')

        if self.user is None or not self.user.is_authenticated:
            logger.warning("Conexão WebSocket rejeitada - usuário não autenticado")
            await self.close()
            return

        if not GabinetePermissions.pode_acessar_kanban(self.user, self.kanban_type):
            logger.warning(
                "Conexão WebSocket rejeitada - %s sem acesso ao kanban %s",
                self.user.username, self.kanban_type
            )
            await self.close()
            return

        await self.channel_layer.group_add(self.kanban_group_name, self.channel_name)
        await self.accept()

        # Informa ao cliente de quanto em quanto tempo enviar ping
        await self.send_json({
            'type': 'conectado',
            'kanban_type': self.kanban_type,
            'heartbeat_interval': getattr(settings, 'GABINETE_WS_HEARTBEAT_INTERVAL', 30),
        })

        logger.info("WebSocket conectado - %s no kanban %s", self.user.username, self.kanban_type)

    async def disconnect(self, close_code):
        if hasattr(self, 'kanban_group_name'):
            await self.channel_layer.group_discard(self.kanban_group_name, self.channel_name)

        logger.info("WebSocket desconectado do kanban %s (código %s)", getattr(self, 'kanban_type', '?'), close_code)

    async def receive(self, text_data=None, bytes_data=None):
        """
        Recebe mensagens do cliente WebSocket
        Processa diferentes tipos de eventos
        """
        try:
            data = json.loads(text_data or '{}')
        except json.JSONDecodeError:
            logger.error("JSON inválido recebido via WebSocket de %s", self.user.username)
            await self.send_json({'type': 'erro', 'error': 'JSON inválido'})
            return

        if not isinstance(data, dict):
            logger.warning("Mensagem WebSocket fora do formato de objeto de %s", self.user.username)
            await self.send_json({'type': 'erro', 'error': 'Mensagem deve ser um objeto JSON'})
            return

        message_type = data.get('type')

        if message_type == 'ping':
            await self.send_json({'type': 'pong', 'timestamp': self.get_timestamp()})

        elif message_type == 'carregar_historico':
            await self.enviar_historico(data)

    async def enviar_historico(self, data):
        seletor = SeletorPeriodo.from_query(data)
        service = HistoricoService()

        try:
            quadro = await service.carregar_async(self.kanban_type, seletor)
        except HistoricoIndisponivel as e:
            await self.send_json({'type': 'erro', 'error': str(e)})
            return

        nomes = await database_sync_to_async(service.nomes_responsaveis)(quadro)
        await self.send_json({
            'type': 'historico',
            'historico': quadro.to_dict(nomes),
            'timestamp': self.get_timestamp()
        })

    # === Handlers para diferentes tipos de eventos ===

    async def item_added(self, event):
        await self.send_json({'type': 'item_added', 'message': event['message']})

    async def item_moved(self, event):
        await self.send_json({'type': 'item_moved', 'message': event['message']})

    async def item_removed(self, event):
        await self.send_json({'type': 'item_removed', 'message': event['message']})

    # === Métodos auxiliares ===

    async def send_json(self, content):
        await self.send(text_data=json.dumps(content))

    def get_timestamp(self):
        return timezone.now().isoformat()
