# apps/kanban/routing.py

from django.urls import re_path
from . import consumers

# Rotas WebSocket da aplicação kanban
websocket_urlpatterns = [
    re_path(r'ws/kanban/(?P<kanban_type>[\w-]+)/$', consumers.KanbanConsumer.as_asgi()),
]
