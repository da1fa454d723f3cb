# config/asgi.py

import os
from django.core.asgi import get_asgi_application
from channels.routing import ProtocolTypeRouter, URLRouter
from channels.auth import AuthMiddlewareStack
from channels.security.websocket import AllowedHostsOriginValidator

# Configurar Django settings
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

# Importar rotas do kanban depois de configurar Django
django_asgi_app = get_asgi_application()

from apps.kanban.routing import websocket_urlpatterns  # noqa: E402

application = ProtocolTypeRouter({
    # Páginas, API JSON e exports
    "http": django_asgi_app,

    # Notificações e histórico do kanban, só de origens em ALLOWED_HOSTS
    "websocket": AllowedHostsOriginValidator(
        AuthMiddlewareStack(
            URLRouter(websocket_urlpatterns)
        )
    ),
})
