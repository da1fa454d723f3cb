# config/wsgi.py

"""
Entrada WSGI do gabinete

Atende apenas HTTP (páginas, API e exports). O WebSocket do kanban
precisa do servidor ASGI em config/asgi.py.
"""

import os
from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.production')

application = get_wsgi_application()
