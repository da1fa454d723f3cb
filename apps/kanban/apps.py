# apps/kanban/apps.py

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class KanbanConfig(AppConfig):
    """Configuração da app Kanban"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.kanban'
    verbose_name = 'Kanban - Quadros e Histórico'

    def ready(self):
        logger.info("Kanban App inicializada - histórico e WebSockets habilitados")
