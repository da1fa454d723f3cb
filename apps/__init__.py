# apps/__init__.py

"""
Gabinete Kanban - Aplicações Django

Este pacote contém todas as aplicações do sistema:
- core: Usuários, autenticação, permissões e painel
- kanban: Board, log de movimentações e histórico por período (HTTP e WebSocket)
- relatorios: Exportação do histórico em CSV e Excel
"""

__version__ = '0.1.0'
__author__ = 'Equipe do Gabinete'
