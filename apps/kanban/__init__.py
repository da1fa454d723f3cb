# apps/kanban/__init__.py

"""
Kanban - Aplicação de quadros do gabinete

Funcionalidades:
- Kanbans pessoais e compartilhados (demandas, tarefas e rotas)
- Log append-only das movimentações
- Histórico por semana ou mês reconstruído a partir do log
- WebSockets para atualizações em tempo real
"""
