# apps/relatorios/__init__.py

"""
Relatórios - exports do histórico do kanban

Funcionalidades:
- Movimentações do período em CSV
- Resumo por coluna e movimentações em Excel (xlsxwriter)
"""
