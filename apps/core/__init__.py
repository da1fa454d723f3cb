# apps/core/__init__.py

"""
Core - Aplicação base do gabinete

Contém:
- Usuario com os tipos admin, gestor e assessor
- Regras de acesso aos kanbans (GabinetePermissions)
- Login, painel e health check
- Comando seed com dados de demonstração
"""
