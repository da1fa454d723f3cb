# apps/kanban/exceptions.py


class HistoricoError(Exception):
    """Erro base do histórico do kanban"""


class HistoricoIndisponivel(HistoricoError):
    """Falha ao ler o log de eventos do kanban"""


class HistoricoImutavel(HistoricoError):
    """Tentativa de alterar ou apagar um evento já registrado"""


class EventoInvalido(HistoricoError):
    """Evento com ação, tipo ou posição fora do conjunto conhecido"""

    def __init__(self, evento, motivo):
        self.evento = evento
        self.motivo = motivo
        super().__init__(f"Evento {getattr(evento, 'id', None)} inválido: {motivo}")


class MovimentacaoInvalida(HistoricoError):
    """Adição, movimentação ou remoção recusada"""
