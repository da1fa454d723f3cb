# apps/kanban/models.py

from django.conf import settings
from django.db import models
from django.utils import timezone

from .exceptions import HistoricoImutavel


class TipoItem(models.TextChoices):
    DEMANDA = 'demanda', 'Demanda'
    TAREFA = 'tarefa', 'Tarefa'
    ROTA = 'rota', 'Rota'


class AcaoHistorico(models.TextChoices):
    ADICIONADO = 'adicionado', 'Adicionado'
    MOVIDO = 'movido', 'Movido'
    REMOVIDO = 'removido', 'Removido'


class PosicaoKanban(models.TextChoices):
    """Colunas fixas de todo kanban do gabinete"""

    A_FAZER = 'a_fazer', 'A Fazer'
    EM_PROGRESSO = 'em_progresso', 'Em Progresso'
    FEITO = 'feito', 'Feito'


class ItemKanban(models.Model):
    """
    Posição atual de uma demanda, tarefa ou rota em um kanban

    O mesmo item pode estar em vários kanbans (pessoal e compartilhado),
    mas apenas uma vez em cada um.
    """

    item_id = models.CharField(max_length=64)
    item_tipo = models.CharField(max_length=10, choices=TipoItem.choices)
    titulo = models.CharField(max_length=255, blank=True)
    kanban_type = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Id do usuário dono do kanban ou nome do kanban compartilhado"
    )
    posicao = models.CharField(
        max_length=20,
        choices=PosicaoKanban.choices,
        default=PosicaoKanban.A_FAZER
    )
    ordem = models.IntegerField(default=0)
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'kanban_item'
        ordering = ['posicao', 'ordem', 'criado_em']
        constraints = [
            models.UniqueConstraint(
                fields=['item_id', 'item_tipo', 'kanban_type'],
                name='kanban_item_unico_por_kanban'
            ),
        ]

    def __str__(self):
        return f"{self.get_item_tipo_display()} - {self.titulo or self.item_id}"

    def to_dict(self):
        return {
            'id': self.id,
            'item_id': self.item_id,
            'item_tipo': self.item_tipo,
            'titulo': self.titulo,
            'kanban_type': self.kanban_type,
            'posicao': self.posicao,
            'ordem': self.ordem,
        }


class HistoricoKanban(models.Model):
    """
    Log append-only das movimentações do kanban

    Cada linha registra uma transição de um item: adicionado, movido ou
    removido. Linhas nunca são alteradas nem apagadas; o estado do board
    em qualquer instante é reconstruído a partir delas.
    """

    item_id = models.CharField(max_length=64)
    item_tipo = models.CharField(max_length=10, choices=TipoItem.choices)
    item_titulo = models.CharField(max_length=255, blank=True)
    kanban_type = models.CharField(max_length=100)
    posicao_anterior = models.CharField(max_length=20, null=True, blank=True)
    posicao_nova = models.CharField(max_length=20, null=True, blank=True)
    acao = models.CharField(max_length=10, choices=AcaoHistorico.choices)
    movido_por = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='movimentacoes_kanban'
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'kanban_historico'
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['kanban_type', 'created_at'], name='idx_historico_kanban_data'),
        ]

    def __str__(self):
        return f"{self.acao} {self.item_tipo}:{self.item_id} em {self.kanban_type} ({self.created_at:%d/%m/%Y %H:%M})"

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise HistoricoImutavel("Eventos do histórico não podem ser alterados")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise HistoricoImutavel("Eventos do histórico não podem ser apagados")

    def to_evento(self):
        """Converte a linha no valor imutável usado pela reconstrução"""
        from .historico import EventoHistorico

        return EventoHistorico(
            id=self.id,
            item_id=self.item_id,
            item_tipo=self.item_tipo,
            item_titulo=self.item_titulo,
            kanban_type=self.kanban_type,
            posicao_anterior=self.posicao_anterior,
            posicao_nova=self.posicao_nova,
            acao=self.acao,
            movido_por=self.movido_por_id,
            created_at=self.created_at,
        )
