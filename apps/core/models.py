# apps/core/models.py

from django.contrib.auth.models import AbstractUser
from django.db import models


class Usuario(AbstractUser):
    """
    Modelo de usuário customizado do gabinete

    Cada usuário tem um kanban pessoal (identificado pelo próprio id)
    e pode participar dos kanbans compartilhados do gabinete.
    """

    TIPO_CHOICES = [
        ('admin', 'Administrador'),
        ('gestor', 'Gestor'),
        ('assessor', 'Assessor'),
    ]

    telefone = models.CharField(max_length=20, blank=True)
    tipo = models.CharField(max_length=20, choices=TIPO_CHOICES, default='assessor')

    # === METADADOS ===
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'usuario'
        indexes = [
            models.Index(fields=['tipo'], name='usuario_tipo_idx'),
        ]

    @property
    def kanban_pessoal(self):
        """Identificador do kanban pessoal do usuário"""
        return str(self.pk)

    def get_nome_exibicao(self):
        return self.get_full_name() or self.username

    def __str__(self):
        return self.get_nome_exibicao()
