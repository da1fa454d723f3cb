# apps/core/management/commands/seed.py

from datetime import timedelta

from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.core.models import Usuario
from apps.kanban.models import AcaoHistorico, HistoricoKanban, ItemKanban, PosicaoKanban, TipoItem

USUARIOS_DEMO = [
    ('gestora', 'Ana', 'Gestora', 'gestor'),
    ('assessor', 'Bruno', 'Assessor', 'assessor'),
]

ITENS_DEMO = [
    ('101', TipoItem.DEMANDA, 'Poda de árvore na Rua das Flores'),
    ('102', TipoItem.DEMANDA, 'Iluminação pública no Jardim América'),
    ('201', TipoItem.TAREFA, 'Preparar pauta da sessão ordinária'),
    ('202', TipoItem.TAREFA, 'Responder ofício da Secretaria de Obras'),
    ('301', TipoItem.ROTA, 'Visita ao bairro Vila Nova'),
]


class Command(BaseCommand):
    help = 'Cria usuários e movimentações de demonstração no kanban compartilhado'

    def add_arguments(self, parser):
        parser.add_argument('--kanban', default=None, help='Kanban que recebe os itens de demonstração')

    def handle(self, *args, **options):
        compartilhados = getattr(settings, 'GABINETE_KANBANS_COMPARTILHADOS', [])
        kanban_type = options['kanban'] or (compartilhados[0] if compartilhados else 'geral')

        if HistoricoKanban.objects.filter(kanban_type=kanban_type).exists():
            self.stdout.write(self.style.WARNING(f'⚠️  Kanban {kanban_type} já tem histórico, nada a fazer'))
            return

        with transaction.atomic():
            usuarios = self._criar_usuarios()
            total = self._criar_historico(kanban_type, usuarios)

        self.stdout.write(self.style.SUCCESS(
            f'✅ {len(ITENS_DEMO)} itens e {total} movimentações criados em {kanban_type}'
        ))

    def _criar_usuarios(self):
        usuarios = []
        for username, nome, sobrenome, tipo in USUARIOS_DEMO:
            usuario, criado = Usuario.objects.get_or_create(
                username=username,
                defaults={'first_name': nome, 'last_name': sobrenome, 'tipo': tipo}
            )
            if criado:
                usuario.set_password('gabinete123')
                usuario.save()
                self.stdout.write(f'  👤 Usuário {username} criado')
            usuarios.append(usuario)
        return usuarios

    def _criar_historico(self, kanban_type, usuarios):
        """
        Espalha as movimentações pelas últimas semanas, para que a tela de
        histórico tenha o que mostrar no mês atual e no anterior
        """
        agora = timezone.now()
        registros = []

        for indice, (item_id, item_tipo, titulo) in enumerate(ITENS_DEMO):
            entrada = agora - timedelta(days=40 - indice * 7)
            base = {
                'item_id': item_id,
                'item_tipo': item_tipo,
                'item_titulo': titulo,
                'kanban_type': kanban_type,
            }
            registros.append(({**base, 'acao': AcaoHistorico.ADICIONADO, 'posicao_nova': PosicaoKanban.A_FAZER}, entrada))

            posicao = PosicaoKanban.A_FAZER
            if indice % 2 == 0:
                registros.append(({
                    **base, 'acao': AcaoHistorico.MOVIDO,
                    'posicao_anterior': posicao, 'posicao_nova': PosicaoKanban.EM_PROGRESSO,
                }, entrada + timedelta(days=2)))
                posicao = PosicaoKanban.EM_PROGRESSO
            if indice == 0:
                registros.append(({
                    **base, 'acao': AcaoHistorico.MOVIDO,
                    'posicao_anterior': posicao, 'posicao_nova': PosicaoKanban.FEITO,
                }, entrada + timedelta(days=5)))
                posicao = PosicaoKanban.FEITO
            if indice == 3:
                registros.append(({**base, 'acao': AcaoHistorico.REMOVIDO, 'posicao_anterior': posicao}, entrada + timedelta(days=1)))
                continue

            ItemKanban.objects.create(
                item_id=item_id, item_tipo=item_tipo, titulo=titulo,
                kanban_type=kanban_type, posicao=posicao, ordem=indice
            )

        HistoricoKanban.objects.bulk_create([
            HistoricoKanban(**dados, created_at=quando, movido_por=usuarios[0])
            for dados, quando in registros
        ])
        return len(registros)
