# apps/kanban/management/commands/resumo_historico.py

from datetime import date

from django.core.management.base import BaseCommand, CommandError

from apps.kanban.exceptions import HistoricoIndisponivel
from apps.kanban.historico import COLUNA_REMOVIDO, PeriodoTipo, SeletorPeriodo, rotulo_posicao
from apps.kanban.services import HistoricoService


class Command(BaseCommand):
    help = 'Mostra o board reconstruído de um kanban em uma semana ou mês'

    def add_arguments(self, parser):
        parser.add_argument('kanban_type', help='Id do usuário ou nome do kanban compartilhado')
        parser.add_argument('--periodo', choices=PeriodoTipo.values, default=PeriodoTipo.MES)
        parser.add_argument('--data', help='Data de referência (AAAA-MM-DD), padrão hoje')

    def handle(self, *args, **options):
        kanban_type = options['kanban_type']

        if options['data']:
            try:
                seletor = SeletorPeriodo(tipo=options['periodo'], referencia=date.fromisoformat(options['data']))
                seletor.intervalo
            except (ValueError, OverflowError):
                raise CommandError(f"Data inválida: {options['data']}")
        else:
            seletor = SeletorPeriodo.hoje(options['periodo'])

        try:
            quadro = HistoricoService().carregar(kanban_type, seletor)
        except HistoricoIndisponivel as e:
            raise CommandError(str(e))

        self.stdout.write(self.style.MIGRATE_HEADING(f'Kanban {kanban_type} - {seletor.rotulo}'))
        self.stdout.write(
            f'  {quadro.total_itens} item(s) no board, '
            f'{quadro.total_removidos} removido(s), '
            f'{quadro.total_movimentos} movimentação(ões)'
        )

        if quadro.vazio:
            self.stdout.write(self.style.WARNING('  Nenhuma atividade neste período'))
            return

        for coluna, itens in quadro.colunas.items():
            titulo = 'Removidos no período' if coluna == COLUNA_REMOVIDO else rotulo_posicao(coluna)
            self.stdout.write(f'\n{titulo} ({len(itens)})')
            for item in itens:
                self.stdout.write(
                    f'  - [{item.rotulo_tipo}] {item.titulo or "Item sem título"} '
                    f'({len(item.movimentos)} movimentação(ões))'
                )

        if quadro.inconsistentes:
            self.stdout.write(self.style.ERROR(f'\n{len(quadro.inconsistentes)} item(s) sem coluna'))

        if quadro.quarentena:
            self.stdout.write(self.style.ERROR(f'{len(quadro.quarentena)} evento(s) inválido(s) ignorado(s)'))
