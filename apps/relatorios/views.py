# apps/relatorios/views.py

import csv
import logging
from io import BytesIO

import xlsxwriter
from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.http import HttpResponse
from django.views.decorators.http import require_GET

from apps.core.permissions import requer_acesso_kanban
from apps.kanban.exceptions import HistoricoIndisponivel
from apps.kanban.historico import SeletorPeriodo
from apps.kanban.services import HistoricoService
from .utils import CABECALHO_MOVIMENTOS, linhas_movimentos, linhas_resumo

logger = logging.getLogger(__name__)


def _carregar(request, kanban_type):
    seletor = SeletorPeriodo.from_query(request.GET, getattr(settings, 'GABINETE_PERIODO_PADRAO', 'mes'))
    service = HistoricoService()
    quadro = service.carregar(kanban_type, seletor)
    return quadro, service.nomes_responsaveis(quadro)


def _nome_arquivo(kanban_type, quadro, extensao):
    inicio = quadro.seletor.inicio.strftime('%Y%m%d')
    return f'historico_{kanban_type}_{quadro.seletor.tipo}_{inicio}.{extensao}'


def _indisponivel(kanban_type, erro):
    logger.error("Export do histórico %s falhou: %s", kanban_type, erro)
    return HttpResponse(
        'Não foi possível carregar o histórico. Tente novamente.',
        status=503,
        content_type='text/plain; charset=utf-8'
    )


@login_required
@require_GET
@requer_acesso_kanban
def exportar_historico_csv(request, kanban_type):
    """
    Exporta as movimentações do período para CSV
    Uma linha por movimentação, com a situação do item no fim do período
    """
    try:
        quadro, nomes = _carregar(request, kanban_type)
    except HistoricoIndisponivel as e:
        return _indisponivel(kanban_type, e)

    response = HttpResponse(content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{_nome_arquivo(kanban_type, quadro, "csv")}"'
    response.write('\ufeff')  # BOM para UTF-8

    writer = csv.writer(response)
    writer.writerow(CABECALHO_MOVIMENTOS)

    for linha in linhas_movimentos(quadro, nomes):
        writer.writerow([linha[0].strftime('%d/%m/%Y %H:%M')] + linha[1:])

    return response


@login_required
@require_GET
@requer_acesso_kanban
def exportar_historico_excel(request, kanban_type):
    """
    Exporta o histórico do período para Excel (XLSX)
    Aba de resumo por coluna e aba com todas as movimentações
    """
    try:
        quadro, nomes = _carregar(request, kanban_type)
    except HistoricoIndisponivel as e:
        return _indisponivel(kanban_type, e)

    # Criar arquivo Excel em memória
    output = BytesIO()
    workbook = xlsxwriter.Workbook(output, {'in_memory': True, 'remove_timezone': True})

    # Formatos
    header_format = workbook.add_format({
        'bold': True,
        'font_color': 'white',
        'bg_color': '#366092',
        'border': 1
    })
    cell_format = workbook.add_format({'border': 1})
    date_format = workbook.add_format({'num_format': 'dd/mm/yyyy hh:mm', 'border': 1})

    # Aba 1: Resumo
    resumo_sheet = workbook.add_worksheet('Resumo')
    resumo_sheet.write('A1', 'HISTÓRICO DO KANBAN', header_format)
    resumo_sheet.write('A3', 'Kanban:', header_format)
    resumo_sheet.write('B3', kanban_type, cell_format)
    resumo_sheet.write('A4', 'Período:', header_format)
    resumo_sheet.write('B4', quadro.seletor.rotulo, cell_format)

    resumo_sheet.write('A6', 'TOTAIS', header_format)
    for row, (rotulo, quantidade) in enumerate(linhas_resumo(quadro), 6):
        resumo_sheet.write(row, 0, rotulo, header_format)
        resumo_sheet.write(row, 1, quantidade, cell_format)

    # Aba 2: Movimentações
    movimentos_sheet = workbook.add_worksheet('Movimentações')
    for col, header in enumerate(CABECALHO_MOVIMENTOS):
        movimentos_sheet.write(0, col, header, header_format)

    for row, linha in enumerate(linhas_movimentos(quadro, nomes), 1):
        movimentos_sheet.write_datetime(row, 0, linha[0], date_format)
        for col, valor in enumerate(linha[1:], 1):
            movimentos_sheet.write(row, col, valor, cell_format)

    # Ajustar largura das colunas
    resumo_sheet.set_column('A:B', 22)
    movimentos_sheet.set_column('A:I', 18)
    movimentos_sheet.set_column('D:D', 40)

    # Fechar workbook e preparar response
    workbook.close()
    output.seek(0)

    response = HttpResponse(
        output.read(),
        content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )
    response['Content-Disposition'] = f'attachment; filename="{_nome_arquivo(kanban_type, quadro, "xlsx")}"'

    return response
