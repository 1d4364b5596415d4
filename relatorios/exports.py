import csv

import openpyxl
from openpyxl.styles import Font
from django.http import HttpResponse
from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

CABECALHOS = ['Pedido Nº', 'Data', 'Operador', 'Cliente', 'Total (R$)', 'Pagamento', 'Itens']


def _linha_venda(venda):
    return [
        venda.numero_pedido,
        timezone.localtime(venda.created_at).strftime('%d/%m/%Y %H:%M'),
        venda.nome_operador,
        venda.nome_cliente or '-',
        venda.total,
        venda.get_forma_pagamento_display(),
        "; ".join(f"{item.quantidade}x {item.nome}" for item in venda.itens.all()),
    ]


def _nome_arquivo(extensao):
    return f"relatorio_vendas_{timezone.localdate().strftime('%d_%m_%Y')}.{extensao}"


def gerar_csv_vendas(vendas):
    response = HttpResponse(content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{_nome_arquivo("csv")}"'
    # BOM para o Excel abrir os acentos corretamente
    response.write('\ufeff')

    writer = csv.writer(response, delimiter=';')
    writer.writerow(CABECALHOS)
    for venda in vendas:
        linha = _linha_venda(venda)
        linha[4] = f"{linha[4]:.2f}".replace('.', ',')
        writer.writerow(linha)
    return response


def gerar_excel_vendas(vendas, nome_mercado):
    response = HttpResponse(content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
    response['Content-Disposition'] = f'attachment; filename="{_nome_arquivo("xlsx")}"'

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Vendas"

    ws.merge_cells('A1:G1')
    ws['A1'] = f"Mercado: {nome_mercado}"
    ws['A1'].font = Font(bold=True, size=12)
    ws.append([])  # Linha em branco para separar do cabeçalho

    ws.append(CABECALHOS)
    for cell in ws[ws.max_row]:
        cell.font = Font(bold=True)

    total = 0
    for venda in vendas:
        ws.append(_linha_venda(venda))
        # Coluna 'Total' (E) no padrão contábil
        ws.cell(row=ws.max_row, column=5).number_format = '#,##0.00'
        total += venda.total

    ws.append([])
    ws.append(['', '', '', 'Total', total])
    ws.cell(row=ws.max_row, column=4).font = Font(bold=True)
    ws.cell(row=ws.max_row, column=5).number_format = '#,##0.00'

    wb.save(response)
    return response


def gerar_pdf_vendas(vendas, nome_mercado):
    response = HttpResponse(content_type='application/pdf')
    response['Content-Disposition'] = f'inline; filename="{_nome_arquivo("pdf")}"'

    doc = SimpleDocTemplate(response, pagesize=landscape(A4), title="Relatório de Vendas")
    styles = getSampleStyleSheet()

    elements = [
        Paragraph("Relatório de Vendas", styles['Title']),
        Paragraph(f"<b>Mercado:</b> {nome_mercado}", styles['Normal']),
        Paragraph(f"Gerado em: {timezone.localtime().strftime('%d/%m/%Y %H:%M')}", styles['Normal']),
        Spacer(1, 12),
    ]

    data = [CABECALHOS[:6]]
    total = 0
    for venda in vendas:
        linha = _linha_venda(venda)[:6]
        linha[0] = f"#{linha[0]}"
        linha[4] = f"R$ {linha[4]:.2f}"
        data.append(linha)
        total += venda.total
    data.append(['', '', '', 'Total', f"R$ {total:.2f}", ''])

    tabela = Table(data, repeatRows=1)
    tabela.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#f2f2f2')),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('GRID', (0, 0), (-1, -2), 0.5, colors.HexColor('#dddddd')),
        ('ALIGN', (4, 1), (4, -1), 'RIGHT'),
    ]))
    elements.append(tabela)

    doc.build(elements)
    return response
