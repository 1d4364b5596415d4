import logging

from django.core.exceptions import ValidationError
from django.http import JsonResponse, Http404
from django.views.decorators.http import require_GET, require_POST

from accounts.decorators import mercado_required, dono_required
from accounts.models import Produto
from accounts.utils_api import ler_json, erro_json, mensagem_validacao
from pdv.models import FORMA_PAGAMENTO_CHOICES
from . import analytics, assistente
from .exports import gerar_csv_vendas, gerar_excel_vendas, gerar_pdf_vendas

logger = logging.getLogger(__name__)

FORMAS_FILTRO = {'all'} | {codigo for codigo, _ in FORMA_PAGAMENTO_CHOICES}


@require_GET
@dono_required
def painel_view(request):
    mercado = request.mercado
    painel = analytics.painel_mercado(mercado)
    return JsonResponse({
        'success': True,
        'painel': analytics.painel_para_json(painel, mercado.limite_estoque_baixo),
    })


@require_POST
@dono_required
def insights_view(request):
    painel = analytics.painel_mercado(request.mercado)
    return JsonResponse({
        'success': True,
        'demonstracao': not assistente.ia_configurada(),
        'analise': assistente.gerar_insights(painel),
    })


@require_GET
@dono_required
def desempenho_operadores_view(request):
    linhas = analytics.desempenho_operadores_mercado(request.mercado)
    return JsonResponse({
        'success': True,
        'operadores': [
            {
                **linha,
                'faturamento': float(linha['faturamento']),
                'lucro': float(linha['lucro']),
                'ticket_medio': float(linha['ticket_medio']),
            }
            for linha in linhas
        ],
    })


@require_GET
@dono_required
def validade_produtos_view(request):
    mercado = request.mercado
    produtos = Produto.objects.filter(mercado=mercado, data_validade__isnull=False)
    return JsonResponse({
        'success': True,
        'produtos': [
            {
                **r['produto'].to_dict(mercado.limite_estoque_baixo),
                'dias_restantes': r['dias_restantes'],
                'situacao': r['situacao'],
            }
            for r in analytics.produtos_vencendo(produtos)
        ],
    })


def _vendas_filtradas(request):
    periodo = request.GET.get('periodo', 'all')
    forma = request.GET.get('forma_pagamento') or 'all'
    forma = 'all' if forma.lower() == 'all' else forma.upper()
    if periodo not in analytics.PERIODOS:
        raise ValidationError("Período inválido. Use all, today, week ou month.")
    if forma not in FORMAS_FILTRO:
        raise ValidationError("Forma de pagamento inválida.")
    return analytics.filtrar_vendas(request.mercado, periodo, forma, request.GET.get('q', ''))


@require_GET
@dono_required
def vendas_view(request):
    try:
        vendas = list(_vendas_filtradas(request))
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    return JsonResponse({
        'success': True,
        'vendas': [v.to_dict() for v in vendas],
        'quantidade': len(vendas),
        'total': float(sum(v.total for v in vendas)),
    })


@require_GET
@dono_required
def exportar_vendas_view(request, formato):
    try:
        vendas = list(_vendas_filtradas(request))
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    if formato == 'csv':
        return gerar_csv_vendas(vendas)
    if formato == 'excel':
        return gerar_excel_vendas(vendas, request.mercado.nome)
    if formato == 'pdf':
        return gerar_pdf_vendas(vendas, request.mercado.nome)
    raise Http404("Formato de exportação inválido.")


# --- ASSISTENTE ---

@require_POST
@mercado_required
def iniciar_assistente_view(request):
    disponivel, mensagem = assistente.iniciar_chat(request.session, request.perfil)
    return JsonResponse({'success': True, 'disponivel': disponivel, 'mensagem': mensagem})


@require_POST
@mercado_required
def mensagem_assistente_view(request):
    try:
        data = ler_json(request)
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    texto = (data.get('mensagem') or '').strip()
    if not texto:
        return erro_json("Digite uma mensagem.")

    ok, resposta = assistente.enviar_mensagem(request.session, request.perfil, texto)
    return JsonResponse({'success': ok, 'resposta': resposta})
