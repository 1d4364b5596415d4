# pdv/views.py

import logging

from django.core.exceptions import ValidationError
from django.db.models import Q
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from accounts.decorators import mercado_required, dono_required
from accounts.models import Produto
from accounts.utils_api import ler_json, erro_json, mensagem_validacao, para_decimal, para_inteiro
from . import services
from .models import SessaoCaixa, Venda
from .recibos import gerar_texto_recibo, link_whatsapp

logger = logging.getLogger(__name__)


@require_GET
@mercado_required
def buscar_produto_api(request):
    """
    API para busca rápida por nome ou código de barras.
    """
    termo = request.GET.get('q', '').strip()
    if not termo:
        return JsonResponse({'success': True, 'produtos': []})

    # Busca por nome OU código
    produtos = Produto.objects.filter(mercado=request.mercado).filter(
        Q(nome__icontains=termo) | Q(codigo__iexact=termo)
    )[:20]
    limite = request.mercado.limite_estoque_baixo
    return JsonResponse({'success': True, 'produtos': [p.to_dict(limite) for p in produtos]})


@require_POST
@mercado_required
def finalizar_venda_pdv(request):
    """
    Processa a venda: baixa estoque, pontos, fiado e movimento do caixa.
    """
    try:
        data = ler_json(request)
        venda = services.finalizar_venda(request.perfil, data)
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    texto = gerar_texto_recibo(venda, request.mercado.nome)
    return JsonResponse({
        'success': True,
        'venda': venda.to_dict(),
        'recibo': texto,
        'whatsapp_url': link_whatsapp(texto),
        'message': 'Venda realizada com sucesso!',
    }, status=201)


@require_GET
@mercado_required
def recibo_venda_view(request, venda_id):
    venda = get_object_or_404(Venda, id=venda_id, mercado=request.mercado)
    texto = gerar_texto_recibo(venda, request.mercado.nome)
    return JsonResponse({
        'success': True,
        'venda': venda.to_dict(),
        'recibo': texto,
        'whatsapp_url': link_whatsapp(texto),
    })


# --- COMANDAS ---

@require_http_methods(["GET", "POST"])
@mercado_required
def comandas_view(request):
    if request.method == 'GET':
        comandas = Venda.objects.filter(
            mercado=request.mercado, status='ABERTA'
        ).prefetch_related('itens').order_by('created_at')
        return JsonResponse({'success': True, 'comandas': [c.to_dict() for c in comandas]})

    try:
        data = ler_json(request)
        comanda = services.criar_comanda(request.perfil, data.get('nome'), data.get('cliente_id'))
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))
    return JsonResponse({'success': True, 'comanda': comanda.to_dict()}, status=201)


@require_http_methods(["GET", "DELETE"])
@mercado_required
def comanda_detalhe_view(request, comanda_id):
    comanda = get_object_or_404(Venda, id=comanda_id, mercado=request.mercado, status='ABERTA')

    if request.method == 'GET':
        return JsonResponse({'success': True, 'comanda': comanda.to_dict()})

    try:
        services.excluir_comanda(comanda)
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))
    return JsonResponse({'success': True})


@require_http_methods(["PUT", "POST"])
@mercado_required
def comanda_itens_view(request, comanda_id):
    comanda = get_object_or_404(Venda, id=comanda_id, mercado=request.mercado, status='ABERTA')
    try:
        data = ler_json(request)
        comanda = services.atualizar_itens_comanda(comanda, data.get('itens', []))
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))
    return JsonResponse({'success': True, 'comanda': comanda.to_dict()})


# --- FUNÇÕES DO CAIXA ---

@require_POST
@mercado_required
def abrir_caixa_pdv(request):
    """API para abrir uma nova sessão de caixa"""
    try:
        data = ler_json(request)
        saldo_inicial = para_decimal(data.get('saldo_inicial', 0), 'saldo_inicial')
        sessao = services.abrir_caixa(request.perfil, saldo_inicial)
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))
    return JsonResponse({'success': True, 'sessao': services.sessao_to_dict(sessao)}, status=201)


@require_GET
@mercado_required
def caixa_ativo_view(request):
    sessao = services.caixa_aberto(request.user)
    return JsonResponse({
        'success': True,
        'sessao': services.sessao_to_dict(sessao) if sessao else None,
    })


@require_POST
@mercado_required
def registrar_movimento_caixa(request):
    """API para Sangria e Suprimento"""
    try:
        data = ler_json(request)
        sessao = get_object_or_404(
            SessaoCaixa, id=para_inteiro(data.get('sessao_id'), 'sessao_id'), usuario=request.user
        )
        sessao = services.registrar_movimento(
            sessao.id, request.user,
            (data.get('tipo') or '').upper(),
            para_decimal(data.get('valor'), 'valor'),
            data.get('descricao', ''),
        )
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))
    return JsonResponse({'success': True, 'sessao': services.sessao_to_dict(sessao)})


@require_GET
@mercado_required
def dados_conferencia_caixa(request):
    """
    Calcula os totais da sessão atual para a conferência.
    """
    sessao = services.caixa_aberto(request.user)
    if not sessao:
        return erro_json("Nenhum caixa aberto.", status=404)
    return JsonResponse({
        'success': True,
        'sessao_id': sessao.id,
        'dados': services.sessao_to_dict(sessao, com_movimentos=False)['resumo'],
    })


@require_POST
@mercado_required
def fechar_caixa_pdv(request):
    """API para Fechar o Caixa"""
    try:
        data = ler_json(request)
        sessao = get_object_or_404(
            SessaoCaixa, id=para_inteiro(data.get('sessao_id'), 'sessao_id'), usuario=request.user
        )
        sessao = services.fechar_caixa(
            sessao.id, request.user, para_decimal(data.get('saldo_final'), 'saldo_final')
        )
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))
    return JsonResponse({'success': True, 'sessao': services.sessao_to_dict(sessao)})


@require_GET
@dono_required
def historico_caixa_view(request):
    sessoes = SessaoCaixa.objects.filter(
        mercado=request.mercado, status='FECHADO'
    ).prefetch_related('movimentos').order_by('-data_fechamento', '-id')
    return JsonResponse({'success': True, 'sessoes': [services.sessao_to_dict(s) for s in sessoes]})
