import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from accounts.decorators import mercado_required
from accounts.utils_api import (
    ler_json, erro_json, mensagem_validacao, erros_formulario,
    dados_com_instancia, para_decimal, para_inteiro
)
from .forms import ClienteForm
from .models import Cliente
from . import services

logger = logging.getLogger(__name__)

CAMPOS_CLIENTE = ['nome', 'email', 'telefone', 'cpf', 'limite_credito']


@require_http_methods(["GET", "POST"])
@mercado_required
def clientes_view(request):
    """
    GET: lista (ou busca com ?q=) os clientes do mercado.
    POST: cadastra um cliente novo, com pontos e saldo zerados.
    """
    if request.method == 'GET':
        clientes = Cliente.objects.filter(mercado=request.mercado)
        termo = request.GET.get('q', '').strip()
        if termo:
            clientes = clientes.filter(
                Q(nome__icontains=termo) | Q(cpf__icontains=termo) |
                Q(telefone__icontains=termo) | Q(email__icontains=termo)
            )
        return JsonResponse({'success': True, 'clientes': [c.to_dict() for c in clientes]})

    try:
        data = ler_json(request)
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    form = ClienteForm(data)
    if not form.is_valid():
        return erros_formulario(form)

    cliente = form.save(commit=False)
    cliente.mercado = request.mercado
    cliente.pontos = 0
    cliente.saldo_devedor = 0
    cliente.save()
    return JsonResponse({'success': True, 'cliente': cliente.to_dict()}, status=201)


@require_http_methods(["GET", "PUT", "PATCH", "DELETE"])
@mercado_required
def cliente_detalhe_view(request, cliente_id):
    cliente = get_object_or_404(Cliente, id=cliente_id, mercado=request.mercado)

    if request.method == 'GET':
        return JsonResponse({'success': True, 'cliente': cliente.to_dict()})

    if request.method == 'DELETE':
        cliente.delete()
        return JsonResponse({'success': True})

    try:
        data = ler_json(request)
        delta = para_inteiro(data.get('pontos_delta', 0) or 0, 'pontos_delta')
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    form = ClienteForm(dados_com_instancia(cliente, data, CAMPOS_CLIENTE), instance=cliente)
    if not form.is_valid():
        return erros_formulario(form)

    try:
        with transaction.atomic():
            form.save()
            cliente = services.ajustar_pontos(cliente.id, delta)
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    return JsonResponse({'success': True, 'cliente': cliente.to_dict()})


@require_POST
@mercado_required
def registrar_pagamento_view(request, cliente_id):
    cliente = get_object_or_404(Cliente, id=cliente_id, mercado=request.mercado)
    try:
        data = ler_json(request)
        valor = para_decimal(data.get('valor'), 'valor')
        cliente = services.registrar_pagamento(
            cliente.id, valor,
            confirmar_excedente=bool(data.get('confirmar_excedente')),
            observacoes=(data.get('observacoes') or '')[:255],
        )
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    return JsonResponse({'success': True, 'cliente': cliente.to_dict()})


@require_GET
@mercado_required
def extrato_cliente_view(request, cliente_id):
    cliente = get_object_or_404(Cliente, id=cliente_id, mercado=request.mercado)
    movimentos = cliente.movimentos.all()
    return JsonResponse({
        'success': True,
        'cliente': cliente.to_dict(),
        'movimentos': [m.to_dict() for m in movimentos],
    })


@require_GET
@mercado_required
def simular_resgate_pontos_view(request, cliente_id):
    """
    Prévia do resgate: ?total=<valor do carrinho>&pontos=<pontos desejados>
    """
    cliente = get_object_or_404(Cliente, id=cliente_id, mercado=request.mercado)
    try:
        total = para_decimal(request.GET.get('total'), 'total')
        maximo = services.maximo_pontos_resgataveis(cliente.pontos, total)
        solicitados = para_inteiro(request.GET.get('pontos', maximo), 'pontos')
        usados, desconto = services.desconto_por_pontos(solicitados, cliente.pontos, total)
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    return JsonResponse({
        'success': True,
        'pontos_disponiveis': cliente.pontos,
        'maximo_resgatavel': maximo,
        'pontos_usados': usados,
        'desconto': float(desconto),
    })
