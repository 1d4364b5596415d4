"""
Regras de fidelidade (pontos) e crediário (fiado) dos clientes.

Todas as alterações de saldo acontecem com a linha do cliente travada
(select_for_update) dentro de transaction.atomic().
"""
import logging
import math
from decimal import Decimal, ROUND_DOWN

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F

from accounts.utils_api import para_decimal

from .models import Cliente, MovimentoCliente

logger = logging.getLogger(__name__)

CENTAVOS = Decimal('0.01')


def _valor_ponto():
    return Decimal(str(settings.PDV_VALOR_PONTO))


# ==============================================================================
# PONTOS
# ==============================================================================

def maximo_pontos_resgataveis(pontos_cliente, total_carrinho):
    """
    Quantos pontos podem ser usados nesta compra: nunca mais do que o cliente
    tem, nem mais do que o necessário para zerar o carrinho.
    """
    total = Decimal(str(total_carrinho))
    if total <= 0 or pontos_cliente <= 0:
        return 0
    necessarios = math.ceil(total / _valor_ponto())
    return min(int(pontos_cliente), necessarios)


def desconto_por_pontos(pontos_solicitados, pontos_cliente, total_carrinho):
    """Retorna (pontos_usados, valor_desconto)."""
    if pontos_solicitados < 0:
        raise ValidationError("A quantidade de pontos não pode ser negativa.")
    maximo = maximo_pontos_resgataveis(pontos_cliente, total_carrinho)
    usados = min(int(pontos_solicitados), maximo)
    return usados, (Decimal(usados) * _valor_ponto()).quantize(CENTAVOS)


def calcular_pontos_ganhos(total):
    taxa = Decimal(str(settings.PDV_PONTOS_POR_REAL))
    pontos = (Decimal(str(total)) * taxa).to_integral_value(rounding=ROUND_DOWN)
    return max(int(pontos), 0)


def ajustar_pontos(cliente_id, delta):
    """
    Soma (ou subtrai) pontos do cliente. O saldo final não pode ficar negativo.
    """
    delta = int(delta)
    with transaction.atomic():
        cliente = Cliente.objects.select_for_update().get(pk=cliente_id)
        if cliente.pontos + delta < 0:
            raise ValidationError(
                f"O cliente possui apenas {cliente.pontos} pontos; não é possível remover {abs(delta)}."
            )
        if delta:
            Cliente.objects.filter(pk=cliente.pk).update(pontos=F('pontos') + delta)
            cliente.refresh_from_db()
    return cliente


# ==============================================================================
# CREDIÁRIO (FIADO)
# ==============================================================================

def registrar_pagamento(cliente_id, valor, confirmar_excedente=False, observacoes=''):
    """
    Abate um pagamento do saldo devedor e grava no extrato.

    Pagamentos acima do que o cliente deve só passam com confirmação
    explícita; nesse caso o saldo fica negativo (crédito a favor do cliente).
    """
    valor = para_decimal(valor, 'valor').quantize(CENTAVOS)
    if valor <= 0:
        raise ValidationError("O valor do pagamento deve ser maior que zero.")

    with transaction.atomic():
        cliente = Cliente.objects.select_for_update().get(pk=cliente_id)
        if valor > cliente.saldo_devedor and not confirmar_excedente:
            raise ValidationError(
                f"O valor informado (R$ {valor}) é maior que o saldo devedor "
                f"(R$ {cliente.saldo_devedor}). Confirme para registrar mesmo assim."
            )

        Cliente.objects.filter(pk=cliente.pk).update(saldo_devedor=F('saldo_devedor') - valor)
        MovimentoCliente.objects.create(
            cliente=cliente,
            tipo='PAGAMENTO',
            valor=valor,
            observacoes=observacoes or '',
        )
        cliente.refresh_from_db()

    logger.info("Pagamento de R$ %s registrado para o cliente %s", valor, cliente.id)
    return cliente


def validar_compra_fiado(cliente, total):
    if cliente is None:
        raise ValidationError("Selecione um cliente para vender no fiado.")
    total = Decimal(str(total))
    if total <= 0:
        raise ValidationError("O total da venda no fiado deve ser maior que zero.")
    if total > cliente.credito_disponivel:
        raise ValidationError(
            f"Limite de crédito insuficiente. Disponível: R$ {cliente.credito_disponivel:.2f}."
        )


def lancar_compra_fiado(cliente, total, venda=None):
    """
    Lança a compra no crediário. Deve ser chamada dentro da transação da
    venda, com o cliente já travado.
    """
    validar_compra_fiado(cliente, total)
    total = Decimal(str(total)).quantize(CENTAVOS)
    Cliente.objects.filter(pk=cliente.pk).update(saldo_devedor=F('saldo_devedor') + total)
    MovimentoCliente.objects.create(
        cliente=cliente,
        tipo='COMPRA',
        valor=total,
        venda_origem=venda,
        observacoes=f"Pedido #{venda.numero_pedido}" if venda else '',
    )
    cliente.refresh_from_db()
    return cliente
