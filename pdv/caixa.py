# pdv/caixa.py
"""
Matemática da gaveta. Funções puras sobre a lista de movimentos da sessão,
usadas tanto na conferência (caixa aberto) quanto no fechamento.
"""
from decimal import Decimal

from .models import FORMA_PAGAMENTO_CHOICES

ZERO = Decimal('0.00')


def _campo(movimento, nome):
    if isinstance(movimento, dict):
        return movimento.get(nome)
    return getattr(movimento, nome)


def resumir_movimentos(saldo_inicial, movimentos):
    """
    Dinheiro que tem que ter fisicamente =
        Inicial + Vendas(Dinheiro) + Suprimentos - Sangrias

    As demais formas de pagamento entram no faturamento, mas não na gaveta.
    """
    vendas_por_forma = {codigo: ZERO for codigo, _ in FORMA_PAGAMENTO_CHOICES}
    suprimentos = ZERO
    sangrias = ZERO

    for mov in movimentos:
        tipo = _campo(mov, 'tipo')
        valor = Decimal(str(_campo(mov, 'valor')))
        if tipo == 'VENDA':
            forma = _campo(mov, 'forma_pagamento') or 'DINHEIRO'
            vendas_por_forma[forma] = vendas_por_forma.get(forma, ZERO) + valor
        elif tipo == 'SUPRIMENTO':
            suprimentos += valor
        elif tipo == 'SANGRIA':
            sangrias += valor

    saldo_inicial = Decimal(str(saldo_inicial or 0))
    total_vendas = sum(vendas_por_forma.values(), ZERO)
    saldo_esperado = saldo_inicial + vendas_por_forma['DINHEIRO'] + suprimentos - sangrias

    return {
        'saldo_inicial': saldo_inicial,
        'vendas_por_forma': vendas_por_forma,
        'suprimentos': suprimentos,
        'sangrias': sangrias,
        'total_vendas': total_vendas,
        'saldo_esperado': saldo_esperado,
    }


def calcular_diferenca(saldo_contado, saldo_esperado):
    """Positivo = sobra na gaveta; negativo = falta."""
    return Decimal(str(saldo_contado)) - Decimal(str(saldo_esperado))


def resumo_para_json(resumo):
    return {
        'saldo_inicial': float(resumo['saldo_inicial']),
        'vendas': {forma.lower(): float(valor) for forma, valor in resumo['vendas_por_forma'].items()},
        'suprimentos': float(resumo['suprimentos']),
        'sangrias': float(resumo['sangrias']),
        'total_vendas': float(resumo['total_vendas']),
        'saldo_esperado': float(resumo['saldo_esperado']),
    }
