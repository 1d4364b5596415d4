"""
Agregações do painel e dos relatórios.

As funções de cálculo recebem coleções já carregadas (vendas com itens,
despesas, produtos) e só somam e agrupam; as funções *_mercado fazem a
busca no banco.
"""
from collections import OrderedDict
from datetime import timedelta
from decimal import Decimal

from django.db.models import Q
from django.utils import timezone

from accounts.models import PerfilUsuario, Produto, Despesa
from pdv.models import Venda

ZERO = Decimal('0.00')
DIAS_ALERTA_VALIDADE = 30
PERIODOS = ('all', 'today', 'week', 'month')


def _custo_item(item):
    # Produto excluído depois da venda entra com custo zero
    custo = item.produto.custo if item.produto_id and item.produto else ZERO
    return custo * item.quantidade


def vendas_faturadas(mercado):
    """Vendas que contam no faturamento (comandas abertas ficam de fora)."""
    return Venda.objects.filter(mercado=mercado).exclude(
        status='ABERTA'
    ).prefetch_related('itens__produto').order_by('created_at', 'id')


# ==============================================================================
# PAINEL
# ==============================================================================

def calcular_painel(vendas, despesas, produtos, limite_estoque_baixo):
    faturamento = ZERO
    custos = ZERO
    por_dia = OrderedDict()
    por_hora = {}
    por_produto = {}

    for venda in vendas:
        faturamento += venda.total
        momento = timezone.localtime(venda.created_at)

        dia = momento.strftime('%d/%m/%Y')
        por_dia[dia] = por_dia.get(dia, ZERO) + venda.total

        hora = momento.strftime('%H:00')
        por_hora[hora] = por_hora.get(hora, 0) + 1

        for item in venda.itens.all():
            custo = _custo_item(item)
            receita = item.preco_unitario * item.quantidade
            custos += custo

            chave = item.produto_id or f"nome:{item.nome}"
            atual = por_produto.setdefault(chave, {
                'produto_id': item.produto_id,
                'nome': item.nome,
                'quantidade': 0,
                'receita': ZERO,
                'lucro': ZERO,
            })
            atual['quantidade'] += item.quantidade
            atual['receita'] += receita
            atual['lucro'] += receita - custo

    total_despesas = sum((d.valor for d in despesas), ZERO)
    top_produtos = sorted(por_produto.values(), key=lambda p: p['receita'], reverse=True)[:5]

    return {
        'faturamento': faturamento,
        'custos': custos,
        'despesas': total_despesas,
        'lucro_liquido': faturamento - custos - total_despesas,
        'vendas_por_dia': [{'dia': dia, 'total': total} for dia, total in por_dia.items()],
        'vendas_por_hora': [{'hora': hora, 'vendas': qtd} for hora, qtd in sorted(por_hora.items())],
        'top_produtos': top_produtos,
        'estoque_baixo': [p for p in produtos if p.estoque <= limite_estoque_baixo],
    }


def painel_mercado(mercado):
    return calcular_painel(
        vendas_faturadas(mercado),
        Despesa.objects.filter(mercado=mercado),
        Produto.objects.filter(mercado=mercado),
        mercado.limite_estoque_baixo,
    )


def painel_para_json(painel, limite_estoque_baixo):
    return {
        'faturamento': float(painel['faturamento']),
        'custos': float(painel['custos']),
        'despesas': float(painel['despesas']),
        'lucro_liquido': float(painel['lucro_liquido']),
        'vendas_por_dia': [{'dia': d['dia'], 'total': float(d['total'])} for d in painel['vendas_por_dia']],
        'vendas_por_hora': painel['vendas_por_hora'],
        'top_produtos': [
            {**p, 'receita': float(p['receita']), 'lucro': float(p['lucro'])}
            for p in painel['top_produtos']
        ],
        'estoque_baixo': [p.to_dict(limite_estoque_baixo) for p in painel['estoque_baixo']],
    }


# ==============================================================================
# RELATÓRIOS
# ==============================================================================

def desempenho_operadores(perfis, vendas):
    """
    Uma linha por operador (inclusive quem ainda não vendeu), ordenada pelo
    faturamento.
    """
    linhas = {
        perfil.user_id: {
            'operador_id': perfil.user_id,
            'nome': perfil.nome,
            'faturamento': ZERO,
            'vendas': 0,
            'itens_vendidos': 0,
            'lucro': ZERO,
        }
        for perfil in perfis
    }

    for venda in vendas:
        linha = linhas.get(venda.operador_id)
        if linha is None:
            continue
        custo = sum((_custo_item(item) for item in venda.itens.all()), ZERO)
        linha['faturamento'] += venda.total
        linha['vendas'] += 1
        linha['itens_vendidos'] += sum(item.quantidade for item in venda.itens.all())
        linha['lucro'] += venda.total - custo

    resultado = []
    for linha in linhas.values():
        linha['ticket_medio'] = (linha['faturamento'] / linha['vendas']) if linha['vendas'] else ZERO
        resultado.append(linha)
    return sorted(resultado, key=lambda l: l['faturamento'], reverse=True)


def desempenho_operadores_mercado(mercado):
    perfis = PerfilUsuario.objects.filter(mercado=mercado)
    return desempenho_operadores(perfis, vendas_faturadas(mercado))


def produtos_vencendo(produtos, hoje=None, dias=DIAS_ALERTA_VALIDADE):
    """Produtos vencidos ou que vencem nos próximos `dias`, mais urgentes primeiro."""
    hoje = hoje or timezone.localdate()
    limite = hoje + timedelta(days=dias)

    resultado = []
    for produto in produtos:
        if produto.data_validade is None or produto.data_validade > limite:
            continue
        resultado.append({
            'produto': produto,
            'dias_restantes': (produto.data_validade - hoje).days,
            'situacao': 'vencido' if produto.data_validade < hoje else 'vencendo',
        })
    return sorted(resultado, key=lambda r: r['produto'].data_validade)


def inicio_periodo(periodo, hoje=None):
    hoje = hoje or timezone.localdate()
    if periodo == 'today':
        return hoje
    if periodo == 'week':
        # Semana começa no domingo
        return hoje - timedelta(days=(hoje.weekday() + 1) % 7)
    if periodo == 'month':
        return hoje.replace(day=1)
    return None


def filtrar_vendas(mercado, periodo='all', forma_pagamento='all', termo='', hoje=None):
    vendas = Venda.objects.filter(mercado=mercado).exclude(status='ABERTA').prefetch_related('itens')

    inicio = inicio_periodo(periodo, hoje)
    if inicio is not None:
        vendas = vendas.filter(created_at__date__gte=inicio)

    if forma_pagamento and forma_pagamento != 'all':
        vendas = vendas.filter(forma_pagamento=forma_pagamento.upper())

    termo = (termo or '').strip()
    if termo:
        filtro = Q(nome_operador__icontains=termo) | Q(nome_cliente__icontains=termo)
        if termo.isdigit():
            filtro |= Q(numero_pedido=int(termo))
        vendas = vendas.filter(filtro)

    return vendas.order_by('-created_at', '-id')
