# pdv/services.py
"""
Operações transacionais do PDV: caixa, vendas e comandas.

Tudo o que mexe em saldo (estoque, pontos, crediário, gaveta) roda dentro
de transaction.atomic() com as linhas envolvidas travadas.
"""
import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction, IntegrityError
from django.db.models import F, Max
from django.utils import timezone

from accounts.models import Mercado, Produto
from accounts.utils_api import para_decimal, para_inteiro
from crm.models import Cliente
from crm import services as crm_services

from . import caixa
from .models import SessaoCaixa, MovimentoCaixa, Venda, ItemVenda, FORMA_PAGAMENTO_CHOICES

logger = logging.getLogger(__name__)

CENTAVOS = Decimal('0.01')
FORMAS_VALIDAS = {codigo for codigo, _ in FORMA_PAGAMENTO_CHOICES}
DESTINOS = {'CONCLUIDA', 'PENDENTE'}


# ==============================================================================
# CAIXA
# ==============================================================================

def caixa_aberto(usuario):
    return SessaoCaixa.objects.filter(usuario=usuario, status='ABERTO').first()


def abrir_caixa(perfil, saldo_inicial):
    saldo_inicial = para_decimal(saldo_inicial, 'saldo_inicial').quantize(CENTAVOS)
    if saldo_inicial < 0:
        raise ValidationError("O saldo inicial não pode ser negativo.")
    if caixa_aberto(perfil.user):
        raise ValidationError("Já existe um caixa aberto para este operador.")

    try:
        with transaction.atomic():
            sessao = SessaoCaixa.objects.create(
                mercado=perfil.mercado,
                usuario=perfil.user,
                nome_operador=perfil.nome,
                saldo_inicial=saldo_inicial,
                status='ABERTO',
            )
    except IntegrityError:
        # Duas aberturas simultâneas: a constraint segura a segunda
        raise ValidationError("Já existe um caixa aberto para este operador.")

    logger.info("Caixa %s aberto por %s com R$ %s", sessao.id, perfil.nome, saldo_inicial)
    return sessao


def _sessao_aberta_travada(sessao_id, usuario):
    sessao = SessaoCaixa.objects.select_for_update().filter(id=sessao_id, usuario=usuario).first()
    if sessao is None:
        raise SessaoCaixa.DoesNotExist("Sessão de caixa não encontrada.")
    if not sessao.aberto:
        raise ValidationError("Este caixa já está fechado.")
    return sessao


def resumo_sessao(sessao):
    return caixa.resumir_movimentos(sessao.saldo_inicial, sessao.movimentos.all())


def registrar_movimento(sessao_id, usuario, tipo, valor, descricao=''):
    """Sangria ou suprimento."""
    if tipo not in ('SUPRIMENTO', 'SANGRIA'):
        raise ValidationError("Tipo de movimento inválido. Use SUPRIMENTO ou SANGRIA.")
    valor = para_decimal(valor, 'valor').quantize(CENTAVOS)
    if valor <= 0:
        raise ValidationError("O valor do movimento deve ser maior que zero.")

    with transaction.atomic():
        sessao = _sessao_aberta_travada(sessao_id, usuario)
        MovimentoCaixa.objects.create(
            sessao=sessao,
            tipo=tipo,
            valor=valor,
            descricao=(descricao or '')[:255],
        )

    logger.info("%s de R$ %s no caixa %s", tipo.title(), valor, sessao.id)
    return sessao


def fechar_caixa(sessao_id, usuario, saldo_contado):
    """
    Fecha a sessão: calcula e congela total de vendas, saldo esperado e
    diferença (contado - esperado). Só pode acontecer uma vez.
    """
    saldo_contado = para_decimal(saldo_contado, 'saldo_final').quantize(CENTAVOS)
    if saldo_contado < 0:
        raise ValidationError("O valor contado não pode ser negativo.")

    with transaction.atomic():
        sessao = _sessao_aberta_travada(sessao_id, usuario)
        resumo = resumo_sessao(sessao)

        sessao.saldo_final = saldo_contado
        sessao.total_vendas = resumo['total_vendas']
        sessao.saldo_esperado = resumo['saldo_esperado']
        sessao.diferenca = caixa.calcular_diferenca(saldo_contado, resumo['saldo_esperado'])
        sessao.data_fechamento = timezone.now()
        sessao.status = 'FECHADO'
        sessao.save()

    logger.info(
        "Caixa %s fechado: esperado R$ %s, contado R$ %s, diferença R$ %s",
        sessao.id, sessao.saldo_esperado, sessao.saldo_final, sessao.diferenca
    )
    return sessao


def sessao_to_dict(sessao, com_movimentos=True):
    data = {
        'id': sessao.id,
        'mercado_id': sessao.mercado_id,
        'operador_id': sessao.usuario_id,
        'nome_operador': sessao.nome_operador,
        'data_abertura': sessao.data_abertura.isoformat(),
        'data_fechamento': sessao.data_fechamento.isoformat() if sessao.data_fechamento else None,
        'saldo_inicial': float(sessao.saldo_inicial),
        'saldo_final': float(sessao.saldo_final) if sessao.saldo_final is not None else None,
        'total_vendas': float(sessao.total_vendas) if sessao.total_vendas is not None else None,
        'saldo_esperado': float(sessao.saldo_esperado) if sessao.saldo_esperado is not None else None,
        'diferenca': float(sessao.diferenca) if sessao.diferenca is not None else None,
        'status': sessao.status,
    }
    if com_movimentos:
        data['movimentos'] = [m.to_dict() for m in sessao.movimentos.all()]
    if sessao.aberto:
        data['resumo'] = caixa.resumo_para_json(resumo_sessao(sessao))
    return data


# ==============================================================================
# ITENS E ESTOQUE
# ==============================================================================

def normalizar_itens(itens):
    """
    [{'produto_id': 1, 'quantidade': 2}, ...] -> {1: 2}
    Produtos repetidos têm as quantidades somadas.
    """
    if not isinstance(itens, list):
        raise ValidationError("A lista de itens é inválida.")

    quantidades = {}
    for item in itens:
        if not isinstance(item, dict) or not item.get('produto_id'):
            raise ValidationError("Cada item precisa de 'produto_id' e 'quantidade'.")
        produto_id = para_inteiro(item['produto_id'], 'produto_id')
        qtd = para_inteiro(item.get('quantidade', 1), 'quantidade')
        if qtd < 1:
            raise ValidationError("A quantidade de cada item deve ser de pelo menos 1.")
        quantidades[produto_id] = quantidades.get(produto_id, 0) + qtd
    return quantidades


def _carregar_produtos(mercado, quantidades, travar=False):
    """Busca os produtos do mercado e confere o estoque disponível."""
    qs = Produto.objects.filter(mercado=mercado, id__in=list(quantidades))
    if travar:
        qs = qs.select_for_update()
    produtos = {p.id: p for p in qs}

    for produto_id, qtd in quantidades.items():
        produto = produtos.get(produto_id)
        if produto is None:
            raise ValidationError(f"Produto {produto_id} não encontrado.")
        if produto.estoque < qtd:
            raise ValidationError(
                f"Estoque insuficiente para '{produto.nome}' (disponível: {produto.estoque})."
            )
    return produtos


def _gravar_itens(venda, produtos, quantidades):
    ItemVenda.objects.bulk_create([
        ItemVenda(
            venda=venda,
            produto=produtos[produto_id],
            nome=produtos[produto_id].nome,
            preco_unitario=produtos[produto_id].preco,
            quantidade=qtd,
        )
        for produto_id, qtd in quantidades.items()
    ])
    return sum((produtos[pid].preco * qtd for pid, qtd in quantidades.items()), Decimal('0.00'))


def baixar_estoque(venda):
    """
    Baixa o estoque dos itens da venda uma única vez.
    Retorna False quando o estoque já tinha sido baixado.
    """
    with transaction.atomic():
        venda = Venda.objects.select_for_update().get(pk=venda.pk)
        if venda.estoque_baixado:
            return False
        # Baixa otimizada (evita erro se dois caixas venderem juntos)
        for item in venda.itens.exclude(produto__isnull=True):
            Produto.objects.filter(id=item.produto_id).update(estoque=F('estoque') - item.quantidade)
        Venda.objects.filter(pk=venda.pk).update(estoque_baixado=True)
    return True


def _proximo_numero_pedido(mercado_id):
    # A trava no mercado serializa a numeração entre caixas
    Mercado.objects.select_for_update().filter(pk=mercado_id).first()
    ultimo = Venda.objects.filter(mercado_id=mercado_id).aggregate(m=Max('numero_pedido'))['m']
    return (ultimo or 0) + 1


# ==============================================================================
# VENDA (CHECKOUT)
# ==============================================================================

def _calcular_desconto(dados_desconto, subtotal, cliente):
    """
    Retorna (tipo, valor, descricao, pontos_usados). Só um desconto por venda.
    """
    if not dados_desconto:
        return '', Decimal('0.00'), '', 0
    if not isinstance(dados_desconto, dict):
        raise ValidationError("Desconto inválido.")

    tipo = (dados_desconto.get('tipo') or 'MANUAL').upper()
    if tipo == 'MANUAL':
        valor = para_decimal(dados_desconto.get('valor', 0), 'desconto').quantize(CENTAVOS)
        if valor < 0:
            raise ValidationError("O desconto não pode ser negativo.")
        descricao = (dados_desconto.get('descricao') or 'Desconto manual')[:255]
        return ('MANUAL' if valor > 0 else ''), valor, descricao if valor > 0 else '', 0

    if tipo == 'PONTOS':
        if cliente is None:
            raise ValidationError("Selecione um cliente para resgatar pontos.")
        solicitados = para_inteiro(dados_desconto.get('pontos', 0), 'pontos')
        usados, valor = crm_services.desconto_por_pontos(solicitados, cliente.pontos, subtotal)
        if usados == 0:
            return '', Decimal('0.00'), '', 0
        return 'PONTOS', valor, f"Resgate de {usados} pontos", usados

    raise ValidationError("Tipo de desconto inválido. Use MANUAL ou PONTOS.")


def finalizar_venda(perfil, dados):
    """
    Fecha uma venda (nova ou comanda existente).

    dados: {
        'itens': [{'produto_id', 'quantidade'}],   # ignorado quando 'comanda_id' vem
        'comanda_id': opcional,
        'cliente_id': opcional,
        'nome_cliente': opcional,
        'desconto': {'tipo': 'MANUAL', 'valor'} | {'tipo': 'PONTOS', 'pontos'},
        'forma_pagamento': DINHEIRO | DEBITO | CREDITO | PIX | FIADO,
        'valor_recebido': obrigatório no dinheiro,
        'destino': CONCLUIDA | PENDENTE (cozinha),
    }
    """
    mercado = perfil.mercado
    forma = (dados.get('forma_pagamento') or '').upper()
    if forma not in FORMAS_VALIDAS:
        raise ValidationError("Forma de pagamento inválida.")
    destino = (dados.get('destino') or 'CONCLUIDA').upper()
    if destino not in DESTINOS:
        raise ValidationError("Destino inválido. Use CONCLUIDA ou PENDENTE.")

    with transaction.atomic():
        sessao = SessaoCaixa.objects.select_for_update().filter(usuario=perfil.user, status='ABERTO').first()
        if sessao is None:
            raise ValidationError("Nenhum caixa aberto encontrado. Abra o caixa primeiro.")

        cliente = None
        if dados.get('cliente_id'):
            cliente = Cliente.objects.select_for_update().filter(
                id=para_inteiro(dados['cliente_id'], 'cliente_id'), mercado=mercado
            ).first()
            if cliente is None:
                raise ValidationError("Cliente não encontrado.")

        # --- 1. Venda nova ou comanda existente ---
        if dados.get('comanda_id'):
            venda = Venda.objects.select_for_update().filter(
                id=para_inteiro(dados['comanda_id'], 'comanda_id'), mercado=mercado, status='ABERTA'
            ).first()
            if venda is None:
                raise ValidationError("Comanda não encontrada ou já finalizada.")
            quantidades = {}
            for item in venda.itens.exclude(produto__isnull=True):
                quantidades[item.produto_id] = quantidades.get(item.produto_id, 0) + item.quantidade
            if not venda.itens.exists():
                raise ValidationError("A comanda não possui itens.")
            _carregar_produtos(mercado, quantidades, travar=True)
            subtotal = sum((i.subtotal for i in venda.itens.all()), Decimal('0.00'))
            if cliente is None and venda.cliente_id:
                cliente = Cliente.objects.select_for_update().get(pk=venda.cliente_id)
        else:
            quantidades = normalizar_itens(dados.get('itens') or [])
            if not quantidades:
                raise ValidationError("O carrinho está vazio.")
            produtos = _carregar_produtos(mercado, quantidades, travar=True)
            venda = Venda(mercado=mercado, status='ABERTA')
            venda.save()
            subtotal = _gravar_itens(venda, produtos, quantidades)

        # --- 2. Desconto e total ---
        tipo_desc, valor_desc, descricao_desc, pontos_usados = _calcular_desconto(
            dados.get('desconto'), subtotal, cliente
        )
        total = max(subtotal - valor_desc, Decimal('0.00')).quantize(CENTAVOS)

        # --- 3. Pagamento ---
        if forma == 'DINHEIRO':
            recebido = para_decimal(dados.get('valor_recebido'), 'valor_recebido').quantize(CENTAVOS)
            if recebido < total:
                raise ValidationError("Valor recebido é menor que o total.")
            troco = recebido - total
        else:
            recebido, troco = total, Decimal('0.00')
            if forma == 'FIADO':
                crm_services.validar_compra_fiado(cliente, total)

        # --- 4. Grava a venda ---
        venda.numero_pedido = _proximo_numero_pedido(mercado.id)
        venda.sessao = sessao
        venda.operador = perfil.user
        venda.nome_operador = perfil.nome
        venda.cliente = cliente
        venda.nome_cliente = cliente.nome if cliente else (dados.get('nome_cliente') or venda.nome_cliente or '')[:200]
        venda.subtotal = subtotal
        venda.tipo_desconto = tipo_desc
        venda.desconto = valor_desc
        venda.descricao_desconto = descricao_desc
        venda.pontos_resgatados = pontos_usados
        venda.total = total
        venda.forma_pagamento = forma
        venda.valor_recebido = recebido
        venda.troco = troco
        venda.status = destino
        venda.created_at = timezone.now()
        venda.save()

        baixar_estoque(venda)

        # --- 5. Fidelidade e crediário ---
        if cliente is not None:
            ganhos = crm_services.calcular_pontos_ganhos(total)
            Cliente.objects.filter(pk=cliente.pk).update(pontos=F('pontos') - pontos_usados + ganhos)
            Venda.objects.filter(pk=venda.pk).update(pontos_ganhos=ganhos)
            venda.pontos_ganhos = ganhos
            if forma == 'FIADO':
                crm_services.lancar_compra_fiado(cliente, total, venda=venda)

        # --- 6. Movimento no caixa ---
        MovimentoCaixa.objects.create(
            sessao=sessao,
            tipo='VENDA',
            valor=total,
            forma_pagamento=forma,
            descricao=f"Pedido #{venda.numero_pedido} - {venda.get_forma_pagamento_display()}",
            venda_origem=venda,
        )

    venda.refresh_from_db()
    logger.info(
        "Venda #%s finalizada no mercado %s: R$ %s (%s)",
        venda.numero_pedido, mercado.id, venda.total, forma
    )
    return venda


# ==============================================================================
# COMANDAS
# ==============================================================================

def criar_comanda(perfil, nome, cliente_id=None):
    nome = (nome or '').strip()
    if not nome:
        raise ValidationError("Informe o nome da comanda.")

    cliente = None
    if cliente_id:
        cliente = Cliente.objects.filter(
            id=para_inteiro(cliente_id, 'cliente_id'), mercado=perfil.mercado
        ).first()
        if cliente is None:
            raise ValidationError("Cliente não encontrado.")

    return Venda.objects.create(
        mercado=perfil.mercado,
        operador=perfil.user,
        nome_operador=perfil.nome,
        cliente=cliente,
        nome_cliente=nome[:200],
        status='ABERTA',
    )


def atualizar_itens_comanda(comanda, itens):
    """
    Substitui os itens da comanda. O estoque é conferido aqui, mas só é
    baixado quando a comanda for finalizada.
    """
    quantidades = normalizar_itens(itens)
    with transaction.atomic():
        comanda = Venda.objects.select_for_update().get(pk=comanda.pk)
        if comanda.status != 'ABERTA':
            raise ValidationError("Esta comanda já foi finalizada.")
        produtos = _carregar_produtos(comanda.mercado_id, quantidades)
        comanda.itens.all().delete()
        subtotal = _gravar_itens(comanda, produtos, quantidades)
        comanda.subtotal = subtotal
        comanda.total = subtotal
        comanda.save(update_fields=['subtotal', 'total', 'updated_at'])
    return comanda


def excluir_comanda(comanda):
    if comanda.status != 'ABERTA':
        raise ValidationError("Esta comanda já foi finalizada.")
    if comanda.itens.exists():
        raise ValidationError("Não é possível excluir uma comanda com itens.")
    comanda.delete()
