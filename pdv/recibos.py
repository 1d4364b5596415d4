# pdv/recibos.py
from urllib.parse import quote

from django.utils import timezone


def _moeda(valor):
    return f"R$ {valor:.2f}"


def gerar_texto_recibo(venda, nome_mercado='PDVMarket Cloud'):
    """Recibo em texto simples (formatação do WhatsApp: *negrito*)."""
    data_local = timezone.localtime(venda.created_at).strftime('%d/%m/%Y %H:%M')

    linhas = [f"*Recibo {nome_mercado}*", ""]
    if venda.numero_pedido:
        linhas.append(f"Pedido: #{venda.numero_pedido}")
    linhas.append(f"Data: {data_local}")
    if venda.nome_cliente:
        linhas.append(f"Cliente: {venda.nome_cliente}")

    linhas += ["", "*Itens:*"]
    for item in venda.itens.all():
        linhas.append(f"{item.quantidade}x {item.nome} - {_moeda(item.subtotal)}")
    linhas.append("")

    if venda.desconto > 0:
        linhas.append(f"Subtotal: {_moeda(venda.subtotal)}")
        linhas.append(f"Desconto: -{_moeda(venda.desconto)}")
    linhas.append(f"*Total: {_moeda(venda.total)}*")
    linhas.append(f"Pagamento: {venda.get_forma_pagamento_display().upper()}")
    if venda.forma_pagamento == 'DINHEIRO':
        linhas.append(f"Recebido: {_moeda(venda.valor_recebido)}")
        linhas.append(f"Troco: {_moeda(venda.troco)}")

    linhas += ["", "Obrigado pela sua preferência!"]
    return "\n".join(linhas)


def link_whatsapp(texto):
    return f"https://wa.me/?text={quote(texto, safe='')}"
