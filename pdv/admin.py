from django.contrib import admin

from .models import SessaoCaixa, MovimentoCaixa, Venda, ItemVenda


class MovimentoCaixaInline(admin.TabularInline):
    model = MovimentoCaixa
    extra = 0
    readonly_fields = ('tipo', 'valor', 'forma_pagamento', 'data_movimento', 'venda_origem')


@admin.register(SessaoCaixa)
class SessaoCaixaAdmin(admin.ModelAdmin):
    list_display = ('id', 'mercado', 'nome_operador', 'status', 'data_abertura', 'data_fechamento',
                    'saldo_inicial', 'saldo_esperado', 'saldo_final', 'diferenca')
    list_filter = ('status', 'mercado')
    # Valores congelados no fechamento não são editados pelo admin
    readonly_fields = ('total_vendas', 'saldo_esperado', 'diferenca')
    inlines = (MovimentoCaixaInline,)


class ItemVendaInline(admin.TabularInline):
    model = ItemVenda
    extra = 0


@admin.register(Venda)
class VendaAdmin(admin.ModelAdmin):
    list_display = ('numero_pedido', 'mercado', 'nome_operador', 'nome_cliente', 'total', 'forma_pagamento', 'status', 'created_at')
    list_filter = ('status', 'forma_pagamento', 'mercado')
    search_fields = ('numero_pedido', 'nome_cliente', 'nome_operador')
    inlines = (ItemVendaInline,)


@admin.register(MovimentoCaixa)
class MovimentoCaixaAdmin(admin.ModelAdmin):
    list_display = ('sessao', 'tipo', 'valor', 'forma_pagamento', 'data_movimento')
    list_filter = ('tipo',)
