from django.contrib import admin

from .models import Cliente, MovimentoCliente


class MovimentoClienteInline(admin.TabularInline):
    model = MovimentoCliente
    extra = 0
    readonly_fields = ('tipo', 'valor', 'data_movimento', 'venda_origem')


@admin.register(Cliente)
class ClienteAdmin(admin.ModelAdmin):
    list_display = ('nome', 'mercado', 'telefone', 'pontos', 'limite_credito', 'saldo_devedor')
    list_filter = ('mercado',)
    search_fields = ('nome', 'cpf', 'telefone', 'email')
    inlines = (MovimentoClienteInline,)


@admin.register(MovimentoCliente)
class MovimentoClienteAdmin(admin.ModelAdmin):
    list_display = ('cliente', 'tipo', 'valor', 'data_movimento')
    list_filter = ('tipo',)
    search_fields = ('cliente__nome',)
