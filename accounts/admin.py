from django.contrib import admin

from .models import Mercado, PerfilUsuario, Produto, Despesa


# -----------------------------------------------------------------
# Perfis aparecem dentro do próprio mercado
# -----------------------------------------------------------------
class PerfilUsuarioInline(admin.TabularInline):
    model = PerfilUsuario
    extra = 0
    autocomplete_fields = ['user']


@admin.register(Mercado)
class MercadoAdmin(admin.ModelAdmin):
    list_display = ('nome', 'cnpj', 'telefone', 'limite_estoque_baixo', 'created_at')
    search_fields = ('nome', 'cnpj')
    inlines = (PerfilUsuarioInline,)


@admin.register(PerfilUsuario)
class PerfilUsuarioAdmin(admin.ModelAdmin):
    list_display = ('nome', 'user', 'mercado', 'tipo')
    list_filter = ('tipo', 'mercado')
    search_fields = ('nome', 'user__username', 'user__email')
    autocomplete_fields = ['user']


@admin.register(Produto)
class ProdutoAdmin(admin.ModelAdmin):
    list_display = ('nome', 'codigo', 'mercado', 'preco', 'custo', 'estoque', 'data_validade')
    list_filter = ('mercado',)
    search_fields = ('nome', 'codigo')
    # Ajuste rápido de estoque direto na lista
    list_editable = ('estoque',)


@admin.register(Despesa)
class DespesaAdmin(admin.ModelAdmin):
    list_display = ('descricao', 'mercado', 'categoria', 'valor', 'data')
    list_filter = ('categoria', 'mercado')
    date_hierarchy = 'data'
