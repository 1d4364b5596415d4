# pdv/urls.py
from django.urls import path
from . import views

urlpatterns = [
    # Venda
    path('api/buscar-produto/', views.buscar_produto_api, name='api_buscar_produto'),
    path('api/finalizar-venda/', views.finalizar_venda_pdv, name='api_finalizar_venda'),
    path('api/vendas/<int:venda_id>/recibo/', views.recibo_venda_view, name='api_recibo_venda'),

    # Comandas
    path('api/comandas/', views.comandas_view, name='api_comandas'),
    path('api/comandas/<int:comanda_id>/', views.comanda_detalhe_view, name='api_comanda_detalhe'),
    path('api/comandas/<int:comanda_id>/itens/', views.comanda_itens_view, name='api_comanda_itens'),

    # Caixa
    path('api/abrir-caixa/', views.abrir_caixa_pdv, name='api_abrir_caixa'),
    path('api/caixa-ativo/', views.caixa_ativo_view, name='api_caixa_ativo'),
    path('api/movimento-caixa/', views.registrar_movimento_caixa, name='api_movimento_caixa'),
    path('api/dados-caixa/', views.dados_conferencia_caixa, name='api_dados_caixa'),
    path('api/fechar-caixa/', views.fechar_caixa_pdv, name='api_fechar_caixa'),
    path('api/historico-caixa/', views.historico_caixa_view, name='api_historico_caixa'),
]
