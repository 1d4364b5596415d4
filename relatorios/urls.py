from django.urls import path
from . import views

urlpatterns = [
    path('api/painel/', views.painel_view, name='relatorios_painel'),
    path('api/insights/', views.insights_view, name='relatorios_insights'),
    path('api/desempenho-operadores/', views.desempenho_operadores_view, name='relatorios_desempenho'),
    path('api/validade-produtos/', views.validade_produtos_view, name='relatorios_validade'),
    path('api/vendas/', views.vendas_view, name='relatorios_vendas'),
    path('api/vendas/exportar/<str:formato>/', views.exportar_vendas_view, name='relatorios_exportar_vendas'),
    path('api/assistente/iniciar/', views.iniciar_assistente_view, name='assistente_iniciar'),
    path('api/assistente/mensagem/', views.mensagem_assistente_view, name='assistente_mensagem'),
]
