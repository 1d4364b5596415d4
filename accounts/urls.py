from django.urls import path
from .views import (
    # Autenticação
    registrar_view,
    login_view,
    logout_view,
    me_view,

    # Equipe e configurações
    operadores_view,
    operador_detalhe_view,
    configuracoes_view,

    # Catálogo
    produtos_view,
    produto_detalhe_view,
    buscar_produto_codigo_api,

    # Despesas
    despesas_view,
    despesa_detalhe_view,
)

urlpatterns = [
    path('api/registrar/', registrar_view, name='registrar'),
    path('api/login/', login_view, name='login'),
    path('api/logout/', logout_view, name='logout'),
    path('api/me/', me_view, name='me'),

    path('api/operadores/', operadores_view, name='operadores'),
    path('api/operadores/<int:user_id>/', operador_detalhe_view, name='operador_detalhe'),
    path('api/configuracoes/', configuracoes_view, name='configuracoes'),

    path('api/produtos/', produtos_view, name='produtos'),
    path('api/produtos/codigo/', buscar_produto_codigo_api, name='buscar_produto_codigo'),
    path('api/produtos/<int:produto_id>/', produto_detalhe_view, name='produto_detalhe'),

    path('api/despesas/', despesas_view, name='despesas'),
    path('api/despesas/<int:despesa_id>/', despesa_detalhe_view, name='despesa_detalhe'),
]
