from django.urls import path
from . import views

urlpatterns = [
    path('api/', views.clientes_view, name='clientes'),
    path('api/<int:cliente_id>/', views.cliente_detalhe_view, name='cliente_detalhe'),
    path('api/<int:cliente_id>/pagamento/', views.registrar_pagamento_view, name='cliente_pagamento'),
    path('api/<int:cliente_id>/extrato/', views.extrato_cliente_view, name='cliente_extrato'),
    path('api/<int:cliente_id>/resgate-pontos/', views.simular_resgate_pontos_view, name='cliente_resgate_pontos'),
]
