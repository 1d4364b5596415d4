from django.urls import path
from . import views

urlpatterns = [
    path('api/pedidos/', views.quadro_pedidos_api, name='cozinha_quadro'),
    path('api/pedidos/<int:pedido_id>/avancar/', views.avancar_pedido_api, name='cozinha_avancar'),
]
