import logging

from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from accounts.decorators import mercado_required
from accounts.utils_api import ler_json, erro_json, mensagem_validacao, para_inteiro
from pdv.models import Venda
from . import services

logger = logging.getLogger(__name__)


@require_GET
@mercado_required
def quadro_pedidos_api(request):
    """
    Quadro da cozinha. ?conhecidos=1,2,3 traz os ids pendentes que a tela já
    mostrava, para destacar (e tocar o alerta) apenas os novos.
    """
    bruto = request.GET.get('conhecidos', '')
    try:
        conhecidos = [para_inteiro(i.strip(), 'conhecidos') for i in bruto.split(',') if i.strip()]
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    quadro = services.montar_quadro(request.mercado, conhecidos)
    return JsonResponse({'success': True, **quadro})


@require_POST
@mercado_required
def avancar_pedido_api(request, pedido_id):
    try:
        data = ler_json(request)
        pedido = services.avancar_status(pedido_id, request.mercado, data.get('status_atual'))
    except Venda.DoesNotExist:
        return erro_json("Pedido não encontrado.", status=404)
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    return JsonResponse({'success': True, 'pedido': pedido.to_dict()})
