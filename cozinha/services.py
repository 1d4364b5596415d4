import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from pdv.models import Venda
from pdv.services import baixar_estoque

logger = logging.getLogger(__name__)

# Fluxo linear da cozinha
PROXIMO_STATUS = {
    'PENDENTE': 'EM_PREPARO',
    'EM_PREPARO': 'PRONTA',
    'PRONTA': 'CONCLUIDA',
}
COLUNAS = ('PENDENTE', 'EM_PREPARO', 'PRONTA')


def nivel_alerta(segundos):
    if segundos > settings.COZINHA_ALERTA_ATRASADO:
        return 'atrasado'
    if segundos > settings.COZINHA_ALERTA_ATENCAO:
        return 'atencao'
    return 'normal'


def montar_quadro(mercado, ids_conhecidos=None, agora=None):
    """
    Agrupa os pedidos da cozinha em três colunas (mais antigos primeiro).

    ids_conhecidos: pedidos pendentes que a tela já exibia. Os pendentes
    fora dessa lista voltam em 'novos'. Na primeira carga (None ou vazio)
    nada é considerado novo.
    """
    agora = agora or timezone.now()
    pedidos = Venda.objects.filter(
        mercado=mercado, status__in=COLUNAS
    ).prefetch_related('itens').order_by('created_at', 'id')

    quadro = {status: [] for status in COLUNAS}
    for pedido in pedidos:
        segundos = max(int((agora - pedido.created_at).total_seconds()), 0)
        dados = pedido.to_dict()
        dados['segundos_decorridos'] = segundos
        dados['alerta'] = nivel_alerta(segundos)
        quadro[pedido.status].append(dados)

    novos = []
    if ids_conhecidos:
        conhecidos = set(ids_conhecidos)
        novos = [p['id'] for p in quadro['PENDENTE'] if p['id'] not in conhecidos]

    return {
        'pendentes': quadro['PENDENTE'],
        'em_preparo': quadro['EM_PREPARO'],
        'prontos': quadro['PRONTA'],
        'novos': novos,
    }


def avancar_status(pedido_id, mercado, status_atual=None):
    """
    Move o pedido para a próxima etapa. Ao concluir, garante a baixa do
    estoque (uma vez só).
    """
    with transaction.atomic():
        pedido = Venda.objects.select_for_update().filter(id=pedido_id, mercado=mercado).first()
        if pedido is None:
            raise Venda.DoesNotExist("Pedido não encontrado.")

        if status_atual and status_atual != pedido.status:
            raise ValidationError("O pedido mudou de etapa. Atualize o quadro.")
        proximo = PROXIMO_STATUS.get(pedido.status)
        if proximo is None:
            raise ValidationError(
                f"Não é possível avançar um pedido com status '{pedido.get_status_display()}'."
            )

        pedido.status = proximo
        pedido.save(update_fields=['status', 'updated_at'])

        if proximo == 'CONCLUIDA' and baixar_estoque(pedido):
            logger.info("Estoque do pedido #%s baixado na conclusão", pedido.numero_pedido)

    pedido.refresh_from_db()
    logger.info("Pedido #%s avançou para %s", pedido.numero_pedido, proximo)
    return pedido
