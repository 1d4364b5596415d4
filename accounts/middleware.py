from django.utils.deprecation import MiddlewareMixin
from accounts.models import PerfilUsuario
import logging

logger = logging.getLogger(__name__)


class MercadoMiddleware(MiddlewareMixin):
    """
    Descobre a qual mercado o usuário logado pertence.
    Dono e operadores compartilham os dados do mesmo mercado,
    então todas as views filtram por 'request.mercado'.
    """
    def process_request(self, request):
        # Garante que os atributos sempre existam em todos os requests
        request.perfil = None
        request.mercado = None

        if not request.user.is_authenticated:
            return

        try:
            perfil = PerfilUsuario.objects.select_related('mercado').get(user=request.user)
        except PerfilUsuario.DoesNotExist:
            # Ex: superusuário criado pelo createsuperuser, sem mercado
            logger.debug("Usuário %s sem perfil de mercado.", request.user.pk)
            return

        request.perfil = perfil
        request.mercado = perfil.mercado
