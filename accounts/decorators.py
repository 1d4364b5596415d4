from functools import wraps

from django.http import JsonResponse


def mercado_required(view_func):
    """
    Garante que o usuário está logado E vinculado a um mercado.
    (O vínculo já foi resolvido pelo MercadoMiddleware)
    """
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'success': False, 'error': 'Autenticação necessária.'}, status=401)

        if getattr(request, 'mercado', None) is None:
            return JsonResponse({'success': False, 'error': 'Usuário sem mercado vinculado.'}, status=403)

        return view_func(request, *args, **kwargs)

    return _wrapped_view


def dono_required(view_func):
    """
    Garante que APENAS o dono do mercado (não-operador) acesse a view.
    """
    @wraps(view_func)
    @mercado_required
    def _wrapped_view(request, *args, **kwargs):
        if not request.perfil.is_dono:
            return JsonResponse(
                {'success': False, 'error': 'Acesso restrito. Esta área é acessível apenas pelo dono do mercado.'},
                status=403
            )
        return view_func(request, *args, **kwargs)

    return _wrapped_view


def dono_required_for_writes(view_func):
    """
    Operadores podem consultar (GET), mas só o dono altera os dados.
    """
    @wraps(view_func)
    @mercado_required
    def _wrapped_view(request, *args, **kwargs):
        if request.method != 'GET' and not request.perfil.is_dono:
            return JsonResponse(
                {'success': False, 'error': 'Apenas o dono do mercado pode alterar estes dados.'},
                status=403
            )
        return view_func(request, *args, **kwargs)

    return _wrapped_view
