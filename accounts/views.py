import logging

from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from .decorators import mercado_required, dono_required, dono_required_for_writes
from .forms import (
    ProdutoForm, DespesaForm, ConfiguracaoMercadoForm, RegistroForm, OperadorForm
)
from .models import Mercado, PerfilUsuario, Produto, Despesa
from .utils_api import (
    ler_json, erro_json, mensagem_validacao, erros_formulario, dados_com_instancia
)

logger = logging.getLogger(__name__)


# ==============================================================================
# AUTENTICAÇÃO
# ==============================================================================

@require_POST
def registrar_view(request):
    """
    Cadastro de um novo mercado + usuário dono.
    Aceita multipart (com logo) ou JSON.
    """
    if request.content_type and request.content_type.startswith('multipart/'):
        dados, arquivos = request.POST, request.FILES
    else:
        try:
            dados, arquivos = ler_json(request), None
        except ValidationError as e:
            return erro_json(mensagem_validacao(e))

    form = RegistroForm(dados, arquivos)
    if not form.is_valid():
        return erros_formulario(form)

    cd = form.cleaned_data
    with transaction.atomic():
        mercado = Mercado.objects.create(
            nome=cd['nome_mercado'],
            cnpj=cd.get('cnpj') or '',
            telefone=cd.get('telefone') or '',
            endereco=cd.get('endereco') or '',
            logo=cd.get('logo'),
        )
        user = User.objects.create_user(
            username=cd['email'],
            email=cd['email'],
            password=cd['password'],
            first_name=cd['nome'][:150],
        )
        perfil = PerfilUsuario.objects.create(
            user=user, mercado=mercado, nome=cd['nome'], tipo='DONO'
        )

    login(request, user, backend='django.contrib.auth.backends.ModelBackend')
    logger.info("Mercado '%s' cadastrado (dono: %s)", mercado.nome, user.email)
    return JsonResponse({'success': True, 'usuario': perfil.to_dict()}, status=201)


@require_POST
def login_view(request):
    try:
        data = ler_json(request)
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    email = (data.get('email') or '').strip().lower()
    senha = data.get('password') or ''
    if not email or not senha:
        return erro_json("Informe e-mail e senha.")

    # O login é por e-mail; o username guarda o e-mail no cadastro
    conta = User.objects.filter(email__iexact=email).first()
    user = authenticate(request, username=conta.username, password=senha) if conta else None
    if user is None:
        logger.warning("Tentativa de login inválida para %s", email)
        return erro_json("E-mail ou senha inválidos.", status=401)

    perfil = PerfilUsuario.objects.select_related('mercado').filter(user=user).first()
    if perfil is None:
        logout(request)
        return erro_json("Usuário sem mercado vinculado.", status=403)

    login(request, user)
    return JsonResponse({'success': True, 'usuario': perfil.to_dict()})


@require_POST
def logout_view(request):
    logout(request)
    return JsonResponse({'success': True})


@require_GET
@mercado_required
def me_view(request):
    return JsonResponse({'success': True, 'usuario': request.perfil.to_dict()})


# ==============================================================================
# OPERADORES (apenas o dono)
# ==============================================================================

@require_http_methods(["GET", "POST"])
@dono_required
def operadores_view(request):
    if request.method == 'GET':
        perfis = PerfilUsuario.objects.filter(mercado=request.mercado).select_related('user', 'mercado')
        return JsonResponse({'success': True, 'operadores': [p.to_dict() for p in perfis]})

    try:
        data = ler_json(request)
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    form = OperadorForm(data)
    if not form.is_valid():
        return erros_formulario(form)

    cd = form.cleaned_data
    with transaction.atomic():
        user = User.objects.create_user(
            username=cd['email'], email=cd['email'], password=cd['password'],
            first_name=cd['nome'][:150],
        )
        perfil = PerfilUsuario.objects.create(
            user=user, mercado=request.mercado, nome=cd['nome'], tipo='OPERADOR'
        )
    logger.info("Operador %s criado no mercado %s", user.email, request.mercado.id)
    return JsonResponse({'success': True, 'operador': perfil.to_dict()}, status=201)


@require_http_methods(["PUT", "PATCH", "DELETE"])
@dono_required
def operador_detalhe_view(request, user_id):
    perfil = get_object_or_404(
        PerfilUsuario.objects.select_related('user', 'mercado'),
        user_id=user_id, mercado=request.mercado
    )

    if request.method == 'DELETE':
        if perfil.user_id == request.user.id:
            return erro_json("Você não pode excluir o seu próprio usuário.")
        email = perfil.user.email
        perfil.user.delete()
        logger.info("Operador %s removido do mercado %s", email, request.mercado.id)
        return JsonResponse({'success': True})

    try:
        data = ler_json(request)
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    dados = {'nome': perfil.nome, 'email': perfil.user.email}
    dados.update({k: v for k, v in data.items() if k in ('nome', 'email', 'password')})
    form = OperadorForm(dados, usuario=perfil.user)
    if not form.is_valid():
        return erros_formulario(form)

    cd = form.cleaned_data
    with transaction.atomic():
        user = perfil.user
        user.email = cd['email']
        user.username = cd['email']
        user.first_name = cd['nome'][:150]
        if cd.get('password'):
            user.set_password(cd['password'])
        user.save()
        perfil.nome = cd['nome']
        perfil.save(update_fields=['nome'])

    return JsonResponse({'success': True, 'operador': perfil.to_dict()})


# ==============================================================================
# CONFIGURAÇÕES DO MERCADO
# ==============================================================================

@require_http_methods(["GET", "PUT", "PATCH"])
@dono_required
def configuracoes_view(request):
    mercado = request.mercado
    if request.method != 'GET':
        try:
            data = ler_json(request)
        except ValidationError as e:
            return erro_json(mensagem_validacao(e))

        form = ConfiguracaoMercadoForm(
            dados_com_instancia(mercado, data, ['limite_estoque_baixo']), instance=mercado
        )
        if not form.is_valid():
            return erros_formulario(form)
        mercado = form.save()

    return JsonResponse({
        'success': True,
        'configuracoes': {
            'mercado_id': mercado.id,
            'nome': mercado.nome,
            'limite_estoque_baixo': mercado.limite_estoque_baixo,
        }
    })


# ==============================================================================
# PRODUTOS
# ==============================================================================

CAMPOS_PRODUTO = ['nome', 'codigo', 'preco', 'custo', 'estoque', 'data_validade']


@require_http_methods(["GET", "POST"])
@dono_required_for_writes
def produtos_view(request):
    mercado = request.mercado

    if request.method == 'GET':
        produtos = Produto.objects.filter(mercado=mercado)
        termo = request.GET.get('q', '').strip()
        if termo:
            produtos = produtos.filter(Q(nome__icontains=termo) | Q(codigo__icontains=termo))
        limite = mercado.limite_estoque_baixo
        return JsonResponse({
            'success': True,
            'produtos': [p.to_dict(limite) for p in produtos],
        })

    try:
        data = ler_json(request)
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    form = ProdutoForm(data, mercado=mercado)
    if not form.is_valid():
        return erros_formulario(form)

    produto = form.save(commit=False)
    produto.mercado = mercado
    produto.save()
    return JsonResponse({'success': True, 'produto': produto.to_dict()}, status=201)


@require_http_methods(["GET", "PUT", "PATCH", "DELETE"])
@dono_required_for_writes
def produto_detalhe_view(request, produto_id):
    produto = get_object_or_404(Produto, id=produto_id, mercado=request.mercado)

    if request.method == 'GET':
        return JsonResponse({'success': True, 'produto': produto.to_dict()})

    if request.method == 'DELETE':
        produto.delete()
        return JsonResponse({'success': True})

    try:
        data = ler_json(request)
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    form = ProdutoForm(
        dados_com_instancia(produto, data, CAMPOS_PRODUTO),
        instance=produto, mercado=request.mercado
    )
    if not form.is_valid():
        return erros_formulario(form)

    produto = form.save()
    return JsonResponse({'success': True, 'produto': produto.to_dict()})


@require_GET
@mercado_required
def buscar_produto_codigo_api(request):
    """
    Leitura do leitor de código de barras: busca exata pelo código.
    """
    codigo = request.GET.get('codigo', '').strip()
    if not codigo:
        return erro_json("Informe o código do produto.")

    produto = Produto.objects.filter(mercado=request.mercado, codigo=codigo).first()
    if produto is None:
        return erro_json("Produto não encontrado.", status=404)
    return JsonResponse({'success': True, 'produto': produto.to_dict()})


# ==============================================================================
# DESPESAS (apenas o dono)
# ==============================================================================

CAMPOS_DESPESA = ['descricao', 'valor', 'categoria', 'data']


@require_http_methods(["GET", "POST"])
@dono_required
def despesas_view(request):
    if request.method == 'GET':
        despesas = Despesa.objects.filter(mercado=request.mercado)
        return JsonResponse({'success': True, 'despesas': [d.to_dict() for d in despesas]})

    try:
        data = ler_json(request)
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    form = DespesaForm(data)
    if not form.is_valid():
        return erros_formulario(form)

    despesa = form.save(commit=False)
    despesa.mercado = request.mercado
    despesa.save()
    return JsonResponse({'success': True, 'despesa': despesa.to_dict()}, status=201)


@require_http_methods(["PUT", "PATCH", "DELETE"])
@dono_required
def despesa_detalhe_view(request, despesa_id):
    despesa = get_object_or_404(Despesa, id=despesa_id, mercado=request.mercado)

    if request.method == 'DELETE':
        despesa.delete()
        return JsonResponse({'success': True})

    try:
        data = ler_json(request)
    except ValidationError as e:
        return erro_json(mensagem_validacao(e))

    form = DespesaForm(dados_com_instancia(despesa, data, CAMPOS_DESPESA), instance=despesa)
    if not form.is_valid():
        return erros_formulario(form)

    despesa = form.save()
    return JsonResponse({'success': True, 'despesa': despesa.to_dict()})
