"""
Fixtures compartilhadas: um mercado com dono e operador, produtos,
clientes e um caixa aberto.
"""
from decimal import Decimal

import pytest
from django.contrib.auth.models import User
from django.test import Client

from accounts.models import Mercado, PerfilUsuario, Produto
from crm.models import Cliente
from pdv import services as pdv_services


@pytest.fixture(autouse=True)
def sem_chave_gemini(settings):
    # Os testes nunca chamam a API real
    settings.GEMINI_API_KEY = ''


@pytest.fixture
def mercado(db):
    return Mercado.objects.create(nome="Mercadinho Central", cnpj="12.345.678/0001-90")


@pytest.fixture
def outro_mercado(db):
    return Mercado.objects.create(nome="Mercado Vizinho")


def _criar_perfil(mercado, email, nome, tipo):
    user = User.objects.create_user(username=email, email=email, password="senha-forte-123")
    return PerfilUsuario.objects.create(user=user, mercado=mercado, nome=nome, tipo=tipo)


@pytest.fixture
def dono(mercado):
    return _criar_perfil(mercado, "dono@mercado.com", "Ana Dona", "DONO")


@pytest.fixture
def operador(mercado):
    return _criar_perfil(mercado, "caixa@mercado.com", "Bruno Caixa", "OPERADOR")


@pytest.fixture
def client_dono(dono):
    client = Client()
    client.force_login(dono.user)
    return client


@pytest.fixture
def client_operador(operador):
    client = Client()
    client.force_login(operador.user)
    return client


@pytest.fixture
def criar_produto(mercado):
    def _criar(nome="Produto", preco="5.00", custo="3.00", estoque=50, codigo=None, **extra):
        return Produto.objects.create(
            mercado=extra.pop('mercado', mercado),
            nome=nome,
            preco=Decimal(preco),
            custo=Decimal(custo),
            estoque=estoque,
            codigo=codigo,
            **extra,
        )
    return _criar


@pytest.fixture
def refrigerante(criar_produto):
    return criar_produto(nome="Refrigerante 2L", preco="5.00", custo="3.00", estoque=20, codigo="7890001")


@pytest.fixture
def pao(criar_produto):
    return criar_produto(nome="Pão Francês", preco="0.50", custo="0.20", estoque=100, codigo="7890002")


@pytest.fixture
def cliente(mercado):
    return Cliente.objects.create(
        mercado=mercado, nome="Carla Cliente", telefone="11999990000",
        cpf="123.456.789-00", limite_credito=Decimal("100.00"),
    )


@pytest.fixture
def caixa_operador(operador):
    return pdv_services.abrir_caixa(operador, Decimal("50.00"))
