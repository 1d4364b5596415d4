from decimal import Decimal

import pytest

from cozinha import services as cozinha_services
from crm.models import MovimentoCliente
from pdv.models import Venda


@pytest.mark.django_db
class TestComandas:

    def _criar(self, client, nome='Mesa 4'):
        return client.post('/pdv/api/comandas/', {'nome': nome}, content_type='application/json')

    def test_cria_e_lista(self, client_operador):
        resposta = self._criar(client_operador)
        assert resposta.status_code == 201
        comanda = resposta.json()['comanda']
        assert comanda['status'] == 'ABERTA'
        assert comanda['nome_cliente'] == 'Mesa 4'
        assert comanda['numero_pedido'] is None

        lista = client_operador.get('/pdv/api/comandas/').json()['comandas']
        assert [c['id'] for c in lista] == [comanda['id']]

    def test_nome_obrigatorio(self, client_operador):
        assert self._criar(client_operador, nome='   ').status_code == 400

    def test_substitui_itens_sem_baixar_estoque(self, client_operador, refrigerante, pao):
        comanda_id = self._criar(client_operador).json()['comanda']['id']
        url = f'/pdv/api/comandas/{comanda_id}/itens/'

        client_operador.put(url, {'itens': [{'produto_id': refrigerante.id, 'quantidade': 1}]},
                            content_type='application/json')
        resposta = client_operador.put(url, {'itens': [
            {'produto_id': refrigerante.id, 'quantidade': 2},
            {'produto_id': pao.id, 'quantidade': 2},
        ]}, content_type='application/json')

        comanda = resposta.json()['comanda']
        assert len(comanda['itens']) == 2
        assert comanda['total'] == 11.0
        refrigerante.refresh_from_db()
        assert refrigerante.estoque == 20

    def test_itens_conferem_estoque(self, client_operador, criar_produto):
        pouco = criar_produto(nome='Pouco', estoque=1)
        comanda_id = self._criar(client_operador).json()['comanda']['id']
        resposta = client_operador.put(f'/pdv/api/comandas/{comanda_id}/itens/', {
            'itens': [{'produto_id': pouco.id, 'quantidade': 3}]
        }, content_type='application/json')
        assert resposta.status_code == 400

    def test_nao_exclui_comanda_com_itens(self, client_operador, refrigerante):
        comanda_id = self._criar(client_operador).json()['comanda']['id']
        client_operador.put(f'/pdv/api/comandas/{comanda_id}/itens/', {
            'itens': [{'produto_id': refrigerante.id, 'quantidade': 1}]
        }, content_type='application/json')

        assert client_operador.delete(f'/pdv/api/comandas/{comanda_id}/').status_code == 400
        assert Venda.objects.filter(id=comanda_id).exists()

    def test_exclui_comanda_vazia(self, client_operador):
        comanda_id = self._criar(client_operador).json()['comanda']['id']
        assert client_operador.delete(f'/pdv/api/comandas/{comanda_id}/').status_code == 200
        assert not Venda.objects.filter(id=comanda_id).exists()

    def test_finaliza_comanda(self, client_operador, caixa_operador, refrigerante):
        comanda_id = self._criar(client_operador).json()['comanda']['id']
        client_operador.put(f'/pdv/api/comandas/{comanda_id}/itens/', {
            'itens': [{'produto_id': refrigerante.id, 'quantidade': 3}]
        }, content_type='application/json')

        resposta = client_operador.post('/pdv/api/finalizar-venda/', {
            'comanda_id': comanda_id, 'forma_pagamento': 'DINHEIRO', 'valor_recebido': '20'
        }, content_type='application/json')

        assert resposta.status_code == 201
        venda = Venda.objects.get(id=comanda_id)
        assert venda.status == 'CONCLUIDA'
        assert venda.total == Decimal('15.00')
        assert venda.troco == Decimal('5.00')
        assert venda.numero_pedido == 1
        assert venda.nome_cliente == 'Mesa 4'
        refrigerante.refresh_from_db()
        assert refrigerante.estoque == 17

        # Sai da lista de comandas abertas
        assert client_operador.get('/pdv/api/comandas/').json()['comandas'] == []

    def test_comanda_vazia_nao_finaliza(self, client_operador, caixa_operador):
        comanda_id = self._criar(client_operador).json()['comanda']['id']
        resposta = client_operador.post('/pdv/api/finalizar-venda/', {
            'comanda_id': comanda_id, 'forma_pagamento': 'PIX'
        }, content_type='application/json')
        assert resposta.status_code == 400

    def test_comanda_de_outro_mercado(self, client_operador, outro_mercado):
        alheia = Venda.objects.create(mercado=outro_mercado, nome_cliente='Mesa X')
        assert client_operador.delete(f'/pdv/api/comandas/{alheia.id}/').status_code == 404

    def _comanda_com_itens(self, client, produto, quantidade, **extra):
        resposta = client.post('/pdv/api/comandas/', {'nome': 'Mesa 7', **extra}, content_type='application/json')
        comanda_id = resposta.json()['comanda']['id']
        client.put(f'/pdv/api/comandas/{comanda_id}/itens/', {
            'itens': [{'produto_id': produto.id, 'quantidade': quantidade}]
        }, content_type='application/json')
        return comanda_id

    def test_comanda_enviada_para_cozinha(self, client_operador, caixa_operador, refrigerante, mercado):
        comanda_id = self._comanda_com_itens(client_operador, refrigerante, 3)

        resposta = client_operador.post('/pdv/api/finalizar-venda/', {
            'comanda_id': comanda_id, 'forma_pagamento': 'PIX', 'destino': 'PENDENTE'
        }, content_type='application/json')

        assert resposta.status_code == 201
        venda = Venda.objects.get(id=comanda_id)
        assert venda.status == 'PENDENTE'
        assert venda.estoque_baixado is True
        refrigerante.refresh_from_db()
        assert refrigerante.estoque == 17

        # Concluir na cozinha não baixa de novo
        for _ in range(3):
            cozinha_services.avancar_status(comanda_id, mercado)
        venda.refresh_from_db()
        refrigerante.refresh_from_db()
        assert venda.status == 'CONCLUIDA'
        assert refrigerante.estoque == 17

    def test_comanda_fiado_usa_cliente_da_comanda(self, client_operador, caixa_operador, refrigerante, cliente):
        comanda_id = self._comanda_com_itens(client_operador, refrigerante, 3, cliente_id=cliente.id)

        resposta = client_operador.post('/pdv/api/finalizar-venda/', {
            'comanda_id': comanda_id, 'forma_pagamento': 'FIADO'
        }, content_type='application/json')

        assert resposta.status_code == 201
        venda = Venda.objects.get(id=comanda_id)
        assert venda.cliente_id == cliente.id
        assert venda.nome_cliente == 'Carla Cliente'
        cliente.refresh_from_db()
        assert cliente.saldo_devedor == Decimal('15.00')
        assert cliente.pontos == 15
        compra = MovimentoCliente.objects.get(cliente=cliente)
        assert compra.tipo == 'COMPRA'
        assert compra.venda_origem_id == comanda_id

    def test_cliente_id_invalido_na_criacao(self, client_operador):
        resposta = client_operador.post('/pdv/api/comandas/', {'nome': 'Mesa 1', 'cliente_id': 'abc'},
                                        content_type='application/json')
        assert resposta.status_code == 400
