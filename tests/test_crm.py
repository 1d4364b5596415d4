"""
Clientes, fidelidade e crediário.
"""
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from crm import services
from crm.models import Cliente, MovimentoCliente


class TestRegrasDePontos:

    def test_maximo_limitado_pelo_saldo(self):
        assert services.maximo_pontos_resgataveis(30, Decimal('10.00')) == 30

    def test_maximo_limitado_pelo_total(self):
        # R$ 5,05 / R$ 0,10 = 50,5 -> 51 pontos zeram o carrinho
        assert services.maximo_pontos_resgataveis(500, Decimal('5.05')) == 51

    def test_sem_pontos_ou_carrinho_vazio(self):
        assert services.maximo_pontos_resgataveis(0, Decimal('10')) == 0
        assert services.maximo_pontos_resgataveis(10, Decimal('0')) == 0

    def test_desconto_usa_no_maximo_o_permitido(self):
        usados, desconto = services.desconto_por_pontos(200, 100, Decimal('5.05'))
        assert usados == 51
        assert desconto == Decimal('5.10')

    def test_desconto_parcial(self):
        usados, desconto = services.desconto_por_pontos(15, 100, Decimal('50.00'))
        assert (usados, desconto) == (15, Decimal('1.50'))

    def test_pontos_ganhos_arredondam_para_baixo(self):
        assert services.calcular_pontos_ganhos(Decimal('19.99')) == 19
        assert services.calcular_pontos_ganhos(Decimal('0.99')) == 0

    def test_taxa_configuravel(self, settings):
        settings.PDV_PONTOS_POR_REAL = Decimal('2')
        assert services.calcular_pontos_ganhos(Decimal('10.50')) == 21


@pytest.mark.django_db
class TestClientesApi:

    def test_cria_cliente_com_saldos_zerados(self, client_operador, mercado):
        resposta = client_operador.post('/clientes/api/', {
            'nome': 'Diego', 'telefone': '1188887777', 'limite_credito': '50.00',
            'pontos': 999, 'saldo_devedor': '20.00',
        }, content_type='application/json')

        assert resposta.status_code == 201
        cliente = Cliente.objects.get(id=resposta.json()['cliente']['id'])
        assert cliente.mercado == mercado
        assert cliente.pontos == 0
        assert cliente.saldo_devedor == Decimal('0')
        assert cliente.limite_credito == Decimal('50.00')

    def test_nome_obrigatorio(self, client_operador):
        resposta = client_operador.post('/clientes/api/', {'nome': '  '}, content_type='application/json')
        assert resposta.status_code == 400

    def test_busca_por_cpf_telefone_e_nome(self, client_operador, cliente, mercado):
        Cliente.objects.create(mercado=mercado, nome='Outro Cliente', telefone='2100000000')

        for termo in ('123.456', '999990000', 'carla'):
            nomes = [c['nome'] for c in client_operador.get('/clientes/api/', {'q': termo}).json()['clientes']]
            assert nomes == ['Carla Cliente']

    def test_atualiza_e_ajusta_pontos(self, client_operador, cliente):
        cliente.pontos = 10
        cliente.save()

        resposta = client_operador.patch(f'/clientes/api/{cliente.id}/', {
            'telefone': '1177776666', 'pontos_delta': 15
        }, content_type='application/json')

        assert resposta.status_code == 200
        cliente.refresh_from_db()
        assert cliente.pontos == 25
        assert cliente.telefone == '1177776666'
        assert cliente.nome == 'Carla Cliente'

    def test_pontos_nao_ficam_negativos(self, client_operador, cliente):
        cliente.pontos = 10
        cliente.save()

        resposta = client_operador.patch(f'/clientes/api/{cliente.id}/', {
            'nome': 'Carla Nova', 'pontos_delta': -11
        }, content_type='application/json')

        assert resposta.status_code == 400
        cliente.refresh_from_db()
        assert cliente.pontos == 10
        # Nada é salvo quando o ajuste falha
        assert cliente.nome == 'Carla Cliente'

    def test_exclui_cliente(self, client_operador, cliente):
        assert client_operador.delete(f'/clientes/api/{cliente.id}/').status_code == 200
        assert not Cliente.objects.filter(id=cliente.id).exists()

    def test_cliente_de_outro_mercado(self, client_operador, outro_mercado):
        alheio = Cliente.objects.create(mercado=outro_mercado, nome='Alheio')
        assert client_operador.get(f'/clientes/api/{alheio.id}/').status_code == 404

    def test_previa_de_resgate(self, client_operador, cliente):
        cliente.pontos = 80
        cliente.save()

        dados = client_operador.get(
            f'/clientes/api/{cliente.id}/resgate-pontos/', {'total': '5,00', 'pontos': 60}
        ).json()

        assert dados['maximo_resgatavel'] == 50
        assert dados['pontos_usados'] == 50
        assert dados['desconto'] == 5.0


@pytest.mark.django_db
class TestCrediario:

    def test_pagamento_abate_saldo_e_gera_extrato(self, client_operador, cliente):
        cliente.saldo_devedor = Decimal('40.00')
        cliente.save()

        resposta = client_operador.post(f'/clientes/api/{cliente.id}/pagamento/', {
            'valor': '15.50'
        }, content_type='application/json')

        assert resposta.status_code == 200
        assert resposta.json()['cliente']['saldo_devedor'] == 24.5
        movimento = MovimentoCliente.objects.get(cliente=cliente)
        assert movimento.tipo == 'PAGAMENTO'
        assert movimento.valor == Decimal('15.50')

    def test_pagamento_deve_ser_positivo(self, client_operador, cliente):
        resposta = client_operador.post(f'/clientes/api/{cliente.id}/pagamento/', {
            'valor': '0'
        }, content_type='application/json')
        assert resposta.status_code == 400

    @pytest.mark.parametrize('valor', ['NaN', 'Infinity', '1e999'])
    def test_pagamento_com_valor_invalido(self, client_operador, cliente, valor):
        resposta = client_operador.post(f'/clientes/api/{cliente.id}/pagamento/', {
            'valor': valor, 'confirmar_excedente': True
        }, content_type='application/json')
        assert resposta.status_code == 400
        assert not MovimentoCliente.objects.exists()

    def test_pagamento_acima_do_saldo_exige_confirmacao(self, client_operador, cliente):
        cliente.saldo_devedor = Decimal('10.00')
        cliente.save()
        url = f'/clientes/api/{cliente.id}/pagamento/'

        resposta = client_operador.post(url, {'valor': '15.00'}, content_type='application/json')
        assert resposta.status_code == 400
        assert not MovimentoCliente.objects.exists()

        resposta = client_operador.post(url, {
            'valor': '15.00', 'confirmar_excedente': True
        }, content_type='application/json')
        assert resposta.status_code == 200
        cliente.refresh_from_db()
        assert cliente.saldo_devedor == Decimal('-5.00')

    def test_extrato_mais_recente_primeiro(self, client_operador, cliente):
        cliente.saldo_devedor = Decimal('100.00')
        cliente.save()
        services.registrar_pagamento(cliente.id, Decimal('10'))
        services.registrar_pagamento(cliente.id, Decimal('20'))

        movimentos = client_operador.get(f'/clientes/api/{cliente.id}/extrato/').json()['movimentos']
        assert [m['valor'] for m in movimentos] == [20.0, 10.0]

    def test_compra_fiado_exige_cliente(self):
        with pytest.raises(ValidationError):
            services.validar_compra_fiado(None, Decimal('10'))

    def test_compra_fiado_respeita_limite(self, cliente):
        cliente.saldo_devedor = Decimal('90.00')
        with pytest.raises(ValidationError):
            services.validar_compra_fiado(cliente, Decimal('10.01'))
        services.validar_compra_fiado(cliente, Decimal('10.00'))

    def test_compra_fiado_com_total_zero(self, cliente):
        with pytest.raises(ValidationError):
            services.validar_compra_fiado(cliente, Decimal('0'))
