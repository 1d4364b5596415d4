"""
Abertura, sangria/suprimento, conferência e fechamento do caixa.
"""
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from pdv import caixa, services
from pdv.models import SessaoCaixa, MovimentoCaixa


class TestMatematicaDaGaveta:

    def test_saldo_esperado_considera_so_dinheiro(self):
        movimentos = [
            {'tipo': 'VENDA', 'valor': '30.00', 'forma_pagamento': 'DINHEIRO'},
            {'tipo': 'VENDA', 'valor': '45.00', 'forma_pagamento': 'PIX'},
            {'tipo': 'VENDA', 'valor': '12.00', 'forma_pagamento': 'FIADO'},
            {'tipo': 'SUPRIMENTO', 'valor': '20.00'},
            {'tipo': 'SANGRIA', 'valor': '15.00'},
        ]
        resumo = caixa.resumir_movimentos(Decimal('100.00'), movimentos)

        assert resumo['saldo_esperado'] == Decimal('135.00')
        assert resumo['total_vendas'] == Decimal('87.00')
        assert resumo['vendas_por_forma']['PIX'] == Decimal('45.00')
        assert resumo['suprimentos'] == Decimal('20.00')
        assert resumo['sangrias'] == Decimal('15.00')

    def test_sessao_sem_movimentos(self):
        resumo = caixa.resumir_movimentos(Decimal('50'), [])
        assert resumo['saldo_esperado'] == Decimal('50')
        assert resumo['total_vendas'] == Decimal('0')

    def test_diferenca(self):
        assert caixa.calcular_diferenca(Decimal('130'), Decimal('135')) == Decimal('-5')
        assert caixa.calcular_diferenca(Decimal('140'), Decimal('135')) == Decimal('5')


@pytest.mark.django_db
class TestAberturaDoCaixa:

    def test_abre_caixa(self, client_operador, operador):
        resposta = client_operador.post('/pdv/api/abrir-caixa/', {
            'saldo_inicial': '100,00'
        }, content_type='application/json')

        assert resposta.status_code == 201
        sessao = resposta.json()['sessao']
        assert sessao['status'] == 'ABERTO'
        assert sessao['saldo_inicial'] == 100.0
        assert sessao['nome_operador'] == 'Bruno Caixa'
        assert sessao['resumo']['saldo_esperado'] == 100.0

    def test_saldo_inicial_negativo(self, operador):
        with pytest.raises(ValidationError):
            services.abrir_caixa(operador, Decimal('-1'))

    def test_um_caixa_aberto_por_operador(self, client_operador, caixa_operador):
        resposta = client_operador.post('/pdv/api/abrir-caixa/', {
            'saldo_inicial': 10
        }, content_type='application/json')
        assert resposta.status_code == 400
        assert SessaoCaixa.objects.filter(status='ABERTO').count() == 1

    def test_operadores_diferentes_podem_abrir(self, caixa_operador, dono):
        services.abrir_caixa(dono, Decimal('0'))
        assert SessaoCaixa.objects.filter(status='ABERTO').count() == 2

    def test_caixa_ativo(self, client_operador, client_dono, caixa_operador):
        assert client_operador.get('/pdv/api/caixa-ativo/').json()['sessao']['id'] == caixa_operador.id
        assert client_dono.get('/pdv/api/caixa-ativo/').json()['sessao'] is None


@pytest.mark.django_db
class TestMovimentos:

    def test_suprimento_e_sangria(self, client_operador, caixa_operador):
        url = '/pdv/api/movimento-caixa/'
        client_operador.post(url, {
            'sessao_id': caixa_operador.id, 'tipo': 'SUPRIMENTO', 'valor': '25.00', 'descricao': 'Troco'
        }, content_type='application/json')
        resposta = client_operador.post(url, {
            'sessao_id': caixa_operador.id, 'tipo': 'sangria', 'valor': '10.00'
        }, content_type='application/json')

        assert resposta.status_code == 200
        resumo = resposta.json()['sessao']['resumo']
        assert resumo['suprimentos'] == 25.0
        assert resumo['sangrias'] == 10.0
        assert resumo['saldo_esperado'] == 65.0

    def test_valor_deve_ser_positivo(self, client_operador, caixa_operador):
        resposta = client_operador.post('/pdv/api/movimento-caixa/', {
            'sessao_id': caixa_operador.id, 'tipo': 'SANGRIA', 'valor': '0'
        }, content_type='application/json')
        assert resposta.status_code == 400

    def test_tipo_invalido(self, operador, caixa_operador):
        with pytest.raises(ValidationError):
            services.registrar_movimento(caixa_operador.id, operador.user, 'VENDA', Decimal('5'))

    def test_caixa_de_outro_operador(self, client_dono, caixa_operador):
        resposta = client_dono.post('/pdv/api/movimento-caixa/', {
            'sessao_id': caixa_operador.id, 'tipo': 'SANGRIA', 'valor': '5'
        }, content_type='application/json')
        assert resposta.status_code == 404

    def test_conferencia(self, client_operador, caixa_operador):
        dados = client_operador.get('/pdv/api/dados-caixa/').json()['dados']
        assert dados['saldo_inicial'] == 50.0
        assert dados['vendas']['dinheiro'] == 0.0

    def test_conferencia_sem_caixa(self, client_dono):
        assert client_dono.get('/pdv/api/dados-caixa/').status_code == 404


@pytest.mark.django_db
class TestFechamento:

    def test_fecha_e_congela_valores(self, client_operador, operador, caixa_operador):
        services.registrar_movimento(caixa_operador.id, operador.user, 'SUPRIMENTO', Decimal('20'))
        services.registrar_movimento(caixa_operador.id, operador.user, 'SANGRIA', Decimal('5'))
        MovimentoCaixa.objects.create(
            sessao=caixa_operador, tipo='VENDA', valor=Decimal('30'), forma_pagamento='DINHEIRO'
        )
        MovimentoCaixa.objects.create(
            sessao=caixa_operador, tipo='VENDA', valor=Decimal('70'), forma_pagamento='CREDITO'
        )

        resposta = client_operador.post('/pdv/api/fechar-caixa/', {
            'sessao_id': caixa_operador.id, 'saldo_final': '92.00'
        }, content_type='application/json')

        assert resposta.status_code == 200
        caixa_operador.refresh_from_db()
        assert caixa_operador.status == 'FECHADO'
        assert caixa_operador.saldo_esperado == Decimal('95.00')
        assert caixa_operador.total_vendas == Decimal('100.00')
        assert caixa_operador.diferenca == Decimal('-3.00')
        assert caixa_operador.data_fechamento is not None

        # Um movimento posterior não muda o que foi congelado
        MovimentoCaixa.objects.create(sessao=caixa_operador, tipo='SUPRIMENTO', valor=Decimal('100'))
        caixa_operador.refresh_from_db()
        assert caixa_operador.saldo_esperado == Decimal('95.00')

    def test_nao_fecha_duas_vezes(self, operador, caixa_operador):
        services.fechar_caixa(caixa_operador.id, operador.user, Decimal('50'))
        with pytest.raises(ValidationError):
            services.fechar_caixa(caixa_operador.id, operador.user, Decimal('50'))

    def test_valor_contado_negativo(self, operador, caixa_operador):
        with pytest.raises(ValidationError):
            services.fechar_caixa(caixa_operador.id, operador.user, Decimal('-1'))

    def test_nao_movimenta_caixa_fechado(self, operador, caixa_operador):
        services.fechar_caixa(caixa_operador.id, operador.user, Decimal('50'))
        with pytest.raises(ValidationError):
            services.registrar_movimento(caixa_operador.id, operador.user, 'SUPRIMENTO', Decimal('5'))

    def test_historico_apenas_para_o_dono(self, client_dono, client_operador, operador, caixa_operador):
        services.fechar_caixa(caixa_operador.id, operador.user, Decimal('50'))

        assert client_operador.get('/pdv/api/historico-caixa/').status_code == 403
        sessoes = client_dono.get('/pdv/api/historico-caixa/').json()['sessoes']
        assert [s['id'] for s in sessoes] == [caixa_operador.id]
        assert sessoes[0]['diferenca'] == 0.0


@pytest.mark.django_db
class TestValoresInvalidos:

    @pytest.mark.parametrize('valor', ['NaN', 'Infinity', '-Infinity', '1e999', '100000000'])
    def test_abertura(self, client_operador, operador, valor):
        resposta = client_operador.post('/pdv/api/abrir-caixa/', {'saldo_inicial': valor},
                                        content_type='application/json')
        assert resposta.status_code == 400
        assert not SessaoCaixa.objects.filter(usuario=operador.user).exists()

    def test_literal_nan_no_json(self, client_operador):
        resposta = client_operador.post('/pdv/api/abrir-caixa/', '{"saldo_inicial": NaN}',
                                        content_type='application/json')
        assert resposta.status_code == 400

    @pytest.mark.parametrize('valor', ['NaN', 'Infinity', '1e999'])
    def test_movimento(self, client_operador, caixa_operador, valor):
        resposta = client_operador.post('/pdv/api/movimento-caixa/', {
            'sessao_id': caixa_operador.id, 'tipo': 'SUPRIMENTO', 'valor': valor
        }, content_type='application/json')
        assert resposta.status_code == 400
        assert not caixa_operador.movimentos.exists()

    @pytest.mark.parametrize('valor', ['NaN', 'Infinity', '1e999'])
    def test_fechamento(self, client_operador, caixa_operador, valor):
        resposta = client_operador.post('/pdv/api/fechar-caixa/', {
            'sessao_id': caixa_operador.id, 'saldo_final': valor
        }, content_type='application/json')
        assert resposta.status_code == 400
        caixa_operador.refresh_from_db()
        assert caixa_operador.aberto

    @pytest.mark.parametrize('url', ['/pdv/api/movimento-caixa/', '/pdv/api/fechar-caixa/'])
    def test_sessao_id_nao_numerico(self, client_operador, caixa_operador, url):
        resposta = client_operador.post(url, {
            'sessao_id': 'abc', 'tipo': 'SUPRIMENTO', 'valor': '5', 'saldo_final': '50'
        }, content_type='application/json')
        assert resposta.status_code == 400
