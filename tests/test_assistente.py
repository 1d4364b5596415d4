from unittest import mock

import pytest

from relatorios import assistente

INSIGHTS_URL = '/relatorios/api/insights/'
INICIAR_URL = '/relatorios/api/assistente/iniciar/'
MENSAGEM_URL = '/relatorios/api/assistente/mensagem/'


@pytest.fixture
def com_chave(settings):
    settings.GEMINI_API_KEY = 'chave-de-teste'
    settings.GEMINI_MODEL = 'modelo-de-teste'


@pytest.fixture
def genai_mock():
    with mock.patch('relatorios.assistente.genai') as genai:
        yield genai


@pytest.mark.django_db
class TestInsights:

    def test_sem_chave_retorna_demonstracao(self, client_dono, genai_mock):
        dados = client_dono.post(INSIGHTS_URL).json()

        assert dados['demonstracao'] is True
        assert 'Demonstração' in dados['analise']
        genai_mock.GenerativeModel.assert_not_called()

    def test_com_chave_usa_o_gemini(self, client_dono, com_chave, genai_mock, refrigerante):
        genai_mock.GenerativeModel.return_value.generate_content.return_value.text = "  **Tudo certo.**  "

        dados = client_dono.post(INSIGHTS_URL).json()

        assert dados['demonstracao'] is False
        assert dados['analise'] == "**Tudo certo.**"
        genai_mock.configure.assert_called_once_with(api_key='chave-de-teste')
        genai_mock.GenerativeModel.assert_called_once_with('modelo-de-teste')
        prompt = genai_mock.GenerativeModel.return_value.generate_content.call_args[0][0]
        assert 'Faturamento Total: R$ 0.00' in prompt

    def test_falha_na_api(self, client_dono, com_chave, genai_mock):
        genai_mock.GenerativeModel.return_value.generate_content.side_effect = RuntimeError("quota")

        dados = client_dono.post(INSIGHTS_URL).json()

        assert dados['analise'] == assistente.MENSAGEM_ERRO_INSIGHTS

    def test_somente_dono(self, client_operador):
        assert client_operador.post(INSIGHTS_URL).status_code == 403


@pytest.mark.django_db
class TestChat:

    def test_indisponivel_sem_chave(self, client_operador):
        dados = client_operador.post(INICIAR_URL).json()
        assert dados['disponivel'] is False
        assert dados['mensagem'] == assistente.MENSAGEM_CHAT_INDISPONIVEL

        resposta = client_operador.post(MENSAGEM_URL, {'mensagem': 'Oi'}, content_type='application/json')
        assert resposta.json() == {'success': False, 'resposta': assistente.MENSAGEM_CHAT_INDISPONIVEL}

    def test_saudacao_pelo_nome(self, client_operador, com_chave, genai_mock):
        dados = client_operador.post(INICIAR_URL).json()

        assert dados['disponivel'] is True
        assert dados['mensagem'].startswith("Olá, Bruno Caixa! Sou o Marky")
        conversa = client_operador.session[assistente.CHAVE_SESSAO_CHAT]
        assert conversa['historico'] == []
        assert 'Mercadinho Central' in conversa['instrucao']

    def test_contexto_traz_produtos(self, mercado, refrigerante):
        contexto = assistente.montar_contexto_loja(mercado)
        assert f"Refrigerante 2L (ID: {refrigerante.id}, Preço: R$5.00, Estoque: 20)" in contexto
        assert "nenhuma venda registrada" in contexto

    def test_conversa_guarda_historico(self, client_operador, com_chave, genai_mock):
        chat = genai_mock.GenerativeModel.return_value.start_chat.return_value
        chat.send_message.return_value.text = "Temos 20 refrigerantes."

        client_operador.post(INICIAR_URL)
        primeira = client_operador.post(MENSAGEM_URL, {'mensagem': 'Quantos refrigerantes?'},
                                        content_type='application/json').json()
        client_operador.post(MENSAGEM_URL, {'mensagem': 'E pães?'}, content_type='application/json')

        assert primeira == {'success': True, 'resposta': "Temos 20 refrigerantes."}
        historico_enviado = genai_mock.GenerativeModel.return_value.start_chat.call_args_list[1].kwargs['history']
        assert historico_enviado == [
            {'role': 'user', 'parts': ['Quantos refrigerantes?']},
            {'role': 'model', 'parts': ['Temos 20 refrigerantes.']},
        ]
        assert len(client_operador.session[assistente.CHAVE_SESSAO_CHAT]['historico']) == 4

    def test_mensagem_sem_iniciar_abre_conversa(self, client_operador, com_chave, genai_mock):
        genai_mock.GenerativeModel.return_value.start_chat.return_value.send_message.return_value.text = "Oi!"

        dados = client_operador.post(MENSAGEM_URL, {'mensagem': 'Oi'}, content_type='application/json').json()

        assert dados['success'] is True
        assert assistente.CHAVE_SESSAO_CHAT in client_operador.session

    def test_falha_nao_entra_no_historico(self, client_operador, com_chave, genai_mock):
        chat = genai_mock.GenerativeModel.return_value.start_chat.return_value
        chat.send_message.side_effect = RuntimeError("timeout")

        client_operador.post(INICIAR_URL)
        dados = client_operador.post(MENSAGEM_URL, {'mensagem': 'Oi'}, content_type='application/json').json()

        assert dados == {'success': False, 'resposta': assistente.MENSAGEM_ERRO_CHAT}
        assert client_operador.session[assistente.CHAVE_SESSAO_CHAT]['historico'] == []

    def test_mensagem_vazia(self, client_operador, com_chave):
        resposta = client_operador.post(MENSAGEM_URL, {'mensagem': '  '}, content_type='application/json')
        assert resposta.status_code == 400
