import logging

import google.generativeai as genai
from django.conf import settings

from accounts.models import Produto
from pdv.models import Venda

logger = logging.getLogger(__name__)

MENSAGEM_ERRO_INSIGHTS = (
    "Erro ao gerar insights. Verifique sua chave de API e a conexão. Tente novamente mais tarde."
)
MENSAGEM_CHAT_INDISPONIVEL = (
    "Desculpe, o serviço de chat não está disponível. "
    "Verifique se a chave de API do Gemini está configurada."
)
MENSAGEM_ERRO_CHAT = "Desculpe, não consegui processar sua solicitação."
CHAVE_SESSAO_CHAT = 'assistente_marky'


def ia_configurada():
    return bool(settings.GEMINI_API_KEY)


def _modelo(system_instruction=None):
    genai.configure(api_key=settings.GEMINI_API_KEY)
    if system_instruction:
        return genai.GenerativeModel(settings.GEMINI_MODEL, system_instruction=system_instruction)
    return genai.GenerativeModel(settings.GEMINI_MODEL)


# ==============================================================================
# INSIGHTS DO PAINEL
# ==============================================================================

def insights_demonstracao(painel):
    return f"""
### **Análise Financeira (Demonstração)**

**Resumo Geral:**
Seu faturamento de **R$ {painel['faturamento']:.2f}** é sólido. Após deduzir os custos dos produtos (R$ {painel['custos']:.2f}) e outras despesas (R$ {painel['despesas']:.2f}), seu lucro líquido é de **R$ {painel['lucro_liquido']:.2f}**.

**Recomendações:**
1.  **Controle de Despesas:** Fique de olho nas despesas variáveis para maximizar seu lucro.
2.  **Crie Combos:** Ofereça pacotes com seus produtos mais vendidos para aumentar o ticket médio.

*Nota: Esta é uma análise de demonstração. Configure a chave GEMINI_API_KEY para obter insights em tempo real.*
""".strip()


def montar_prompt_insights(painel):
    produtos = ", ".join(
        f"{p['nome']} (Receita: R$ {p['receita']:.2f}, Lucro: R$ {p['lucro']:.2f})"
        for p in painel['top_produtos']
    ) or "nenhum"
    horas = ", ".join(f"{h['hora']}: {h['vendas']} vendas" for h in painel['vendas_por_hora']) or "sem vendas"

    return f"""
    Você é um consultor financeiro de pequenos mercados.
    Analise os dados abaixo e responda em português do Brasil, de forma concisa,
    fácil de entender para quem não é especialista e com sugestões práticas.
    Use markdown (negrito nos títulos, listas com marcadores).

    Dados:
    - Faturamento Total: R$ {painel['faturamento']:.2f}
    - Custo das Mercadorias Vendidas: R$ {painel['custos']:.2f}
    - Outras Despesas: R$ {painel['despesas']:.2f}
    - Lucro Líquido: R$ {painel['lucro_liquido']:.2f}
    - Top 5 Produtos (por receita): {produtos}
    - Vendas por Hora: {horas}

    Com base nesses dados, escreva:
    1. **Resumo Geral:** a saúde financeira, comentando faturamento, despesas e lucro líquido.
    2. **Principais Produtos:** os produtos mais vendidos são lucrativos? Alguma sugestão?
    3. **Horários de Pico:** analise as vendas por hora e sugira escala de equipe ou ações de marketing.
    4. **Recomendações:** duas ou três ações concretas para aumentar o lucro ou reduzir custos.
    """


def gerar_insights(painel):
    if not ia_configurada():
        return insights_demonstracao(painel)

    try:
        response = _modelo().generate_content(montar_prompt_insights(painel))
        return response.text.strip()
    except Exception:
        logger.exception("Erro ao chamar o Gemini para os insights do painel")
        return MENSAGEM_ERRO_INSIGHTS


# ==============================================================================
# CHAT "MARKY"
# ==============================================================================

def montar_contexto_loja(mercado):
    produtos = Produto.objects.filter(mercado=mercado)
    vendas = Venda.objects.filter(mercado=mercado).exclude(
        status='ABERTA'
    ).prefetch_related('itens').order_by('-created_at', '-id')[:10]

    linhas_produtos = "\n".join(
        f"- {p.nome} (ID: {p.id}, Preço: R${p.preco:.2f}, Estoque: {p.estoque})" for p in produtos
    ) or "- (nenhum produto cadastrado)"
    linhas_vendas = "\n".join(
        f"- Pedido #{v.numero_pedido}, Total: R${v.total:.2f}, Itens: "
        + ", ".join(f"{i.quantidade}x {i.nome}" for i in v.itens.all())
        for v in vendas
    ) or "- (nenhuma venda registrada)"

    return f"""
    Você é o Marky, assistente virtual do PDVMarket Cloud, um sistema de frente de caixa.
    Você conversa com o dono ou com um operador do mercado "{mercado.nome}".
    Seu tom é amigável, prestativo e profissional.
    Responda com base nos dados da loja abaixo. Se não tiver a informação, diga isso.
    Não invente dados. Você pode fazer cálculos a partir dos dados.
    Seja conciso. Sempre responda em português do Brasil.

    PRODUTOS:
    {linhas_produtos}

    VENDAS RECENTES:
    {linhas_vendas}
    """


def iniciar_chat(session, perfil):
    """
    Abre uma conversa nova guardando o contexto da loja na sessão do usuário.
    Retorna (disponivel, mensagem_de_boas_vindas).
    """
    if not ia_configurada():
        session.pop(CHAVE_SESSAO_CHAT, None)
        return False, MENSAGEM_CHAT_INDISPONIVEL

    session[CHAVE_SESSAO_CHAT] = {
        'mercado_id': perfil.mercado_id,
        'instrucao': montar_contexto_loja(perfil.mercado),
        'historico': [],
    }
    return True, f"Olá, {perfil.nome}! Sou o Marky, seu assistente virtual. Como posso ajudar hoje?"


def enviar_mensagem(session, perfil, texto):
    """
    Retorna (ok, resposta). O histórico só guarda as trocas que deram certo.
    """
    if not ia_configurada():
        return False, MENSAGEM_CHAT_INDISPONIVEL

    conversa = session.get(CHAVE_SESSAO_CHAT)
    if not conversa or conversa.get('mercado_id') != perfil.mercado_id:
        iniciar_chat(session, perfil)
        conversa = session[CHAVE_SESSAO_CHAT]

    try:
        chat = _modelo(conversa['instrucao']).start_chat(history=conversa['historico'])
        resposta = chat.send_message(texto).text.strip()
    except Exception:
        logger.exception("Erro ao comunicar com o Gemini no chat do mercado %s", perfil.mercado_id)
        return False, MENSAGEM_ERRO_CHAT

    conversa['historico'] = conversa['historico'] + [
        {'role': 'user', 'parts': [texto]},
        {'role': 'model', 'parts': [resposta]},
    ]
    session[CHAVE_SESSAO_CHAT] = conversa
    session.modified = True
    return True, resposta
