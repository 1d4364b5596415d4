import json
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.forms.models import model_to_dict
from django.http import JsonResponse

# Maior valor que cabe nos campos monetários (max_digits=10, decimal_places=2)
LIMITE_VALOR = Decimal('99999999.99')
LIMITE_INTEIRO = 2147483647


def ler_json(request):
    """Decodifica o corpo da requisição. Corpo vazio vira {}."""
    if request.content_type in ('multipart/form-data', 'application/x-www-form-urlencoded'):
        # Formulário comum (sem arquivos) também é aceito
        return request.POST.dict()
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (ValueError, json.JSONDecodeError):
        raise ValidationError("JSON inválido no corpo da requisição.")
    if not isinstance(data, dict):
        raise ValidationError("O corpo da requisição deve ser um objeto JSON.")
    return data


def erro_json(mensagem, status=400):
    return JsonResponse({'success': False, 'error': mensagem}, status=status)


def mensagem_validacao(exc):
    return " ".join(exc.messages)


def erros_formulario(form):
    """Junta os erros do form em uma mensagem só + o dicionário completo."""
    mensagens = []
    for campo, erros in form.errors.items():
        prefixo = '' if campo == '__all__' else f"{form.fields[campo].label or campo}: "
        mensagens.extend(f"{prefixo}{erro}" for erro in erros)
    return JsonResponse({
        'success': False,
        'error': " ".join(mensagens),
        'errors': form.errors.get_json_data(),
    }, status=400)


def para_decimal(valor, campo='valor'):
    """Converte número vindo do front (float, int ou string com vírgula)."""
    if valor is None or valor == '':
        raise ValidationError(f"Informe o campo '{campo}'.")
    try:
        texto = str(valor).replace('R$', '').strip()
        if ',' in texto:
            texto = texto.replace('.', '').replace(',', '.')
        numero = Decimal(texto)
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Valor inválido para '{campo}'.")
    # NaN, Infinity e valores fora da faixa dos campos
    if not numero.is_finite() or abs(numero) > LIMITE_VALOR:
        raise ValidationError(f"Valor inválido para '{campo}'.")
    return numero


def para_inteiro(valor, campo='quantidade'):
    try:
        numero = Decimal(str(valor))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Valor inválido para '{campo}'.")
    if not numero.is_finite() or abs(numero) > LIMITE_INTEIRO:
        raise ValidationError(f"Valor inválido para '{campo}'.")
    if numero != numero.to_integral_value():
        raise ValidationError(f"O campo '{campo}' deve ser um número inteiro.")
    return int(numero)


def dados_com_instancia(instance, dados, campos):
    """
    Permite updates parciais com ModelForm: o que não veio no JSON
    mantém o valor atual do objeto.
    """
    base = model_to_dict(instance, fields=campos)
    base = {chave: valor for chave, valor in base.items() if valor is not None}
    base.update({chave: valor for chave, valor in dados.items() if chave in campos})
    return base
