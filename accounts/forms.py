from django import forms
from django.contrib.auth.models import User
from .models import Produto, Despesa, Mercado


class ProdutoForm(forms.ModelForm):
    class Meta:
        model = Produto
        fields = ['nome', 'codigo', 'preco', 'custo', 'estoque', 'data_validade']
        labels = {
            'nome': 'Nome do Produto',
            'codigo': 'Código de Barras',
            'preco': 'Preço de Venda',
            'custo': 'Preço de Custo',
            'estoque': 'Estoque Atual',
            'data_validade': 'Data de Validade',
        }

    def __init__(self, *args, **kwargs):
        # Recebe o mercado da view para validar o código
        self.mercado = kwargs.pop('mercado', None)
        super().__init__(*args, **kwargs)

    def clean_codigo(self):
        codigo = (self.cleaned_data.get('codigo') or '').strip()
        if not codigo:
            return None
        if self.mercado:
            # O .exclude(pk=self.instance.pk) serve para permitir edição do próprio produto
            exists = Produto.objects.filter(mercado=self.mercado, codigo=codigo).exclude(pk=self.instance.pk).exists()
            if exists:
                raise forms.ValidationError("Já existe um produto cadastrado com este código.")
        return codigo

    def clean_preco(self):
        preco = self.cleaned_data.get('preco')
        if preco is not None and preco < 0:
            raise forms.ValidationError("O preço não pode ser negativo.")
        return preco

    def clean_custo(self):
        custo = self.cleaned_data.get('custo')
        if custo is not None and custo < 0:
            raise forms.ValidationError("O custo não pode ser negativo.")
        return custo


class DespesaForm(forms.ModelForm):
    class Meta:
        model = Despesa
        fields = ['descricao', 'valor', 'categoria', 'data']
        labels = {
            'descricao': 'Descrição',
            'valor': 'Valor',
            'categoria': 'Categoria',
            'data': 'Data',
        }

    def clean_valor(self):
        valor = self.cleaned_data.get('valor')
        if valor is not None and valor <= 0:
            raise forms.ValidationError("O valor da despesa deve ser maior que zero.")
        return valor


class ConfiguracaoMercadoForm(forms.ModelForm):
    limite_estoque_baixo = forms.IntegerField(label="Limite de Estoque Baixo")

    class Meta:
        model = Mercado
        fields = ['limite_estoque_baixo']

    def clean_limite_estoque_baixo(self):
        # Valores negativos viram zero em vez de erro
        return max(self.cleaned_data['limite_estoque_baixo'], 0)


class RegistroForm(forms.Form):
    # --- Dados do Mercado ---
    nome_mercado = forms.CharField(label="Nome do Mercado", max_length=200)
    cnpj = forms.CharField(label="CNPJ", max_length=20, required=False)
    telefone = forms.CharField(label="Telefone", max_length=20, required=False)
    endereco = forms.CharField(label="Endereço", max_length=255, required=False)
    logo = forms.FileField(label="Logo", required=False)

    # --- Dados do Dono ---
    nome = forms.CharField(label="Seu Nome", max_length=150)
    email = forms.EmailField(label="E-mail")
    password = forms.CharField(label="Senha", widget=forms.PasswordInput)
    password_confirm = forms.CharField(label="Confirmar Senha", widget=forms.PasswordInput)

    def clean_email(self):
        email = self.cleaned_data.get('email').lower()
        if User.objects.filter(email__iexact=email).exists():
            raise forms.ValidationError("Este e-mail já está em uso.")
        return email

    def clean_logo(self):
        logo = self.cleaned_data.get('logo')
        if logo and logo.size > 2 * 1024 * 1024:  # Limite de 2MB
            raise forms.ValidationError('A logo deve ter no máximo 2MB.')
        return logo

    def clean_password_confirm(self):
        password = self.cleaned_data.get("password")
        password_confirm = self.cleaned_data.get("password_confirm")
        if password and password_confirm and password != password_confirm:
            raise forms.ValidationError("As senhas não coincidem.")
        if password and len(password) < 8:
            raise forms.ValidationError("A senha deve ter pelo menos 8 caracteres.")
        return password_confirm


class OperadorForm(forms.Form):
    nome = forms.CharField(label="Nome", max_length=150)
    email = forms.EmailField(label="E-mail")
    password = forms.CharField(label="Senha", required=False, widget=forms.PasswordInput)

    def __init__(self, *args, **kwargs):
        # Na edição recebemos o usuário atual (senha passa a ser opcional)
        self.usuario = kwargs.pop('usuario', None)
        super().__init__(*args, **kwargs)

    def clean_email(self):
        email = self.cleaned_data.get('email').lower()
        qs = User.objects.filter(email__iexact=email)
        if self.usuario is not None:
            qs = qs.exclude(pk=self.usuario.pk)
        if qs.exists():
            raise forms.ValidationError("Este e-mail já está em uso.")
        return email

    def clean_password(self):
        password = self.cleaned_data.get('password')
        if self.usuario is None and not password:
            raise forms.ValidationError("Informe uma senha para o novo operador.")
        if password and len(password) < 8:
            raise forms.ValidationError("A senha deve ter pelo menos 8 caracteres.")
        return password
