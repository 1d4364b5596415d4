from django import forms

from .models import Cliente


class ClienteForm(forms.ModelForm):
    class Meta:
        model = Cliente
        fields = ['nome', 'email', 'telefone', 'cpf', 'limite_credito']
        labels = {
            'nome': 'Nome',
            'email': 'E-mail',
            'telefone': 'Telefone',
            'cpf': 'CPF',
            'limite_credito': 'Limite de Crédito',
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['limite_credito'].required = False

    def clean_nome(self):
        nome = (self.cleaned_data.get('nome') or '').strip()
        if not nome:
            raise forms.ValidationError("Informe o nome do cliente.")
        return nome

    def clean_limite_credito(self):
        limite = self.cleaned_data.get('limite_credito')
        if limite is None:
            return 0
        if limite < 0:
            raise forms.ValidationError("O limite de crédito não pode ser negativo.")
        return limite
