from decimal import Decimal

from django.db import models
from django.utils import timezone

from accounts.models import Mercado


class Cliente(models.Model):
    mercado = models.ForeignKey(Mercado, on_delete=models.CASCADE, related_name='clientes')
    nome = models.CharField(max_length=200)
    email = models.EmailField(blank=True)
    telefone = models.CharField(max_length=20, blank=True)
    cpf = models.CharField(max_length=14, blank=True, verbose_name="CPF")

    # --- Fidelidade ---
    pontos = models.PositiveIntegerField(default=0, verbose_name="Saldo de Pontos")

    # --- Crediário (Fiado) ---
    limite_credito = models.DecimalField(max_digits=10, decimal_places=2, default=0, verbose_name="Limite de Crédito")
    saldo_devedor = models.DecimalField(
        max_digits=10, decimal_places=2, default=0,
        verbose_name="Saldo Devedor",
        help_text="Quanto o cliente deve hoje. Negativo = crédito a favor do cliente."
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Cliente"
        verbose_name_plural = "Clientes"
        ordering = ['nome']

    def __str__(self):
        return self.nome

    @property
    def credito_disponivel(self):
        disponivel = self.limite_credito - self.saldo_devedor
        return disponivel if disponivel > 0 else Decimal('0.00')

    def to_dict(self):
        return {
            'id': self.id,
            'mercado_id': self.mercado_id,
            'nome': self.nome,
            'email': self.email,
            'telefone': self.telefone,
            'cpf': self.cpf,
            'pontos': self.pontos,
            'limite_credito': float(self.limite_credito),
            'saldo_devedor': float(self.saldo_devedor),
            'credito_disponivel': float(self.credito_disponivel),
        }


class MovimentoCliente(models.Model):
    """
    Extrato do crediário do cliente.
    """
    TIPO_CHOICES = (
        ('COMPRA', 'Compra'),
        ('PAGAMENTO', 'Pagamento'),
    )

    cliente = models.ForeignKey(Cliente, on_delete=models.CASCADE, related_name='movimentos')
    tipo = models.CharField(max_length=10, choices=TIPO_CHOICES)
    valor = models.DecimalField(max_digits=10, decimal_places=2)
    data_movimento = models.DateTimeField(default=timezone.now)
    venda_origem = models.ForeignKey('pdv.Venda', on_delete=models.SET_NULL, null=True, blank=True, related_name='movimentos_cliente')
    observacoes = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ['-data_movimento', '-id']

    def __str__(self):
        return f"{self.get_tipo_display()} - R$ {self.valor}"

    def to_dict(self):
        return {
            'id': self.id,
            'cliente_id': self.cliente_id,
            'tipo': self.tipo,
            'tipo_display': self.get_tipo_display(),
            'valor': float(self.valor),
            'data_movimento': self.data_movimento.isoformat(),
            'venda_id': self.venda_origem_id,
            'observacoes': self.observacoes,
        }
