# pdv/models.py
from django.db import models
from django.conf import settings
from django.utils import timezone

from accounts.models import Mercado, Produto


FORMA_PAGAMENTO_CHOICES = (
    ('DINHEIRO', 'Dinheiro'),
    ('DEBITO', 'Cartão de Débito'),
    ('CREDITO', 'Cartão de Crédito'),
    ('PIX', 'PIX'),
    ('FIADO', 'Fiado (Crediário)'),
)


class SessaoCaixa(models.Model):
    STATUS_CHOICES = (
        ('ABERTO', 'Aberto'),
        ('FECHADO', 'Fechado'),
    )

    mercado = models.ForeignKey(Mercado, on_delete=models.CASCADE, related_name='sessoes_caixa')
    # Operador excluído: a sessão fica no histórico com o nome_operador
    usuario = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='sessoes_caixa'
    )
    nome_operador = models.CharField(max_length=150)
    data_abertura = models.DateTimeField(default=timezone.now)
    data_fechamento = models.DateTimeField(null=True, blank=True)
    saldo_inicial = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    # Preenchidos (e congelados) no fechamento
    saldo_final = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True, verbose_name="Saldo Contado")
    total_vendas = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    saldo_esperado = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    diferenca = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='ABERTO')
    observacoes = models.TextField(blank=True, null=True)

    class Meta:
        verbose_name = "Sessão de Caixa"
        verbose_name_plural = "Sessões de Caixa"
        ordering = ['-data_abertura', '-id']
        constraints = [
            # Um operador só pode ter um caixa aberto por vez
            models.UniqueConstraint(
                fields=['usuario'], condition=models.Q(status='ABERTO'),
                name='unique_caixa_aberto_por_operador'
            )
        ]

    def __str__(self):
        return f"Caixa {self.id} - {self.nome_operador} ({self.status})"

    @property
    def aberto(self):
        return self.status == 'ABERTO'


class Venda(models.Model):
    STATUS_CHOICES = (
        ('ABERTA', 'Comanda Aberta'),
        ('PENDENTE', 'Pendente'),
        ('EM_PREPARO', 'Em Preparo'),
        ('PRONTA', 'Pronta'),
        ('CONCLUIDA', 'Concluída'),
    )
    TIPO_DESCONTO_CHOICES = (
        ('MANUAL', 'Manual'),
        ('PONTOS', 'Pontos de Fidelidade'),
    )

    mercado = models.ForeignKey(Mercado, on_delete=models.CASCADE, related_name='vendas')
    numero_pedido = models.PositiveIntegerField(null=True, blank=True)
    sessao = models.ForeignKey(SessaoCaixa, on_delete=models.SET_NULL, null=True, blank=True, related_name='vendas')
    operador = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='vendas_pdv')
    nome_operador = models.CharField(max_length=150, blank=True)
    cliente = models.ForeignKey('crm.Cliente', on_delete=models.SET_NULL, null=True, blank=True, related_name='vendas')
    nome_cliente = models.CharField(max_length=200, blank=True, help_text="Nome do cliente ou da comanda")

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    tipo_desconto = models.CharField(max_length=10, choices=TIPO_DESCONTO_CHOICES, blank=True)
    desconto = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    descricao_desconto = models.CharField(max_length=255, blank=True)
    pontos_resgatados = models.PositiveIntegerField(default=0)
    pontos_ganhos = models.PositiveIntegerField(default=0)
    total = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    forma_pagamento = models.CharField(max_length=10, choices=FORMA_PAGAMENTO_CHOICES, blank=True)
    valor_recebido = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    troco = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default='ABERTA')
    # Evita baixar o estoque duas vezes (PDV e cozinha)
    estoque_baixado = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Venda"
        verbose_name_plural = "Vendas"
        ordering = ['-created_at', '-id']
        constraints = [
            models.UniqueConstraint(fields=['mercado', 'numero_pedido'], name='unique_numero_pedido_por_mercado')
        ]

    def __str__(self):
        return f"Pedido #{self.numero_pedido or '-'} - R$ {self.total} ({self.get_status_display()})"

    def to_dict(self, com_itens=True):
        data = {
            'id': self.id,
            'mercado_id': self.mercado_id,
            'numero_pedido': self.numero_pedido,
            'sessao_id': self.sessao_id,
            'operador_id': self.operador_id,
            'nome_operador': self.nome_operador,
            'cliente_id': self.cliente_id,
            'nome_cliente': self.nome_cliente,
            'subtotal': float(self.subtotal),
            'desconto': None,
            'total': float(self.total),
            'forma_pagamento': self.forma_pagamento,
            'forma_pagamento_display': self.get_forma_pagamento_display() if self.forma_pagamento else '',
            'valor_recebido': float(self.valor_recebido),
            'troco': float(self.troco),
            'pontos_ganhos': self.pontos_ganhos,
            'status': self.status,
            'status_display': self.get_status_display(),
            'created_at': self.created_at.isoformat(),
        }
        if self.desconto > 0:
            data['desconto'] = {
                'tipo': self.tipo_desconto,
                'valor': float(self.desconto),
                'descricao': self.descricao_desconto,
                'pontos_resgatados': self.pontos_resgatados,
            }
        if com_itens:
            data['itens'] = [item.to_dict() for item in self.itens.all()]
        return data


class ItemVenda(models.Model):
    venda = models.ForeignKey(Venda, on_delete=models.CASCADE, related_name='itens')
    produto = models.ForeignKey(Produto, on_delete=models.SET_NULL, null=True, blank=True, related_name='itens_venda')
    # Cópia dos dados do produto no momento da venda
    nome = models.CharField(max_length=200)
    preco_unitario = models.DecimalField(max_digits=10, decimal_places=2)
    quantidade = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.quantidade}x {self.nome}"

    @property
    def subtotal(self):
        return self.preco_unitario * self.quantidade

    def to_dict(self):
        return {
            'id': self.id,
            'produto_id': self.produto_id,
            'nome': self.nome,
            'preco_unitario': float(self.preco_unitario),
            'quantidade': self.quantidade,
            'subtotal': float(self.subtotal),
        }


class MovimentoCaixa(models.Model):
    TIPO_CHOICES = (
        ('SUPRIMENTO', 'Suprimento (Entrada)'),
        ('SANGRIA', 'Sangria (Saída)'),
        ('VENDA', 'Venda PDV'),
    )

    sessao = models.ForeignKey(SessaoCaixa, on_delete=models.CASCADE, related_name='movimentos')
    tipo = models.CharField(max_length=15, choices=TIPO_CHOICES)
    valor = models.DecimalField(max_digits=10, decimal_places=2)
    forma_pagamento = models.CharField(max_length=10, choices=FORMA_PAGAMENTO_CHOICES, blank=True)
    descricao = models.CharField(max_length=255, blank=True)
    data_movimento = models.DateTimeField(default=timezone.now)

    # Linka com a Venda quando o movimento for gerado por uma venda
    venda_origem = models.ForeignKey(Venda, on_delete=models.SET_NULL, null=True, blank=True, related_name='movimentos_caixa')

    class Meta:
        ordering = ['data_movimento', 'id']

    def __str__(self):
        return f"{self.get_tipo_display()} - R$ {self.valor}"

    def to_dict(self):
        return {
            'id': self.id,
            'tipo': self.tipo,
            'valor': float(self.valor),
            'forma_pagamento': self.forma_pagamento,
            'descricao': self.descricao,
            'data_movimento': self.data_movimento.isoformat(),
            'venda_id': self.venda_origem_id,
        }
