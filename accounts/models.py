from django.db import models
from django.contrib.auth.models import User
from django.conf import settings
from django.utils import timezone


class Mercado(models.Model):
    nome = models.CharField(max_length=200, verbose_name="Nome do Mercado")
    cnpj = models.CharField(max_length=20, blank=True, verbose_name="CNPJ")
    telefone = models.CharField(max_length=20, blank=True)
    endereco = models.CharField(max_length=255, blank=True, verbose_name="Endereço")
    logo = models.FileField(upload_to='logos/%Y/%m/', null=True, blank=True)
    limite_estoque_baixo = models.PositiveIntegerField(
        default=settings.PDV_LIMITE_ESTOQUE_BAIXO,
        verbose_name="Limite de Estoque Baixo",
        help_text="Produtos com estoque igual ou menor que este valor aparecem em alerta."
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Mercado"
        verbose_name_plural = "Mercados"

    def __str__(self):
        return self.nome


class PerfilUsuario(models.Model):
    TIPO_CHOICES = (
        ('DONO', 'Dono'),
        ('OPERADOR', 'Operador'),
    )

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='perfil')
    mercado = models.ForeignKey(Mercado, on_delete=models.CASCADE, related_name='perfis')
    nome = models.CharField(max_length=150)
    tipo = models.CharField(max_length=10, choices=TIPO_CHOICES, default='OPERADOR')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Perfil de Usuário"
        verbose_name_plural = "Perfis de Usuário"
        ordering = ['nome']

    def __str__(self):
        return f"{self.nome} ({self.get_tipo_display()} - {self.mercado})"

    @property
    def is_dono(self):
        return self.tipo == 'DONO'

    def to_dict(self):
        return {
            'id': self.user_id,
            'nome': self.nome,
            'email': self.user.email,
            'tipo': self.tipo,
            'mercado_id': self.mercado_id,
            'mercado': self.mercado.nome,
        }


class Produto(models.Model):
    mercado = models.ForeignKey(Mercado, on_delete=models.CASCADE, related_name='produtos')
    nome = models.CharField(max_length=200)
    codigo = models.CharField(max_length=50, blank=True, null=True, verbose_name="Código de Barras")
    preco = models.DecimalField(max_digits=10, decimal_places=2, verbose_name="Preço de Venda")
    custo = models.DecimalField(max_digits=10, decimal_places=2, default=0, verbose_name="Preço de Custo")
    estoque = models.IntegerField(default=0)
    data_validade = models.DateField(null=True, blank=True, verbose_name="Data de Validade")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Produto"
        verbose_name_plural = "Produtos"
        ordering = ['nome']
        # O mercado A pode ter o código 01, e o mercado B também.
        constraints = [
            models.UniqueConstraint(fields=['mercado', 'codigo'], name='unique_codigo_por_mercado')
        ]

    def __str__(self):
        return f"{self.nome} (R$ {self.preco})"

    def to_dict(self, limite_estoque_baixo=None):
        if limite_estoque_baixo is None:
            limite_estoque_baixo = self.mercado.limite_estoque_baixo
        return {
            'id': self.id,
            'mercado_id': self.mercado_id,
            'nome': self.nome,
            'codigo': self.codigo or '',
            'preco': float(self.preco),
            'custo': float(self.custo),
            'estoque': self.estoque,
            'data_validade': self.data_validade.isoformat() if self.data_validade else None,
            'estoque_baixo': self.estoque <= limite_estoque_baixo,
        }


class Despesa(models.Model):
    CATEGORIA_CHOICES = (
        ('FIXA', 'Fixa'),
        ('VARIAVEL', 'Variável'),
        ('OUTRA', 'Outra'),
    )

    mercado = models.ForeignKey(Mercado, on_delete=models.CASCADE, related_name='despesas')
    descricao = models.CharField(max_length=255, verbose_name="Descrição")
    valor = models.DecimalField(max_digits=10, decimal_places=2)
    categoria = models.CharField(max_length=10, choices=CATEGORIA_CHOICES, default='VARIAVEL')
    data = models.DateField(default=timezone.localdate)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Despesa"
        verbose_name_plural = "Despesas"
        ordering = ['-data', '-id']

    def __str__(self):
        return f"{self.descricao} - R$ {self.valor}"

    def to_dict(self):
        return {
            'id': self.id,
            'mercado_id': self.mercado_id,
            'descricao': self.descricao,
            'valor': float(self.valor),
            'categoria': self.categoria,
            'categoria_display': self.get_categoria_display(),
            'data': self.data.isoformat(),
        }
