from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


FORMAS = [('DINHEIRO', 'Dinheiro'), ('DEBITO', 'Cartão de Débito'), ('CREDITO', 'Cartão de Crédito'), ('PIX', 'PIX'), ('FIADO', 'Fiado (Crediário)')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
        ('crm', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='SessaoCaixa',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nome_operador', models.CharField(max_length=150)),
                ('data_abertura', models.DateTimeField(default=django.utils.timezone.now)),
                ('data_fechamento', models.DateTimeField(blank=True, null=True)),
                ('saldo_inicial', models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ('saldo_final', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Saldo Contado')),
                ('total_vendas', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('saldo_esperado', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('diferenca', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('status', models.CharField(choices=[('ABERTO', 'Aberto'), ('FECHADO', 'Fechado')], default='ABERTO', max_length=10)),
                ('observacoes', models.TextField(blank=True, null=True)),
                ('mercado', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sessoes_caixa', to='accounts.mercado')),
                ('usuario', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='sessoes_caixa', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Sessão de Caixa',
                'verbose_name_plural': 'Sessões de Caixa',
                'ordering': ['-data_abertura', '-id'],
                'constraints': [models.UniqueConstraint(condition=models.Q(('status', 'ABERTO')), fields=('usuario',), name='unique_caixa_aberto_por_operador')],
            },
        ),
        migrations.CreateModel(
            name='Venda',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('numero_pedido', models.PositiveIntegerField(blank=True, null=True)),
                ('nome_operador', models.CharField(blank=True, max_length=150)),
                ('nome_cliente', models.CharField(blank=True, help_text='Nome do cliente ou da comanda', max_length=200)),
                ('subtotal', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('tipo_desconto', models.CharField(blank=True, choices=[('MANUAL', 'Manual'), ('PONTOS', 'Pontos de Fidelidade')], max_length=10)),
                ('desconto', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('descricao_desconto', models.CharField(blank=True, max_length=255)),
                ('pontos_resgatados', models.PositiveIntegerField(default=0)),
                ('pontos_ganhos', models.PositiveIntegerField(default=0)),
                ('total', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('forma_pagamento', models.CharField(blank=True, choices=FORMAS, max_length=10)),
                ('valor_recebido', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('troco', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('status', models.CharField(choices=[('ABERTA', 'Comanda Aberta'), ('PENDENTE', 'Pendente'), ('EM_PREPARO', 'Em Preparo'), ('PRONTA', 'Pronta'), ('CONCLUIDA', 'Concluída')], default='ABERTA', max_length=12)),
                ('estoque_baixado', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('cliente', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='vendas', to='crm.cliente')),
                ('mercado', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='vendas', to='accounts.mercado')),
                ('operador', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='vendas_pdv', to=settings.AUTH_USER_MODEL)),
                ('sessao', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='vendas', to='pdv.sessaocaixa')),
            ],
            options={
                'verbose_name': 'Venda',
                'verbose_name_plural': 'Vendas',
                'ordering': ['-created_at', '-id'],
                'constraints': [models.UniqueConstraint(fields=('mercado', 'numero_pedido'), name='unique_numero_pedido_por_mercado')],
            },
        ),
        migrations.CreateModel(
            name='ItemVenda',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nome', models.CharField(max_length=200)),
                ('preco_unitario', models.DecimalField(decimal_places=2, max_digits=10)),
                ('quantidade', models.PositiveIntegerField(default=1)),
                ('produto', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='itens_venda', to='accounts.produto')),
                ('venda', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='itens', to='pdv.venda')),
            ],
            options={
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='MovimentoCaixa',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tipo', models.CharField(choices=[('SUPRIMENTO', 'Suprimento (Entrada)'), ('SANGRIA', 'Sangria (Saída)'), ('VENDA', 'Venda PDV')], max_length=15)),
                ('valor', models.DecimalField(decimal_places=2, max_digits=10)),
                ('forma_pagamento', models.CharField(blank=True, choices=FORMAS, max_length=10)),
                ('descricao', models.CharField(blank=True, max_length=255)),
                ('data_movimento', models.DateTimeField(default=django.utils.timezone.now)),
                ('sessao', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='movimentos', to='pdv.sessaocaixa')),
                ('venda_origem', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='movimentos_caixa', to='pdv.venda')),
            ],
            options={
                'ordering': ['data_movimento', 'id'],
            },
        ),
    ]
