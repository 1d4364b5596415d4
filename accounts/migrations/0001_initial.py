from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Mercado',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nome', models.CharField(max_length=200, verbose_name='Nome do Mercado')),
                ('cnpj', models.CharField(blank=True, max_length=20, verbose_name='CNPJ')),
                ('telefone', models.CharField(blank=True, max_length=20)),
                ('endereco', models.CharField(blank=True, max_length=255, verbose_name='Endereço')),
                ('logo', models.FileField(blank=True, null=True, upload_to='logos/%Y/%m/')),
                ('limite_estoque_baixo', models.PositiveIntegerField(default=10, help_text='Produtos com estoque igual ou menor que este valor aparecem em alerta.', verbose_name='Limite de Estoque Baixo')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Mercado',
                'verbose_name_plural': 'Mercados',
            },
        ),
        migrations.CreateModel(
            name='PerfilUsuario',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nome', models.CharField(max_length=150)),
                ('tipo', models.CharField(choices=[('DONO', 'Dono'), ('OPERADOR', 'Operador')], default='OPERADOR', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('mercado', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='perfis', to='accounts.mercado')),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='perfil', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Perfil de Usuário',
                'verbose_name_plural': 'Perfis de Usuário',
                'ordering': ['nome'],
            },
        ),
        migrations.CreateModel(
            name='Produto',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nome', models.CharField(max_length=200)),
                ('codigo', models.CharField(blank=True, max_length=50, null=True, verbose_name='Código de Barras')),
                ('preco', models.DecimalField(decimal_places=2, max_digits=10, verbose_name='Preço de Venda')),
                ('custo', models.DecimalField(decimal_places=2, default=0, max_digits=10, verbose_name='Preço de Custo')),
                ('estoque', models.IntegerField(default=0)),
                ('data_validade', models.DateField(blank=True, null=True, verbose_name='Data de Validade')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('mercado', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='produtos', to='accounts.mercado')),
            ],
            options={
                'verbose_name': 'Produto',
                'verbose_name_plural': 'Produtos',
                'ordering': ['nome'],
                'constraints': [models.UniqueConstraint(fields=('mercado', 'codigo'), name='unique_codigo_por_mercado')],
            },
        ),
        migrations.CreateModel(
            name='Despesa',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('descricao', models.CharField(max_length=255, verbose_name='Descrição')),
                ('valor', models.DecimalField(decimal_places=2, max_digits=10)),
                ('categoria', models.CharField(choices=[('FIXA', 'Fixa'), ('VARIAVEL', 'Variável'), ('OUTRA', 'Outra')], default='VARIAVEL', max_length=10)),
                ('data', models.DateField(default=django.utils.timezone.localdate)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('mercado', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='despesas', to='accounts.mercado')),
            ],
            options={
                'verbose_name': 'Despesa',
                'verbose_name_plural': 'Despesas',
                'ordering': ['-data', '-id'],
            },
        ),
    ]
