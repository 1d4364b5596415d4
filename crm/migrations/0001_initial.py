from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Cliente',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nome', models.CharField(max_length=200)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('telefone', models.CharField(blank=True, max_length=20)),
                ('cpf', models.CharField(blank=True, max_length=14, verbose_name='CPF')),
                ('pontos', models.PositiveIntegerField(default=0, verbose_name='Saldo de Pontos')),
                ('limite_credito', models.DecimalField(decimal_places=2, default=0, max_digits=10, verbose_name='Limite de Crédito')),
                ('saldo_devedor', models.DecimalField(decimal_places=2, default=0, help_text='Quanto o cliente deve hoje. Negativo = crédito a favor do cliente.', max_digits=10, verbose_name='Saldo Devedor')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('mercado', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='clientes', to='accounts.mercado')),
            ],
            options={
                'verbose_name': 'Cliente',
                'verbose_name_plural': 'Clientes',
                'ordering': ['nome'],
            },
        ),
        migrations.CreateModel(
            name='MovimentoCliente',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tipo', models.CharField(choices=[('COMPRA', 'Compra'), ('PAGAMENTO', 'Pagamento')], max_length=10)),
                ('valor', models.DecimalField(decimal_places=2, max_digits=10)),
                ('data_movimento', models.DateTimeField(default=django.utils.timezone.now)),
                ('observacoes', models.CharField(blank=True, max_length=255)),
                ('cliente', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='movimentos', to='crm.cliente')),
            ],
            options={
                'ordering': ['-data_movimento', '-id'],
            },
        ),
    ]
