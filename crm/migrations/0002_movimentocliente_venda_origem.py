from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    dependencies = [
        ('crm', '0001_initial'),
        ('pdv', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='movimentocliente',
            name='venda_origem',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='movimentos_cliente', to='pdv.venda'),
        ),
    ]
