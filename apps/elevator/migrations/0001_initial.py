import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='CommandLedgerEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('unit_number', models.CharField(db_index=True, max_length=10)),
                ('card_type', models.CharField(choices=[('A', 'Principal'), ('B', 'Secundaria'), ('C', 'Invitados')], max_length=1)),
                ('action', models.CharField(choices=[('ACTIVATE', 'Encender'), ('DEACTIVATE', 'Apagar')], max_length=10)),
                ('success', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
            ],
            options={
                'verbose_name': 'Comando de Ascensor',
                'verbose_name_plural': 'Comandos de Ascensor',
                'db_table': 'comandos_ascensor',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['unit_number', 'created_at'], name='comando_unidad_fecha_idx')],
            },
        ),
    ]
