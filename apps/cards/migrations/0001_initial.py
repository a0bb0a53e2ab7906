from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Card',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('apartment_identifier', models.CharField(db_index=True, max_length=20)),
                ('card_type', models.CharField(choices=[('A', 'Principal'), ('B', 'Secundaria'), ('C', 'Invitados')], max_length=1)),
                ('name', models.CharField(max_length=100)),
                ('is_active', models.BooleanField(default=False)),
                ('last_used_at', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'verbose_name': 'Tarjeta',
                'verbose_name_plural': 'Tarjetas',
                'db_table': 'tarjetas',
                'ordering': ['apartment_identifier', 'card_type'],
                'constraints': [models.UniqueConstraint(fields=('apartment_identifier', 'card_type'), name='unique_card_type_per_apartment')],
            },
        ),
    ]
