from decimal import Decimal
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Client',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('full_name', models.CharField(max_length=100, validators=[django.core.validators.MinLengthValidator(2)])),
                ('phone', models.CharField(blank=True, max_length=20)),
                ('email', models.EmailField(blank=True, max_length=255, null=True)),
                ('cuit', models.CharField(blank=True, max_length=13, null=True)),
                ('notes', models.TextField(blank=True)),
            ],
            options={
                'db_table': 'clients',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['full_name'], name='clients_full_name_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('deleted_at__isnull', True), ('email__isnull', False)), fields=('email',), name='unique_active_client_email'),
                    models.UniqueConstraint(condition=models.Q(('deleted_at__isnull', True), ('cuit__isnull', False)), fields=('cuit',), name='unique_active_client_cuit'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Prepaid',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('CONSUMED', 'Consumed')], default='PENDING', max_length=10)),
                ('consumed_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='prepaids', to='clients.client')),
            ],
            options={
                'db_table': 'prepaids',
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['client', 'status'], name='prepaids_client_status_idx'),
                    models.Index(fields=['status'], name='prepaids_status_idx'),
                ],
            },
        ),
    ]
