from decimal import Decimal
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Egress',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('egress_number', models.CharField(max_length=20, unique=True)),
                ('concept', models.CharField(max_length=255, validators=[django.core.validators.MinLengthValidator(3)])),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('currency', models.CharField(choices=[('USD', 'US Dollar'), ('ARS', 'Argentine Peso')], default='USD', max_length=3)),
                ('type', models.CharField(choices=[('WITHDRAWAL', 'Withdrawal'), ('EXPENSE', 'Expense'), ('REFUND', 'Refund'), ('TRANSFER', 'Transfer'), ('OTHER', 'Other')], max_length=12)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('COMPLETED', 'Completed'), ('CANCELLED', 'Cancelled')], default='PENDING', max_length=10)),
                ('notes', models.TextField(blank=True)),
                ('authorized_by', models.CharField(blank=True, max_length=100)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='egresses', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'egresses',
                'ordering': ['-created_at'],
                'verbose_name_plural': 'egresses',
                'indexes': [
                    models.Index(fields=['status'], name='egresses_status_idx'),
                    models.Index(fields=['type'], name='egresses_type_idx'),
                    models.Index(fields=['currency', 'status'], name='egresses_currency_status_idx'),
                ],
            },
        ),
    ]
