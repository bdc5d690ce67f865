import django.core.serializers.json
import django.utils.timezone
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('entity', models.CharField(max_length=50)),
                ('entity_id', models.CharField(blank=True, max_length=64)),
                ('action', models.CharField(choices=[('CREATE', 'Create'), ('UPDATE', 'Update'), ('DELETE', 'Delete'), ('UPDATE_STOCK', 'Update stock')], max_length=20)),
                ('user_id', models.UUIDField(blank=True, null=True)),
                ('user_email', models.EmailField(blank=True, max_length=255)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('new_values', models.JSONField(blank=True, default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ('timestamp', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'db_table': 'audit_logs',
                'ordering': ['-timestamp'],
                'indexes': [
                    models.Index(fields=['entity', 'entity_id'], name='audit_logs_entity_7c1e2a_idx'),
                    models.Index(fields=['user_id'], name='audit_logs_user_id_3f0b9d_idx'),
                    models.Index(fields=['timestamp'], name='audit_logs_timesta_a2d4c8_idx'),
                ],
            },
        ),
    ]
