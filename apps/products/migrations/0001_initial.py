from decimal import Decimal
import django.core.validators
import django.utils.timezone
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('name', models.CharField(max_length=200)),
                ('barcode', models.CharField(max_length=64, unique=True)),
                ('category', models.CharField(choices=[('organic', 'Organic'), ('aromatic', 'Aromatic'), ('wellness', 'Wellness'), ('coffee', 'Coffee'), ('pastry', 'Pastry'), ('other', 'Other')], max_length=20)),
                ('unit_of_measure', models.CharField(choices=[('unit', 'Unit'), ('gram', 'Gram'), ('kilogram', 'Kilogram'), ('liter', 'Liter'), ('milliliter', 'Milliliter')], max_length=20)),
                ('image', models.CharField(blank=True, max_length=500)),
                ('description', models.TextField(blank=True)),
                ('price', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('cost_price', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('profit_margin', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('stock', models.PositiveIntegerField(default=0)),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive'), ('out_of_stock', 'Out of stock')], default='active', max_length=20)),
            ],
            options={
                'db_table': 'products',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['category'], name='products_category_idx'),
                    models.Index(fields=['status'], name='products_status_idx'),
                    models.Index(fields=['stock'], name='products_stock_idx'),
                ],
            },
        ),
    ]
