# Generated manually for the inventory app
from django.db import migrations, models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='InventoryItem',
            fields=[
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('name', models.CharField(max_length=200, db_index=True)),
                ('category', models.CharField(max_length=100, blank=True, db_index=True)),
                ('quantity', models.DecimalField(default=0, max_digits=12, decimal_places=2, help_text="Units on hand. Can go negative under the 'allow' stock policy.")),
                ('unit', models.CharField(max_length=30, blank=True)),
                ('cost_price', models.DecimalField(default=0, max_digits=12, decimal_places=2, validators=[django.core.validators.MinValueValidator(0)])),
                ('price', models.DecimalField(default=0, max_digits=12, decimal_places=2, validators=[django.core.validators.MinValueValidator(0)])),
                ('min_stock', models.DecimalField(default=0, max_digits=12, decimal_places=2)),
                ('total_consumed', models.DecimalField(default=0, max_digits=12, decimal_places=2, help_text='Units consumed by treatments')),
                ('date_added', models.DateTimeField(default=django.utils.timezone.now)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'inventory_items',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='InventoryLossRecord',
            fields=[
                ('cascade_status', models.CharField(choices=[('PENDING', 'Pending'), ('APPLIED', 'Applied'), ('PARTIAL', 'Partially Applied'), ('FAILED', 'Failed')], db_index=True, default='PENDING', help_text='Outcome of the last cascade run for this record', max_length=10)),
                ('cascade_steps_applied', models.JSONField(blank=True, default=list, help_text='Names of cascade steps already applied (JSON array)')),
                ('cascade_error', models.TextField(blank=True, help_text='Error from the last failed cascade step')),
                ('cascade_attempts', models.PositiveIntegerField(default=0)),
                ('cascade_last_attempt_at', models.DateTimeField(blank=True, null=True)),
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('item_name', models.CharField(max_length=200, blank=True, help_text='Denormalized for display')),
                ('loss_type', models.CharField(choices=[('Wasted', 'Wasted'), ('Damaged', 'Damaged'), ('Lost', 'Lost'), ('Expired', 'Expired')], db_index=True, max_length=10)),
                ('quantity', models.DecimalField(max_digits=12, decimal_places=2, validators=[django.core.validators.MinValueValidator(0)])),
                ('unit_cost', models.DecimalField(default=0, max_digits=12, decimal_places=2, validators=[django.core.validators.MinValueValidator(0)])),
                ('total_loss', models.DecimalField(default=0, max_digits=14, decimal_places=2, validators=[django.core.validators.MinValueValidator(0)])),
                ('date', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('reason', models.TextField(blank=True)),
                ('reported_by', models.CharField(max_length=100, blank=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('inventory_item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='loss_records', to='inventory.inventoryitem')),
            ],
            options={
                'db_table': 'inventory_loss_records',
                'ordering': ['-date'],
            },
        ),
        migrations.AddIndex(
            model_name='inventoryitem',
            index=models.Index(fields=['category', 'name'], name='inv_items_category_name_idx'),
        ),
        migrations.AddIndex(
            model_name='inventorylossrecord',
            index=models.Index(fields=['inventory_item', 'date'], name='inv_loss_item_date_idx'),
        ),
        migrations.AddIndex(
            model_name='inventorylossrecord',
            index=models.Index(fields=['loss_type', 'date'], name='inv_loss_type_date_idx'),
        ),
    ]
