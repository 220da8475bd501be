# Generated manually for the finance app
from django.db import migrations, models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('inventory', '0001_initial'),
        ('livestock', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='FinanceRecord',
            fields=[
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('date', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('type', models.CharField(choices=[('Income', 'Income'), ('Expense', 'Expense')], db_index=True, max_length=10)),
                ('category', models.CharField(db_index=True, max_length=100)),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('amount', models.DecimalField(max_digits=14, decimal_places=2, validators=[django.core.validators.MinValueValidator(0)])),
                ('payment_method', models.CharField(choices=[('Cash', 'Cash'), ('Bank Transfer', 'Bank Transfer'), ('Check', 'Check'), ('Mobile Money', 'Mobile Money')], default='Cash', max_length=20)),
                ('vendor', models.CharField(max_length=200, blank=True)),
                ('invoice_number', models.CharField(max_length=100, blank=True)),
                ('status', models.CharField(choices=[('Pending', 'Pending'), ('Completed', 'Completed')], default='Completed', max_length=10)),
                ('source_reference', models.CharField(blank=True, editable=False, help_text='Trigger record this line was created for by a cascade', max_length=80, null=True, unique=True)),
                ('recorded_by', models.CharField(max_length=100, blank=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('related_animal', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='finance_records', to='livestock.animal')),
                ('related_inventory', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='finance_records', to='inventory.inventoryitem')),
            ],
            options={
                'db_table': 'finance_records',
                'ordering': ['-date'],
            },
        ),
        migrations.AddIndex(
            model_name='financerecord',
            index=models.Index(fields=['type', 'date'], name='finance_type_date_idx'),
        ),
    ]
