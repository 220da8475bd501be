# Generated manually for the livestock app
from decimal import Decimal

from django.db import migrations, models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid


CASCADE_STATUS_CHOICES = [
    ('PENDING', 'Pending'),
    ('APPLIED', 'Applied'),
    ('PARTIAL', 'Partially Applied'),
    ('FAILED', 'Failed'),
]

TREATMENT_ROUTE_CHOICES = [
    ('IM', 'Intramuscular'),
    ('Oral', 'Oral'),
    ('Subcutaneous', 'Subcutaneous'),
    ('Spraying', 'Spraying'),
    ('Backline', 'Backline'),
    ('Topical', 'Topical'),
    ('IV', 'Intravenous'),
    ('Other', 'Other'),
]


def cascade_fields():
    return [
        ('cascade_status', models.CharField(choices=CASCADE_STATUS_CHOICES, db_index=True, default='PENDING', help_text='Outcome of the last cascade run for this record', max_length=10)),
        ('cascade_steps_applied', models.JSONField(blank=True, default=list, help_text='Names of cascade steps already applied (JSON array)')),
        ('cascade_error', models.TextField(blank=True, help_text='Error from the last failed cascade step')),
        ('cascade_attempts', models.PositiveIntegerField(default=0)),
        ('cascade_last_attempt_at', models.DateTimeField(blank=True, null=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('inventory', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Location',
            fields=[
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('name', models.CharField(max_length=100, unique=True)),
                ('description', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'locations',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Animal',
            fields=[
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('tag_id', models.CharField(max_length=50, unique=True, help_text='Human-assigned ear tag, unique across the farm')),
                ('name', models.CharField(max_length=100, blank=True, db_index=True)),
                ('species', models.CharField(max_length=50, blank=True, db_index=True)),
                ('breed', models.CharField(max_length=100, blank=True, db_index=True)),
                ('animal_class', models.CharField(max_length=50, blank=True)),
                ('gender', models.CharField(max_length=10, blank=True, choices=[('Male', 'Male'), ('Female', 'Female')])),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('color', models.CharField(max_length=50, blank=True)),
                ('acquisition_type', models.CharField(max_length=20, blank=True, choices=[('Bred on farm', 'Bred on farm'), ('Purchased', 'Purchased'), ('Donated', 'Donated'), ('Other', 'Other')])),
                ('acquisition_date', models.DateField(blank=True, null=True)),
                ('status', models.CharField(max_length=10, choices=[('Alive', 'Alive'), ('Dead', 'Dead'), ('Sold', 'Sold'), ('Archived', 'Archived')], default='Alive', db_index=True)),
                ('is_archived', models.BooleanField(default=False, db_index=True)),
                ('archived_at', models.DateTimeField(blank=True, null=True)),
                ('archived_reason', models.CharField(max_length=200, blank=True)),
                ('current_weight', models.DecimalField(blank=True, null=True, max_digits=8, decimal_places=2, help_text='Most recently captured weight (kg)')),
                ('weight_date', models.DateTimeField(blank=True, null=True)),
                ('recorded_by', models.CharField(max_length=100, blank=True)),
                ('purchase_cost', models.DecimalField(default=0, max_digits=12, decimal_places=2, validators=[django.core.validators.MinValueValidator(0)])),
                ('margin_percent', models.DecimalField(default=30, max_digits=5, decimal_places=2)),
                ('projected_sales_price', models.DecimalField(default=0, max_digits=12, decimal_places=2, validators=[django.core.validators.MinValueValidator(0)])),
                ('total_feed_cost', models.DecimalField(default=0, max_digits=12, decimal_places=2, validators=[django.core.validators.MinValueValidator(0)])),
                ('total_medication_cost', models.DecimalField(default=0, max_digits=12, decimal_places=2, validators=[django.core.validators.MinValueValidator(0)])),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('location', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='animals', to='livestock.location')),
            ],
            options={
                'db_table': 'animals',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='WeightRecord',
            fields=cascade_fields() + [
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('weight_kg', models.DecimalField(max_digits=8, decimal_places=2, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('date', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('recorded_by', models.CharField(max_length=100, blank=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('animal', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='weight_records', to='livestock.animal')),
            ],
            options={
                'db_table': 'weight_records',
                'ordering': ['-date'],
            },
        ),
        migrations.CreateModel(
            name='HealthRecord',
            fields=cascade_fields() + [
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('date', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('is_routine', models.BooleanField(default=False)),
                ('symptoms', models.TextField(blank=True)),
                ('possible_cause', models.CharField(max_length=200, blank=True)),
                ('diagnosis', models.CharField(max_length=200, blank=True)),
                ('prescribed_days', models.PositiveIntegerField(default=0)),
                ('vaccines', models.CharField(max_length=100, blank=True)),
                ('pre_weight', models.DecimalField(blank=True, null=True, max_digits=8, decimal_places=2)),
                ('treatment_a_type', models.CharField(max_length=50, blank=True)),
                ('treatment_a_medication_name', models.CharField(max_length=100, blank=True)),
                ('treatment_a_dosage', models.CharField(max_length=50, blank=True)),
                ('treatment_a_route', models.CharField(max_length=20, blank=True, choices=TREATMENT_ROUTE_CHOICES)),
                ('needs_multiple_treatments', models.BooleanField(default=False)),
                ('treatment_b_type', models.CharField(max_length=50, blank=True)),
                ('treatment_b_medication_name', models.CharField(max_length=100, blank=True)),
                ('treatment_b_dosage', models.CharField(max_length=50, blank=True)),
                ('treatment_b_route', models.CharField(max_length=20, blank=True, choices=TREATMENT_ROUTE_CHOICES)),
                ('treated_by', models.CharField(max_length=100, blank=True)),
                ('post_observation', models.TextField(blank=True)),
                ('completion_date', models.DateTimeField(blank=True, null=True)),
                ('recovery_status', models.CharField(max_length=20, blank=True, choices=[('Under Treatment', 'Under Treatment'), ('Improving', 'Improving'), ('Recovered', 'Recovered'), ('Regressing', 'Regressing')])),
                ('post_weight', models.DecimalField(blank=True, null=True, max_digits=8, decimal_places=2)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('animal', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='health_records', to='livestock.animal')),
                ('treatment_a_medication', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='inventory.inventoryitem')),
                ('treatment_b_medication', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='inventory.inventoryitem')),
            ],
            options={
                'db_table': 'health_records',
                'ordering': ['-date'],
            },
        ),
        migrations.CreateModel(
            name='MortalityRecord',
            fields=cascade_fields() + [
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('date_of_death', models.DateTimeField(db_index=True)),
                ('cause', models.CharField(max_length=200, blank=True)),
                ('symptoms', models.TextField(blank=True)),
                ('days_sick', models.PositiveIntegerField(default=0)),
                ('weight', models.DecimalField(blank=True, null=True, max_digits=8, decimal_places=2)),
                ('estimated_value', models.DecimalField(default=0, max_digits=12, decimal_places=2, validators=[django.core.validators.MinValueValidator(0)], help_text='Value of the animal at death; derived when left at 0')),
                ('value_lost', models.DecimalField(default=0, max_digits=12, decimal_places=2, validators=[django.core.validators.MinValueValidator(0)], help_text='Loss booked to the finance ledger')),
                ('disposal_method', models.CharField(max_length=50, blank=True)),
                ('reported_by', models.CharField(max_length=100, blank=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('animal', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='mortality_records', to='livestock.animal')),
            ],
            options={
                'db_table': 'mortality_records',
                'ordering': ['-date_of_death'],
            },
        ),
        migrations.AddIndex(
            model_name='animal',
            index=models.Index(fields=['species', 'status'], name='animals_species_status_idx'),
        ),
        migrations.AddIndex(
            model_name='animal',
            index=models.Index(fields=['is_archived', 'created_at'], name='animals_archived_created_idx'),
        ),
        migrations.AddIndex(
            model_name='animal',
            index=models.Index(fields=['created_at', 'id'], name='animals_created_id_idx'),
        ),
        migrations.AddIndex(
            model_name='weightrecord',
            index=models.Index(fields=['animal', 'date'], name='weight_animal_date_idx'),
        ),
        migrations.AddIndex(
            model_name='healthrecord',
            index=models.Index(fields=['animal', 'date'], name='health_animal_date_idx'),
        ),
        migrations.AddIndex(
            model_name='healthrecord',
            index=models.Index(fields=['recovery_status'], name='health_recovery_idx'),
        ),
        migrations.AddIndex(
            model_name='mortalityrecord',
            index=models.Index(fields=['animal', 'date_of_death'], name='mortality_animal_date_idx'),
        ),
    ]
