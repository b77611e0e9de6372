# Generated manually for the credits app

from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('clients', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Credit',
            fields=[
                ('credit_id', models.BigAutoField(primary_key=True, serialize=False)),
                ('sale_id', models.PositiveIntegerField(blank=True, db_index=True, null=True)),
                ('credit_amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[MinValueValidator(Decimal('0.01'))])),
                ('amount_paid', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[MinValueValidator(Decimal('0.00'))])),
                ('due_date', models.DateField()),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('paid', 'Paid'), ('overdue', 'Overdue')], default='pending', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='credits', to='clients.client')),
            ],
            options={
                'db_table': 'credits',
                'ordering': ['due_date', 'credit_id'],
                'indexes': [
                    models.Index(fields=['due_date'], name='credits_due_dat_6772f7_idx'),
                    models.Index(fields=['status'], name='credits_status_815afb_idx'),
                    models.Index(fields=['client', 'due_date'], name='credits_client__9a2744_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('amount_paid__lte', models.F('credit_amount'))), name='credit_paid_not_above_amount'),
                    models.CheckConstraint(condition=models.Q(('amount_paid__gte', 0)), name='credit_paid_not_negative'),
                ],
            },
        ),
    ]
