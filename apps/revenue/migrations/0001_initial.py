# Generated manually for the revenue app

import uuid
from decimal import Decimal
from django.db import migrations, models


def money():
    return models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='RevenueLedger',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateField()),
                ('district', models.CharField(max_length=100)),
                ('basic_plan_revenue', money()),
                ('basic_plan_count', models.PositiveIntegerField(default=0)),
                ('premium_plan_revenue', money()),
                ('premium_plan_count', models.PositiveIntegerField(default=0)),
                ('featured_plan_revenue', money()),
                ('featured_plan_count', models.PositiveIntegerField(default=0)),
                ('left_bar_plan_revenue', money()),
                ('left_bar_plan_count', models.PositiveIntegerField(default=0)),
                ('right_bar_plan_revenue', money()),
                ('right_bar_plan_count', models.PositiveIntegerField(default=0)),
                ('banner_plan_revenue', money()),
                ('banner_plan_count', models.PositiveIntegerField(default=0)),
                ('hero_plan_revenue', money()),
                ('hero_plan_count', models.PositiveIntegerField(default=0)),
                ('total_revenue', money()),
                ('total_agent_commission', money()),
                ('net_revenue', money()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'revenue_ledger',
                'ordering': ['-date', 'district'],
                'indexes': [
                    models.Index(fields=['-date'], name='revenue_date_idx'),
                    models.Index(fields=['district', '-date'], name='revenue_district_date_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('date', 'district'), name='unique_revenue_date_district'),
                ],
            },
        ),
    ]
