# Generated manually for the listings app

import uuid
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    dependencies = [
        ('listings', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PaymentPeriod',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('plan_type', models.CharField(choices=[('BASIC', 'Basic Plan'), ('PREMIUM', 'Premium Plan'), ('FEATURED', 'Featured Plan'), ('LEFT_BAR', 'Left Bar Plan'), ('RIGHT_BAR', 'Right Bar Plan'), ('BANNER', 'Banner Plan'), ('HERO', 'Hero Plan')], max_length=20)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('commission', models.DecimalField(decimal_places=2, max_digits=10)),
                ('district', models.CharField(max_length=100)),
                ('payment_mode', models.CharField(choices=[('CASH', 'Cash'), ('UPI', 'UPI'), ('NONE', 'None')], default='NONE', max_length=10)),
                ('receipt_no', models.CharField(blank=True, max_length=40)),
                ('paid_at', models.DateTimeField(blank=True, null=True)),
                ('expired_at', models.DateTimeField(blank=True, null=True)),
                ('renewed_at', models.DateTimeField(auto_now_add=True)),
                ('agent_listing', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='payment_periods', to='listings.agentlisting')),
                ('public_listing', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='payment_periods', to='listings.publiclisting')),
            ],
            options={
                'db_table': 'listing_payment_periods',
                'ordering': ['paid_at'],
                'indexes': [models.Index(fields=['paid_at'], name='payment_period_paid_idx')],
            },
        ),
    ]
