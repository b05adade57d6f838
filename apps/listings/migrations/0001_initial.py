# Generated manually for the listings app

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


def listing_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('shop_name', models.CharField(max_length=200)),
        ('owner_name', models.CharField(max_length=100)),
        ('mobile', models.CharField(blank=True, max_length=20)),
        ('email', models.EmailField(blank=True, max_length=254)),
        ('category', models.CharField(max_length=100)),
        ('address', models.CharField(blank=True, max_length=500)),
        ('area', models.CharField(blank=True, max_length=100)),
        ('pincode', models.CharField(blank=True, max_length=10)),
        ('district', models.CharField(blank=True, max_length=100)),
        ('latitude', models.FloatField(blank=True, null=True)),
        ('longitude', models.FloatField(blank=True, null=True)),
        ('photo_url', models.CharField(blank=True, max_length=500)),
        ('additional_photos', models.JSONField(blank=True, default=list)),
        ('offers', models.JSONField(blank=True, default=list)),
        ('whatsapp_number', models.CharField(blank=True, max_length=20)),
        ('shop_logo', models.CharField(blank=True, max_length=500)),
        ('plan_type', models.CharField(choices=[('BASIC', 'Basic Plan'), ('PREMIUM', 'Premium Plan'), ('FEATURED', 'Featured Plan'), ('LEFT_BAR', 'Left Bar Plan'), ('RIGHT_BAR', 'Right Bar Plan'), ('BANNER', 'Banner Plan'), ('HERO', 'Hero Plan')], default='BASIC', max_length=20)),
        ('plan_amount', models.DecimalField(decimal_places=2, default=Decimal('100.00'), max_digits=10, validators=[MinValueValidator(Decimal('0.00'))])),
        ('payment_status', models.CharField(choices=[('PENDING', 'Pending'), ('PAID', 'Paid')], default='PENDING', max_length=10)),
        ('payment_mode', models.CharField(choices=[('CASH', 'Cash'), ('UPI', 'UPI'), ('NONE', 'None')], default='NONE', max_length=10)),
        ('receipt_no', models.CharField(blank=True, max_length=40)),
        ('agent_commission', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
        ('last_payment_date', models.DateTimeField(blank=True, null=True)),
        ('payment_expiry_date', models.DateTimeField(blank=True, null=True)),
        ('priority_rank', models.IntegerField(default=0)),
        ('placement_slot', models.CharField(choices=[('NONE', 'None'), ('HOME_BANNER', 'Home Page Banner'), ('TOP_SLIDER', 'Top Slider'), ('LEFT_BAR', 'Left Bar'), ('RIGHT_BAR', 'Right Bar'), ('HERO', 'Hero')], default='NONE', max_length=20)),
        ('is_home_page_banner', models.BooleanField(default=False)),
        ('is_top_slider', models.BooleanField(default=False)),
        ('is_left_bar', models.BooleanField(default=False)),
        ('is_right_bar', models.BooleanField(default=False)),
        ('is_hero', models.BooleanField(default=False)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('agents', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PublicListing',
            fields=listing_fields() + [
                ('is_visible', models.BooleanField(default=True)),
                ('created_by_agent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='public_listings', to='agents.agent')),
                ('created_by_admin', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_listings', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'public_listings',
                'ordering': ['-priority_rank', '-created_at'],
                'indexes': [
                    models.Index(fields=['payment_status'], name='public_lst_status_idx'),
                    models.Index(fields=['district', 'last_payment_date'], name='public_lst_district_idx'),
                    models.Index(fields=['plan_type', '-priority_rank'], name='public_lst_plan_rank_idx'),
                    models.Index(fields=['payment_expiry_date'], name='public_lst_expiry_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='AgentListing',
            fields=listing_fields() + [
                ('agent', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='listings', to='agents.agent')),
                ('public_listing', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='agent_listing', to='listings.publiclisting')),
            ],
            options={
                'db_table': 'agent_listings',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['agent', '-created_at'], name='agent_lst_agent_idx'),
                    models.Index(fields=['payment_status'], name='agent_lst_status_idx'),
                    models.Index(fields=['district', 'last_payment_date'], name='agent_lst_district_idx'),
                ],
            },
        ),
    ]
