from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid

from .plans import PlanCode, PlacementSlot


class PaymentStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    PAID = 'PAID', 'Paid'


class PaymentMode(models.TextChoices):
    CASH = 'CASH', 'Cash'
    UPI = 'UPI', 'UPI'
    NONE = 'NONE', 'None'


class ListingBase(models.Model):
    """
    Fields shared by the agent-scoped and the public copy of a shop listing.

    The two copies must agree on ``plan_type``, ``payment_status`` and
    ``agent_commission`` whenever both exist. Only the reconcilers in
    ``apps.listings.services`` write those fields.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Shop details
    shop_name = models.CharField(max_length=200)
    owner_name = models.CharField(max_length=100)
    mobile = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    category = models.CharField(max_length=100)
    address = models.CharField(max_length=500, blank=True)
    area = models.CharField(max_length=100, blank=True)
    pincode = models.CharField(max_length=10, blank=True)
    district = models.CharField(max_length=100, blank=True)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    photo_url = models.CharField(max_length=500, blank=True)

    # Plan-gated extras
    additional_photos = models.JSONField(default=list, blank=True)
    offers = models.JSONField(default=list, blank=True)
    whatsapp_number = models.CharField(max_length=20, blank=True)
    shop_logo = models.CharField(max_length=500, blank=True)

    # Plan & payment
    plan_type = models.CharField(
        max_length=20,
        choices=PlanCode.choices,
        default=PlanCode.BASIC
    )
    plan_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('100.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    payment_status = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING
    )
    payment_mode = models.CharField(
        max_length=10,
        choices=PaymentMode.choices,
        default=PaymentMode.NONE
    )
    receipt_no = models.CharField(max_length=40, blank=True)
    # Null until a payment has been reconciled
    agent_commission = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True
    )
    last_payment_date = models.DateTimeField(null=True, blank=True)
    payment_expiry_date = models.DateTimeField(null=True, blank=True)

    # Placement entitlements copied from the plan catalog
    priority_rank = models.IntegerField(default=0)
    placement_slot = models.CharField(
        max_length=20,
        choices=PlacementSlot.choices,
        default=PlacementSlot.NONE
    )
    is_home_page_banner = models.BooleanField(default=False)
    is_top_slider = models.BooleanField(default=False)
    is_left_bar = models.BooleanField(default=False)
    is_right_bar = models.BooleanField(default=False)
    is_hero = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def __str__(self):
        return f"{self.shop_name} - {self.owner_name} ({self.payment_status})"

    @property
    def is_paid(self):
        return self.payment_status == PaymentStatus.PAID


class PublicListing(ListingBase):
    """Copy of a listing served to the public directory and search."""

    # Primary agent association
    created_by_agent = models.ForeignKey(
        'agents.Agent',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='public_listings'
    )
    # Secondary "creator" reference; not necessarily an agent
    created_by_admin = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_listings'
    )
    is_visible = models.BooleanField(default=True)

    class Meta:
        db_table = 'public_listings'
        indexes = [
            models.Index(fields=['payment_status'], name='public_lst_status_idx'),
            models.Index(fields=['district', 'last_payment_date'], name='public_lst_district_idx'),
            models.Index(fields=['plan_type', '-priority_rank'], name='public_lst_plan_rank_idx'),
            models.Index(fields=['payment_expiry_date'], name='public_lst_expiry_idx'),
        ]
        ordering = ['-priority_rank', '-created_at']


class AgentListing(ListingBase):
    """Copy of a listing owned by (and visible to) the agent who signed it up."""

    agent = models.ForeignKey(
        'agents.Agent',
        on_delete=models.PROTECT,
        related_name='listings'
    )
    # Explicit link to the public copy, written when the listing is published
    public_listing = models.OneToOneField(
        PublicListing,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='agent_listing'
    )

    class Meta:
        db_table = 'agent_listings'
        indexes = [
            models.Index(fields=['agent', '-created_at'], name='agent_lst_agent_idx'),
            models.Index(fields=['payment_status'], name='agent_lst_status_idx'),
            models.Index(fields=['district', 'last_payment_date'], name='agent_lst_district_idx'),
        ]
        ordering = ['-created_at']


class PaymentPeriod(models.Model):
    """
    A paid year that a renewal has since replaced on the listing.

    The listing copies always carry the current booking. Renewing moves the
    previous one here, so deleting a listing can reverse every year it was
    paid for and the ledger rebuilds can count them.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    agent_listing = models.ForeignKey(
        AgentListing,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='payment_periods'
    )
    public_listing = models.ForeignKey(
        PublicListing,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='payment_periods'
    )

    plan_type = models.CharField(max_length=20, choices=PlanCode.choices)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    commission = models.DecimalField(max_digits=10, decimal_places=2)
    # Revenue row key, already normalized
    district = models.CharField(max_length=100)
    payment_mode = models.CharField(
        max_length=10,
        choices=PaymentMode.choices,
        default=PaymentMode.NONE
    )
    receipt_no = models.CharField(max_length=40, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    expired_at = models.DateTimeField(null=True, blank=True)
    renewed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'listing_payment_periods'
        indexes = [
            models.Index(fields=['paid_at'], name='payment_period_paid_idx'),
        ]
        ordering = ['paid_at']

    def __str__(self):
        return f"{self.plan_type} {self.amount} ({self.district})"
