"""
Serializers for the listings app.

Input Serializers:
    ListingCreateInputSerializer - Listing sign-up payload
    MarkPaymentInputSerializer - Payment payload for mark-payment-done
    RenewListingInputSerializer - Payment payload for renew

Output Serializers:
    PlanSerializer - Plan catalog entry
    AgentListingSerializer / PublicListingSerializer - Listing copies
    PaymentPeriodSerializer - Earlier paid year of a renewed listing
    MarkPaymentResponseSerializer / DeleteListingResponseSerializer
"""

from rest_framework import serializers

from .models import AgentListing, PublicListing, PaymentMode, PaymentPeriod


# =============================================================================
# Input Serializers
# =============================================================================

class ListingCreateInputSerializer(serializers.Serializer):
    """
    Validate input for registering a listing.

    ``agent`` is required when an admin registers on behalf of an agent and
    ignored for agent users, who always register for themselves.
    """

    agent = serializers.UUIDField(required=False)
    shop_name = serializers.CharField(max_length=200)
    owner_name = serializers.CharField(max_length=100)
    category = serializers.CharField(max_length=100)
    mobile = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    email = serializers.EmailField(required=False, allow_blank=True, default='')
    address = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    area = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    pincode = serializers.CharField(max_length=10, required=False, allow_blank=True, default='')
    district = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    latitude = serializers.FloatField(required=False, allow_null=True, default=None)
    longitude = serializers.FloatField(required=False, allow_null=True, default=None)
    photo_url = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    plan_type = serializers.CharField(max_length=20, required=False, allow_blank=True)
    publish = serializers.BooleanField(required=False, default=True)


class MarkPaymentInputSerializer(serializers.Serializer):
    """
    Validate input for marking a listing as paid.

    ``plan_type`` is passed through as-is; unknown codes are rejected by the
    plan catalog so the error message lists the code that was sent.
    """

    plan_type = serializers.CharField(max_length=20, required=False, allow_blank=True)
    amount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True
    )
    payment_mode = serializers.ChoiceField(
        choices=[PaymentMode.CASH, PaymentMode.UPI],
        required=False
    )
    receipt_no = serializers.CharField(max_length=40, required=False, allow_blank=True)
    district = serializers.CharField(max_length=100, required=False, allow_blank=True)
    whatsapp_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    additional_photos = serializers.ListField(
        child=serializers.CharField(max_length=500),
        required=False
    )
    offers = serializers.ListField(child=serializers.JSONField(), required=False)
    shop_logo = serializers.CharField(max_length=500, required=False, allow_blank=True)


class RenewListingInputSerializer(MarkPaymentInputSerializer):
    """
    Validate input for renewing an expired listing.

    Same fields as a payment; ``plan_type`` defaults to the current plan.
    """
    pass


# =============================================================================
# Output Serializers
# =============================================================================

class PlanSerializer(serializers.Serializer):
    """Plan catalog entry."""

    code = serializers.CharField()
    name = serializers.CharField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    commission_rate = serializers.DecimalField(max_digits=4, decimal_places=2)
    commission = serializers.SerializerMethodField()
    priority_rank = serializers.IntegerField()
    placement_slot = serializers.CharField()
    max_photos = serializers.IntegerField()
    has_offers = serializers.BooleanField()
    has_whatsapp = serializers.BooleanField()
    has_logo = serializers.BooleanField()

    def get_commission(self, plan):
        return str(plan.commission_for(plan.amount))


LISTING_FIELDS = [
    'id',
    'shop_name',
    'owner_name',
    'mobile',
    'email',
    'category',
    'address',
    'area',
    'pincode',
    'district',
    'latitude',
    'longitude',
    'photo_url',
    'additional_photos',
    'offers',
    'whatsapp_number',
    'shop_logo',
    'plan_type',
    'plan_amount',
    'payment_status',
    'payment_mode',
    'receipt_no',
    'agent_commission',
    'last_payment_date',
    'payment_expiry_date',
    'priority_rank',
    'placement_slot',
    'is_home_page_banner',
    'is_top_slider',
    'is_left_bar',
    'is_right_bar',
    'is_hero',
    'created_at',
    'updated_at',
]


class AgentListingSerializer(serializers.ModelSerializer):
    """Agent-scoped copy of a listing."""

    store = serializers.SerializerMethodField()
    agent_code = serializers.CharField(source='agent.agent_code', read_only=True)

    class Meta:
        model = AgentListing
        fields = LISTING_FIELDS + ['store', 'agent', 'agent_code', 'public_listing']
        read_only_fields = fields

    def get_store(self, obj):
        return 'agent'


class PublicListingSerializer(serializers.ModelSerializer):
    """Public copy of a listing."""

    store = serializers.SerializerMethodField()

    class Meta:
        model = PublicListing
        fields = LISTING_FIELDS + ['store', 'created_by_agent', 'created_by_admin', 'is_visible']
        read_only_fields = fields

    def get_store(self, obj):
        return 'public'


def serialize_listing(listing):
    """Serialize either copy with the matching serializer."""
    if isinstance(listing, AgentListing):
        return AgentListingSerializer(listing).data
    return PublicListingSerializer(listing).data


class ErrorSerializer(serializers.Serializer):
    """Standard error response serializer."""
    error = serializers.CharField()


class MarkPaymentResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    listing = serializers.DictField()
    commission = serializers.DecimalField(max_digits=10, decimal_places=2)
    receipt = serializers.DictField()
    warnings = serializers.ListField(child=serializers.CharField())


class DeductionsSerializer(serializers.Serializer):
    commission_deducted = serializers.DecimalField(max_digits=10, decimal_places=2)
    revenue_deducted = serializers.DecimalField(max_digits=10, decimal_places=2)
    agent_name = serializers.CharField(allow_null=True)
    agent_code = serializers.CharField(allow_null=True)


class DeleteListingResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    deductions = DeductionsSerializer()
    warnings = serializers.ListField(child=serializers.CharField())


class PaymentPeriodSerializer(serializers.ModelSerializer):
    """Earlier paid year of a renewed listing."""

    class Meta:
        model = PaymentPeriod
        fields = [
            'id',
            'plan_type',
            'amount',
            'commission',
            'district',
            'payment_mode',
            'receipt_no',
            'paid_at',
            'expired_at',
            'renewed_at',
        ]
        read_only_fields = fields


class RenewListingResponseSerializer(MarkPaymentResponseSerializer):
    previous_period = PaymentPeriodSerializer()
