# ==========================================
# apps/listings/admin.py
# ==========================================

from django.contrib import admin, messages
from django.utils.html import format_html

from .models import AgentListing, PublicListing, PaymentPeriod, PaymentStatus
from .services import delete_listing, expire_listings


def payment_status_badge(obj):
    """Display payment status as colored badge."""
    colors = {
        PaymentStatus.PENDING: ('#E5C49A', '#2C1810'),
        PaymentStatus.PAID: ('#6B8E5E', 'white'),
    }
    bg, fg = colors.get(obj.payment_status, ('#ccc', '#666'))
    return format_html(
        '<span style="background: {}; color: {}; padding: 3px 8px; '
        'border-radius: 10px; font-size: 11px;">{}</span>',
        bg, fg, obj.get_payment_status_display()
    )
payment_status_badge.short_description = 'Payment'


# Payment, plan and placement fields are owned by the reconcilers. District
# keys the revenue row a payment was booked under.
PAYMENT_READONLY = [
    'payment_status',
    'plan_type',
    'district',
    'payment_mode',
    'receipt_no',
    'agent_commission',
    'plan_amount',
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


class PaymentPeriodInline(admin.TabularInline):
    """Earlier paid years, read only."""
    model = PaymentPeriod
    extra = 0
    can_delete = False
    fields = [
        'plan_type', 'amount', 'commission', 'district',
        'payment_mode', 'receipt_no', 'paid_at', 'expired_at', 'renewed_at',
    ]
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


class AgentPaymentPeriodInline(PaymentPeriodInline):
    fk_name = 'agent_listing'


class PublicPaymentPeriodInline(PaymentPeriodInline):
    fk_name = 'public_listing'


class ReconciledDeleteMixin:
    """
    Route admin deletes through the deletion reconciler so paid listings
    give their commission and revenue back.
    """

    def delete_model(self, request, obj):
        result = delete_listing(listing_id=obj.pk)
        for warning in result.warnings:
            self.message_user(request, str(warning), messages.WARNING)

    def delete_queryset(self, request, queryset):
        for pk in list(queryset.values_list('pk', flat=True)):
            self.delete_model(request, queryset.model(pk=pk))


@admin.register(AgentListing)
class AgentListingAdmin(ReconciledDeleteMixin, admin.ModelAdmin):
    list_display = [
        'shop_name',
        'owner_name',
        'agent',
        'district',
        'plan_type',
        payment_status_badge,
        'agent_commission',
        'last_payment_date',
    ]
    list_filter = ['payment_status', 'plan_type', 'district', 'created_at']
    search_fields = ['shop_name', 'owner_name', 'mobile', 'agent__agent_code', 'agent__name']
    readonly_fields = PAYMENT_READONLY
    raw_id_fields = ['agent', 'public_listing']
    inlines = [AgentPaymentPeriodInline]


@admin.register(PublicListing)
class PublicListingAdmin(ReconciledDeleteMixin, admin.ModelAdmin):
    list_display = [
        'shop_name',
        'owner_name',
        'created_by_agent',
        'district',
        'plan_type',
        payment_status_badge,
        'is_visible',
        'payment_expiry_date',
    ]
    list_filter = ['payment_status', 'plan_type', 'is_visible', 'district']
    search_fields = ['shop_name', 'owner_name', 'mobile']
    readonly_fields = PAYMENT_READONLY
    raw_id_fields = ['created_by_agent', 'created_by_admin']
    inlines = [PublicPaymentPeriodInline]
    actions = ['hide_expired']

    @admin.action(description='Hide all expired listings')
    def hide_expired(self, request, queryset):
        hidden = expire_listings()
        self.message_user(request, f'{hidden} expired listing(s) hidden.')
