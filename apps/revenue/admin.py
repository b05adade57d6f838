# ==========================================
# apps/revenue/admin.py
# ==========================================

from django.contrib import admin

from .models import RevenueLedger


@admin.register(RevenueLedger)
class RevenueLedgerAdmin(admin.ModelAdmin):
    """
    Read-only view of the revenue ledger.

    Rows are written by the payment reconcilers and the rebuild command only.
    """

    list_display = [
        'date',
        'district',
        'total_revenue',
        'total_agent_commission',
        'net_revenue',
        'updated_at',
    ]
    list_filter = ['district', 'date']
    search_fields = ['district']
    date_hierarchy = 'date'
    ordering = ['-date', 'district']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
