"""
Serializers for the revenue app.

Input Serializers:
    RevenueQuerySerializer - Report filters
    RebuildInputSerializer - Ledger rebuild scope

Output Serializers:
    RevenueLedgerSerializer - One (date, district) row
"""

from rest_framework import serializers

from .models import RevenueLedger
from .services import VALID_PERIODS


# =============================================================================
# Input Serializers
# =============================================================================

class RevenueQuerySerializer(serializers.Serializer):
    """
    Validate revenue report query parameters.

    Query Parameters:
        district (str): District name, or 'all'
        start_date (date): Start of date range
        end_date (date): End of date range
        period (str): all, today, week, month or year; ignored with dates
    """

    district = serializers.CharField(required=False, allow_blank=True)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    period = serializers.ChoiceField(choices=VALID_PERIODS, required=False, default='all')

    def validate(self, attrs):
        """Validate date range."""
        start_date = attrs.get('start_date')
        end_date = attrs.get('end_date')

        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError({
                'end_date': 'End date must be after start date'
            })

        return attrs


class RebuildInputSerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    district = serializers.CharField(required=False, allow_blank=True)
    dry_run = serializers.BooleanField(required=False, default=False)


# =============================================================================
# Output Serializers
# =============================================================================

class RevenueLedgerSerializer(serializers.ModelSerializer):
    per_plan_revenue = serializers.DictField(read_only=True)
    per_plan_count = serializers.DictField(read_only=True)

    class Meta:
        model = RevenueLedger
        fields = [
            'id',
            'date',
            'district',
            'per_plan_revenue',
            'per_plan_count',
            'total_revenue',
            'total_agent_commission',
            'net_revenue',
            'updated_at',
        ]
        read_only_fields = fields
