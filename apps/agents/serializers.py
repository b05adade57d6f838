from rest_framework import serializers

from .models import Agent


class AgentSerializer(serializers.ModelSerializer):
    """Agent with running balances. Balances are read-only."""

    class Meta:
        model = Agent
        fields = [
            'id',
            'user',
            'name',
            'phone',
            'email',
            'agent_code',
            'total_shops',
            'total_earnings',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class AgentStatsDriftSerializer(serializers.Serializer):
    agent_id = serializers.UUIDField()
    agent_code = serializers.CharField()
    old_shops = serializers.IntegerField()
    new_shops = serializers.IntegerField()
    old_earnings = serializers.DecimalField(max_digits=12, decimal_places=2)
    new_earnings = serializers.DecimalField(max_digits=12, decimal_places=2)
    paid_listings = serializers.IntegerField()


class RecalculateStatsResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    total_agents = serializers.IntegerField()
    updated_agents = serializers.IntegerField()
    updates = AgentStatsDriftSerializer(many=True)
