from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsAdminOrAgent, IsAdminRole
from apps.listings.serializers import ErrorSerializer

from .models import Agent
from .serializers import (
    AgentSerializer,
    AgentStatsDriftSerializer,
    RecalculateStatsResponseSerializer,
)
from apps.agents.services import (
    recalculate_agent_stats,
    recalculate_agent_earnings,
    # Exceptions
    AgentNotFoundError,
)


class AgentViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for agents and their balances.

    list: Admins see every agent, agents see themselves
    retrieve: Get one agent
    recalculate_earnings: Rebuild one agent's earnings (admin only)
    recalculate_stats: Rebuild every agent's balances (admin only)
    """

    serializer_class = AgentSerializer
    permission_classes = [IsAuthenticated, IsAdminOrAgent]

    def get_queryset(self):
        user = self.request.user
        if user.is_admin_role:
            return Agent.objects.all()
        return Agent.objects.filter(user=user)

    def get_permissions(self):
        """Set permissions based on action."""
        if self.action in ['recalculate_earnings', 'recalculate_stats']:
            return [IsAuthenticated(), IsAdminRole()]
        return super().get_permissions()

    @extend_schema(
        request=None,
        responses={200: AgentStatsDriftSerializer, 404: ErrorSerializer},
        tags=['agents'],
    )
    @action(detail=True, methods=['post'], url_path='recalculate-earnings')
    def recalculate_earnings(self, request, pk=None):
        """
        Rebuild an agent's earnings from its PAID listings.

        POST /api/agents/{id}/recalculate-earnings/
        """
        try:
            drift = recalculate_agent_earnings(agent_id=pk)
        except AgentNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response({
            'success': True,
            'message': 'Earnings recalculated successfully',
            'agent': AgentStatsDriftSerializer(drift.as_dict()).data,
        })

    @extend_schema(
        request=None,
        responses={200: RecalculateStatsResponseSerializer},
        tags=['agents'],
    )
    @action(detail=False, methods=['post'], url_path='recalculate-stats')
    def recalculate_stats(self, request):
        """
        Rebuild shop counts and earnings for every agent.

        POST /api/agents/recalculate-stats/
        """
        drifts = recalculate_agent_stats()
        total = Agent.objects.count()

        return Response({
            'success': True,
            'message': f'Recalculated stats for {total} agents. {len(drifts)} agents were updated.',
            'total_agents': total,
            'updated_agents': len(drifts),
            'updates': AgentStatsDriftSerializer([d.as_dict() for d in drifts], many=True).data,
        })
