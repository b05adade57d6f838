"""
Role-based permission classes shared by the API apps.

Permission Classes:
    IsAdminRole - Staff users and users with the admin role
    IsAdminOrAgent - Admins, or users linked to an agent profile

Usage:
    from apps.accounts.permissions import IsAdminRole

    @api_view(['POST'])
    @permission_classes([IsAuthenticated, IsAdminRole])
    def rebuild(request):
        ...
"""

from rest_framework.permissions import BasePermission


def agent_for_user(user):
    """Agent profile linked to ``user``, or None."""
    from apps.agents.models import Agent

    if not user or not user.is_authenticated:
        return None
    return Agent.objects.filter(user=user).first()


class IsAdminRole(BasePermission):
    """Allow staff users and users whose role is admin."""

    message = 'Admin access required.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin_role)


class IsAdminOrAgent(BasePermission):
    """Allow admins and users linked to an agent profile."""

    message = 'You must be an admin or a registered agent.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if user.is_admin_role:
            return True
        return agent_for_user(user) is not None
