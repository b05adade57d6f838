"""
Custom permission classes for the listings app.

Permission Classes:
    CanManageListing - Admins, or the agent who owns the listing
"""

from rest_framework.permissions import BasePermission

from apps.accounts.permissions import agent_for_user
from .services.listing_lookup import resolve_owning_agent


class CanManageListing(BasePermission):
    """
    Object permission on a ListingPair.

    Allows if:
    - User is an admin (staff or admin role)
    - User's agent profile is the agent the listing is attributed to

    Usage:
        pair = get_listing_pair(listing_id=pk)
        self.check_object_permissions(request, pair)
    """

    message = 'You do not have permission to manage this listing.'

    def has_object_permission(self, request, view, obj):
        user = request.user
        if user.is_admin_role:
            return True

        agent = agent_for_user(user)
        if agent is None:
            return False
        owner = resolve_owning_agent(obj)
        return owner is not None and owner.pk == agent.pk
