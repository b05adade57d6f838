import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.agents.models import Agent
from apps.listings.services import register_listing, mark_paid


def authenticate(client, user):
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def admin_user(db):
    """Create and return an admin user."""
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def agent_user(db):
    """Create and return an agent user."""
    return User.objects.create_user(
        email='agent@example.com',
        password='TestPass123!',
        role=UserRole.AGENT,
    )


@pytest.fixture
def agent(agent_user):
    """Create and return the agent profile for agent_user."""
    return Agent.objects.create(
        user=agent_user,
        name='Ravi Kumar',
        phone='9000000001',
        email='ravi@example.com',
        agent_code='AG001',
    )


@pytest.fixture
def paid_listing(agent):
    """Factory registering a listing and marking it PAID."""
    def _paid_listing(plan_type='BASIC', district='Patna', amount=None):
        listing = register_listing(
            agent=agent,
            shop_name='Sharma General Store',
            owner_name='Anil Sharma',
            category='Grocery',
            district=district,
        )
        return mark_paid(listing_id=listing.id, plan_type=plan_type, amount=amount).listing
    return _paid_listing


@pytest.fixture
def admin_client(api_client, admin_user):
    """Return API client authenticated as admin."""
    return authenticate(api_client, admin_user)


@pytest.fixture
def agent_client(agent_user, agent):
    """Return API client authenticated as agent."""
    return authenticate(APIClient(), agent_user)
