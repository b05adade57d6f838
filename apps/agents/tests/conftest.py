import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.agents.models import Agent
from apps.listings.services import register_listing


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
        display_name='Admin',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def agent_user(db):
    """Create and return a user with an agent profile."""
    return User.objects.create_user(
        email='agent@example.com',
        password='TestPass123!',
        display_name='Field Agent',
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
def other_agent(db):
    """Create and return an agent without a dashboard login."""
    return Agent.objects.create(
        name='Sita Devi',
        phone='9000000002',
        email='sita@example.com',
        agent_code='AG002',
    )


@pytest.fixture
def make_listing(agent):
    """Factory registering PENDING listings for an agent."""
    def _make_listing(owner=None, shop_name='Sharma General Store', district='Patna'):
        return register_listing(
            agent=owner or agent,
            shop_name=shop_name,
            owner_name='Anil Sharma',
            category='Grocery',
            mobile='9123456780',
            district=district,
        )
    return _make_listing


@pytest.fixture
def admin_client(api_client, admin_user):
    """Return API client authenticated as admin."""
    return authenticate(api_client, admin_user)


@pytest.fixture
def agent_client(agent_user, agent):
    """Return API client authenticated as agent."""
    return authenticate(APIClient(), agent_user)
