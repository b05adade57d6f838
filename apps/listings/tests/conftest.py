import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.agents.models import Agent
from apps.listings.models import PublicListing
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
        is_staff=True,
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
def other_agent_user(db):
    """Create and return a second agent user."""
    return User.objects.create_user(
        email='agent2@example.com',
        password='TestPass123!',
        display_name='Other Agent',
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
        agent_code='ag001',
    )


@pytest.fixture
def other_agent(other_agent_user):
    """Create and return a second agent."""
    return Agent.objects.create(
        user=other_agent_user,
        name='Sita Devi',
        phone='9000000002',
        email='sita@example.com',
        agent_code='AG002',
    )


@pytest.fixture
def pending_listing(agent):
    """PENDING listing registered by agent, with both copies."""
    return register_listing(
        agent=agent,
        shop_name='Sharma General Store',
        owner_name='Anil Sharma',
        category='Grocery',
        mobile='9123456780',
        district='Patna',
    )


@pytest.fixture
def public_only_listing(agent):
    """PENDING public listing attributed to agent with no agent copy."""
    return PublicListing.objects.create(
        shop_name='Gupta Sweets',
        owner_name='Ramesh Gupta',
        category='Sweets',
        mobile='9123456781',
        district='Gaya',
        created_by_agent=agent,
    )


@pytest.fixture
def admin_created_listing(agent_user):
    """PENDING public listing whose only reference is the creating user."""
    return PublicListing.objects.create(
        shop_name='Verma Electronics',
        owner_name='Sunil Verma',
        category='Electronics',
        mobile='9123456782',
        district='Patna',
        created_by_admin=agent_user,
    )


@pytest.fixture
def admin_client(api_client, admin_user):
    """Return API client authenticated as admin."""
    return authenticate(api_client, admin_user)


@pytest.fixture
def agent_client(agent_user, agent):
    """Return API client authenticated as agent."""
    return authenticate(APIClient(), agent_user)


@pytest.fixture
def other_agent_client(other_agent_user, other_agent):
    """Return API client authenticated as the second agent."""
    return authenticate(APIClient(), other_agent_user)


@pytest.fixture
def unlinked_client(agent_user):
    """Return API client for an agent-role user with no agent profile."""
    return authenticate(APIClient(), agent_user)
