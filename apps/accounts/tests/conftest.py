import pytest

from apps.accounts.models import User, UserRole
from apps.agents.models import Agent


@pytest.fixture
def admin_user(db):
    """Create and return a user with the admin role."""
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def staff_user(db):
    """Create and return a staff operator."""
    return User.objects.create_user(
        email='staff@example.com',
        password='TestPass123!',
        role=UserRole.OPERATOR,
        is_staff=True,
    )


@pytest.fixture
def operator_user(db):
    """Create and return an operator without staff access."""
    return User.objects.create_user(
        email='operator@example.com',
        password='TestPass123!',
        role=UserRole.OPERATOR,
    )


@pytest.fixture
def agent_user(db):
    """Create and return a user linked to an agent profile."""
    user = User.objects.create_user(
        email='agent@example.com',
        password='TestPass123!',
        role=UserRole.AGENT,
    )
    Agent.objects.create(
        user=user,
        name='Ravi Kumar',
        phone='9000000001',
        email='ravi@example.com',
        agent_code='AG001',
    )
    return user
