import pytest
from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from apps.agents.models import Agent
from apps.listings.models import AgentListing, PublicListing, PaymentStatus
from apps.listings.services import mark_paid
from apps.revenue.models import RevenueLedger


# =============================================================================
# Plan Catalog
# =============================================================================

@pytest.mark.django_db
class TestPlans:
    """Tests for GET /api/listings/plans/"""

    def test_list_plans(self, agent_client):
        url = reverse('listings:listing-plans')
        response = agent_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 7
        premium = response.data[1]
        assert premium['code'] == 'PREMIUM'
        assert premium['amount'] == '2999.00'
        assert premium['commission'] == '600'

    def test_plans_unauthenticated(self, api_client):
        url = reverse('listings:listing-plans')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Registration
# =============================================================================

@pytest.mark.django_db
class TestListingCreate:
    """Tests for POST /api/listings/"""

    def test_agent_registers_listing(self, agent_client, agent):
        url = reverse('listings:listing-list')
        data = {
            'shop_name': 'Kumar Hardware',
            'owner_name': 'Vijay Kumar',
            'category': 'Hardware',
            'district': 'Patna',
            'plan_type': 'PREMIUM',
        }
        response = agent_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['store'] == 'agent'
        assert response.data['payment_status'] == PaymentStatus.PENDING
        assert response.data['agent_code'] == 'AG001'

        listing = AgentListing.objects.get(id=response.data['id'])
        assert listing.agent == agent
        assert listing.public_listing is not None
        agent.refresh_from_db()
        assert agent.total_shops == 1

    def test_agent_cannot_register_for_other_agent(self, agent_client, agent, other_agent):
        """The agent field is ignored for agent users."""
        url = reverse('listings:listing-list')
        data = {
            'agent': str(other_agent.id),
            'shop_name': 'Kumar Hardware',
            'owner_name': 'Vijay Kumar',
            'category': 'Hardware',
        }
        response = agent_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert AgentListing.objects.get(id=response.data['id']).agent == agent

    def test_admin_registers_for_agent(self, admin_client, admin_user, agent):
        url = reverse('listings:listing-list')
        data = {
            'agent': str(agent.id),
            'shop_name': 'Kumar Hardware',
            'owner_name': 'Vijay Kumar',
            'category': 'Hardware',
        }
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        listing = AgentListing.objects.get(id=response.data['id'])
        assert listing.agent == agent
        assert listing.public_listing.created_by_admin == admin_user

    def test_admin_must_name_agent(self, admin_client):
        url = reverse('listings:listing-list')
        data = {'shop_name': 'Shop', 'owner_name': 'Owner', 'category': 'Misc'}
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'agent is required' in response.data['error']

    def test_admin_unknown_agent(self, admin_client):
        url = reverse('listings:listing-list')
        data = {
            'agent': str(uuid4()),
            'shop_name': 'Shop',
            'owner_name': 'Owner',
            'category': 'Misc',
        }
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_invalid_plan(self, agent_client):
        url = reverse('listings:listing-list')
        data = {
            'shop_name': 'Shop',
            'owner_name': 'Owner',
            'category': 'Misc',
            'plan_type': 'GOLD',
        }
        response = agent_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'GOLD' in response.data['error']

    def test_user_without_agent_profile(self, unlinked_client):
        """Agent-role users need an agent profile to use the listing API."""
        url = reverse('listings:listing-list')
        data = {'shop_name': 'Shop', 'owner_name': 'Owner', 'category': 'Misc'}
        response = unlinked_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Retrieve
# =============================================================================

@pytest.mark.django_db
class TestListingRetrieve:
    """Tests for GET /api/listings/{id}/"""

    def test_retrieve_by_public_id(self, agent_client, pending_listing):
        """Either id resolves to the agent copy."""
        url = reverse('listings:listing-detail', args=[pending_listing.public_listing_id])
        response = agent_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['store'] == 'agent'
        assert response.data['id'] == str(pending_listing.id)

    def test_retrieve_public_only(self, admin_client, public_only_listing):
        url = reverse('listings:listing-detail', args=[public_only_listing.id])
        response = admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['store'] == 'public'
        assert response.data['is_visible'] is True

    def test_retrieve_not_found(self, admin_client):
        url = reverse('listings:listing-detail', args=[uuid4()])
        response = admin_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert 'error' in response.data

    def test_retrieve_other_agents_listing(self, other_agent_client, pending_listing):
        url = reverse('listings:listing-detail', args=[pending_listing.id])
        response = other_agent_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Mark Payment Done
# =============================================================================

@pytest.mark.django_db
class TestMarkPaymentDone:
    """Tests for POST /api/listings/{id}/mark-payment-done/"""

    def test_mark_paid(self, agent_client, pending_listing, agent):
        url = reverse('listings:listing-mark-payment-done', args=[pending_listing.id])
        data = {'plan_type': 'BASIC', 'amount': '100', 'payment_mode': 'UPI'}
        response = agent_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert response.data['commission'] == Decimal('20')
        assert response.data['listing']['payment_status'] == PaymentStatus.PAID
        assert response.data['listing']['payment_mode'] == 'UPI'
        assert response.data['receipt']['shop_name'] == 'Sharma General Store'
        assert response.data['receipt']['receipt_no'].startswith('REC')
        assert response.data['warnings'] == []

        agent.refresh_from_db()
        assert agent.total_earnings == Decimal('20')
        assert RevenueLedger.objects.get(district='PATNA').net_revenue == Decimal('80')

    def test_mark_paid_twice(self, admin_client, pending_listing, agent):
        url = reverse('listings:listing-mark-payment-done', args=[pending_listing.id])
        admin_client.post(url, {'plan_type': 'BASIC'}, format='json')
        response = admin_client.post(url, {'plan_type': 'BASIC'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['commission'] == Decimal('0')
        assert 'already paid' in response.data['message']
        agent.refresh_from_db()
        assert agent.total_earnings == Decimal('20')

    def test_mark_paid_defaults(self, admin_client, pending_listing):
        url = reverse('listings:listing-mark-payment-done', args=[pending_listing.id])
        response = admin_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['listing']['plan_type'] == 'BASIC'
        assert response.data['listing']['payment_mode'] == 'CASH'

    def test_invalid_plan(self, admin_client, pending_listing):
        url = reverse('listings:listing-mark-payment-done', args=[pending_listing.id])
        response = admin_client.post(url, {'plan_type': 'GOLD'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'GOLD' in response.data['error']
        pending_listing.refresh_from_db()
        assert pending_listing.payment_status == PaymentStatus.PENDING

    def test_negative_amount(self, admin_client, pending_listing):
        url = reverse('listings:listing-mark-payment-done', args=[pending_listing.id])
        response = admin_client.post(url, {'amount': '-5'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_invalid_payment_mode(self, admin_client, pending_listing):
        url = reverse('listings:listing-mark-payment-done', args=[pending_listing.id])
        response = admin_client.post(url, {'payment_mode': 'CHEQUE'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_not_found(self, admin_client):
        url = reverse('listings:listing-mark-payment-done', args=[uuid4()])
        response = admin_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_other_agent_forbidden(self, other_agent_client, pending_listing, agent):
        url = reverse('listings:listing-mark-payment-done', args=[pending_listing.id])
        response = other_agent_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        pending_listing.refresh_from_db()
        assert pending_listing.payment_status == PaymentStatus.PENDING

    def test_public_only_listing_reports_missing_agent(self, admin_client, admin_created_listing):
        url = reverse('listings:listing-mark-payment-done', args=[admin_created_listing.id])
        response = admin_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['warnings']) == 1
        assert 'not credited' in response.data['warnings'][0]

    def test_plan_change_on_paid_listing(self, admin_client, pending_listing, agent):
        mark_paid(listing_id=pending_listing.id, plan_type='PREMIUM')

        url = reverse('listings:listing-mark-payment-done', args=[pending_listing.id])
        response = admin_client.post(url, {'plan_type': 'BASIC'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'renew' in response.data['error']
        assert AgentListing.objects.get(id=pending_listing.id).plan_type == 'PREMIUM'

    def test_mode_change_on_paid_listing(self, admin_client, pending_listing, agent):
        mark_paid(listing_id=pending_listing.id, plan_type='PREMIUM')

        url = reverse('listings:listing-mark-payment-done', args=[pending_listing.id])
        response = admin_client.post(url, {'payment_mode': 'UPI'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['listing']['plan_type'] == 'PREMIUM'
        assert response.data['listing']['payment_mode'] == 'UPI'
        assert RevenueLedger.objects.get(district='PATNA').total_revenue == Decimal('2999')

    def test_unauthenticated(self, api_client, pending_listing):
        url = reverse('listings:listing-mark-payment-done', args=[pending_listing.id])
        response = api_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Renewal
# =============================================================================

@pytest.mark.django_db
class TestRenew:
    """Tests for POST /api/listings/{id}/renew/"""

    def _expire(self, listing):
        past = timezone.now() - timedelta(days=1)
        AgentListing.objects.filter(id=listing.id).update(payment_expiry_date=past)
        PublicListing.objects.filter(id=listing.public_listing_id).update(payment_expiry_date=past)

    def test_renew(self, agent_client, pending_listing, agent):
        mark_paid(listing_id=pending_listing.id, plan_type='BASIC')
        self._expire(pending_listing)

        url = reverse('listings:listing-renew', args=[pending_listing.id])
        response = agent_client.post(url, {'plan_type': 'PREMIUM'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert response.data['commission'] == Decimal('600')
        assert response.data['listing']['plan_type'] == 'PREMIUM'
        assert response.data['previous_period']['plan_type'] == 'BASIC'
        assert response.data['previous_period']['amount'] == '100.00'
        assert response.data['receipt']['receipt_no'].startswith('REC')

        agent.refresh_from_db()
        assert agent.total_earnings == Decimal('620')

    def test_renew_before_expiry(self, agent_client, pending_listing):
        mark_paid(listing_id=pending_listing.id)

        url = reverse('listings:listing-renew', args=[pending_listing.id])
        response = agent_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'paid until' in response.data['error']

    def test_renew_pending_listing(self, admin_client, pending_listing):
        url = reverse('listings:listing-renew', args=[pending_listing.id])
        response = admin_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_renew_other_agents_listing(self, other_agent_client, pending_listing):
        mark_paid(listing_id=pending_listing.id)
        self._expire(pending_listing)

        url = reverse('listings:listing-renew', args=[pending_listing.id])
        response = other_agent_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_renew_not_found(self, admin_client):
        url = reverse('listings:listing-renew', args=[uuid4()])
        response = admin_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_after_renewal(self, admin_client, pending_listing, agent):
        mark_paid(listing_id=pending_listing.id, plan_type='BASIC')
        self._expire(pending_listing)
        admin_client.post(
            reverse('listings:listing-renew', args=[pending_listing.id]),
            {'plan_type': 'PREMIUM'},
            format='json'
        )

        response = admin_client.delete(reverse('listings:listing-detail', args=[pending_listing.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['deductions']['commission_deducted'] == Decimal('620')
        assert response.data['deductions']['revenue_deducted'] == Decimal('3099')
        agent.refresh_from_db()
        assert agent.total_earnings == Decimal('0')


# =============================================================================
# Delete
# =============================================================================

@pytest.mark.django_db
class TestListingDelete:
    """Tests for DELETE /api/listings/{id}/"""

    def test_delete_paid_listing(self, agent_client, pending_listing, agent):
        mark_paid(listing_id=pending_listing.id, plan_type='PREMIUM')

        url = reverse('listings:listing-detail', args=[pending_listing.id])
        response = agent_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        deductions = response.data['deductions']
        assert deductions['commission_deducted'] == Decimal('600')
        assert deductions['revenue_deducted'] == Decimal('2999')
        assert deductions['agent_code'] == 'AG001'

        assert not AgentListing.objects.filter(id=pending_listing.id).exists()
        assert not PublicListing.objects.filter(id=pending_listing.public_listing_id).exists()
        agent.refresh_from_db()
        assert agent.total_earnings == Decimal('0')

    def test_delete_reports_clamping(self, admin_client, pending_listing, agent):
        mark_paid(listing_id=pending_listing.id, plan_type='PREMIUM')
        Agent.objects.filter(pk=agent.pk).update(total_earnings=Decimal('0'))

        url = reverse('listings:listing-detail', args=[pending_listing.id])
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['deductions']['commission_deducted'] == Decimal('0')
        assert len(response.data['warnings']) == 1
        assert 'clamped to 0' in response.data['warnings'][0]

    def test_delete_other_agents_listing(self, other_agent_client, pending_listing):
        url = reverse('listings:listing-detail', args=[pending_listing.id])
        response = other_agent_client.delete(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert AgentListing.objects.filter(id=pending_listing.id).exists()

    def test_delete_not_found(self, admin_client):
        url = reverse('listings:listing-detail', args=[uuid4()])
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Expiry
# =============================================================================

@pytest.mark.django_db
class TestCheckExpiry:
    """Tests for POST /api/listings/check-expiry/"""

    def test_check_expiry(self, admin_client, pending_listing):
        mark_paid(listing_id=pending_listing.id)
        PublicListing.objects.filter(id=pending_listing.public_listing_id).update(
            payment_expiry_date=timezone.now() - timedelta(days=1)
        )

        url = reverse('listings:listing-check-expiry')
        response = admin_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['expired_count'] == 1
        assert PublicListing.objects.get(id=pending_listing.public_listing_id).is_visible is False

    def test_check_expiry_agent_forbidden(self, agent_client):
        url = reverse('listings:listing-check-expiry')
        response = agent_client.post(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
