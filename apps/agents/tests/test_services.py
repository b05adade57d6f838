"""
Service layer tests for agent balances.

Tests cover:
- Commission credit and clamped reversal
- Recalculating shop counts and earnings from listings
"""

import pytest
from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

from django.test import override_settings
from django.utils import timezone

from apps.agents.models import Agent
from apps.agents.services import (
    credit_commission,
    reverse_commission,
    expected_balances,
    recalculate_agent_stats,
    recalculate_agent_earnings,
    AgentNotFoundError,
)
from apps.listings.models import AgentListing, PublicListing
from apps.listings.services import mark_paid, renew_listing


@pytest.mark.django_db
class TestAgentModel:

    def test_agent_code_is_upper_cased(self, db):
        agent = Agent.objects.create(
            name='Mohan Lal',
            phone='9000000009',
            email='mohan@example.com',
            agent_code=' ag010 ',
        )
        assert agent.agent_code == 'AG010'
        assert str(agent) == 'Mohan Lal (AG010)'


@pytest.mark.django_db
class TestCommissionLedger:

    def test_credit(self, agent):
        credit_commission(agent=agent, commission=Decimal('600'))
        credit_commission(agent=agent, commission=Decimal('20'))

        agent.refresh_from_db()
        assert agent.total_earnings == Decimal('620')
        assert agent.total_shops == 0

    def test_reverse_within_balance(self, agent):
        Agent.objects.filter(pk=agent.pk).update(total_earnings=Decimal('620'), total_shops=2)

        reversal = reverse_commission(agent=agent, commission=Decimal('600'))

        assert reversal.reversed == Decimal('600')
        assert reversal.clamped is False
        agent.refresh_from_db()
        assert agent.total_earnings == Decimal('20')
        assert agent.total_shops == 1

    def test_reverse_clamps_at_zero(self, agent):
        Agent.objects.filter(pk=agent.pk).update(total_earnings=Decimal('50'))

        reversal = reverse_commission(agent=agent, commission=Decimal('600'))

        assert reversal.clamped is True
        assert reversal.reversed == Decimal('50')
        assert reversal.available == Decimal('50')
        agent.refresh_from_db()
        assert agent.total_earnings == Decimal('0')
        assert agent.total_shops == 0

    def test_reverse_keeps_shop(self, agent):
        Agent.objects.filter(pk=agent.pk).update(total_earnings=Decimal('620'), total_shops=2)

        reverse_commission(agent=agent, commission=Decimal('20'), release_shop=False)

        agent.refresh_from_db()
        assert agent.total_earnings == Decimal('600')
        assert agent.total_shops == 2


@pytest.mark.django_db
class TestRecalculateAgentStats:

    def test_no_drift(self, agent, make_listing):
        listing = make_listing()
        mark_paid(listing_id=listing.id, plan_type='PREMIUM')

        assert recalculate_agent_stats() == []

    def test_repairs_drift(self, agent, other_agent, make_listing):
        paid = make_listing()
        make_listing(shop_name='Second Shop')
        mark_paid(listing_id=paid.id, plan_type='PREMIUM')
        Agent.objects.filter(pk=agent.pk).update(total_earnings=Decimal('5'), total_shops=7)

        drifts = recalculate_agent_stats()

        assert len(drifts) == 1
        drift = drifts[0]
        assert drift.agent == agent
        assert drift.old_shops == 7
        assert drift.new_shops == 2
        assert drift.old_earnings == Decimal('5')
        assert drift.new_earnings == Decimal('600')
        assert drift.paid_listings == 1

        agent.refresh_from_db()
        assert agent.total_shops == 2
        assert agent.total_earnings == Decimal('600')

    def test_dry_run_reports_only(self, agent, make_listing):
        listing = make_listing()
        mark_paid(listing_id=listing.id)
        Agent.objects.filter(pk=agent.pk).update(total_earnings=Decimal('0'))

        drifts = recalculate_agent_stats(apply=False)

        assert len(drifts) == 1
        agent.refresh_from_db()
        assert agent.total_earnings == Decimal('0')

    def test_single_agent(self, agent, other_agent):
        Agent.objects.update(total_shops=3)

        drifts = recalculate_agent_stats(agent=other_agent)

        assert [d.agent for d in drifts] == [other_agent]
        agent.refresh_from_db()
        assert agent.total_shops == 3

    def test_public_only_listings_count_towards_earnings(self, agent):
        public = PublicListing.objects.create(
            shop_name='Gupta Sweets',
            owner_name='Ramesh Gupta',
            category='Sweets',
            district='Gaya',
            created_by_agent=agent,
        )
        mark_paid(listing_id=public.id, plan_type='HERO')

        shops, earnings, paid = expected_balances(agent)

        assert shops == 0
        assert earnings == Decimal('1198')
        assert paid == 1

    def test_creator_listings_follow_policy(self, agent, agent_user):
        public = PublicListing.objects.create(
            shop_name='Verma Electronics',
            owner_name='Sunil Verma',
            category='Electronics',
            created_by_admin=agent_user,
        )
        mark_paid(listing_id=public.id)

        assert expected_balances(agent)[1] == Decimal('0')
        with override_settings(CREDIT_COMMISSION_TO_CREATOR=True):
            assert expected_balances(agent)[1] == Decimal('20')

    def test_renewed_years_count_towards_earnings(self, agent, make_listing):
        listing = make_listing()
        mark_paid(listing_id=listing.id, plan_type='BASIC')
        AgentListing.objects.filter(pk=listing.pk).update(
            payment_expiry_date=timezone.now() - timedelta(days=1)
        )
        renew_listing(listing_id=listing.id, plan_type='PREMIUM')
        Agent.objects.filter(pk=agent.pk).update(total_earnings=Decimal('0'))

        drifts = recalculate_agent_stats()

        assert drifts[0].new_earnings == Decimal('620')
        assert drifts[0].paid_listings == 1
        agent.refresh_from_db()
        assert agent.total_earnings == Decimal('620')

    def test_missing_commission_uses_plan_rate(self, agent, make_listing):
        listing = make_listing()
        mark_paid(listing_id=listing.id, plan_type='PREMIUM', amount=Decimal('2000'))
        AgentListing.objects.filter(pk=listing.pk).update(agent_commission=None)

        assert expected_balances(agent)[1] == Decimal('400')


@pytest.mark.django_db
class TestRecalculateAgentEarnings:

    def test_rebuilds_earnings_only(self, agent, make_listing):
        listing = make_listing()
        mark_paid(listing_id=listing.id, plan_type='BANNER')
        Agent.objects.filter(pk=agent.pk).update(total_earnings=Decimal('0'), total_shops=9)

        drift = recalculate_agent_earnings(agent_id=agent.id)

        assert drift.old_earnings == Decimal('0')
        assert drift.new_earnings == Decimal('958')
        agent.refresh_from_db()
        assert agent.total_earnings == Decimal('958')
        assert agent.total_shops == 9

    @pytest.mark.parametrize('agent_id', [uuid4(), 'not-a-uuid'])
    def test_unknown_agent(self, db, agent_id):
        with pytest.raises(AgentNotFoundError):
            recalculate_agent_earnings(agent_id=agent_id)
