"""Tests for the reconcile_ledgers management command."""

import pytest
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError

from apps.agents.models import Agent
from apps.listings.services import mark_paid
from apps.revenue.models import RevenueLedger


def run(*args):
    out = StringIO()
    call_command('reconcile_ledgers', *args, stdout=out)
    return out.getvalue()


@pytest.mark.django_db
class TestReconcileLedgers:

    def test_clean_ledgers(self, pending_listing):
        mark_paid(listing_id=pending_listing.id)

        output = run()

        assert 'Agent balances match listings.' in output
        assert 'Revenue ledger matches listings.' in output

    def test_repairs_both_ledgers(self, pending_listing, agent):
        mark_paid(listing_id=pending_listing.id, plan_type='PREMIUM')
        Agent.objects.filter(pk=agent.pk).update(total_earnings=Decimal('0'))
        RevenueLedger.objects.all().delete()

        output = run()

        assert 'AG001' in output
        assert 'missing' in output
        assert 'Ledgers reconciled.' in output
        agent.refresh_from_db()
        assert agent.total_earnings == Decimal('600')
        assert RevenueLedger.objects.get(district='PATNA').net_revenue == Decimal('2399')

    def test_dry_run(self, pending_listing, agent):
        mark_paid(listing_id=pending_listing.id)
        Agent.objects.filter(pk=agent.pk).update(total_earnings=Decimal('0'))
        RevenueLedger.objects.all().delete()

        output = run('--dry-run')

        assert 'No changes made' in output
        agent.refresh_from_db()
        assert agent.total_earnings == Decimal('0')
        assert RevenueLedger.objects.count() == 0

    def test_skip_agents(self, pending_listing, agent):
        mark_paid(listing_id=pending_listing.id)
        Agent.objects.filter(pk=agent.pk).update(total_earnings=Decimal('0'))

        output = run('--skip-agents')

        assert 'Agent balances' not in output
        agent.refresh_from_db()
        assert agent.total_earnings == Decimal('0')

    def test_reversed_range(self, db):
        with pytest.raises(CommandError):
            run('--start-date', '2025-03-31', '--end-date', '2025-03-01')
