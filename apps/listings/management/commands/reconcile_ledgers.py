"""
Management command to rebuild the agent and revenue ledgers from listings.

Payment and deletion keep the ledgers current with relative updates. A
ledger write that failed part-way leaves drift behind; this command finds
it and repairs it from the PAID listings.

Usage:
    python manage.py reconcile_ledgers
    python manage.py reconcile_ledgers --dry-run
    python manage.py reconcile_ledgers --start-date 2025-01-01 --district patna
"""

from datetime import date

from django.core.management.base import BaseCommand, CommandError

from apps.agents.services import recalculate_agent_stats
from apps.revenue.services import rebuild_revenue_ledger, RevenueServiceError


class Command(BaseCommand):
    help = 'Recompute agent balances and revenue rows from PAID listings'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be updated without making changes',
        )
        parser.add_argument(
            '--start-date',
            type=date.fromisoformat,
            help='First revenue day to check (YYYY-MM-DD)',
        )
        parser.add_argument(
            '--end-date',
            type=date.fromisoformat,
            help='Last revenue day to check (YYYY-MM-DD)',
        )
        parser.add_argument(
            '--district',
            help='Only check revenue rows for this district',
        )
        parser.add_argument(
            '--skip-agents',
            action='store_true',
            help='Do not check agent balances',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        apply = not dry_run

        if not options['skip_agents']:
            drifts = recalculate_agent_stats(apply=apply)
            if drifts:
                self.stdout.write(f'\nFound {len(drifts)} agent(s) with drifted balances:\n')
                for drift in drifts:
                    self.stdout.write(
                        f'  - {drift.agent.agent_code} | shops {drift.old_shops} -> {drift.new_shops}'
                        f' | earnings {drift.old_earnings} -> {drift.new_earnings}'
                    )
            else:
                self.stdout.write(self.style.SUCCESS('Agent balances match listings.'))

        try:
            revenue_drifts = rebuild_revenue_ledger(
                start_date=options['start_date'],
                end_date=options['end_date'],
                district=options['district'],
                apply=apply,
            )
        except RevenueServiceError as e:
            raise CommandError(str(e))

        if revenue_drifts:
            self.stdout.write(f'\nFound {len(revenue_drifts)} revenue row(s) to fix:\n')
            for drift in revenue_drifts:
                detail = 'missing' if drift.missing else ', '.join(sorted(drift.fields))
                self.stdout.write(f'  - {drift.date} | {drift.district} | {detail}')
        else:
            self.stdout.write(self.style.SUCCESS('Revenue ledger matches listings.'))

        if dry_run:
            self.stdout.write(
                self.style.WARNING('\n--dry-run mode: No changes made.')
            )
            return

        self.stdout.write(self.style.SUCCESS('\nLedgers reconciled.'))
