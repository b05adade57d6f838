from django.db import models
from decimal import Decimal
import uuid

from apps.listings.plans import PLAN_CATALOG


def revenue_field(plan_code):
    return f"{plan_code.lower()}_plan_revenue"


def count_field(plan_code):
    return f"{plan_code.lower()}_plan_count"


def _money():
    return models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))


class RevenueLedger(models.Model):
    """
    Aggregate plan revenue for one day in one district.

    Rows are created on the first payment of the day in a district and are
    only ever changed by single ``UPDATE ... SET x = x + delta`` statements
    (see ``apps.revenue.services.ledger``), which keeps
    ``net_revenue == total_revenue - total_agent_commission`` on every row.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    date = models.DateField()
    # Stored upper-case
    district = models.CharField(max_length=100)

    basic_plan_revenue = _money()
    basic_plan_count = models.PositiveIntegerField(default=0)
    premium_plan_revenue = _money()
    premium_plan_count = models.PositiveIntegerField(default=0)
    featured_plan_revenue = _money()
    featured_plan_count = models.PositiveIntegerField(default=0)
    left_bar_plan_revenue = _money()
    left_bar_plan_count = models.PositiveIntegerField(default=0)
    right_bar_plan_revenue = _money()
    right_bar_plan_count = models.PositiveIntegerField(default=0)
    banner_plan_revenue = _money()
    banner_plan_count = models.PositiveIntegerField(default=0)
    hero_plan_revenue = _money()
    hero_plan_count = models.PositiveIntegerField(default=0)

    total_revenue = _money()
    total_agent_commission = _money()
    net_revenue = _money()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'revenue_ledger'
        constraints = [
            models.UniqueConstraint(
                fields=['date', 'district'],
                name='unique_revenue_date_district'
            ),
        ]
        indexes = [
            models.Index(fields=['-date'], name='revenue_date_idx'),
            models.Index(fields=['district', '-date'], name='revenue_district_date_idx'),
        ]
        ordering = ['-date', 'district']

    def __str__(self):
        return f"{self.date} {self.district}: {self.total_revenue}"

    @property
    def per_plan_revenue(self):
        return {code: getattr(self, revenue_field(code)) for code in PLAN_CATALOG}

    @property
    def per_plan_count(self):
        return {code: getattr(self, count_field(code)) for code in PLAN_CATALOG}

    @property
    def is_balanced(self):
        return self.net_revenue == self.total_revenue - self.total_agent_commission
