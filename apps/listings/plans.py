"""
Plan Catalog
============

Static table of the yearly listing plans sold by field agents. Every
commission and entitlement decision reads from here, so the payment and the
deletion reconcilers always agree on what a plan is worth.

Example:
    Looking up a plan and its commission::

        from apps.listings.plans import get_plan

        plan = get_plan('premium')
        plan.amount                         # Decimal('2999')
        plan.commission_for(plan.amount)    # Decimal('600')
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from django.db import models

from .exceptions import InvalidPlanError


DEFAULT_PLAN_CODE = 'BASIC'


class PlanCode(models.TextChoices):
    BASIC = 'BASIC', 'Basic Plan'
    PREMIUM = 'PREMIUM', 'Premium Plan'
    FEATURED = 'FEATURED', 'Featured Plan'
    LEFT_BAR = 'LEFT_BAR', 'Left Bar Plan'
    RIGHT_BAR = 'RIGHT_BAR', 'Right Bar Plan'
    BANNER = 'BANNER', 'Banner Plan'
    HERO = 'HERO', 'Hero Plan'


class PlacementSlot(models.TextChoices):
    NONE = 'NONE', 'None'
    HOME_BANNER = 'HOME_BANNER', 'Home Page Banner'
    TOP_SLIDER = 'TOP_SLIDER', 'Top Slider'
    LEFT_BAR = 'LEFT_BAR', 'Left Bar'
    RIGHT_BAR = 'RIGHT_BAR', 'Right Bar'
    HERO = 'HERO', 'Hero'


# Listing flag field for each placement slot
PLACEMENT_FLAGS = {
    PlacementSlot.HOME_BANNER: 'is_home_page_banner',
    PlacementSlot.TOP_SLIDER: 'is_top_slider',
    PlacementSlot.LEFT_BAR: 'is_left_bar',
    PlacementSlot.RIGHT_BAR: 'is_right_bar',
    PlacementSlot.HERO: 'is_hero',
}


@dataclass(frozen=True)
class Plan:
    code: str
    name: str
    amount: Decimal
    commission_rate: Decimal
    priority_rank: int
    placement_slots: tuple = ()
    max_photos: int = 1
    has_offers: bool = False
    has_whatsapp: bool = False
    has_logo: bool = False

    @property
    def placement_slot(self):
        """Primary placement slot, ``NONE`` for plans without a placement."""
        return self.placement_slots[0] if self.placement_slots else PlacementSlot.NONE

    def commission_for(self, amount):
        """Agent commission on ``amount``, rounded half-up to whole rupees."""
        commission = Decimal(amount) * self.commission_rate
        return commission.quantize(Decimal('1'), rounding=ROUND_HALF_UP)

    def company_profit(self, amount):
        return Decimal(amount) - self.commission_for(amount)

    def placement_flags(self):
        """Values for every listing placement flag under this plan."""
        return {
            field: slot in self.placement_slots
            for slot, field in PLACEMENT_FLAGS.items()
        }


_STANDARD_RATE = Decimal('0.20')

# Catalog order is the upgrade ladder used by can_upgrade().
_PLANS = [
    Plan(
        code=PlanCode.BASIC,
        name='Basic Plan',
        amount=Decimal('100'),
        commission_rate=_STANDARD_RATE,
        priority_rank=0,
        max_photos=1,
    ),
    Plan(
        code=PlanCode.PREMIUM,
        name='Premium Plan',
        amount=Decimal('2999'),
        commission_rate=_STANDARD_RATE,
        priority_rank=10,
        max_photos=10,
        has_offers=True,
        has_whatsapp=True,
        has_logo=True,
    ),
    Plan(
        code=PlanCode.FEATURED,
        name='Featured Plan',
        amount=Decimal('2388'),
        commission_rate=_STANDARD_RATE,
        priority_rank=100,
        placement_slots=(PlacementSlot.HOME_BANNER, PlacementSlot.TOP_SLIDER),
        max_photos=10,
        has_offers=True,
        has_whatsapp=True,
        has_logo=True,
    ),
    Plan(
        code=PlanCode.LEFT_BAR,
        name='Left Bar Plan',
        amount=Decimal('3588'),
        commission_rate=_STANDARD_RATE,
        priority_rank=30,
        placement_slots=(PlacementSlot.LEFT_BAR,),
        max_photos=10,
    ),
    Plan(
        code=PlanCode.RIGHT_BAR,
        name='Right Bar Plan',
        amount=Decimal('3588'),
        commission_rate=_STANDARD_RATE,
        priority_rank=30,
        placement_slots=(PlacementSlot.RIGHT_BAR,),
        max_photos=10,
    ),
    Plan(
        code=PlanCode.BANNER,
        name='Banner Plan',
        amount=Decimal('4788'),
        commission_rate=_STANDARD_RATE,
        priority_rank=50,
        placement_slots=(PlacementSlot.HOME_BANNER,),
        max_photos=10,
    ),
    Plan(
        code=PlanCode.HERO,
        name='Hero Plan',
        amount=Decimal('5988'),
        commission_rate=_STANDARD_RATE,
        priority_rank=200,
        placement_slots=(PlacementSlot.HERO,),
        max_photos=10,
    ),
]

PLAN_CATALOG = {str(plan.code): plan for plan in _PLANS}


def get_plan(code):
    """
    Resolve a plan code (case-insensitive).

    Raises:
        InvalidPlanError: If the code is empty or not in the catalog.
    """
    normalized = (code or '').strip().upper()
    try:
        return PLAN_CATALOG[normalized]
    except KeyError:
        raise InvalidPlanError(f"Unknown plan type: {code!r}")


def all_plans():
    return list(PLAN_CATALOG.values())


def can_upgrade(current_code, target_code):
    """True if ``target_code`` sits above ``current_code`` in catalog order."""
    order = list(PLAN_CATALOG)
    return order.index(get_plan(target_code).code) > order.index(get_plan(current_code).code)
