"""Tier service - standing and benefit effects derived from lifetime points.

Tier is always a function of lifetime_earned, never of balance, so spending
points never costs a fan their rank.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from fanpoints.exceptions import FanPointsError
from fanpoints.models import BenefitType, Membership, Tier, TierBenefit


@dataclass(frozen=True)
class BenefitEffects:
    """Flat view of the benefits active for one tier."""

    multiplier: Decimal = Decimal("1")
    discount_percent: int = 0
    vip: bool = False
    monthly_bonus: int = 0


NO_EFFECTS = BenefitEffects()


@dataclass
class TierStanding:
    """Display snapshot of a membership's tier position."""

    membership_id: int
    lifetime_earned: int
    current: Tier | None
    next: Tier | None
    effects: BenefitEffects
    points_to_next: int | None = None
    progress_percent: int = 100


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def apply_multiplier(points: int, multiplier: Decimal) -> int:
    """Activity points after a tier multiplier, rounded half up, never below 1."""
    return max(1, round_half_up(Decimal(points) * Decimal(multiplier)))


def apply_discount(cost: int, discount_percent: int) -> int:
    """
    Reward cost after a tier discount.

    final = round_half_up(cost * (1 - discount/100)); 500 at 20% -> 400.
    """
    factor = Decimal(1) - Decimal(discount_percent) / Decimal(100)
    return max(0, round_half_up(Decimal(cost) * factor))


def compute_tier(lifetime_earned: int, tiers: Iterable[Tier]) -> tuple[Tier | None, Tier | None]:
    """
    Current and next tier for a lifetime points total.

    Current is the last tier (by rank) whose threshold is reached; next is the
    tier ranked right after it, or None at the top.

    Args:
        lifetime_earned: Lifetime points of the membership
        tiers: Tiers of one program, any order

    Returns:
        (current, next); current is None below the first threshold
    """
    ordered = sorted(tiers, key=lambda t: t.rank)
    current_index = None
    for index, tier in enumerate(ordered):
        if tier.points_threshold <= lifetime_earned:
            current_index = index

    if current_index is None:
        return None, (ordered[0] if ordered else None)

    current = ordered[current_index]
    following = ordered[current_index + 1] if current_index + 1 < len(ordered) else None
    return current, following


def resolve_benefits(benefits: Iterable[TierBenefit]) -> BenefitEffects:
    """
    Collapse benefit rows into effects.

    Rows are applied in order and the last row of each type wins; values of
    the same type are not summed.
    """
    multiplier = Decimal("1")
    discount = 0
    vip = False
    monthly_bonus = 0

    for benefit in benefits:
        value = benefit.benefit_value
        if benefit.benefit_type == BenefitType.POINTS_MULTIPLIER:
            multiplier = Decimal(value) if value is not None else Decimal("1")
        elif benefit.benefit_type == BenefitType.REWARD_DISCOUNT_PERCENT:
            discount = min(100, max(0, int(value or 0)))
        elif benefit.benefit_type == BenefitType.VIP_ACCESS:
            vip = True
        elif benefit.benefit_type == BenefitType.MONTHLY_BONUS_POINTS:
            monthly_bonus = max(0, int(value or 0))

    return BenefitEffects(
        multiplier=multiplier,
        discount_percent=discount,
        vip=vip,
        monthly_bonus=monthly_bonus,
    )


def effects_for(tier: Tier | None) -> BenefitEffects:
    if tier is None:
        return NO_EFFECTS
    return resolve_benefits(tier.benefits.order_by("created_at", "pk"))


def tiers_for_program(program_id) -> list[Tier]:
    return list(Tier.objects.filter(program_id=program_id).order_by("rank"))


def tier_for(program_id, lifetime_earned: int) -> Tier | None:
    current, _ = compute_tier(lifetime_earned, tiers_for_program(program_id))
    return current


def effects_for_lifetime(program_id, lifetime_earned: int) -> BenefitEffects:
    """Effects of the tier a lifetime total qualifies for."""
    return effects_for(tier_for(program_id, lifetime_earned))


def standing(membership_id) -> TierStanding:
    """
    Tier standing for display.

    Snapshot read: may be stale by the time the fan acts on it, which is fine
    because every award and spend recomputes effects inside its transaction.
    """
    try:
        membership = Membership.objects.get(pk=membership_id, is_active=True)
    except Membership.DoesNotExist:
        raise FanPointsError("MEMBERSHIP_NOT_FOUND", membership_id=membership_id)

    current, following = compute_tier(
        membership.lifetime_earned, tiers_for_program(membership.program_id)
    )
    result = TierStanding(
        membership_id=membership.pk,
        lifetime_earned=membership.lifetime_earned,
        current=current,
        next=following,
        effects=effects_for(current),
    )

    if following is not None:
        floor = current.points_threshold if current else 0
        span = following.points_threshold - floor
        result.points_to_next = max(0, following.points_threshold - membership.lifetime_earned)
        if span > 0:
            done = membership.lifetime_earned - floor
            result.progress_percent = min(100, max(0, int(done * 100 / span)))
        else:
            result.progress_percent = 0
    return result
