"""Ledger service - the only writer of Membership.balance/lifetime_earned.

Balance moves are conditional F-expression UPDATEs: the check runs against
the value the database holds at write time, never against a value read
earlier by the application.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from django.db import transaction
from django.db.models import F, Sum
from django.utils import timezone

from fanpoints.conf import fanpoints_settings
from fanpoints.exceptions import FanPointsError
from fanpoints.models import (
    ActivityCompletion,
    Fan,
    LoyaltyProgram,
    Membership,
    RewardRedemption,
    Tier,
)
from fanpoints.services import tiers
from fanpoints.signals import tier_changed

logger = logging.getLogger(__name__)


@dataclass
class LedgerEntry:
    """One line of a membership's points history."""

    kind: str  # "earn" or "spend"
    points: int
    description: str
    reference: str
    occurred_at: datetime


@dataclass
class LedgerAudit:
    """Balance recomputed from append-only facts."""

    membership_id: int
    balance: int
    lifetime_earned: int
    earned_total: int
    spent_total: int

    @property
    def expected_balance(self) -> int:
        return self.earned_total - self.spent_total

    @property
    def ok(self) -> bool:
        return (
            self.balance == self.expected_balance
            and self.balance >= 0
            and self.lifetime_earned == self.earned_total
        )


@dataclass
class LeaderboardEntry:
    rank: int
    membership_id: int
    fan_code: str
    display_name: str
    lifetime_earned: int
    tier_name: str | None


def join(fan_code: str, program_id) -> Membership:
    """
    Enroll a fan in a program.

    Idempotent - returns the existing membership if already joined.

    Raises:
        FanPointsError: FAN_NOT_FOUND, PROGRAM_NOT_FOUND
    """
    try:
        fan = Fan.objects.get(code=fan_code, is_active=True)
    except Fan.DoesNotExist:
        raise FanPointsError("FAN_NOT_FOUND", fan_code=fan_code)
    try:
        program = LoyaltyProgram.objects.get(pk=program_id)
    except LoyaltyProgram.DoesNotExist:
        raise FanPointsError("PROGRAM_NOT_FOUND", program_id=program_id)

    membership, created = Membership.objects.get_or_create(
        fan=fan,
        program=program,
        defaults={"tier": tiers.tier_for(program.pk, 0)},
    )
    if created:
        logger.info("Fan %s joined program %s", fan.code, program.pk)
    return membership


def get_membership(membership_id) -> Membership | None:
    try:
        return Membership.objects.select_related("fan", "program").get(pk=membership_id)
    except Membership.DoesNotExist:
        return None


def get_active_membership(membership_id) -> Membership:
    """Active membership or MEMBERSHIP_NOT_FOUND."""
    try:
        return Membership.objects.select_related("fan", "program").get(
            pk=membership_id,
            is_active=True,
            fan__is_active=True,
        )
    except Membership.DoesNotExist:
        raise FanPointsError("MEMBERSHIP_NOT_FOUND", membership_id=membership_id)


def get_balance(membership_id) -> int:
    """Current balance. Returns 0 for unknown memberships."""
    membership = get_membership(membership_id)
    return membership.balance if membership else 0


def _require_atomic():
    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError("Ledger mutations must run inside transaction.atomic()")


def credit(membership_id, points: int) -> Membership:
    """
    Add points to balance and lifetime_earned.

    MUST be called inside transaction.atomic(), together with the fact row
    that justifies the credit.

    Returns:
        Membership reloaded after the update

    Raises:
        FanPointsError: INVALID_POINTS, MEMBERSHIP_NOT_FOUND
    """
    _require_atomic()
    if points <= 0:
        raise FanPointsError("INVALID_POINTS", points=points)

    updated = Membership.objects.filter(pk=membership_id, is_active=True).update(
        balance=F("balance") + points,
        lifetime_earned=F("lifetime_earned") + points,
        updated_at=timezone.now(),
    )
    if not updated:
        raise FanPointsError("MEMBERSHIP_NOT_FOUND", membership_id=membership_id)
    return Membership.objects.get(pk=membership_id)


def debit(membership_id, points: int) -> Membership:
    """
    Remove points from balance if, at write time, the balance covers them.

    MUST be called inside transaction.atomic(). lifetime_earned is untouched.

    Raises:
        FanPointsError: INVALID_POINTS, MEMBERSHIP_NOT_FOUND, INSUFFICIENT_POINTS
    """
    _require_atomic()
    if points < 0:
        raise FanPointsError("INVALID_POINTS", points=points)

    updated = Membership.objects.filter(
        pk=membership_id,
        is_active=True,
        balance__gte=points,
    ).update(
        balance=F("balance") - points,
        updated_at=timezone.now(),
    )
    if not updated:
        available = (
            Membership.objects.filter(pk=membership_id, is_active=True)
            .values_list("balance", flat=True)
            .first()
        )
        if available is None:
            raise FanPointsError("MEMBERSHIP_NOT_FOUND", membership_id=membership_id)
        raise FanPointsError(
            "INSUFFICIENT_POINTS",
            available=available,
            requested=points,
        )
    return Membership.objects.get(pk=membership_id)


def refresh_tier(membership: Membership) -> tuple[Tier | None, Tier | None]:
    """
    Re-derive the cached tier from lifetime_earned.

    Emits tier_changed on commit when the tier moves.

    Returns:
        (previous_tier, current_tier)
    """
    previous_id = membership.tier_id
    current = tiers.tier_for(membership.program_id, membership.lifetime_earned)
    current_id = current.pk if current else None

    if current_id == previous_id:
        return membership.tier, current

    previous = membership.tier
    Membership.objects.filter(pk=membership.pk).update(tier=current)
    membership.tier = current
    logger.info(
        "Membership %s tier %s -> %s",
        membership.pk,
        previous.name if previous else None,
        current.name if current else None,
    )
    transaction.on_commit(
        lambda: tier_changed.send(
            sender=Membership,
            membership=membership,
            previous_tier=previous,
            tier=current,
        )
    )
    return previous, current


def history(membership_id, limit: int = 50) -> list[LedgerEntry]:
    """Earn and spend entries, most recent first."""
    completions = (
        ActivityCompletion.objects.filter(membership_id=membership_id)
        .select_related("activity")
        .order_by("-completed_at")[:limit]
    )
    redemptions = (
        RewardRedemption.objects.filter(membership_id=membership_id)
        .select_related("reward")
        .order_by("-redeemed_at")[:limit]
    )

    entries = [
        LedgerEntry(
            kind="earn",
            points=c.points_earned,
            description=c.activity.name,
            reference=f"completion:{c.pk}",
            occurred_at=c.completed_at,
        )
        for c in completions
    ]
    entries += [
        LedgerEntry(
            kind="spend",
            points=-r.points_spent,
            description=r.reward.name,
            reference=f"redemption:{r.pk}",
            occurred_at=r.redeemed_at,
        )
        for r in redemptions
    ]
    entries.sort(key=lambda e: e.occurred_at, reverse=True)
    return entries[:limit]


def audit(membership_id) -> LedgerAudit:
    """
    Recompute the balance from completions and redemptions.

    Approved manual claims are realised as completions, so they are already
    part of earned_total.
    """
    membership = get_membership(membership_id)
    if membership is None:
        raise FanPointsError("MEMBERSHIP_NOT_FOUND", membership_id=membership_id)

    earned = ActivityCompletion.objects.filter(membership=membership).aggregate(
        total=Sum("points_earned")
    )["total"] or 0
    spent = RewardRedemption.objects.filter(membership=membership).aggregate(
        total=Sum("points_spent")
    )["total"] or 0

    return LedgerAudit(
        membership_id=membership.pk,
        balance=membership.balance,
        lifetime_earned=membership.lifetime_earned,
        earned_total=earned,
        spent_total=spent,
    )


def leaderboard(program_id, limit: int | None = None) -> list[LeaderboardEntry]:
    """Memberships ranked by lifetime points (snapshot read)."""
    limit = limit or fanpoints_settings.LEADERBOARD_LIMIT
    memberships = (
        Membership.objects.filter(program_id=program_id, is_active=True, fan__is_active=True)
        .select_related("fan", "tier")
        .order_by("-lifetime_earned", "joined_at")[:limit]
    )
    return [
        LeaderboardEntry(
            rank=position,
            membership_id=m.pk,
            fan_code=m.fan.code,
            display_name=m.fan.display_name,
            lifetime_earned=m.lifetime_earned,
            tier_name=m.tier.name if m.tier else None,
        )
        for position, m in enumerate(memberships, start=1)
    ]
