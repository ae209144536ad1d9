"""Redemption service - spends points on rewards.

Inside one transaction: the reward counter is incremented only if the reward
is still active and in stock, the balance is decremented only if it still
covers the discounted cost, and the redemption row is inserted. Any failed
check raises inside the atomic block, so nothing partial is committed.
"""

import logging
import secrets
from dataclasses import dataclass

from django.db import IntegrityError, OperationalError, transaction
from django.db.models import F, Q
from django.utils import timezone

from fanpoints.conf import fanpoints_settings
from fanpoints.exceptions import FanPointsError
from fanpoints.gates import GateError, Gates
from fanpoints.models import (
    CODE_ISSUING_METHODS,
    Membership,
    RedemptionMethod,
    Reward,
    RewardRedemption,
)
from fanpoints.services import ledger, tiers
from fanpoints.signals import reward_fulfilled, reward_redeemed

logger = logging.getLogger(__name__)


@dataclass
class RedemptionResult:
    """Outcome of a successful redeem()."""

    redemption: RewardRedemption
    final_cost: int
    balance_after: int
    redemption_code: str | None
    redemption_method: str
    discount_percent: int = 0


@dataclass
class RewardRecommendation:
    """Display row for the rewards catalog."""

    reward: Reward
    final_cost: int
    affordable: bool
    points_needed: int


def generate_code(length: int | None = None) -> str:
    """Random uppercase hex code."""
    length = length or fanpoints_settings.REDEMPTION_CODE_LENGTH
    return secrets.token_hex((length + 1) // 2)[:length].upper()


def get_reward(reward_id, program_id) -> Reward:
    try:
        return Reward.objects.get(pk=reward_id, program_id=program_id)
    except Reward.DoesNotExist:
        raise FanPointsError("REWARD_NOT_FOUND", reward_id=reward_id, program_id=program_id)


def _take_stock(reward: Reward) -> None:
    """Increment quantity_redeemed if, at write time, the reward is active and in stock."""
    in_stock = Q(quantity_limit__isnull=True) | Q(quantity_redeemed__lt=F("quantity_limit"))
    taken = Reward.objects.filter(Q(pk=reward.pk, is_active=True) & in_stock).update(
        quantity_redeemed=F("quantity_redeemed") + 1,
        updated_at=timezone.now(),
    )
    if taken:
        return

    current = Reward.objects.get(pk=reward.pk)
    if not current.is_active:
        raise FanPointsError("REWARD_INACTIVE", reward_id=reward.pk)
    raise FanPointsError(
        "OUT_OF_STOCK",
        reward_id=reward.pk,
        quantity_limit=current.quantity_limit,
        quantity_redeemed=current.quantity_redeemed,
    )


def _create_redemption(membership: Membership, reward: Reward, cost: int, discount: int):
    """Insert the redemption row with its code; generated codes retry on collision."""
    fields = {
        "membership": membership,
        "reward": reward,
        "points_spent": cost,
        "discount_percent": discount,
    }

    if reward.redemption_method not in CODE_ISSUING_METHODS:
        return RewardRedemption.objects.create(redemption_code=None, **fields)

    if reward.redemption_method == RedemptionMethod.VOUCHER and reward.voucher_code:
        return RewardRedemption.objects.create(
            redemption_code=reward.voucher_code, code_generated=False, **fields
        )

    for attempt in range(fanpoints_settings.REDEMPTION_CODE_ATTEMPTS):
        try:
            with transaction.atomic():
                return RewardRedemption.objects.create(
                    redemption_code=generate_code(), code_generated=True, **fields
                )
        except IntegrityError:
            logger.warning("Redemption code collision (attempt %s)", attempt + 1)

    raise FanPointsError(
        "CONCURRENCY_CONFLICT",
        message="Could not allocate a unique redemption code",
        reward_id=reward.pk,
    )


def final_cost_for(membership: Membership, reward: Reward) -> tuple[int, int]:
    """(final_cost, discount_percent) for a membership's current tier."""
    effects = tiers.effects_for_lifetime(membership.program_id, membership.lifetime_earned)
    return tiers.apply_discount(reward.points_cost, effects.discount_percent), effects.discount_percent


def redeem(membership_id, reward_id) -> RedemptionResult:
    """
    Exchange points for a reward.

    Args:
        membership_id: Membership primary key
        reward_id: Reward primary key (must belong to the membership's program)

    Returns:
        RedemptionResult with final cost, balance after, and code (if any)

    Raises:
        FanPointsError: PROGRAM_NOT_LIVE, REWARD_INACTIVE, OUT_OF_STOCK,
            INSUFFICIENT_POINTS, CONCURRENCY_CONFLICT, MEMBERSHIP_NOT_FOUND,
            REWARD_NOT_FOUND
    """
    membership = ledger.get_active_membership(membership_id)
    reward = get_reward(reward_id, membership.program_id)

    try:
        Gates.program_live(membership.program_id)
        Gates.reward_available(reward)
    except GateError as e:
        logger.info(
            "Redemption refused: membership=%s reward=%s gate=%s",
            membership.pk,
            reward.pk,
            e.gate_name,
        )
        raise FanPointsError(
            e.error_code, message=e.message, gate=e.gate_name, **e.details
        ) from e

    try:
        with transaction.atomic():
            _take_stock(reward)
            reward = Reward.objects.get(pk=reward.pk)
            membership = Membership.objects.get(pk=membership.pk)
            cost, discount = final_cost_for(membership, reward)

            updated = ledger.debit(membership.pk, cost)
            redemption = _create_redemption(updated, reward, cost, discount)
    except FanPointsError as e:
        logger.info(
            "Redemption refused: membership=%s reward=%s code=%s",
            membership.pk,
            reward.pk,
            e.code,
        )
        raise
    except OperationalError as e:
        logger.warning("Redemption conflict: membership=%s reward=%s: %s", membership.pk, reward.pk, e)
        raise FanPointsError(
            "CONCURRENCY_CONFLICT", membership_id=membership.pk, reward_id=reward.pk
        ) from e

    logger.info(
        "Redeemed reward %s for %s pts (discount %s%%): membership=%s",
        reward.pk,
        cost,
        discount,
        membership.pk,
    )
    transaction.on_commit(
        lambda: reward_redeemed.send(
            sender=RewardRedemption, redemption=redemption, membership=updated
        )
    )

    return RedemptionResult(
        redemption=redemption,
        final_cost=cost,
        balance_after=updated.balance,
        redemption_code=redemption.redemption_code,
        redemption_method=reward.redemption_method,
        discount_percent=discount,
    )


def mark_fulfilled(redemption_id, fulfilled_by: str) -> RewardRedemption:
    """
    Club admin hands over a reward. Sets fulfilled_at exactly once.

    Raises:
        FanPointsError: REDEMPTION_NOT_FOUND, ALREADY_FULFILLED
    """
    now = timezone.now()
    updated = RewardRedemption.objects.filter(
        pk=redemption_id, fulfilled_at__isnull=True
    ).update(fulfilled_at=now, fulfilled_by=fulfilled_by)

    try:
        redemption = RewardRedemption.objects.select_related("reward").get(pk=redemption_id)
    except RewardRedemption.DoesNotExist:
        raise FanPointsError("REDEMPTION_NOT_FOUND", redemption_id=redemption_id)
    if not updated:
        raise FanPointsError(
            "ALREADY_FULFILLED",
            redemption_id=redemption_id,
            fulfilled_at=redemption.fulfilled_at,
        )

    logger.info("Redemption %s fulfilled by %s", redemption.pk, fulfilled_by)
    transaction.on_commit(
        lambda: reward_fulfilled.send(sender=RewardRedemption, redemption=redemption)
    )
    return redemption


def pending_fulfillment(program_id, limit: int = 100) -> list[RewardRedemption]:
    """Manual-fulfillment redemptions still waiting for the club, oldest first."""
    return list(
        RewardRedemption.objects.filter(
            reward__program_id=program_id,
            reward__redemption_method=RedemptionMethod.MANUAL_FULFILLMENT,
            fulfilled_at__isnull=True,
        )
        .select_related("membership__fan", "reward")
        .order_by("redeemed_at", "pk")[:limit]
    )


def recommended_rewards(membership_id, limit: int = 5) -> list[RewardRecommendation]:
    """
    Active, in-stock rewards with the fan's discounted cost.

    Affordable rewards come first, then the cheapest.

    Snapshot read; redeem() re-validates everything.
    """
    membership = ledger.get_active_membership(membership_id)
    rewards = Reward.objects.filter(program_id=membership.program_id, is_active=True)

    rows = []
    for reward in rewards:
        if not Gates.check_reward_available(reward):
            continue
        cost, _ = final_cost_for(membership, reward)
        rows.append(
            RewardRecommendation(
                reward=reward,
                final_cost=cost,
                affordable=membership.balance >= cost,
                points_needed=max(0, cost - membership.balance),
            )
        )
    rows.sort(key=lambda r: (not r.affordable, r.final_cost, r.reward.pk))
    return rows[:limit]
