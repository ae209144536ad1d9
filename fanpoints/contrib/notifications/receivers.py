"""Signal receivers turning committed points events into notifications."""

from django.dispatch import receiver

from fanpoints.contrib.notifications.models import NotificationType
from fanpoints.contrib.notifications.service import NotificationService
from fanpoints.signals import (
    claim_reviewed,
    points_awarded,
    reward_fulfilled,
    reward_redeemed,
    tier_changed,
)


def _currency(membership) -> str:
    return membership.program.points_currency_name


@receiver(points_awarded)
def on_points_awarded(sender, completion, membership, **kwargs):
    NotificationService.notify(
        membership.fan.code,
        NotificationType.POINTS_EARNED,
        title=f"+{completion.points_earned} {_currency(membership)}",
        body=completion.activity.name,
        reference=f"completion:{completion.pk}",
        metadata={"balance": membership.balance},
    )


@receiver(reward_redeemed)
def on_reward_redeemed(sender, redemption, membership, **kwargs):
    metadata = {"points_spent": redemption.points_spent}
    if redemption.redemption_code:
        metadata["redemption_code"] = redemption.redemption_code
    NotificationService.notify(
        membership.fan.code,
        NotificationType.REWARD_REDEEMED,
        title=f"Redeemed {redemption.reward.name}",
        body=f"-{redemption.points_spent} {_currency(membership)}",
        reference=f"redemption:{redemption.pk}",
        metadata=metadata,
    )


@receiver(reward_fulfilled)
def on_reward_fulfilled(sender, redemption, **kwargs):
    NotificationService.notify(
        redemption.membership.fan.code,
        NotificationType.REWARD_FULFILLED,
        title=f"{redemption.reward.name} is ready",
        reference=f"redemption:{redemption.pk}",
    )


@receiver(tier_changed)
def on_tier_changed(sender, membership, previous_tier, tier, **kwargs):
    if tier is None:
        return
    if previous_tier is not None and tier.rank <= previous_tier.rank:
        return
    NotificationService.notify(
        membership.fan.code,
        NotificationType.TIER_UPGRADED,
        title=f"Welcome to {tier.name}",
        reference=f"tier:{tier.pk}",
        metadata={"previous_tier": previous_tier.name if previous_tier else None},
    )


@receiver(claim_reviewed)
def on_claim_reviewed(sender, claim, approved, **kwargs):
    fan_code = claim.membership.fan.code
    if approved:
        NotificationService.notify(
            fan_code,
            NotificationType.CLAIM_APPROVED,
            title=f"Claim approved: {claim.activity.name}",
            reference=f"claim:{claim.pk}",
        )
    else:
        NotificationService.notify(
            fan_code,
            NotificationType.CLAIM_REJECTED,
            title=f"Claim rejected: {claim.activity.name}",
            body=claim.rejection_reason,
            reference=f"claim:{claim.pk}",
        )
