"""Completion service - validates an attempt and awards activity points.

Order of checks: program live, activity active, time window, verification
method, frequency policy. The frequency check here is advisory; the unique
constraint on ActivityCompletion.frequency_key decides under races.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from django.db import IntegrityError, OperationalError, transaction
from django.utils import timezone

from fanpoints.conf import fanpoints_settings
from fanpoints.exceptions import FanPointsError
from fanpoints.gates import GateError, Gates
from fanpoints.models import (
    Activity,
    ActivityCompletion,
    ClaimStatus,
    Frequency,
    Membership,
)
from fanpoints.policies import CompletionContext, frequency_key, parse_context
from fanpoints.services import ledger, tiers
from fanpoints.signals import points_awarded

logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    """Outcome of a successful attempt_completion."""

    completion: ActivityCompletion
    points_earned: int
    base_points: int
    multiplier: Decimal
    balance_after: int
    lifetime_earned: int
    tier_changed: bool = False


@dataclass
class ActivityAvailability:
    """Display row: can this fan complete this activity right now?"""

    activity: Activity
    available: bool
    reason: str = ""


def get_activity(activity_id, program_id) -> Activity:
    """Activity of the given program, or ACTIVITY_NOT_FOUND."""
    try:
        return Activity.objects.get(pk=activity_id, program_id=program_id)
    except Activity.DoesNotExist:
        raise FanPointsError(
            "ACTIVITY_NOT_FOUND", activity_id=activity_id, program_id=program_id
        )


def check_eligibility(
    membership: Membership,
    activity: Activity,
    context: CompletionContext,
    occurred_at: datetime,
) -> str | None:
    """
    Run the gates in order and return the frequency key for the attempt.

    Raises:
        FanPointsError: carrying the failing gate's error code
    """
    try:
        Gates.program_live(membership.program_id)
        Gates.activity_active(activity)
        Gates.time_window(activity, occurred_at)
        Gates.verification_match(activity, context.method)
        key = frequency_key(activity.frequency, context, occurred_at)
        Gates.frequency_policy(membership, activity, key)
    except GateError as e:
        raise FanPointsError(
            e.error_code,
            message=e.message,
            gate=e.gate_name,
            membership_id=membership.pk,
            activity_id=activity.pk,
        ) from e
    return key


def award_multiplier(program_id, lifetime_earned: int) -> Decimal:
    """Multiplier credited at award time (1 when multipliers are display-only)."""
    if not fanpoints_settings.APPLY_TIER_MULTIPLIER:
        return Decimal("1")
    return tiers.effects_for_lifetime(program_id, lifetime_earned).multiplier


def attempt_completion(
    membership_id,
    activity_id,
    context: dict[str, Any] | CompletionContext,
) -> CompletionResult:
    """
    Record a completion and credit the points in one atomic unit.

    The time window and the frequency bucket are evaluated at the current time.

    Args:
        membership_id: Membership primary key
        activity_id: Activity primary key (must belong to the membership's program)
        context: Verification context, tagged by "method"

    Returns:
        CompletionResult

    Raises:
        FanPointsError: PROGRAM_NOT_LIVE, NOT_ELIGIBLE, ALREADY_COMPLETED,
            INVALID_CONTEXT, CONCURRENCY_CONFLICT, MEMBERSHIP_NOT_FOUND,
            ACTIVITY_NOT_FOUND
    """
    now = timezone.now()
    return _complete(membership_id, activity_id, parse_context(context), now, now)


def award_claim(claim, context: CompletionContext) -> CompletionResult:
    """
    Completion for an approved manual claim.

    Window and frequency bucket are evaluated at the claim's submission time.
    """
    return _complete(
        claim.membership_id,
        claim.activity_id,
        parse_context(context),
        claim.created_at,
        timezone.now(),
    )


def _complete(
    membership_id,
    activity_id,
    context: CompletionContext,
    occurred_at: datetime,
    now: datetime,
) -> CompletionResult:
    """Gates, then the completion insert and credit. Times are supplied by the caller."""
    membership = ledger.get_active_membership(membership_id)
    activity = get_activity(activity_id, membership.program_id)

    try:
        key = check_eligibility(membership, activity, context, occurred_at)
    except FanPointsError as e:
        logger.info(
            "Completion refused: membership=%s activity=%s code=%s",
            membership.pk,
            activity.pk,
            e.code,
        )
        raise

    try:
        with transaction.atomic():
            lifetime_before = (
                Membership.objects.filter(pk=membership.pk)
                .values_list("lifetime_earned", flat=True)
                .get()
            )
            multiplier = award_multiplier(membership.program_id, lifetime_before)
            points = tiers.apply_multiplier(activity.points_awarded, multiplier)

            completion = ActivityCompletion.objects.create(
                membership=membership,
                activity=activity,
                points_earned=points,
                base_points=activity.points_awarded,
                multiplier=multiplier,
                frequency_key=key,
                verification_method=context.method,
                metadata=context.to_metadata(),
                completed_at=now,
            )
            updated = ledger.credit(membership.pk, points)
            previous, current = ledger.refresh_tier(updated)
    except IntegrityError:
        if key is not None and ActivityCompletion.objects.filter(
            membership=membership, activity=activity, frequency_key=key
        ).exists():
            logger.info(
                "Completion lost race: membership=%s activity=%s key=%s",
                membership.pk,
                activity.pk,
                key,
            )
            raise FanPointsError(
                "ALREADY_COMPLETED",
                membership_id=membership.pk,
                activity_id=activity.pk,
                frequency_key=key,
            ) from None
        raise
    except OperationalError as e:
        logger.warning(
            "Completion conflict: membership=%s activity=%s: %s",
            membership.pk,
            activity.pk,
            e,
        )
        raise FanPointsError(
            "CONCURRENCY_CONFLICT", membership_id=membership.pk, activity_id=activity.pk
        ) from e

    logger.info(
        "Awarded %s pts (base %s x%s): membership=%s activity=%s",
        points,
        activity.points_awarded,
        multiplier,
        membership.pk,
        activity.pk,
    )
    transaction.on_commit(
        lambda: points_awarded.send(
            sender=ActivityCompletion,
            completion=completion,
            membership=updated,
        )
    )

    return CompletionResult(
        completion=completion,
        points_earned=points,
        base_points=activity.points_awarded,
        multiplier=multiplier,
        balance_after=updated.balance,
        lifetime_earned=updated.lifetime_earned,
        tier_changed=previous != current,
    )


def available_activities(membership_id, at: datetime | None = None) -> list[ActivityAvailability]:
    """
    Active activities of the membership's program, flagged by availability.

    Once-per-match activities are reported available: their bucket depends on
    the match the front-end supplies at attempt time.
    """
    at = at or timezone.now()
    membership = ledger.get_active_membership(membership_id)
    live = Gates.check_program_live(membership.program_id)
    activities = Activity.objects.filter(program_id=membership.program_id, is_active=True)
    pending = set(
        membership.claims.filter(status=ClaimStatus.PENDING).values_list("activity_id", flat=True)
    )

    result = []
    for activity in activities:
        reason = ""
        if not live:
            reason = "program_not_live"
        elif not activity.is_within_window(at):
            reason = "outside_window"
        elif activity.frequency in (Frequency.ONCE_EVER, Frequency.ONCE_PER_DAY):
            key = frequency_key(activity.frequency, CompletionContext(method=""), at)
            if not Gates.check_frequency_policy(membership, activity, key):
                reason = "already_completed"
        if not reason and activity.pk in pending:
            reason = "claim_pending"
        result.append(ActivityAvailability(activity=activity, available=not reason, reason=reason))
    return result
