"""Claim service - human-reviewed manual proof.

A claim leaves `pending` exactly once: the transition is a conditional
UPDATE filtered on status=pending, so two concurrent reviews cannot both win.
Approval runs the completion gate inside the same transaction.
"""

import logging
from dataclasses import dataclass

from django.db import IntegrityError, OperationalError, transaction
from django.utils import timezone

from fanpoints.exceptions import FanPointsError
from fanpoints.models import ClaimStatus, ManualClaim, VerificationMethod
from fanpoints.policies import ManualProofContext
from fanpoints.services import completion, ledger
from fanpoints.services.completion import CompletionResult
from fanpoints.signals import claim_reviewed, claim_submitted

logger = logging.getLogger(__name__)

OPEN_STATUSES = (ClaimStatus.PENDING, ClaimStatus.APPROVED)

ALREADY_COMPLETED_REASON = "Activity already completed"

_DECISIONS = {
    "approve": ClaimStatus.APPROVED,
    "approved": ClaimStatus.APPROVED,
    "reject": ClaimStatus.REJECTED,
    "rejected": ClaimStatus.REJECTED,
}


@dataclass
class ClaimReview:
    """Outcome of review_claim."""

    claim: ManualClaim
    approved: bool
    completion_result: CompletionResult | None = None
    reason: str = ""


def _context_for(claim: ManualClaim) -> ManualProofContext:
    return ManualProofContext(
        method=VerificationMethod.MANUAL_PROOF,
        match_id=claim.match_id,
        proof_description=claim.proof_description,
        proof_url=claim.proof_url,
        claim_id=claim.pk,
    )


def submit_claim(
    membership_id,
    activity_id,
    proof_description: str = "",
    proof_url: str = "",
    match_id: str = "",
    submitted_by: str = "",
) -> ManualClaim:
    """
    Submit proof for a manual_proof activity.

    Args:
        membership_id: Membership primary key
        activity_id: Activity primary key
        proof_description: Free text describing the proof
        proof_url: Link to uploaded evidence
        match_id: Match reference for once-per-match activities
        submitted_by: Who submitted (audit)

    Returns:
        ManualClaim in pending status

    Raises:
        FanPointsError: DUPLICATE_PENDING_CLAIM, ALREADY_COMPLETED,
            PROGRAM_NOT_LIVE, NOT_ELIGIBLE, INVALID_CONTEXT
    """
    membership = ledger.get_active_membership(membership_id)
    activity = completion.get_activity(activity_id, membership.program_id)
    now = timezone.now()
    context = ManualProofContext(
        method=VerificationMethod.MANUAL_PROOF,
        match_id=str(match_id or ""),
        proof_description=proof_description,
        proof_url=proof_url,
    )

    open_status = (
        ManualClaim.objects.filter(
            membership=membership, activity=activity, status__in=OPEN_STATUSES
        )
        .values_list("status", flat=True)
        .first()
    )
    if open_status == ClaimStatus.APPROVED:
        raise FanPointsError(
            "ALREADY_COMPLETED",
            message="A claim for this activity was already approved",
            membership_id=membership.pk,
            activity_id=activity.pk,
        )
    if open_status == ClaimStatus.PENDING:
        raise FanPointsError(
            "DUPLICATE_PENDING_CLAIM",
            membership_id=membership.pk,
            activity_id=activity.pk,
        )

    completion.check_eligibility(membership, activity, context, now)

    try:
        with transaction.atomic():
            claim = ManualClaim.objects.create(
                membership=membership,
                activity=activity,
                proof_url=proof_url,
                proof_description=proof_description,
                match_id=context.match_id,
            )
    except IntegrityError:
        raise FanPointsError(
            "DUPLICATE_PENDING_CLAIM",
            membership_id=membership.pk,
            activity_id=activity.pk,
        ) from None

    logger.info(
        "Claim %s submitted: membership=%s activity=%s by=%s",
        claim.pk,
        membership.pk,
        activity.pk,
        submitted_by or "fan",
    )
    transaction.on_commit(lambda: claim_submitted.send(sender=ManualClaim, claim=claim))
    return claim


def review_claim(
    claim_id,
    decision: str,
    reviewer: str,
    reason: str = "",
) -> ClaimReview:
    """
    Approve or reject a pending claim.

    Approval invokes the completion gate exactly once, evaluating the time
    window at submission time. If a direct completion happened meanwhile, the
    claim closes as rejected with no award. Any other gate failure leaves the
    claim pending and is raised.

    Args:
        claim_id: ManualClaim primary key
        decision: "approve" or "reject"
        reviewer: Club admin identifier
        reason: Rejection reason (required to reject)

    Returns:
        ClaimReview

    Raises:
        FanPointsError: CLAIM_NOT_FOUND, INVALID_DECISION,
            CLAIM_ALREADY_RESOLVED, PROGRAM_NOT_LIVE, NOT_ELIGIBLE,
            CONCURRENCY_CONFLICT
    """
    target = _DECISIONS.get((decision or "").lower())
    if target is None:
        raise FanPointsError("INVALID_DECISION", decision=decision)
    if target == ClaimStatus.REJECTED and not reason.strip():
        raise FanPointsError("INVALID_DECISION", message="Rejection requires a reason")

    try:
        claim = ManualClaim.objects.get(pk=claim_id)
    except ManualClaim.DoesNotExist:
        raise FanPointsError("CLAIM_NOT_FOUND", claim_id=claim_id)

    now = timezone.now()
    result = None
    closing_reason = reason.strip()

    try:
        with transaction.atomic():
            moved = ManualClaim.objects.filter(pk=claim.pk, status=ClaimStatus.PENDING).update(
                status=target,
                reviewed_by=reviewer,
                reviewed_at=now,
                rejection_reason=closing_reason if target == ClaimStatus.REJECTED else "",
                updated_at=now,
            )
            if not moved:
                current = ManualClaim.objects.values_list("status", flat=True).get(pk=claim.pk)
                raise FanPointsError(
                    "CLAIM_ALREADY_RESOLVED", claim_id=claim.pk, status=current
                )

            if target == ClaimStatus.APPROVED:
                try:
                    result = completion.award_claim(claim, _context_for(claim))
                except FanPointsError as e:
                    if e.code != "ALREADY_COMPLETED":
                        raise
                    target = ClaimStatus.REJECTED
                    closing_reason = ALREADY_COMPLETED_REASON
                    ManualClaim.objects.filter(pk=claim.pk).update(
                        status=ClaimStatus.REJECTED,
                        rejection_reason=closing_reason,
                    )
                else:
                    ManualClaim.objects.filter(pk=claim.pk).update(completion=result.completion)
    except OperationalError as e:
        logger.warning("Claim %s review conflict: %s", claim.pk, e)
        raise FanPointsError("CONCURRENCY_CONFLICT", claim_id=claim.pk) from e

    claim.refresh_from_db()
    approved = target == ClaimStatus.APPROVED
    logger.info(
        "Claim %s %s by %s%s",
        claim.pk,
        claim.status,
        reviewer,
        f" ({closing_reason})" if closing_reason else "",
    )
    transaction.on_commit(
        lambda: claim_reviewed.send(sender=ManualClaim, claim=claim, approved=approved)
    )
    return ClaimReview(
        claim=claim,
        approved=approved,
        completion_result=result,
        reason="" if approved else closing_reason,
    )


def pending_claims(program_id, limit: int = 100) -> list[ManualClaim]:
    """Review queue for a club admin, oldest first."""
    return list(
        ManualClaim.objects.filter(
            activity__program_id=program_id,
            status=ClaimStatus.PENDING,
        )
        .select_related("membership__fan", "activity")
        .order_by("created_at", "pk")[:limit]
    )


def claims_for(membership_id, limit: int = 50) -> list[ManualClaim]:
    return list(
        ManualClaim.objects.filter(membership_id=membership_id)
        .select_related("activity")
        .order_by("-created_at")[:limit]
    )
