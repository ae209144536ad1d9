"""
Fanpoints public API.

CORE (points movement):
    PointsService.join(fan_code, program_id)          - Enroll a fan
    PointsService.attempt_completion(...)             - Award activity points
    PointsService.submit_claim(...) / review_claim(...) - Manual proof workflow
    PointsService.redeem(membership_id, reward_id)    - Spend points

CONVENIENCE (display reads):
    PointsService.standing(membership_id)             - Tier progress
    PointsService.available_activities(membership_id)
    PointsService.recommended_rewards(membership_id)
    PointsService.leaderboard(program_id)
"""

from typing import Any

from fanpoints.models import Club, ManualClaim, Membership, RewardRedemption
from fanpoints.policies import CompletionContext
from fanpoints.services import claims, completion, ledger, redemption, tiers, verification
from fanpoints.services.claims import ClaimReview
from fanpoints.services.completion import ActivityAvailability, CompletionResult
from fanpoints.services.ledger import LeaderboardEntry, LedgerAudit, LedgerEntry
from fanpoints.services.redemption import RedemptionResult, RewardRecommendation
from fanpoints.services.tiers import TierStanding


class PointsService:
    """
    Fanpoints public API.

    Uses @classmethod so host projects can subclass and override single
    operations. Every method delegates to a service module; errors surface
    as FanPointsError.
    """

    # ======================================================================
    # MEMBERSHIP
    # ======================================================================

    @classmethod
    def join(cls, fan_code: str, program_id) -> Membership:
        """Enroll a fan in a program (idempotent)."""
        return ledger.join(fan_code, program_id)

    @classmethod
    def get_balance(cls, membership_id) -> int:
        return ledger.get_balance(membership_id)

    @classmethod
    def history(cls, membership_id, limit: int = 50) -> list[LedgerEntry]:
        return ledger.history(membership_id, limit=limit)

    @classmethod
    def audit(cls, membership_id) -> LedgerAudit:
        return ledger.audit(membership_id)

    # ======================================================================
    # EARNING
    # ======================================================================

    @classmethod
    def attempt_completion(
        cls,
        membership_id,
        activity_id,
        context: dict[str, Any] | CompletionContext,
    ) -> CompletionResult:
        """
        Validate a completion attempt and credit the points.

        Args:
            membership_id: Membership primary key
            activity_id: Activity primary key
            context: Verification context, e.g. {"method": "qr_scan", "qr_payload": "..."}

        Returns:
            CompletionResult
        """
        return completion.attempt_completion(membership_id, activity_id, context)

    @classmethod
    def available_activities(cls, membership_id) -> list[ActivityAvailability]:
        return completion.available_activities(membership_id)

    @classmethod
    def submit_claim(
        cls,
        membership_id,
        activity_id,
        proof_description: str = "",
        proof_url: str = "",
        match_id: str = "",
        submitted_by: str = "",
    ) -> ManualClaim:
        return claims.submit_claim(
            membership_id,
            activity_id,
            proof_description=proof_description,
            proof_url=proof_url,
            match_id=match_id,
            submitted_by=submitted_by,
        )

    @classmethod
    def review_claim(cls, claim_id, decision: str, reviewer: str, reason: str = "") -> ClaimReview:
        return claims.review_claim(claim_id, decision, reviewer, reason=reason)

    @classmethod
    def pending_claims(cls, program_id, limit: int = 100) -> list[ManualClaim]:
        return claims.pending_claims(program_id, limit=limit)

    # ======================================================================
    # TIERS
    # ======================================================================

    @classmethod
    def standing(cls, membership_id) -> TierStanding:
        return tiers.standing(membership_id)

    # ======================================================================
    # SPENDING
    # ======================================================================

    @classmethod
    def redeem(cls, membership_id, reward_id) -> RedemptionResult:
        """
        Exchange points for a reward.

        Returns:
            RedemptionResult with final_cost, balance_after and redemption_code
        """
        return redemption.redeem(membership_id, reward_id)

    @classmethod
    def mark_fulfilled(cls, redemption_id, fulfilled_by: str) -> RewardRedemption:
        return redemption.mark_fulfilled(redemption_id, fulfilled_by)

    @classmethod
    def pending_fulfillment(cls, program_id, limit: int = 100) -> list[RewardRedemption]:
        return redemption.pending_fulfillment(program_id, limit=limit)

    @classmethod
    def recommended_rewards(cls, membership_id, limit: int = 5) -> list[RewardRecommendation]:
        return redemption.recommended_rewards(membership_id, limit=limit)

    # ======================================================================
    # PROGRAM
    # ======================================================================

    @classmethod
    def is_program_live(cls, program_id) -> bool:
        return verification.is_program_live(program_id)

    @classmethod
    def force_verify(cls, club_code: str, verified_by: str, official: bool = False) -> Club:
        return verification.force_verify(club_code, verified_by, official=official)

    @classmethod
    def leaderboard(cls, program_id, limit: int | None = None) -> list[LeaderboardEntry]:
        return ledger.leaderboard(program_id, limit=limit)
