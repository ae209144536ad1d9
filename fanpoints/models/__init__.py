"""Fanpoints models.

Catalog (club-admin owned): Club, ClubVerification, LoyaltyProgram, Activity,
Reward, Tier, TierBenefit.
Ledger: Membership.
Append-only facts: ActivityCompletion, RewardRedemption.
Workflow: ManualClaim.
"""

from fanpoints.models.club import (
    Club,
    ClubStatus,
    ClubVerification,
    LoyaltyProgram,
    LIVE_CLUB_STATUSES,
)
from fanpoints.models.fan import Fan
from fanpoints.models.membership import Membership
from fanpoints.models.activity import (
    Activity,
    ActivityCompletion,
    Frequency,
    VerificationMethod,
)
from fanpoints.models.claim import ClaimStatus, ManualClaim
from fanpoints.models.reward import (
    Reward,
    RewardRedemption,
    RedemptionMethod,
    CODE_ISSUING_METHODS,
)
from fanpoints.models.tier import BenefitType, Tier, TierBenefit

__all__ = [
    # Clubs and programs
    "Club",
    "ClubStatus",
    "ClubVerification",
    "LoyaltyProgram",
    "LIVE_CLUB_STATUSES",
    # Fans and ledger
    "Fan",
    "Membership",
    # Activities
    "Activity",
    "ActivityCompletion",
    "Frequency",
    "VerificationMethod",
    # Claims
    "ClaimStatus",
    "ManualClaim",
    # Rewards
    "Reward",
    "RewardRedemption",
    "RedemptionMethod",
    "CODE_ISSUING_METHODS",
    # Tiers
    "BenefitType",
    "Tier",
    "TierBenefit",
]
