"""
Fanpoints signals - public event API.

All signals are sent from transaction.on_commit, so receivers only ever
observe committed effects.

Emitted signals:
- points_awarded: sender=ActivityCompletion, completion, membership
- tier_changed: sender=Membership, membership, previous_tier, tier
- reward_redeemed: sender=RewardRedemption, redemption, membership
- reward_fulfilled: sender=RewardRedemption, redemption
- claim_submitted: sender=ManualClaim, claim
- claim_reviewed: sender=ManualClaim, claim, approved
- club_verified: sender=Club, club, forced
"""

from django.dispatch import Signal

# Ledger signals (emitted by services.completion / services.ledger)
points_awarded = Signal()
tier_changed = Signal()

# Redemption signals (emitted by services.redemption)
reward_redeemed = Signal()
reward_fulfilled = Signal()

# Claim signals (emitted by services.claims)
claim_submitted = Signal()
claim_reviewed = Signal()

# Verification signals (emitted by services.verification)
club_verified = Signal()
