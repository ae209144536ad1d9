"""Pytest fixtures for Fanpoints tests."""

from decimal import Decimal

import pytest

from fanpoints.models import (
    Activity,
    BenefitType,
    Club,
    ClubStatus,
    Fan,
    Frequency,
    LoyaltyProgram,
    Membership,
    RedemptionMethod,
    Reward,
    Tier,
    TierBenefit,
    VerificationMethod,
)

QR = {"method": "qr_scan", "qr_payload": "GATE-7"}


def set_points(membership, balance, lifetime_earned=None):
    """Put a membership at a known balance (and lifetime) without facts."""
    if lifetime_earned is None:
        lifetime_earned = balance
    Membership.objects.filter(pk=membership.pk).update(
        balance=balance, lifetime_earned=lifetime_earned
    )
    membership.refresh_from_db()
    return membership


@pytest.fixture
def club(db):
    """Create a verified club."""
    return Club.objects.create(
        code="lions",
        name="Lions FC",
        country="Portugal",
        city="Porto",
        status=ClubStatus.VERIFIED,
    )


@pytest.fixture
def unverified_club(db):
    return Club.objects.create(code="cubs", name="Cubs United")


@pytest.fixture
def program(db, club):
    return LoyaltyProgram.objects.create(
        club=club,
        name="Lions Rewards",
        points_currency_name="Roars",
    )


@pytest.fixture
def fan(db):
    return Fan.objects.create(
        code="FAN-001",
        display_name="Ana Silva",
        email="ana@example.com",
    )


@pytest.fixture
def other_fan(db):
    return Fan.objects.create(code="FAN-002", display_name="Rui Costa")


@pytest.fixture
def membership(db, fan, program):
    return Membership.objects.create(fan=fan, program=program)


@pytest.fixture
def other_membership(db, other_fan, program):
    return Membership.objects.create(fan=other_fan, program=program)


# ===========================================
# Activities
# ===========================================


@pytest.fixture
def activity_qr(db, program):
    """Stadium entry scan: once ever, 100 points."""
    return Activity.objects.create(
        program=program,
        name="First stadium visit",
        points_awarded=100,
        frequency=Frequency.ONCE_EVER,
        verification_method=VerificationMethod.QR_SCAN,
    )


@pytest.fixture
def activity_daily(db, program):
    """Daily quiz: once per day, 10 points."""
    return Activity.objects.create(
        program=program,
        name="Daily quiz",
        points_awarded=10,
        frequency=Frequency.ONCE_PER_DAY,
        verification_method=VerificationMethod.IN_APP_COMPLETION,
    )


@pytest.fixture
def activity_match(db, program):
    """Matchday check-in: once per match, 50 points."""
    return Activity.objects.create(
        program=program,
        name="Matchday check-in",
        points_awarded=50,
        frequency=Frequency.ONCE_PER_MATCH,
        verification_method=VerificationMethod.LOCATION_CHECKIN,
    )


@pytest.fixture
def activity_unlimited(db, program):
    """Merch stand scan: unlimited, 5 points."""
    return Activity.objects.create(
        program=program,
        name="Merch stand scan",
        points_awarded=5,
        frequency=Frequency.UNLIMITED,
        verification_method=VerificationMethod.QR_SCAN,
    )


@pytest.fixture
def activity_manual(db, program):
    """Away trip photo: once ever, 200 points, reviewed by the club."""
    return Activity.objects.create(
        program=program,
        name="Away trip photo",
        points_awarded=200,
        frequency=Frequency.ONCE_EVER,
        verification_method=VerificationMethod.MANUAL_PROOF,
    )


# ===========================================
# Rewards
# ===========================================


@pytest.fixture
def reward_voucher(db, program):
    return Reward.objects.create(
        program=program,
        name="Shop voucher",
        points_cost=500,
        redemption_method=RedemptionMethod.VOUCHER,
        voucher_code="LIONS-2026",
    )


@pytest.fixture
def reward_code(db, program):
    """Signed scarf: code display, single unit."""
    return Reward.objects.create(
        program=program,
        name="Signed scarf",
        points_cost=300,
        quantity_limit=1,
        redemption_method=RedemptionMethod.CODE_DISPLAY,
    )


@pytest.fixture
def reward_manual(db, program):
    return Reward.objects.create(
        program=program,
        name="Meet the squad",
        points_cost=1000,
        redemption_method=RedemptionMethod.MANUAL_FULFILLMENT,
    )


# ===========================================
# Tiers
# ===========================================


@pytest.fixture
def tiers(db, program):
    """Bronze (0), Silver (500, x1.5, 10% off), Gold (2000, x2, 20% off, VIP)."""
    bronze = Tier.objects.create(program=program, name="Bronze", rank=1, points_threshold=0)
    silver = Tier.objects.create(program=program, name="Silver", rank=2, points_threshold=500)
    gold = Tier.objects.create(program=program, name="Gold", rank=3, points_threshold=2000)

    TierBenefit.objects.create(
        tier=silver, benefit_type=BenefitType.POINTS_MULTIPLIER, benefit_value=Decimal("1.5")
    )
    TierBenefit.objects.create(
        tier=silver, benefit_type=BenefitType.REWARD_DISCOUNT_PERCENT, benefit_value=Decimal("10")
    )
    TierBenefit.objects.create(
        tier=gold, benefit_type=BenefitType.POINTS_MULTIPLIER, benefit_value=Decimal("2")
    )
    TierBenefit.objects.create(
        tier=gold, benefit_type=BenefitType.REWARD_DISCOUNT_PERCENT, benefit_value=Decimal("20")
    )
    TierBenefit.objects.create(tier=gold, benefit_type=BenefitType.VIP_ACCESS)
    return {"bronze": bronze, "silver": silver, "gold": gold}
