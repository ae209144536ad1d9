"""Tests for the tier engine."""

from decimal import Decimal

import pytest

from fanpoints.exceptions import FanPointsError
from fanpoints.models import BenefitType, Tier, TierBenefit
from fanpoints.services import tiers as tier_service
from fanpoints.services.tiers import BenefitEffects
from fanpoints.tests.conftest import set_points


def _ladder():
    return [
        Tier(name="Gold", rank=3, points_threshold=2000),
        Tier(name="Bronze", rank=1, points_threshold=0),
        Tier(name="Silver", rank=2, points_threshold=500),
    ]


class TestComputeTier:
    """Pure function over an unsorted ladder."""

    @pytest.mark.parametrize(
        "lifetime,current,following",
        [
            (0, "Bronze", "Silver"),
            (499, "Bronze", "Silver"),
            (500, "Silver", "Gold"),
            (1999, "Silver", "Gold"),
            (2000, "Gold", None),
            (10**9, "Gold", None),
        ],
    )
    def test_thresholds(self, lifetime, current, following):
        cur, nxt = tier_service.compute_tier(lifetime, _ladder())
        assert cur.name == current
        assert (nxt.name if nxt else None) == following

    def test_below_first_threshold(self):
        ladder = [Tier(name="Silver", rank=1, points_threshold=100)]
        assert tier_service.compute_tier(50, ladder) == (None, ladder[0])

    def test_no_tiers(self):
        assert tier_service.compute_tier(500, []) == (None, None)

    def test_rank_monotonic_in_lifetime(self):
        ladder = _ladder()
        ranks = [tier_service.compute_tier(points, ladder)[0].rank for points in range(0, 3000, 50)]
        assert ranks == sorted(ranks)


class TestResolveBenefits:
    def test_defaults(self):
        assert tier_service.resolve_benefits([]) == BenefitEffects()
        assert tier_service.NO_EFFECTS.multiplier == Decimal("1")

    def test_last_wins_per_type(self):
        benefits = [
            TierBenefit(benefit_type=BenefitType.POINTS_MULTIPLIER, benefit_value=Decimal("1.5")),
            TierBenefit(benefit_type=BenefitType.REWARD_DISCOUNT_PERCENT, benefit_value=Decimal("10")),
            TierBenefit(benefit_type=BenefitType.POINTS_MULTIPLIER, benefit_value=Decimal("2")),
        ]

        effects = tier_service.resolve_benefits(benefits)

        assert effects.multiplier == Decimal("2")
        assert effects.discount_percent == 10

    def test_discount_clamped(self):
        benefits = [
            TierBenefit(benefit_type=BenefitType.REWARD_DISCOUNT_PERCENT, benefit_value=Decimal("150")),
        ]
        assert tier_service.resolve_benefits(benefits).discount_percent == 100

    def test_vip_and_bonus(self):
        benefits = [
            TierBenefit(benefit_type=BenefitType.VIP_ACCESS, benefit_label="Lounge"),
            TierBenefit(benefit_type=BenefitType.MONTHLY_BONUS_POINTS, benefit_value=Decimal("50")),
        ]
        effects = tier_service.resolve_benefits(benefits)
        assert effects.vip is True
        assert effects.monthly_bonus == 50

    @pytest.mark.django_db
    def test_stored_benefits_in_creation_order(self, tiers):
        TierBenefit.objects.create(
            tier=tiers["gold"],
            benefit_type=BenefitType.POINTS_MULTIPLIER,
            benefit_value=Decimal("3"),
        )

        effects = tier_service.effects_for(tiers["gold"])

        assert effects.multiplier == Decimal("3")
        assert effects.discount_percent == 20
        assert effects.vip is True


class TestArithmetic:
    @pytest.mark.parametrize(
        "cost,discount,expected",
        [(500, 20, 400), (500, 0, 500), (333, 10, 300), (5, 50, 3), (100, 100, 0)],
    )
    def test_apply_discount(self, cost, discount, expected):
        assert tier_service.apply_discount(cost, discount) == expected

    @pytest.mark.parametrize(
        "points,multiplier,expected",
        [
            (100, Decimal("1.5"), 150),
            (15, Decimal("1.5"), 23),
            (7, Decimal("1.25"), 9),
            (10, Decimal("1"), 10),
            (5, Decimal("0.05"), 1),
            (5, Decimal("0"), 1),
        ],
    )
    def test_apply_multiplier(self, points, multiplier, expected):
        assert tier_service.apply_multiplier(points, multiplier) == expected


@pytest.mark.django_db
class TestStanding:
    def test_between_tiers(self, membership, tiers):
        set_points(membership, 100, lifetime_earned=1250)

        standing = tier_service.standing(membership.pk)

        assert standing.current == tiers["silver"]
        assert standing.next == tiers["gold"]
        assert standing.points_to_next == 750
        assert standing.progress_percent == 50
        assert standing.effects.multiplier == Decimal("1.5")

    def test_top_tier(self, membership, tiers):
        set_points(membership, 0, lifetime_earned=5000)

        standing = tier_service.standing(membership.pk)

        assert standing.current == tiers["gold"]
        assert standing.next is None
        assert standing.points_to_next is None
        assert standing.progress_percent == 100

    def test_spending_keeps_tier(self, membership, tiers):
        """Test tier follows lifetime points, not balance."""
        set_points(membership, 0, lifetime_earned=600)
        assert tier_service.standing(membership.pk).current == tiers["silver"]

    def test_unknown_membership(self, db):
        with pytest.raises(FanPointsError) as exc:
            tier_service.standing(123456)
        assert exc.value.code == "MEMBERSHIP_NOT_FOUND"
