"""Tier ladder and per-tier benefits."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class BenefitType(models.TextChoices):
    POINTS_MULTIPLIER = "points_multiplier", _("Points multiplier")
    REWARD_DISCOUNT_PERCENT = "reward_discount_percent", _("Reward discount (%)")
    VIP_ACCESS = "vip_access", _("VIP access")
    MONTHLY_BONUS_POINTS = "monthly_bonus_points", _("Monthly bonus points")


class Tier(models.Model):
    """Rank unlocked when lifetime_earned reaches points_threshold."""

    program = models.ForeignKey(
        "fanpoints.LoyaltyProgram",
        on_delete=models.CASCADE,
        related_name="tiers",
        verbose_name=_("program"),
    )
    name = models.CharField(_("name"), max_length=100)
    rank = models.PositiveIntegerField(_("rank"))
    points_threshold = models.PositiveIntegerField(
        _("points threshold"),
        help_text=_("Lifetime points needed to unlock this tier"),
    )

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("tier")
        verbose_name_plural = _("tiers")
        ordering = ["program", "rank"]
        constraints = [
            models.UniqueConstraint(
                fields=["program", "rank"],
                name="fanpoints_tier_program_rank_uniq",
            ),
        ]

    def __str__(self):
        return f"{self.name} (#{self.rank}, {self.points_threshold}+)"


class TierBenefit(models.Model):
    """
    One effect attached to a tier.

    Several rows of the same type on one tier are allowed; the Tier Engine
    applies only the last one created.
    """

    tier = models.ForeignKey(
        Tier,
        on_delete=models.CASCADE,
        related_name="benefits",
        verbose_name=_("tier"),
    )
    benefit_type = models.CharField(
        _("type"),
        max_length=30,
        choices=BenefitType.choices,
    )
    benefit_value = models.DecimalField(
        _("value"),
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
    )
    benefit_label = models.CharField(_("label"), max_length=200, blank=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        verbose_name = _("tier benefit")
        verbose_name_plural = _("tier benefits")
        ordering = ["tier", "created_at", "pk"]

    def __str__(self):
        if self.benefit_value is None:
            return self.get_benefit_type_display()
        return f"{self.get_benefit_type_display()}: {self.benefit_value}"
