"""Membership model: the points ledger row."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Membership(models.Model):
    """
    A fan's enrollment in one club program.

    balance is spendable; lifetime_earned only ever grows and drives tier.
    Both are mutated exclusively by services.ledger through conditional
    F-expression updates. tier is a cache refreshed after every credit.
    """

    fan = models.ForeignKey(
        "fanpoints.Fan",
        on_delete=models.PROTECT,
        related_name="memberships",
        verbose_name=_("fan"),
    )
    program = models.ForeignKey(
        "fanpoints.LoyaltyProgram",
        on_delete=models.PROTECT,
        related_name="memberships",
        verbose_name=_("program"),
    )

    balance = models.IntegerField(
        _("balance"),
        default=0,
        help_text=_("Points available to spend"),
    )
    lifetime_earned = models.IntegerField(
        _("lifetime earned"),
        default=0,
        help_text=_("Total points ever credited (never decreases)"),
    )
    tier = models.ForeignKey(
        "fanpoints.Tier",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("tier"),
    )

    is_active = models.BooleanField(_("active"), default=True)
    joined_at = models.DateTimeField(_("joined at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("membership")
        verbose_name_plural = _("memberships")
        constraints = [
            models.UniqueConstraint(
                fields=["fan", "program"],
                name="fanpoints_membership_fan_program_uniq",
            ),
            models.CheckConstraint(
                condition=models.Q(balance__gte=0),
                name="fanpoints_membership_balance_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(lifetime_earned__gte=0),
                name="fanpoints_membership_lifetime_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["program", "-lifetime_earned"], name="fp_membership_leader_idx"),
        ]

    def __str__(self):
        return f"{self.fan.code}@{self.program_id}: {self.balance}pts"
