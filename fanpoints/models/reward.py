"""Reward catalog and append-only redemption facts."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class RedemptionMethod(models.TextChoices):
    VOUCHER = "voucher", _("Voucher")
    MANUAL_FULFILLMENT = "manual_fulfillment", _("Manual fulfillment")
    CODE_DISPLAY = "code_display", _("Code display")


CODE_ISSUING_METHODS = (RedemptionMethod.VOUCHER, RedemptionMethod.CODE_DISPLAY)


class Reward(models.Model):
    """
    Something a fan can buy with points.

    quantity_redeemed is a bounded counter: it is only ever incremented by a
    conditional update that re-checks quantity_limit at write time.
    """

    program = models.ForeignKey(
        "fanpoints.LoyaltyProgram",
        on_delete=models.CASCADE,
        related_name="rewards",
        verbose_name=_("program"),
    )
    name = models.CharField(_("name"), max_length=200)
    description = models.TextField(_("description"), blank=True)

    points_cost = models.PositiveIntegerField(_("points cost"))
    quantity_limit = models.PositiveIntegerField(
        _("quantity limit"),
        null=True,
        blank=True,
        help_text=_("Leave empty for unlimited stock"),
    )
    quantity_redeemed = models.PositiveIntegerField(_("quantity redeemed"), default=0)

    redemption_method = models.CharField(
        _("redemption method"),
        max_length=30,
        choices=RedemptionMethod.choices,
    )
    voucher_code = models.CharField(
        _("voucher code"),
        max_length=100,
        blank=True,
        help_text=_("Pre-provisioned code handed out for voucher rewards"),
    )
    is_active = models.BooleanField(_("active"), default=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("reward")
        verbose_name_plural = _("rewards")
        ordering = ["points_cost", "name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(points_cost__gt=0),
                name="fanpoints_reward_cost_positive",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(quantity_limit__isnull=True)
                    | models.Q(quantity_redeemed__lte=models.F("quantity_limit"))
                ),
                name="fanpoints_reward_stock_bounded",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.points_cost}pts)"

    @property
    def remaining_quantity(self) -> int | None:
        if self.quantity_limit is None:
            return None
        return max(0, self.quantity_limit - self.quantity_redeemed)

    @property
    def in_stock(self) -> bool:
        return self.quantity_limit is None or self.quantity_redeemed < self.quantity_limit


class RewardRedemption(models.Model):
    """
    Immutable record of points exchanged for a reward.

    Only fulfilled_at/fulfilled_by are written after creation, by
    services.redemption.mark_fulfilled.
    """

    membership = models.ForeignKey(
        "fanpoints.Membership",
        on_delete=models.PROTECT,
        related_name="redemptions",
        verbose_name=_("membership"),
    )
    reward = models.ForeignKey(
        Reward,
        on_delete=models.PROTECT,
        related_name="redemptions",
        verbose_name=_("reward"),
    )

    points_spent = models.PositiveIntegerField(_("points spent"))
    discount_percent = models.PositiveSmallIntegerField(_("discount percent"), default=0)
    redemption_code = models.CharField(
        _("redemption code"),
        max_length=100,
        null=True,
        blank=True,
    )
    code_generated = models.BooleanField(
        _("generated code"),
        default=False,
        help_text=_("Generated codes are unique; pre-provisioned voucher codes are shared"),
    )

    redeemed_at = models.DateTimeField(_("redeemed at"), auto_now_add=True, db_index=True)
    fulfilled_at = models.DateTimeField(_("fulfilled at"), null=True, blank=True)
    fulfilled_by = models.CharField(_("fulfilled by"), max_length=100, blank=True)

    class Meta:
        verbose_name = _("reward redemption")
        verbose_name_plural = _("reward redemptions")
        ordering = ["-redeemed_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["redemption_code"],
                condition=models.Q(code_generated=True),
                name="fanpoints_redemption_generated_code_uniq",
            ),
        ]
        indexes = [
            models.Index(fields=["membership", "-redeemed_at"], name="fp_redemption_member_idx"),
        ]

    def __str__(self):
        return f"-{self.points_spent}pts {self.reward_id} [{self.redemption_code or 'pending'}]"

    @property
    def is_fulfilled(self) -> bool:
        return self.fulfilled_at is not None

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("RewardRedemption is append-only")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("RewardRedemption is append-only")
