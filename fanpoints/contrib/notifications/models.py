"""FanNotification model - per-fan feed of points events."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class NotificationType(models.TextChoices):
    POINTS_EARNED = "points_earned", _("Points earned")
    REWARD_REDEEMED = "reward_redeemed", _("Reward redeemed")
    REWARD_FULFILLED = "reward_fulfilled", _("Reward fulfilled")
    TIER_UPGRADED = "tier_upgraded", _("Tier upgraded")
    CLAIM_APPROVED = "claim_approved", _("Claim approved")
    CLAIM_REJECTED = "claim_rejected", _("Claim rejected")


class FanNotification(models.Model):
    """
    Single entry in a fan's notification feed.

    Written by signal receivers after the underlying transaction commits.
    Only read_at changes after creation.
    """

    fan = models.ForeignKey(
        "fanpoints.Fan",
        on_delete=models.CASCADE,
        related_name="notifications",
        verbose_name=_("fan"),
    )

    notification_type = models.CharField(
        _("type"),
        max_length=30,
        choices=NotificationType.choices,
        db_index=True,
    )
    title = models.CharField(_("title"), max_length=200)
    body = models.TextField(_("body"), blank=True)
    reference = models.CharField(
        _("reference"),
        max_length=100,
        blank=True,
        help_text=_("Source record (e.g. completion:12, redemption:7)"),
    )
    metadata = models.JSONField(_("metadata"), default=dict, blank=True)

    read_at = models.DateTimeField(_("read at"), null=True, blank=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("fan notification")
        verbose_name_plural = _("fan notifications")
        ordering = ["-created_at", "-pk"]
        indexes = [
            models.Index(fields=["fan", "-created_at"], name="fp_notification_feed_idx"),
            models.Index(fields=["fan", "read_at"], name="fp_notification_unread_idx"),
        ]

    def __str__(self):
        return f"[{self.notification_type}] {self.title}"

    @property
    def is_read(self) -> bool:
        return self.read_at is not None
