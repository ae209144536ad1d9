"""ManualClaim model: human-reviewed path to a completion."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class ClaimStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    APPROVED = "approved", _("Approved")
    REJECTED = "rejected", _("Rejected")


class ManualClaim(models.Model):
    """
    Proof submitted by a fan for a manual_proof activity.

    pending -> approved | rejected, exactly once. Approval produces exactly one
    ActivityCompletion, linked through `completion`.
    """

    membership = models.ForeignKey(
        "fanpoints.Membership",
        on_delete=models.PROTECT,
        related_name="claims",
        verbose_name=_("membership"),
    )
    activity = models.ForeignKey(
        "fanpoints.Activity",
        on_delete=models.PROTECT,
        related_name="claims",
        verbose_name=_("activity"),
    )

    proof_url = models.URLField(_("proof URL"), blank=True)
    proof_description = models.TextField(_("proof description"), blank=True)
    match_id = models.CharField(
        _("match"),
        max_length=100,
        blank=True,
        help_text=_("Match the proof refers to (once-per-match activities)"),
    )

    status = models.CharField(
        _("status"),
        max_length=20,
        choices=ClaimStatus.choices,
        default=ClaimStatus.PENDING,
        db_index=True,
    )
    reviewed_by = models.CharField(_("reviewed by"), max_length=100, blank=True)
    reviewed_at = models.DateTimeField(_("reviewed at"), null=True, blank=True)
    rejection_reason = models.TextField(_("rejection reason"), blank=True)
    completion = models.OneToOneField(
        "fanpoints.ActivityCompletion",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="claim",
        verbose_name=_("completion"),
    )

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("manual claim")
        verbose_name_plural = _("manual claims")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["membership", "activity"],
                condition=models.Q(status__in=["pending", "approved"]),
                name="fanpoints_claim_open_uniq",
            ),
        ]

    def __str__(self):
        return f"Claim {self.pk} [{self.status}] {self.activity_id}"

    @property
    def is_resolved(self) -> bool:
        return self.status != ClaimStatus.PENDING
