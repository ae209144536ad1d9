"""Activity catalog and append-only completion facts."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Frequency(models.TextChoices):
    """How often one membership may be credited for one activity."""

    ONCE_EVER = "once_ever", _("Once ever")
    ONCE_PER_MATCH = "once_per_match", _("Once per match")
    ONCE_PER_DAY = "once_per_day", _("Once per day")
    UNLIMITED = "unlimited", _("Unlimited")


class VerificationMethod(models.TextChoices):
    """Front-end that establishes the real-world condition was met."""

    QR_SCAN = "qr_scan", _("QR scan")
    LOCATION_CHECKIN = "location_checkin", _("Location check-in")
    IN_APP_COMPLETION = "in_app_completion", _("In-app completion")
    MANUAL_PROOF = "manual_proof", _("Manual proof")


class Activity(models.Model):
    """
    Something a fan can do to earn points, configured by a club admin.

    The points core only reads these rows; QR payloads and geofences are
    checked by the verification front-ends before attempt_completion.
    """

    program = models.ForeignKey(
        "fanpoints.LoyaltyProgram",
        on_delete=models.CASCADE,
        related_name="activities",
        verbose_name=_("program"),
    )
    name = models.CharField(_("name"), max_length=200)
    description = models.TextField(_("description"), blank=True)

    points_awarded = models.PositiveIntegerField(_("points awarded"))
    frequency = models.CharField(
        _("frequency"),
        max_length=20,
        choices=Frequency.choices,
    )
    verification_method = models.CharField(
        _("verification method"),
        max_length=30,
        choices=VerificationMethod.choices,
    )

    time_window_start = models.DateTimeField(_("window start"), null=True, blank=True)
    time_window_end = models.DateTimeField(_("window end"), null=True, blank=True)
    is_active = models.BooleanField(_("active"), default=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("activity")
        verbose_name_plural = _("activities")
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(points_awarded__gt=0),
                name="fanpoints_activity_points_positive",
            ),
        ]

    def __str__(self):
        return f"{self.name} (+{self.points_awarded})"

    def is_within_window(self, at) -> bool:
        """True when `at` falls inside the optional [start, end] window."""
        if self.time_window_start and at < self.time_window_start:
            return False
        if self.time_window_end and at > self.time_window_end:
            return False
        return True


class ActivityCompletion(models.Model):
    """
    Immutable record that a membership was credited for an activity.

    frequency_key holds the policy bucket ("ever", "day:2026-10-18",
    "match:<id>"); the unique constraint on it is what stops double awards.
    Unlimited activities store NULL, which never collides.
    """

    membership = models.ForeignKey(
        "fanpoints.Membership",
        on_delete=models.PROTECT,
        related_name="completions",
        verbose_name=_("membership"),
    )
    activity = models.ForeignKey(
        Activity,
        on_delete=models.PROTECT,
        related_name="completions",
        verbose_name=_("activity"),
    )

    points_earned = models.PositiveIntegerField(_("points earned"))
    base_points = models.PositiveIntegerField(_("base points"))
    multiplier = models.DecimalField(
        _("multiplier"),
        max_digits=6,
        decimal_places=2,
        default=1,
    )
    frequency_key = models.CharField(
        _("frequency key"),
        max_length=100,
        null=True,
        blank=True,
    )
    verification_method = models.CharField(
        _("verification method"),
        max_length=30,
        choices=VerificationMethod.choices,
    )
    metadata = models.JSONField(_("metadata"), default=dict, blank=True)

    completed_at = models.DateTimeField(_("completed at"), db_index=True)

    class Meta:
        verbose_name = _("activity completion")
        verbose_name_plural = _("activity completions")
        ordering = ["-completed_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["membership", "activity", "frequency_key"],
                name="fanpoints_completion_frequency_uniq",
            ),
        ]
        indexes = [
            models.Index(fields=["membership", "activity"], name="fp_completion_member_idx"),
        ]

    def __str__(self):
        return f"+{self.points_earned}pts {self.activity_id} [{self.frequency_key or '-'}]"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("ActivityCompletion is append-only")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("ActivityCompletion is append-only")
