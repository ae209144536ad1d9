"""Club, verification evidence, and loyalty program models."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class ClubStatus(models.TextChoices):
    """Club verification status. Only verified/official clubs move points."""

    UNVERIFIED = "unverified", _("Unverified")
    VERIFIED = "verified", _("Verified")
    OFFICIAL = "official", _("Official")


LIVE_CLUB_STATUSES = (ClubStatus.VERIFIED, ClubStatus.OFFICIAL)


class Club(models.Model):
    """
    Football club owning one loyalty program.

    status is driven by services.verification: automatic promotion when the
    verification evidence is sufficient, or an administrative override.
    """

    code = models.SlugField(_("code"), max_length=50, unique=True)
    name = models.CharField(_("name"), max_length=200)
    country = models.CharField(_("country"), max_length=100, blank=True)
    city = models.CharField(_("city"), max_length=100, blank=True)

    status = models.CharField(
        _("status"),
        max_length=20,
        choices=ClubStatus.choices,
        default=ClubStatus.UNVERIFIED,
        db_index=True,
    )
    verified_at = models.DateTimeField(_("verified at"), null=True, blank=True)
    verified_by = models.CharField(
        _("verified by"),
        max_length=100,
        blank=True,
        help_text=_("Administrator who forced verification (blank when automatic)"),
    )

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("club")
        verbose_name_plural = _("clubs")
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.status})"

    @property
    def is_live(self) -> bool:
        return self.status in LIVE_CLUB_STATUSES


class ClubVerification(models.Model):
    """
    Evidence submitted by a club admin to get the club verified.

    Two of the three signals are enough for automatic verification.
    """

    club = models.OneToOneField(
        Club,
        on_delete=models.CASCADE,
        related_name="verification",
        verbose_name=_("club"),
    )
    official_email_domain = models.CharField(
        _("official email domain"),
        max_length=200,
        blank=True,
        help_text=_("Domain of the club's official email (free-mail domains do not count)"),
    )
    public_link = models.URLField(_("public link"), blank=True)
    authority_declaration = models.BooleanField(_("authority declaration"), default=False)
    verified_at = models.DateTimeField(_("verified at"), null=True, blank=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("club verification")
        verbose_name_plural = _("club verifications")

    def __str__(self):
        return f"Verification: {self.club.name}"


class LoyaltyProgram(models.Model):
    """A club's loyalty program. Activities, rewards and tiers hang off it."""

    club = models.OneToOneField(
        Club,
        on_delete=models.CASCADE,
        related_name="program",
        verbose_name=_("club"),
    )
    name = models.CharField(_("name"), max_length=200)
    description = models.TextField(_("description"), blank=True)
    points_currency_name = models.CharField(
        _("points currency name"),
        max_length=50,
        default="Points",
    )
    is_active = models.BooleanField(_("active"), default=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("loyalty program")
        verbose_name_plural = _("loyalty programs")

    def __str__(self):
        return self.name
