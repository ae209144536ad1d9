"""Fan model."""

import uuid as uuid_lib

from django.db import models
from django.utils.translation import gettext_lazy as _


class Fan(models.Model):
    """
    A supporter who can join club programs.

    Identity only: authentication lives in the host project, which maps its
    users to fans by code.
    """

    code = models.CharField(
        _("code"),
        max_length=50,
        unique=True,
        help_text=_("Unique fan code (e.g. FAN-001)"),
    )
    uuid = models.UUIDField(default=uuid_lib.uuid4, editable=False, unique=True)
    display_name = models.CharField(_("display name"), max_length=150)
    email = models.EmailField(_("email"), blank=True)
    is_active = models.BooleanField(_("active"), default=True, db_index=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        verbose_name = _("fan")
        verbose_name_plural = _("fans")
        ordering = ["display_name"]

    def __str__(self):
        return f"{self.display_name} ({self.code})"
