"""Notifications app config."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class NotificationsConfig(AppConfig):
    name = "fanpoints.contrib.notifications"
    label = "fanpoints_notifications"
    verbose_name = _("Fan Notifications")
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        from fanpoints.contrib.notifications import receivers  # noqa: F401
