from django.apps import AppConfig


class FanpointsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "fanpoints"
    verbose_name = "Fanpoints - Club Loyalty Points"
