"""
Fanpoints Notifications - In-app feed of points events per fan.

Listens to the core fanpoints signals and stores one notification per
committed event: points earned, rewards redeemed or fulfilled, tier
upgrades and claim decisions.

Usage:
    INSTALLED_APPS = [
        ...
        "fanpoints",
        "fanpoints.contrib.notifications",
    ]

    from fanpoints.contrib.notifications import NotificationService

    feed = NotificationService.get_notifications(fan_code, unread_only=True)
    NotificationService.mark_read(fan_code)
"""


def __getattr__(name):
    if name == "NotificationService":
        from fanpoints.contrib.notifications.service import NotificationService

        return NotificationService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["NotificationService"]
