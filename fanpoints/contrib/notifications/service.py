"""Notification service - write and read a fan's feed."""

import logging

from django.utils import timezone

from fanpoints.contrib.notifications.models import FanNotification
from fanpoints.exceptions import FanPointsError
from fanpoints.models import Fan

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Service for fan notification feeds.

    Uses @classmethod for extensibility (consistent with PointsService).
    """

    @classmethod
    def notify(
        cls,
        fan_code: str,
        notification_type: str,
        title: str,
        body: str = "",
        reference: str = "",
        metadata: dict | None = None,
    ) -> FanNotification:
        """
        Append a notification to a fan's feed.

        Args:
            fan_code: Fan code
            notification_type: One of NotificationType
            title: Short headline
            body: Longer text
            reference: Source record (completion:12, redemption:7)
            metadata: Extra data as JSON

        Returns:
            Created FanNotification

        Raises:
            FanPointsError: FAN_NOT_FOUND
        """
        try:
            fan = Fan.objects.get(code=fan_code)
        except Fan.DoesNotExist:
            raise FanPointsError("FAN_NOT_FOUND", fan_code=fan_code)

        notification = FanNotification.objects.create(
            fan=fan,
            notification_type=notification_type,
            title=title,
            body=body,
            reference=reference,
            metadata=metadata or {},
        )
        logger.debug("Notified fan %s: %s", fan.code, notification_type)
        return notification

    @classmethod
    def get_notifications(
        cls,
        fan_code: str,
        limit: int = 50,
        unread_only: bool = False,
        notification_type: str | None = None,
    ) -> list[FanNotification]:
        """Feed for a fan, most recent first."""
        qs = FanNotification.objects.filter(fan__code=fan_code)
        if unread_only:
            qs = qs.filter(read_at__isnull=True)
        if notification_type:
            qs = qs.filter(notification_type=notification_type)
        return list(qs[:limit])

    @classmethod
    def unread_count(cls, fan_code: str) -> int:
        return FanNotification.objects.filter(fan__code=fan_code, read_at__isnull=True).count()

    @classmethod
    def mark_read(cls, fan_code: str, notification_ids: list[int] | None = None) -> int:
        """
        Mark notifications as read.

        Args:
            fan_code: Fan code
            notification_ids: Specific notifications (default: all unread)

        Returns:
            Number of notifications marked
        """
        qs = FanNotification.objects.filter(fan__code=fan_code, read_at__isnull=True)
        if notification_ids is not None:
            qs = qs.filter(pk__in=notification_ids)
        return qs.update(read_at=timezone.now())
