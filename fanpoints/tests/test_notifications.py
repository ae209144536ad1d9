"""Tests for the notifications contrib app."""

import pytest

from fanpoints.contrib.notifications import NotificationService
from fanpoints.contrib.notifications.models import FanNotification, NotificationType
from fanpoints.exceptions import FanPointsError
from fanpoints.services import claims, completion, redemption
from fanpoints.tests.conftest import QR, set_points


pytestmark = pytest.mark.django_db


class TestNotificationService:
    def test_notify_and_read(self, fan):
        NotificationService.notify(fan.code, NotificationType.POINTS_EARNED, "+10 Roars")
        NotificationService.notify(fan.code, NotificationType.TIER_UPGRADED, "Welcome to Silver")

        assert NotificationService.unread_count(fan.code) == 2
        feed = NotificationService.get_notifications(fan.code)
        assert [n.title for n in feed] == ["Welcome to Silver", "+10 Roars"]

        marked = NotificationService.mark_read(fan.code, [feed[0].pk])
        assert marked == 1
        assert NotificationService.unread_count(fan.code) == 1
        assert [n.title for n in NotificationService.get_notifications(fan.code, unread_only=True)] == [
            "+10 Roars"
        ]

    def test_mark_all_read(self, fan):
        NotificationService.notify(fan.code, NotificationType.POINTS_EARNED, "+10")
        NotificationService.notify(fan.code, NotificationType.POINTS_EARNED, "+20")

        assert NotificationService.mark_read(fan.code) == 2
        assert NotificationService.unread_count(fan.code) == 0

    def test_filter_by_type(self, fan):
        NotificationService.notify(fan.code, NotificationType.POINTS_EARNED, "+10")
        NotificationService.notify(fan.code, NotificationType.CLAIM_REJECTED, "Claim rejected")

        feed = NotificationService.get_notifications(
            fan.code, notification_type=NotificationType.CLAIM_REJECTED
        )
        assert len(feed) == 1

    def test_unknown_fan(self, db):
        with pytest.raises(FanPointsError) as exc:
            NotificationService.notify("NOBODY", NotificationType.POINTS_EARNED, "+1")
        assert exc.value.code == "FAN_NOT_FOUND"


class TestReceivers:
    """Committed points events land in the fan's feed."""

    def test_points_earned(self, fan, membership, activity_qr, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            completion.attempt_completion(membership.pk, activity_qr.pk, QR)

        note = FanNotification.objects.get(fan=fan)
        assert note.notification_type == NotificationType.POINTS_EARNED
        assert note.title == "+100 Roars"
        assert note.metadata == {"balance": 100}

    def test_nothing_before_commit(self, fan, membership, activity_qr, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            completion.attempt_completion(membership.pk, activity_qr.pk, QR)

        assert len(callbacks) == 1
        assert not FanNotification.objects.exists()

    def test_tier_upgrade(self, fan, membership, tiers, activity_qr, django_capture_on_commit_callbacks):
        set_points(membership, 450)

        with django_capture_on_commit_callbacks(execute=True):
            completion.attempt_completion(membership.pk, activity_qr.pk, QR)

        types = set(FanNotification.objects.values_list("notification_type", flat=True))
        assert types == {NotificationType.POINTS_EARNED, NotificationType.TIER_UPGRADED}
        upgrade = FanNotification.objects.get(notification_type=NotificationType.TIER_UPGRADED)
        assert upgrade.title == "Welcome to Silver"

    def test_reward_redeemed_and_fulfilled(
        self, fan, membership, reward_manual, django_capture_on_commit_callbacks
    ):
        set_points(membership, 1000)

        with django_capture_on_commit_callbacks(execute=True):
            result = redemption.redeem(membership.pk, reward_manual.pk)
        with django_capture_on_commit_callbacks(execute=True):
            redemption.mark_fulfilled(result.redemption.pk, "staff")

        assert list(
            FanNotification.objects.order_by("pk").values_list("notification_type", flat=True)
        ) == [NotificationType.REWARD_REDEEMED, NotificationType.REWARD_FULFILLED]

    def test_redemption_code_in_metadata(
        self, fan, membership, reward_voucher, django_capture_on_commit_callbacks
    ):
        set_points(membership, 500)

        with django_capture_on_commit_callbacks(execute=True):
            redemption.redeem(membership.pk, reward_voucher.pk)

        note = FanNotification.objects.get(notification_type=NotificationType.REWARD_REDEEMED)
        assert note.metadata["redemption_code"] == "LIONS-2026"

    def test_claim_rejected(self, fan, membership, activity_manual, django_capture_on_commit_callbacks):
        claim = claims.submit_claim(membership.pk, activity_manual.pk, proof_description="Selfie")

        with django_capture_on_commit_callbacks(execute=True):
            claims.review_claim(claim.pk, "reject", reviewer="admin", reason="Wrong stadium")

        note = FanNotification.objects.get(notification_type=NotificationType.CLAIM_REJECTED)
        assert note.body == "Wrong stadium"
        assert note.reference == f"claim:{claim.pk}"
