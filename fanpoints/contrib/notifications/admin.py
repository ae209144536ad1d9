"""Notifications admin."""

from django.contrib import admin
from django.utils.html import format_html

from fanpoints.contrib.notifications.models import FanNotification


@admin.register(FanNotification)
class FanNotificationAdmin(admin.ModelAdmin):
    list_display = [
        "created_at",
        "type_badge",
        "fan_link",
        "title",
        "read_at",
    ]
    list_filter = ["notification_type"]
    search_fields = ["fan__code", "fan__display_name", "title", "reference"]
    raw_id_fields = ["fan"]
    readonly_fields = ["created_at"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    def type_badge(self, obj):
        colors = {
            "points_earned": "#28a745",
            "reward_redeemed": "#007bff",
            "reward_fulfilled": "#17a2b8",
            "tier_upgraded": "#ffc107",
            "claim_approved": "#20c997",
            "claim_rejected": "#dc3545",
        }
        color = colors.get(obj.notification_type, "#6c757d")
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:3px; font-size:11px;">{}</span>',
            color,
            obj.get_notification_type_display(),
        )

    type_badge.short_description = "Type"

    def fan_link(self, obj):
        from django.urls import reverse

        url = reverse("admin:fanpoints_fan_change", args=[obj.fan.pk])
        return format_html('<a href="{}">{}</a>', url, obj.fan.code)

    fan_link.short_description = "Fan"
