# Initial fan notifications schema

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("fanpoints", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="FanNotification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "notification_type",
                    models.CharField(
                        choices=[
                            ("points_earned", "Points earned"),
                            ("reward_redeemed", "Reward redeemed"),
                            ("reward_fulfilled", "Reward fulfilled"),
                            ("tier_upgraded", "Tier upgraded"),
                            ("claim_approved", "Claim approved"),
                            ("claim_rejected", "Claim rejected"),
                        ],
                        db_index=True,
                        max_length=30,
                        verbose_name="type",
                    ),
                ),
                ("title", models.CharField(max_length=200, verbose_name="title")),
                ("body", models.TextField(blank=True, verbose_name="body")),
                (
                    "reference",
                    models.CharField(
                        blank=True,
                        help_text="Source record (e.g. completion:12, redemption:7)",
                        max_length=100,
                        verbose_name="reference",
                    ),
                ),
                ("metadata", models.JSONField(blank=True, default=dict, verbose_name="metadata")),
                ("read_at", models.DateTimeField(blank=True, null=True, verbose_name="read at")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                (
                    "fan",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to="fanpoints.fan",
                        verbose_name="fan",
                    ),
                ),
            ],
            options={
                "verbose_name": "fan notification",
                "verbose_name_plural": "fan notifications",
                "ordering": ["-created_at", "-pk"],
                "indexes": [
                    models.Index(fields=["fan", "-created_at"], name="fp_notification_feed_idx"),
                    models.Index(fields=["fan", "read_at"], name="fp_notification_unread_idx"),
                ],
            },
        ),
    ]
