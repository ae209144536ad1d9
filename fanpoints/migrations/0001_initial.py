# Initial fanpoints schema

import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Club",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.SlugField(unique=True, verbose_name="code")),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("country", models.CharField(blank=True, max_length=100, verbose_name="country")),
                ("city", models.CharField(blank=True, max_length=100, verbose_name="city")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("unverified", "Unverified"),
                            ("verified", "Verified"),
                            ("official", "Official"),
                        ],
                        db_index=True,
                        default="unverified",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("verified_at", models.DateTimeField(blank=True, null=True, verbose_name="verified at")),
                (
                    "verified_by",
                    models.CharField(
                        blank=True,
                        help_text="Administrator who forced verification (blank when automatic)",
                        max_length=100,
                        verbose_name="verified by",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "club",
                "verbose_name_plural": "clubs",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Fan",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "code",
                    models.CharField(
                        help_text="Unique fan code (e.g. FAN-001)",
                        max_length=50,
                        unique=True,
                        verbose_name="code",
                    ),
                ),
                ("uuid", models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ("display_name", models.CharField(max_length=150, verbose_name="display name")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="email")),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "fan",
                "verbose_name_plural": "fans",
                "ordering": ["display_name"],
            },
        ),
        migrations.CreateModel(
            name="ClubVerification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "official_email_domain",
                    models.CharField(
                        blank=True,
                        help_text="Domain of the club's official email (free-mail domains do not count)",
                        max_length=200,
                        verbose_name="official email domain",
                    ),
                ),
                ("public_link", models.URLField(blank=True, verbose_name="public link")),
                ("authority_declaration", models.BooleanField(default=False, verbose_name="authority declaration")),
                ("verified_at", models.DateTimeField(blank=True, null=True, verbose_name="verified at")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "club",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="verification",
                        to="fanpoints.club",
                        verbose_name="club",
                    ),
                ),
            ],
            options={
                "verbose_name": "club verification",
                "verbose_name_plural": "club verifications",
            },
        ),
        migrations.CreateModel(
            name="LoyaltyProgram",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("description", models.TextField(blank=True, verbose_name="description")),
                (
                    "points_currency_name",
                    models.CharField(default="Points", max_length=50, verbose_name="points currency name"),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "club",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="program",
                        to="fanpoints.club",
                        verbose_name="club",
                    ),
                ),
            ],
            options={
                "verbose_name": "loyalty program",
                "verbose_name_plural": "loyalty programs",
            },
        ),
        migrations.CreateModel(
            name="Tier",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, verbose_name="name")),
                ("rank", models.PositiveIntegerField(verbose_name="rank")),
                (
                    "points_threshold",
                    models.PositiveIntegerField(
                        help_text="Lifetime points needed to unlock this tier",
                        verbose_name="points threshold",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tiers",
                        to="fanpoints.loyaltyprogram",
                        verbose_name="program",
                    ),
                ),
            ],
            options={
                "verbose_name": "tier",
                "verbose_name_plural": "tiers",
                "ordering": ["program", "rank"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("program", "rank"),
                        name="fanpoints_tier_program_rank_uniq",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="TierBenefit",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "benefit_type",
                    models.CharField(
                        choices=[
                            ("points_multiplier", "Points multiplier"),
                            ("reward_discount_percent", "Reward discount (%)"),
                            ("vip_access", "VIP access"),
                            ("monthly_bonus_points", "Monthly bonus points"),
                        ],
                        max_length=30,
                        verbose_name="type",
                    ),
                ),
                (
                    "benefit_value",
                    models.DecimalField(
                        blank=True, decimal_places=2, max_digits=12, null=True, verbose_name="value"
                    ),
                ),
                ("benefit_label", models.CharField(blank=True, max_length=200, verbose_name="label")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                (
                    "tier",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="benefits",
                        to="fanpoints.tier",
                        verbose_name="tier",
                    ),
                ),
            ],
            options={
                "verbose_name": "tier benefit",
                "verbose_name_plural": "tier benefits",
                "ordering": ["tier", "created_at", "pk"],
            },
        ),
        migrations.CreateModel(
            name="Membership",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "balance",
                    models.IntegerField(default=0, help_text="Points available to spend", verbose_name="balance"),
                ),
                (
                    "lifetime_earned",
                    models.IntegerField(
                        default=0,
                        help_text="Total points ever credited (never decreases)",
                        verbose_name="lifetime earned",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("joined_at", models.DateTimeField(auto_now_add=True, verbose_name="joined at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "fan",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="memberships",
                        to="fanpoints.fan",
                        verbose_name="fan",
                    ),
                ),
                (
                    "program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="memberships",
                        to="fanpoints.loyaltyprogram",
                        verbose_name="program",
                    ),
                ),
                (
                    "tier",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="fanpoints.tier",
                        verbose_name="tier",
                    ),
                ),
            ],
            options={
                "verbose_name": "membership",
                "verbose_name_plural": "memberships",
                "indexes": [
                    models.Index(fields=["program", "-lifetime_earned"], name="fp_membership_leader_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("fan", "program"),
                        name="fanpoints_membership_fan_program_uniq",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("balance__gte", 0)),
                        name="fanpoints_membership_balance_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("lifetime_earned__gte", 0)),
                        name="fanpoints_membership_lifetime_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Activity",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("description", models.TextField(blank=True, verbose_name="description")),
                ("points_awarded", models.PositiveIntegerField(verbose_name="points awarded")),
                (
                    "frequency",
                    models.CharField(
                        choices=[
                            ("once_ever", "Once ever"),
                            ("once_per_match", "Once per match"),
                            ("once_per_day", "Once per day"),
                            ("unlimited", "Unlimited"),
                        ],
                        max_length=20,
                        verbose_name="frequency",
                    ),
                ),
                (
                    "verification_method",
                    models.CharField(
                        choices=[
                            ("qr_scan", "QR scan"),
                            ("location_checkin", "Location check-in"),
                            ("in_app_completion", "In-app completion"),
                            ("manual_proof", "Manual proof"),
                        ],
                        max_length=30,
                        verbose_name="verification method",
                    ),
                ),
                ("time_window_start", models.DateTimeField(blank=True, null=True, verbose_name="window start")),
                ("time_window_end", models.DateTimeField(blank=True, null=True, verbose_name="window end")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="activities",
                        to="fanpoints.loyaltyprogram",
                        verbose_name="program",
                    ),
                ),
            ],
            options={
                "verbose_name": "activity",
                "verbose_name_plural": "activities",
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("points_awarded__gt", 0)),
                        name="fanpoints_activity_points_positive",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="ActivityCompletion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("points_earned", models.PositiveIntegerField(verbose_name="points earned")),
                ("base_points", models.PositiveIntegerField(verbose_name="base points")),
                (
                    "multiplier",
                    models.DecimalField(decimal_places=2, default=1, max_digits=6, verbose_name="multiplier"),
                ),
                (
                    "frequency_key",
                    models.CharField(blank=True, max_length=100, null=True, verbose_name="frequency key"),
                ),
                (
                    "verification_method",
                    models.CharField(
                        choices=[
                            ("qr_scan", "QR scan"),
                            ("location_checkin", "Location check-in"),
                            ("in_app_completion", "In-app completion"),
                            ("manual_proof", "Manual proof"),
                        ],
                        max_length=30,
                        verbose_name="verification method",
                    ),
                ),
                ("metadata", models.JSONField(blank=True, default=dict, verbose_name="metadata")),
                ("completed_at", models.DateTimeField(db_index=True, verbose_name="completed at")),
                (
                    "activity",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="completions",
                        to="fanpoints.activity",
                        verbose_name="activity",
                    ),
                ),
                (
                    "membership",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="completions",
                        to="fanpoints.membership",
                        verbose_name="membership",
                    ),
                ),
            ],
            options={
                "verbose_name": "activity completion",
                "verbose_name_plural": "activity completions",
                "ordering": ["-completed_at"],
                "indexes": [
                    models.Index(fields=["membership", "activity"], name="fp_completion_member_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("membership", "activity", "frequency_key"),
                        name="fanpoints_completion_frequency_uniq",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="ManualClaim",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("proof_url", models.URLField(blank=True, verbose_name="proof URL")),
                ("proof_description", models.TextField(blank=True, verbose_name="proof description")),
                (
                    "match_id",
                    models.CharField(
                        blank=True,
                        help_text="Match the proof refers to (once-per-match activities)",
                        max_length=100,
                        verbose_name="match",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("approved", "Approved"),
                            ("rejected", "Rejected"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("reviewed_by", models.CharField(blank=True, max_length=100, verbose_name="reviewed by")),
                ("reviewed_at", models.DateTimeField(blank=True, null=True, verbose_name="reviewed at")),
                ("rejection_reason", models.TextField(blank=True, verbose_name="rejection reason")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "activity",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="claims",
                        to="fanpoints.activity",
                        verbose_name="activity",
                    ),
                ),
                (
                    "completion",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="claim",
                        to="fanpoints.activitycompletion",
                        verbose_name="completion",
                    ),
                ),
                (
                    "membership",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="claims",
                        to="fanpoints.membership",
                        verbose_name="membership",
                    ),
                ),
            ],
            options={
                "verbose_name": "manual claim",
                "verbose_name_plural": "manual claims",
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("status__in", ["pending", "approved"])),
                        fields=("membership", "activity"),
                        name="fanpoints_claim_open_uniq",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Reward",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("description", models.TextField(blank=True, verbose_name="description")),
                ("points_cost", models.PositiveIntegerField(verbose_name="points cost")),
                (
                    "quantity_limit",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Leave empty for unlimited stock",
                        null=True,
                        verbose_name="quantity limit",
                    ),
                ),
                ("quantity_redeemed", models.PositiveIntegerField(default=0, verbose_name="quantity redeemed")),
                (
                    "redemption_method",
                    models.CharField(
                        choices=[
                            ("voucher", "Voucher"),
                            ("manual_fulfillment", "Manual fulfillment"),
                            ("code_display", "Code display"),
                        ],
                        max_length=30,
                        verbose_name="redemption method",
                    ),
                ),
                (
                    "voucher_code",
                    models.CharField(
                        blank=True,
                        help_text="Pre-provisioned code handed out for voucher rewards",
                        max_length=100,
                        verbose_name="voucher code",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rewards",
                        to="fanpoints.loyaltyprogram",
                        verbose_name="program",
                    ),
                ),
            ],
            options={
                "verbose_name": "reward",
                "verbose_name_plural": "rewards",
                "ordering": ["points_cost", "name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("points_cost__gt", 0)),
                        name="fanpoints_reward_cost_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("quantity_limit__isnull", True),
                            ("quantity_redeemed__lte", models.F("quantity_limit")),
                            _connector="OR",
                        ),
                        name="fanpoints_reward_stock_bounded",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="RewardRedemption",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("points_spent", models.PositiveIntegerField(verbose_name="points spent")),
                (
                    "discount_percent",
                    models.PositiveSmallIntegerField(default=0, verbose_name="discount percent"),
                ),
                (
                    "redemption_code",
                    models.CharField(blank=True, max_length=100, null=True, verbose_name="redemption code"),
                ),
                (
                    "code_generated",
                    models.BooleanField(
                        default=False,
                        help_text="Generated codes are unique; pre-provisioned voucher codes are shared",
                        verbose_name="generated code",
                    ),
                ),
                ("redeemed_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="redeemed at")),
                ("fulfilled_at", models.DateTimeField(blank=True, null=True, verbose_name="fulfilled at")),
                ("fulfilled_by", models.CharField(blank=True, max_length=100, verbose_name="fulfilled by")),
                (
                    "membership",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="redemptions",
                        to="fanpoints.membership",
                        verbose_name="membership",
                    ),
                ),
                (
                    "reward",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="redemptions",
                        to="fanpoints.reward",
                        verbose_name="reward",
                    ),
                ),
            ],
            options={
                "verbose_name": "reward redemption",
                "verbose_name_plural": "reward redemptions",
                "ordering": ["-redeemed_at"],
                "indexes": [
                    models.Index(fields=["membership", "-redeemed_at"], name="fp_redemption_member_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("code_generated", True)),
                        fields=("redemption_code",),
                        name="fanpoints_redemption_generated_code_uniq",
                    )
                ],
            },
        ),
    ]
