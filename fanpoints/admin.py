"""Fanpoints admin (CORE only).

Completions and redemptions are append-only facts: their admins are
read-only. Balances are never edited here; they move only through the
services.

Contrib models have their own admin in their respective modules:
- fanpoints.contrib.notifications.admin: FanNotificationAdmin
"""

from django.contrib import admin, messages
from django.utils.html import format_html

from fanpoints.exceptions import FanPointsError
from fanpoints.models import (
    Activity,
    ActivityCompletion,
    Club,
    ClubVerification,
    Fan,
    LoyaltyProgram,
    ManualClaim,
    Membership,
    Reward,
    RewardRedemption,
    Tier,
    TierBenefit,
)
from fanpoints.services import claims, redemption, verification


def _badge(color, label):
    return format_html(
        '<span style="background:{}; color:#fff; padding:2px 8px; '
        'border-radius:3px; font-size:11px;">{}</span>',
        color,
        label,
    )


class ReadOnlyFactAdmin(admin.ModelAdmin):
    """Append-only rows: viewable, never added, changed or deleted by hand."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ===========================================
# Club Admin
# ===========================================


class ClubVerificationInline(admin.StackedInline):
    model = ClubVerification
    extra = 0
    fields = ["official_email_domain", "public_link", "authority_declaration", "verified_at"]
    readonly_fields = ["verified_at"]


@admin.register(Club)
class ClubAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "country", "city", "status_badge", "verified_at"]
    list_filter = ["status", "country"]
    search_fields = ["code", "name", "city"]
    readonly_fields = ["status", "verified_at", "verified_by", "created_at", "updated_at"]
    inlines = [ClubVerificationInline]
    actions = ["force_verify", "force_official", "revoke_verification"]

    def status_badge(self, obj):
        colors = {
            "unverified": "#6c757d",
            "verified": "#28a745",
            "official": "#007bff",
        }
        return _badge(colors.get(obj.status, "#6c757d"), obj.get_status_display())

    status_badge.short_description = "Status"

    @admin.action(description="Force verify selected clubs")
    def force_verify(self, request, queryset):
        for club in queryset:
            verification.force_verify(club.code, request.user.get_username())
        self.message_user(request, f"{queryset.count()} club(s) verified.")

    @admin.action(description="Mark selected clubs as official")
    def force_official(self, request, queryset):
        for club in queryset:
            verification.force_verify(club.code, request.user.get_username(), official=True)
        self.message_user(request, f"{queryset.count()} club(s) marked official.")

    @admin.action(description="Revoke verification")
    def revoke_verification(self, request, queryset):
        for club in queryset:
            verification.revoke(club.code, request.user.get_username())
        self.message_user(request, f"{queryset.count()} club(s) revoked.", messages.WARNING)


# ===========================================
# Program / catalog Admin
# ===========================================


class TierBenefitInline(admin.TabularInline):
    model = TierBenefit
    extra = 0
    fields = ["benefit_type", "benefit_value", "benefit_label", "created_at"]
    readonly_fields = ["created_at"]


@admin.register(LoyaltyProgram)
class LoyaltyProgramAdmin(admin.ModelAdmin):
    list_display = ["name", "club", "points_currency_name", "live_badge", "membership_count"]
    list_filter = ["is_active"]
    search_fields = ["name", "club__code", "club__name"]
    raw_id_fields = ["club"]

    def live_badge(self, obj):
        if obj.club.is_live:
            return _badge("#28a745", "Live")
        return _badge("#dc3545", "Not live")

    live_badge.short_description = "Live"

    def membership_count(self, obj):
        return obj.memberships.count()

    membership_count.short_description = "Members"


@admin.register(Tier)
class TierAdmin(admin.ModelAdmin):
    list_display = ["name", "program", "rank", "points_threshold"]
    list_filter = ["program"]
    ordering = ["program", "rank"]
    inlines = [TierBenefitInline]


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    list_display = [
        "name",
        "program",
        "points_awarded",
        "frequency",
        "verification_method",
        "time_window_start",
        "time_window_end",
        "is_active",
    ]
    list_filter = ["program", "frequency", "verification_method", "is_active"]
    search_fields = ["name"]
    list_editable = ["is_active"]


@admin.register(Reward)
class RewardAdmin(admin.ModelAdmin):
    list_display = [
        "name",
        "program",
        "points_cost",
        "redemption_method",
        "stock_display",
        "is_active",
    ]
    list_filter = ["program", "redemption_method", "is_active"]
    search_fields = ["name"]
    list_editable = ["is_active"]
    readonly_fields = ["quantity_redeemed", "created_at", "updated_at"]

    def stock_display(self, obj):
        if obj.quantity_limit is None:
            return "∞"
        return f"{obj.quantity_redeemed}/{obj.quantity_limit}"

    stock_display.short_description = "Redeemed"


# ===========================================
# Fan / Membership Admin
# ===========================================


@admin.register(Fan)
class FanAdmin(admin.ModelAdmin):
    list_display = ["code", "display_name", "email", "is_active", "created_at"]
    list_filter = ["is_active"]
    search_fields = ["code", "display_name", "email"]
    readonly_fields = ["uuid", "created_at"]


@admin.register(Membership)
class MembershipAdmin(admin.ModelAdmin):
    list_display = ["fan", "program", "balance", "lifetime_earned", "tier", "is_active"]
    list_filter = ["program", "tier", "is_active"]
    search_fields = ["fan__code", "fan__display_name"]
    raw_id_fields = ["fan", "program"]
    readonly_fields = ["balance", "lifetime_earned", "tier", "joined_at", "updated_at"]


# ===========================================
# Facts Admin
# ===========================================


@admin.register(ActivityCompletion)
class ActivityCompletionAdmin(ReadOnlyFactAdmin):
    list_display = [
        "completed_at",
        "membership",
        "activity",
        "points_earned",
        "multiplier",
        "frequency_key",
        "verification_method",
    ]
    list_filter = ["verification_method", "activity__program"]
    search_fields = ["membership__fan__code", "activity__name", "frequency_key"]
    date_hierarchy = "completed_at"


@admin.register(RewardRedemption)
class RewardRedemptionAdmin(ReadOnlyFactAdmin):
    list_display = [
        "redeemed_at",
        "membership",
        "reward",
        "points_spent",
        "discount_percent",
        "redemption_code",
        "fulfilled_badge",
    ]
    list_filter = ["reward__redemption_method", "reward__program"]
    search_fields = ["membership__fan__code", "reward__name", "redemption_code"]
    date_hierarchy = "redeemed_at"
    actions = ["mark_fulfilled"]

    def fulfilled_badge(self, obj):
        if obj.is_fulfilled:
            return _badge("#28a745", "Fulfilled")
        return _badge("#ffc107", "Pending")

    fulfilled_badge.short_description = "Fulfilment"

    @admin.action(description="Mark selected redemptions as fulfilled")
    def mark_fulfilled(self, request, queryset):
        done = 0
        for item in queryset.filter(fulfilled_at__isnull=True):
            try:
                redemption.mark_fulfilled(item.pk, request.user.get_username())
                done += 1
            except FanPointsError as e:
                self.message_user(request, f"{item.pk}: {e.message}", messages.WARNING)
        self.message_user(request, f"{done} redemption(s) fulfilled.")


@admin.register(ManualClaim)
class ManualClaimAdmin(admin.ModelAdmin):
    list_display = ["created_at", "membership", "activity", "match_id", "status_badge", "reviewed_by"]
    list_filter = ["status", "activity__program"]
    search_fields = ["membership__fan__code", "activity__name", "proof_description"]
    raw_id_fields = ["membership", "activity"]
    readonly_fields = [
        "membership",
        "activity",
        "proof_url",
        "proof_description",
        "match_id",
        "status",
        "reviewed_by",
        "reviewed_at",
        "rejection_reason",
        "completion",
        "created_at",
        "updated_at",
    ]
    actions = ["approve_claims"]

    def status_badge(self, obj):
        colors = {
            "pending": "#ffc107",
            "approved": "#28a745",
            "rejected": "#dc3545",
        }
        return _badge(colors.get(obj.status, "#6c757d"), obj.get_status_display())

    status_badge.short_description = "Status"

    def has_add_permission(self, request):
        return False

    @admin.action(description="Approve selected pending claims")
    def approve_claims(self, request, queryset):
        approved = 0
        for claim in queryset.filter(status="pending"):
            try:
                review = claims.review_claim(claim.pk, "approve", request.user.get_username())
            except FanPointsError as e:
                self.message_user(request, f"Claim {claim.pk}: {e.message}", messages.WARNING)
                continue
            if review.approved:
                approved += 1
            else:
                self.message_user(request, f"Claim {claim.pk}: {review.reason}", messages.WARNING)
        self.message_user(request, f"{approved} claim(s) approved.")
