"""
Fanpoints Gates - Validation rules.

G1: ProgramLive - Program's club must be verified or official
G2: ActivityActive - Activity must be active
G3: TimeWindow - Attempt must fall inside the activity's time window
G4: VerificationMatch - Context method must match the activity's method
G5: FrequencyPolicy - No completion may exist for the same frequency key
G6: RewardAvailable - Reward must be active and in stock

Gates are advisory pre-checks read outside any lock. The services re-assert
G5/G6 at write time through constraints and conditional updates.
"""

from dataclasses import dataclass
from datetime import datetime

from django.utils import timezone


class GateError(Exception):
    """Gate validation error."""

    def __init__(
        self,
        gate_name: str,
        message: str,
        details: dict | None = None,
        error_code: str = "NOT_ELIGIBLE",
    ):
        self.gate_name = gate_name
        self.message = message
        self.details = details or {}
        self.error_code = error_code
        super().__init__(f"[{gate_name}] {message}")


@dataclass
class GateResult:
    """Result of a gate check."""

    passed: bool
    gate_name: str
    message: str = ""


# =============================================================================
# Gates
# =============================================================================


class Gates:
    """Fanpoints validation gates."""

    # =========================================================================
    # G1: Program Live
    # =========================================================================

    @classmethod
    def program_live(cls, program) -> GateResult:
        """
        G1: No points move for a program whose club is not verified.

        Args:
            program: LoyaltyProgram instance or primary key

        Raises:
            GateError: If the club is unverified (or the program is unknown)
        """
        from fanpoints.services import verification

        program_id = getattr(program, "pk", program)
        if not verification.is_program_live(program_id):
            raise GateError(
                "G1_ProgramLive",
                "Club is not verified; program cannot move points.",
                {"program_id": program_id},
                error_code="PROGRAM_NOT_LIVE",
            )

        return GateResult(True, "G1_ProgramLive")

    @classmethod
    def check_program_live(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.program_live(*args, **kwargs)
            return True
        except GateError:
            return False

    # =========================================================================
    # G2: Activity Active
    # =========================================================================

    @classmethod
    def activity_active(cls, activity) -> GateResult:
        """
        G2: Inactive activities award nothing.

        Raises:
            GateError: If activity.is_active is False
        """
        if not activity.is_active:
            raise GateError(
                "G2_ActivityActive",
                "Activity is not active.",
                {"activity_id": activity.pk},
            )

        return GateResult(True, "G2_ActivityActive")

    @classmethod
    def check_activity_active(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.activity_active(*args, **kwargs)
            return True
        except GateError:
            return False

    # =========================================================================
    # G3: Time Window
    # =========================================================================

    @classmethod
    def time_window(cls, activity, at: datetime | None = None) -> GateResult:
        """
        G3: Attempt must fall inside [time_window_start, time_window_end].

        Either bound may be unset. Bounds are inclusive.

        Args:
            activity: Activity instance
            at: Moment of the attempt (default: now)

        Raises:
            GateError: If `at` is outside the window
        """
        at = at or timezone.now()
        if not activity.is_within_window(at):
            raise GateError(
                "G3_TimeWindow",
                "Activity is outside its time window.",
                {
                    "activity_id": activity.pk,
                    "window_start": activity.time_window_start,
                    "window_end": activity.time_window_end,
                    "at": at,
                },
            )

        return GateResult(True, "G3_TimeWindow")

    @classmethod
    def check_time_window(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.time_window(*args, **kwargs)
            return True
        except GateError:
            return False

    # =========================================================================
    # G4: Verification Match
    # =========================================================================

    @classmethod
    def verification_match(cls, activity, method: str) -> GateResult:
        """
        G4: Signal must come from the front-end the activity is configured for.

        Raises:
            GateError: If methods differ
        """
        if activity.verification_method != method:
            raise GateError(
                "G4_VerificationMatch",
                f"Activity expects {activity.verification_method}, got {method}.",
                {"expected": activity.verification_method, "received": method},
                error_code="INVALID_CONTEXT",
            )

        return GateResult(True, "G4_VerificationMatch")

    @classmethod
    def check_verification_match(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.verification_match(*args, **kwargs)
            return True
        except GateError:
            return False

    # =========================================================================
    # G5: Frequency Policy
    # =========================================================================

    @classmethod
    def frequency_policy(cls, membership, activity, frequency_key: str | None) -> GateResult:
        """
        G5: At most one completion per (membership, activity, frequency_key).

        A None key (unlimited) always passes. This is a pre-check; the unique
        constraint on ActivityCompletion is what holds under races.

        Raises:
            GateError: If a completion already exists for the key
        """
        from fanpoints.models import ActivityCompletion

        if frequency_key is None:
            return GateResult(True, "G5_FrequencyPolicy", "Unlimited")

        exists = ActivityCompletion.objects.filter(
            membership=membership,
            activity=activity,
            frequency_key=frequency_key,
        ).exists()
        if exists:
            raise GateError(
                "G5_FrequencyPolicy",
                "Activity already completed for this period.",
                {"frequency": activity.frequency, "frequency_key": frequency_key},
                error_code="ALREADY_COMPLETED",
            )

        return GateResult(True, "G5_FrequencyPolicy")

    @classmethod
    def check_frequency_policy(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.frequency_policy(*args, **kwargs)
            return True
        except GateError:
            return False

    # =========================================================================
    # G6: Reward Available
    # =========================================================================

    @classmethod
    def reward_available(cls, reward) -> GateResult:
        """
        G6: Reward must be active and have stock left.

        Raises:
            GateError: REWARD_INACTIVE or OUT_OF_STOCK
        """
        if not reward.is_active:
            raise GateError(
                "G6_RewardAvailable",
                "Reward is not active.",
                {"reward_id": reward.pk},
                error_code="REWARD_INACTIVE",
            )
        if not reward.in_stock:
            raise GateError(
                "G6_RewardAvailable",
                "Reward is out of stock.",
                {
                    "reward_id": reward.pk,
                    "quantity_limit": reward.quantity_limit,
                    "quantity_redeemed": reward.quantity_redeemed,
                },
                error_code="OUT_OF_STOCK",
            )

        return GateResult(True, "G6_RewardAvailable")

    @classmethod
    def check_reward_available(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.reward_available(*args, **kwargs)
            return True
        except GateError:
            return False
