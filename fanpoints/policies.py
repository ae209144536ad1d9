"""
Fanpoints policies - frequency buckets and verification context.

FREQUENCY_POLICIES maps a Frequency tag to the function that derives the
bucket key for one attempt. Two completions with the same non-null key for
the same (membership, activity) are duplicates; the database unique
constraint on ActivityCompletion.frequency_key enforces it.

Verification context is a tagged variant: one frozen dataclass per
VerificationMethod with its own required fields.
"""

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any, Callable, ClassVar
from zoneinfo import ZoneInfo

from django.utils import timezone

from fanpoints.conf import fanpoints_settings
from fanpoints.exceptions import FanPointsError
from fanpoints.models import Frequency, VerificationMethod


# =============================================================================
# Verification context (tagged variant)
# =============================================================================


@dataclass(frozen=True)
class CompletionContext:
    """Base context shared by every verification method."""

    method: str
    match_id: str = ""

    REQUIRED: ClassVar[tuple[str, ...]] = ()

    def to_metadata(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v not in ("", None)}


@dataclass(frozen=True)
class QRScanContext(CompletionContext):
    qr_payload: str = ""

    REQUIRED: ClassVar[tuple[str, ...]] = ("qr_payload",)


@dataclass(frozen=True)
class LocationCheckinContext(CompletionContext):
    latitude: float | None = None
    longitude: float | None = None
    distance_meters: float | None = None

    REQUIRED: ClassVar[tuple[str, ...]] = ("latitude", "longitude")


@dataclass(frozen=True)
class InAppCompletionContext(CompletionContext):
    question_id: str = ""
    answer: str = ""

    REQUIRED: ClassVar[tuple[str, ...]] = ("question_id",)


@dataclass(frozen=True)
class ManualProofContext(CompletionContext):
    proof_description: str = ""
    proof_url: str = ""
    claim_id: int | None = None


CONTEXT_TYPES: dict[str, type[CompletionContext]] = {
    VerificationMethod.QR_SCAN: QRScanContext,
    VerificationMethod.LOCATION_CHECKIN: LocationCheckinContext,
    VerificationMethod.IN_APP_COMPLETION: InAppCompletionContext,
    VerificationMethod.MANUAL_PROOF: ManualProofContext,
}


def parse_context(raw: dict[str, Any] | CompletionContext | None) -> CompletionContext:
    """
    Build the typed context for a completion attempt.

    Args:
        raw: Dict with a "method" tag plus method-specific fields, or an
            already-built context

    Returns:
        CompletionContext subclass for the method

    Raises:
        FanPointsError: INVALID_CONTEXT on unknown method, unknown fields,
            or missing required fields
    """
    if isinstance(raw, CompletionContext):
        context = raw
    else:
        raw = dict(raw or {})
        method = raw.pop("method", "")
        context_type = CONTEXT_TYPES.get(method)
        if context_type is None:
            raise FanPointsError(
                "INVALID_CONTEXT",
                message=f"Unknown verification method: {method!r}",
                allowed=sorted(CONTEXT_TYPES),
            )
        if "match_id" in raw and raw["match_id"] is not None:
            raw["match_id"] = str(raw["match_id"])
        try:
            context = context_type(method=method, **raw)
        except TypeError as e:
            raise FanPointsError("INVALID_CONTEXT", message=str(e), method=method) from e

    missing = [name for name in context.REQUIRED if getattr(context, name) in ("", None)]
    if missing:
        raise FanPointsError(
            "INVALID_CONTEXT",
            message=f"Missing fields for {context.method}: {', '.join(missing)}",
            missing=missing,
        )
    return context


# =============================================================================
# Frequency policies
# =============================================================================


def calendar_day(at: datetime) -> date:
    """Calendar date of `at` in the configured day-boundary timezone."""
    tz = ZoneInfo(fanpoints_settings.DAY_BOUNDARY_TIMEZONE)
    return timezone.localtime(at, tz).date()


def _once_ever_key(context: CompletionContext, at: datetime) -> str:
    return "ever"


def _once_per_day_key(context: CompletionContext, at: datetime) -> str:
    return f"day:{calendar_day(at).isoformat()}"


def _once_per_match_key(context: CompletionContext, at: datetime) -> str:
    if not context.match_id:
        raise FanPointsError(
            "NOT_ELIGIBLE",
            message="Match context is required for once-per-match activities",
            reason="match_context_required",
        )
    return f"match:{context.match_id}"


def _unlimited_key(context: CompletionContext, at: datetime) -> None:
    return None


FREQUENCY_POLICIES: dict[str, Callable[[CompletionContext, datetime], str | None]] = {
    Frequency.ONCE_EVER: _once_ever_key,
    Frequency.ONCE_PER_DAY: _once_per_day_key,
    Frequency.ONCE_PER_MATCH: _once_per_match_key,
    Frequency.UNLIMITED: _unlimited_key,
}


def frequency_key(frequency: str, context: CompletionContext, at: datetime) -> str | None:
    """Bucket key for an attempt, or None when the policy never blocks."""
    try:
        policy = FREQUENCY_POLICIES[frequency]
    except KeyError:
        raise FanPointsError(
            "NOT_ELIGIBLE",
            message=f"Unknown frequency policy: {frequency}",
            reason="unknown_frequency",
        ) from None
    return policy(context, at)
