"""
Fanpoints configuration.

Usage in settings.py:
    FANPOINTS = {
        "DAY_BOUNDARY_TIMEZONE": "Europe/Lisbon",
        "APPLY_TIER_MULTIPLIER": True,
    }
"""

from dataclasses import dataclass, field
from typing import Any

from django.conf import settings


@dataclass
class FanpointsSettings:
    """Fanpoints configuration settings."""

    # Calendar day used by the once_per_day frequency policy
    DAY_BOUNDARY_TIMEZONE: str = "UTC"

    # Tier multiplier applied to points_earned at award time (False = display-only)
    APPLY_TIER_MULTIPLIER: bool = True

    # Generated redemption codes
    REDEMPTION_CODE_LENGTH: int = 8
    REDEMPTION_CODE_ATTEMPTS: int = 5

    # Email domains that never count as an official club domain
    FREE_EMAIL_DOMAINS: tuple[str, ...] = field(
        default=("gmail", "yahoo", "outlook", "hotmail", "live")
    )

    # Display reads
    LEADERBOARD_LIMIT: int = 100


def get_fanpoints_settings() -> FanpointsSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "FANPOINTS", {})
    return FanpointsSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_fanpoints_settings(), name)


fanpoints_settings = _LazySettings()
