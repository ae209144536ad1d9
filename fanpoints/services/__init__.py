"""Fanpoints services (CORE only).

Each module owns one concern of the points economy:
- verification: club verification state machine
- ledger: memberships, balance movement, history and audit
- tiers: tier computation and benefit resolution
- completion: activity completion gate
- claims: manual-proof review workflow
- redemption: spending points on rewards

Contrib services are in their respective modules:
- fanpoints.contrib.notifications: NotificationService
"""

from fanpoints.services import verification
from fanpoints.services import ledger
from fanpoints.services import tiers
from fanpoints.services import completion
from fanpoints.services import claims
from fanpoints.services import redemption

__all__ = ["verification", "ledger", "tiers", "completion", "claims", "redemption"]
