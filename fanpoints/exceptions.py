"""Fanpoints exceptions."""


class BaseError(Exception):
    """
    Structured exception carrying a machine-readable code.

    Subclasses provide ``_default_messages`` keyed by code. Extra keyword
    arguments are kept in ``details`` for callers and logs.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **details):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.details = details
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.details}


class FanPointsError(BaseError):
    """
    Structured exception for points economy operations.

    Every failed award, claim, or spend surfaces as one of these; the code
    names the outcome. Only CONCURRENCY_CONFLICT is worth retrying.

    Usage:
        try:
            PointsService.redeem(membership_id, reward_id)
        except FanPointsError as e:
            if e.code == "INSUFFICIENT_POINTS":
                show_balance_hint(e.details["available"])
    """

    RETRYABLE_CODES = frozenset({"CONCURRENCY_CONFLICT"})

    _default_messages = {
        # Outcomes
        "NOT_ELIGIBLE": "Activity is not available right now",
        "PROGRAM_NOT_LIVE": "Loyalty program is not live: club is not verified",
        "ALREADY_COMPLETED": "Activity already completed for this period",
        "INSUFFICIENT_POINTS": "Insufficient points for redemption",
        "OUT_OF_STOCK": "Reward is out of stock",
        "REWARD_INACTIVE": "Reward is not active",
        "CLAIM_ALREADY_RESOLVED": "Claim was already reviewed",
        "DUPLICATE_PENDING_CLAIM": "A claim for this activity is already pending",
        "CONCURRENCY_CONFLICT": "Concurrent update conflict, retry the operation",
        "ALREADY_FULFILLED": "Redemption was already fulfilled",
        # Lookups
        "FAN_NOT_FOUND": "Fan not found",
        "CLUB_NOT_FOUND": "Club not found",
        "PROGRAM_NOT_FOUND": "Loyalty program not found",
        "MEMBERSHIP_NOT_FOUND": "Membership not found",
        "ACTIVITY_NOT_FOUND": "Activity not found",
        "REWARD_NOT_FOUND": "Reward not found",
        "CLAIM_NOT_FOUND": "Manual claim not found",
        "REDEMPTION_NOT_FOUND": "Redemption not found",
        # Validation
        "INVALID_CONTEXT": "Invalid verification context",
        "INVALID_DECISION": "Invalid claim decision",
        "INVALID_POINTS": "Points must be positive",
    }

    @property
    def retryable(self) -> bool:
        return self.code in self.RETRYABLE_CODES
