"""
Django Fanpoints - Club fan-loyalty points economy.

Usage:
    from fanpoints import PointsService
    from fanpoints.gates import Gates, GateError, GateResult

    membership = PointsService.join("FAN-001", program.pk)
    result = PointsService.attempt_completion(
        membership.pk, activity.pk, {"method": "qr_scan", "qr_payload": "GATE-7"}
    )
    redemption = PointsService.redeem(membership.pk, reward.pk)

    # Gates validation
    Gates.program_live(program)
    Gates.frequency_policy(membership, activity, frequency_key)
"""


def __getattr__(name):
    if name == "PointsService":
        from fanpoints.service import PointsService

        return PointsService
    if name == "FanPointsError":
        from fanpoints.exceptions import FanPointsError

        return FanPointsError
    if name == "Gates":
        from fanpoints.gates import Gates

        return Gates
    if name == "GateError":
        from fanpoints.gates import GateError

        return GateError
    if name == "GateResult":
        from fanpoints.gates import GateResult

        return GateResult
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["PointsService", "FanPointsError", "Gates", "GateError", "GateResult"]
__version__ = "0.1.0"
