"""
Tests for Fanpoints validation gates.

Covers:
- G1: ProgramLive
- G2: ActivityActive
- G3: TimeWindow
- G4: VerificationMatch
- G5: FrequencyPolicy
- G6: RewardAvailable
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from fanpoints.gates import GateError, Gates
from fanpoints.models import ActivityCompletion, ClubStatus
from fanpoints.tests.conftest import QR
from fanpoints.services import completion


pytestmark = pytest.mark.django_db


class TestG1ProgramLive:
    def test_verified_passes(self, program):
        result = Gates.program_live(program)
        assert result.passed
        assert result.gate_name == "G1_ProgramLive"

    def test_accepts_primary_key(self, program):
        assert Gates.check_program_live(program.pk) is True

    def test_unverified_raises(self, club, program):
        club.status = ClubStatus.UNVERIFIED
        club.save()

        with pytest.raises(GateError) as exc:
            Gates.program_live(program)

        assert exc.value.error_code == "PROGRAM_NOT_LIVE"
        assert exc.value.details == {"program_id": program.pk}
        assert str(exc.value).startswith("[G1_ProgramLive]")


class TestG2ActivityActive:
    def test_active_passes(self, activity_qr):
        assert Gates.check_activity_active(activity_qr) is True

    def test_inactive_raises(self, activity_qr):
        activity_qr.is_active = False
        with pytest.raises(GateError) as exc:
            Gates.activity_active(activity_qr)
        assert exc.value.error_code == "NOT_ELIGIBLE"


class TestG3TimeWindow:
    def test_open_window_passes(self, activity_qr):
        assert Gates.check_time_window(activity_qr) is True

    def test_before_start(self, activity_qr):
        activity_qr.time_window_start = timezone.now() + timedelta(days=1)
        assert Gates.check_time_window(activity_qr) is False

    def test_after_end(self, activity_qr):
        activity_qr.time_window_end = timezone.now() - timedelta(minutes=1)
        with pytest.raises(GateError) as exc:
            Gates.time_window(activity_qr)
        assert exc.value.details["window_end"] == activity_qr.time_window_end

    def test_explicit_moment(self, activity_qr):
        now = timezone.now()
        activity_qr.time_window_start = now - timedelta(hours=2)
        activity_qr.time_window_end = now - timedelta(hours=1)
        assert Gates.check_time_window(activity_qr, now - timedelta(minutes=90)) is True
        assert Gates.check_time_window(activity_qr, activity_qr.time_window_end) is True


class TestG4VerificationMatch:
    def test_same_method_passes(self, activity_qr):
        assert Gates.check_verification_match(activity_qr, "qr_scan") is True

    def test_other_method_raises(self, activity_qr):
        with pytest.raises(GateError) as exc:
            Gates.verification_match(activity_qr, "manual_proof")
        assert exc.value.error_code == "INVALID_CONTEXT"
        assert exc.value.details == {"expected": "qr_scan", "received": "manual_proof"}


class TestG5FrequencyPolicy:
    def test_unlimited_key_passes(self, membership, activity_unlimited):
        result = Gates.frequency_policy(membership, activity_unlimited, None)
        assert result.passed
        assert result.message == "Unlimited"

    def test_fresh_key_passes(self, membership, activity_qr):
        assert Gates.check_frequency_policy(membership, activity_qr, "ever") is True

    def test_used_key_raises(self, membership, activity_qr):
        completion.attempt_completion(membership.pk, activity_qr.pk, QR)
        assert ActivityCompletion.objects.filter(frequency_key="ever").exists()

        with pytest.raises(GateError) as exc:
            Gates.frequency_policy(membership, activity_qr, "ever")
        assert exc.value.error_code == "ALREADY_COMPLETED"


class TestG6RewardAvailable:
    def test_in_stock_passes(self, reward_code):
        assert Gates.check_reward_available(reward_code) is True

    def test_inactive(self, reward_code):
        reward_code.is_active = False
        with pytest.raises(GateError) as exc:
            Gates.reward_available(reward_code)
        assert exc.value.error_code == "REWARD_INACTIVE"

    def test_sold_out(self, reward_code):
        reward_code.quantity_redeemed = 1
        with pytest.raises(GateError) as exc:
            Gates.reward_available(reward_code)
        assert exc.value.error_code == "OUT_OF_STOCK"

    def test_unlimited_stock(self, reward_voucher):
        reward_voucher.quantity_redeemed = 10_000
        assert Gates.check_reward_available(reward_voucher) is True
