"""Tests for verification context parsing and frequency policies."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone as dt_timezone

import pytest

from fanpoints.exceptions import FanPointsError
from fanpoints.models import Frequency
from fanpoints.policies import (
    FREQUENCY_POLICIES,
    CompletionContext,
    LocationCheckinContext,
    ManualProofContext,
    QRScanContext,
    calendar_day,
    frequency_key,
    parse_context,
)

AT = datetime(2026, 10, 18, 12, 30, tzinfo=dt_timezone.utc)


class TestParseContext:
    def test_qr(self):
        context = parse_context({"method": "qr_scan", "qr_payload": "GATE-7"})
        assert isinstance(context, QRScanContext)
        assert context.qr_payload == "GATE-7"

    def test_location(self):
        context = parse_context(
            {"method": "location_checkin", "latitude": 41.16, "longitude": -8.58, "distance_meters": 12}
        )
        assert isinstance(context, LocationCheckinContext)
        assert context.distance_meters == 12

    def test_manual_proof_has_no_required_fields(self):
        assert isinstance(parse_context({"method": "manual_proof"}), ManualProofContext)

    def test_match_id_cast_to_str(self):
        context = parse_context({"method": "qr_scan", "qr_payload": "X", "match_id": 42})
        assert context.match_id == "42"

    def test_instance_passthrough(self):
        context = QRScanContext(method="qr_scan", qr_payload="X")
        assert parse_context(context) is context

    def test_instance_still_validated(self):
        with pytest.raises(FanPointsError) as exc:
            parse_context(QRScanContext(method="qr_scan"))
        assert exc.value.code == "INVALID_CONTEXT"

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            {},
            {"method": "telepathy"},
            {"method": "qr_scan", "qr_payload": "X", "unexpected": 1},
            {"method": "location_checkin", "latitude": 41.16},
            {"method": "in_app_completion", "answer": "yes"},
        ],
    )
    def test_invalid(self, raw):
        with pytest.raises(FanPointsError) as exc:
            parse_context(raw)
        assert exc.value.code == "INVALID_CONTEXT"

    def test_frozen(self):
        context = parse_context({"method": "qr_scan", "qr_payload": "X"})
        with pytest.raises(FrozenInstanceError):
            context.qr_payload = "Y"

    def test_metadata_drops_empty_fields(self):
        context = parse_context({"method": "in_app_completion", "question_id": "q1"})
        assert context.to_metadata() == {"method": "in_app_completion", "question_id": "q1"}


class TestFrequencyKey:
    def test_every_frequency_has_a_policy(self):
        assert set(FREQUENCY_POLICIES) == set(Frequency.values)

    def test_keys(self):
        context = CompletionContext(method="qr_scan", match_id="M-7")
        assert frequency_key(Frequency.ONCE_EVER, context, AT) == "ever"
        assert frequency_key(Frequency.ONCE_PER_DAY, context, AT) == "day:2026-10-18"
        assert frequency_key(Frequency.ONCE_PER_MATCH, context, AT) == "match:M-7"
        assert frequency_key(Frequency.UNLIMITED, context, AT) is None

    def test_match_required(self):
        with pytest.raises(FanPointsError) as exc:
            frequency_key(Frequency.ONCE_PER_MATCH, CompletionContext(method="qr_scan"), AT)
        assert exc.value.code == "NOT_ELIGIBLE"

    def test_unknown_frequency(self):
        with pytest.raises(FanPointsError) as exc:
            frequency_key("twice_a_fortnight", CompletionContext(method="qr_scan"), AT)
        assert exc.value.details["reason"] == "unknown_frequency"


class TestCalendarDay:
    def test_utc_default(self, settings):
        settings.FANPOINTS = {}
        late = datetime(2026, 10, 18, 23, 30, tzinfo=dt_timezone.utc)
        assert calendar_day(late).isoformat() == "2026-10-18"

    def test_configured_zone(self, settings):
        settings.FANPOINTS = {"DAY_BOUNDARY_TIMEZONE": "Asia/Tokyo"}
        late = datetime(2026, 10, 18, 23, 30, tzinfo=dt_timezone.utc)
        assert calendar_day(late).isoformat() == "2026-10-19"
