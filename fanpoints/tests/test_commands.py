"""Tests for Fanpoints management commands."""

from io import StringIO

import pytest
from django.core.management import call_command

from fanpoints.models import Membership
from fanpoints.services import completion
from fanpoints.tests.conftest import QR, set_points


pytestmark = pytest.mark.django_db


class TestFanpointsAudit:
    def test_clean_ledger(self, membership, activity_qr):
        completion.attempt_completion(membership.pk, activity_qr.pk, QR)
        out = StringIO()

        call_command("fanpoints_audit", stdout=out)

        assert "Audited 1 membership(s): 0 mismatch(es)." in out.getvalue()

    def test_reports_mismatch(self, membership, other_membership):
        set_points(membership, 50)
        out = StringIO()

        call_command("fanpoints_audit", stdout=out)

        output = out.getvalue()
        assert f"Membership {membership.pk}: balance=50 expected=0" in output
        assert "1 mismatch(es)" in output

    def test_program_filter(self, program, membership):
        out = StringIO()
        call_command("fanpoints_audit", program=program.pk + 1, stdout=out)
        assert "Audited 0 membership(s)" in out.getvalue()

    def test_fix_tiers(self, membership, tiers):
        Membership.objects.filter(pk=membership.pk).update(tier=tiers["gold"])
        out = StringIO()

        call_command("fanpoints_audit", "--fix-tiers", stdout=out)

        membership.refresh_from_db()
        assert membership.tier == tiers["bronze"]
        assert "1 tier(s) re-synced." in out.getvalue()
