"""Tests for the club verification gate."""

from unittest.mock import MagicMock

import pytest

from fanpoints.exceptions import FanPointsError
from fanpoints.models import Club, ClubStatus, LoyaltyProgram
from fanpoints.services import verification
from fanpoints.signals import club_verified


pytestmark = pytest.mark.django_db


class TestOfficialDomain:
    @pytest.mark.parametrize(
        "domain,expected",
        [
            ("lionsfc.pt", True),
            ("@lionsfc.pt", True),
            ("olive-athletic.org", True),
            ("gmail.com", False),
            ("Hotmail.co.uk", False),
            ("mail.live.com", False),
            ("", False),
            (None, False),
        ],
    )
    def test_is_official_domain(self, domain, expected):
        assert verification.is_official_domain(domain) is expected

    def test_free_domains_configurable(self, settings):
        settings.FANPOINTS = {"FREE_EMAIL_DOMAINS": ("lionsfc",)}
        assert verification.is_official_domain("lionsfc.pt") is False
        assert verification.is_official_domain("gmail.com") is True


class TestEvaluate:
    def test_two_signals_verify(self, unverified_club):
        verification.submit_evidence(
            unverified_club.code,
            official_email_domain="cubsunited.org",
            public_link="https://cubsunited.org",
        )

        unverified_club.refresh_from_db()
        assert unverified_club.status == ClubStatus.VERIFIED
        assert unverified_club.verified_at is not None
        assert unverified_club.verification.verified_at is not None

    def test_free_mail_does_not_count(self, unverified_club):
        verification.submit_evidence(
            unverified_club.code,
            official_email_domain="gmail.com",
            public_link="https://facebook.com/cubs",
        )

        unverified_club.refresh_from_db()
        assert unverified_club.status == ClubStatus.UNVERIFIED

    def test_link_and_declaration_verify(self, unverified_club):
        evidence = verification.submit_evidence(
            unverified_club.code,
            official_email_domain="yahoo.com",
            public_link="https://facebook.com/cubs",
            authority_declaration=True,
        )

        assert verification.signals_present(evidence) == ["public_link", "authority_declaration"]
        unverified_club.refresh_from_db()
        assert unverified_club.is_live

    def test_signal_sent_on_commit(self, unverified_club, django_capture_on_commit_callbacks):
        handler = MagicMock()
        club_verified.connect(handler, weak=False)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                verification.submit_evidence(
                    unverified_club.code,
                    public_link="https://cubs.example",
                    authority_declaration=True,
                )
        finally:
            club_verified.disconnect(handler)

        handler.assert_called_once()
        assert handler.call_args.kwargs["forced"] is False
        assert handler.call_args.kwargs["club"].code == "cubs"

    def test_official_club_not_demoted(self, club):
        club.status = ClubStatus.OFFICIAL
        club.save()

        verification.submit_evidence(club.code, public_link="https://lions.example")

        club.refresh_from_db()
        assert club.status == ClubStatus.OFFICIAL

    def test_unknown_club(self, db):
        with pytest.raises(FanPointsError) as exc:
            verification.submit_evidence("ghosts", public_link="https://x.example")
        assert exc.value.code == "CLUB_NOT_FOUND"


class TestOverride:
    def test_force_verify_official(self, unverified_club):
        club = verification.force_verify(unverified_club.code, "sysadmin", official=True)

        assert club.status == ClubStatus.OFFICIAL
        assert club.verified_by == "sysadmin"

    def test_revoke_stops_program(self, program, club):
        assert verification.is_program_live(program.pk) is True

        verification.revoke(club.code, "sysadmin")

        assert verification.is_program_live(program.pk) is False
        assert Club.objects.get(pk=club.pk).verified_at is None

    def test_unverified_program_not_live(self, unverified_club):
        program = LoyaltyProgram.objects.create(club=unverified_club, name="Cubs Club")
        assert verification.is_program_live(program.pk) is False

    def test_unknown_program_not_live(self, db):
        assert verification.is_program_live(404) is False
