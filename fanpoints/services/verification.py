"""Verification service - club status that gates every points movement.

A program is live only while its club is verified or official. Clubs reach
`verified` automatically when two of three evidence signals are present, or
through an administrative override.
"""

import logging

from django.db import transaction
from django.utils import timezone

from fanpoints.conf import fanpoints_settings
from fanpoints.exceptions import FanPointsError
from fanpoints.models import (
    Club,
    ClubStatus,
    ClubVerification,
    LoyaltyProgram,
    LIVE_CLUB_STATUSES,
)
from fanpoints.signals import club_verified

logger = logging.getLogger(__name__)

REQUIRED_SIGNALS = 2


def is_program_live(program_id) -> bool:
    """True iff the program's club is verified or official."""
    return LoyaltyProgram.objects.filter(
        pk=program_id,
        club__status__in=LIVE_CLUB_STATUSES,
    ).exists()


def is_official_domain(domain: str) -> bool:
    """Non-empty domain that is not a free-mail provider."""
    domain = (domain or "").strip().lower().lstrip("@")
    if not domain:
        return False
    labels = domain.split(".")
    return not any(free in labels for free in fanpoints_settings.FREE_EMAIL_DOMAINS)


def signals_present(verification: ClubVerification) -> list[str]:
    """Names of the verification signals satisfied by the evidence."""
    present = []
    if is_official_domain(verification.official_email_domain):
        present.append("official_email_domain")
    if verification.public_link.strip():
        present.append("public_link")
    if verification.authority_declaration:
        present.append("authority_declaration")
    return present


def requirements_met(verification: ClubVerification) -> bool:
    return len(signals_present(verification)) >= REQUIRED_SIGNALS


def get_club(club_code: str) -> Club:
    try:
        return Club.objects.get(code=club_code)
    except Club.DoesNotExist:
        raise FanPointsError("CLUB_NOT_FOUND", club_code=club_code)


def submit_evidence(
    club_code: str,
    official_email_domain: str = "",
    public_link: str = "",
    authority_declaration: bool = False,
) -> ClubVerification:
    """
    Store verification evidence and re-evaluate the club status.

    Args:
        club_code: Club code
        official_email_domain: Domain of the club's official mailbox
        public_link: Public page proving the club exists
        authority_declaration: Admin declares authority to represent the club

    Returns:
        Updated ClubVerification

    Raises:
        FanPointsError: CLUB_NOT_FOUND
    """
    club = get_club(club_code)
    with transaction.atomic():
        verification, _ = ClubVerification.objects.update_or_create(
            club=club,
            defaults={
                "official_email_domain": official_email_domain.strip().lower(),
                "public_link": public_link.strip(),
                "authority_declaration": authority_declaration,
            },
        )
        evaluate(club, verification)
    return verification


def evaluate(club: Club, verification: ClubVerification | None = None) -> Club:
    """
    Promote an unverified club when its evidence meets the requirements.

    Verified and official clubs are never demoted here; use revoke().
    """
    if verification is None:
        verification = ClubVerification.objects.filter(club=club).first()
    if verification is None or not requirements_met(verification):
        return club

    now = timezone.now()
    with transaction.atomic():
        promoted = Club.objects.filter(pk=club.pk, status=ClubStatus.UNVERIFIED).update(
            status=ClubStatus.VERIFIED,
            verified_at=now,
            updated_at=now,
        )
        if promoted:
            ClubVerification.objects.filter(pk=verification.pk).update(verified_at=now)
            club.refresh_from_db()
            logger.info("Club %s verified automatically", club.code)
            transaction.on_commit(
                lambda: club_verified.send(sender=Club, club=club, forced=False)
            )
    return club


def force_verify(club_code: str, verified_by: str, official: bool = False) -> Club:
    """
    Administrative override: verify a club regardless of evidence.

    Args:
        club_code: Club code
        verified_by: Administrator identifier (audit)
        official: Mark the club as official instead of verified

    Returns:
        Updated Club
    """
    club = get_club(club_code)
    status = ClubStatus.OFFICIAL if official else ClubStatus.VERIFIED
    now = timezone.now()

    with transaction.atomic():
        Club.objects.filter(pk=club.pk).update(
            status=status,
            verified_at=now,
            verified_by=verified_by,
            updated_at=now,
        )
        club.refresh_from_db()
        transaction.on_commit(
            lambda: club_verified.send(sender=Club, club=club, forced=True)
        )

    logger.info("Club %s force-verified as %s by %s", club.code, status, verified_by)
    return club


def revoke(club_code: str, revoked_by: str = "") -> Club:
    """Return a club to unverified. Its program stops moving points immediately."""
    club = get_club(club_code)
    now = timezone.now()
    Club.objects.filter(pk=club.pk).update(
        status=ClubStatus.UNVERIFIED,
        verified_at=None,
        verified_by="",
        updated_at=now,
    )
    club.refresh_from_db()
    logger.warning("Club %s verification revoked by %s", club.code, revoked_by or "system")
    return club
