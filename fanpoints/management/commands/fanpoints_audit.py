"""Management command to audit membership ledgers."""

from django.core.management.base import BaseCommand
from django.db import transaction

from fanpoints.models import Membership
from fanpoints.services import ledger


class Command(BaseCommand):
    help = "Recompute balances from completions and redemptions and report mismatches"

    def add_arguments(self, parser):
        parser.add_argument(
            "--program",
            type=int,
            default=None,
            help="Only audit memberships of this program id",
        )
        parser.add_argument(
            "--fix-tiers",
            action="store_true",
            help="Re-sync cached tiers from lifetime points",
        )

    def handle(self, *args, **options):
        qs = Membership.objects.order_by("pk")
        if options["program"] is not None:
            qs = qs.filter(program_id=options["program"])

        checked = 0
        broken = 0
        retiered = 0
        for membership_id in qs.values_list("pk", flat=True).iterator():
            result = ledger.audit(membership_id)
            checked += 1
            if not result.ok:
                broken += 1
                self.stdout.write(
                    self.style.ERROR(
                        f"Membership {membership_id}: balance={result.balance} "
                        f"expected={result.expected_balance} "
                        f"lifetime={result.lifetime_earned} earned={result.earned_total}"
                    )
                )

            if options["fix_tiers"]:
                with transaction.atomic():
                    membership = Membership.objects.select_related("tier").get(pk=membership_id)
                    previous, current = ledger.refresh_tier(membership)
                if previous != current:
                    retiered += 1

        summary = f"Audited {checked} membership(s): {broken} mismatch(es)."
        if options["fix_tiers"]:
            summary += f" {retiered} tier(s) re-synced."
        if broken:
            self.stdout.write(self.style.WARNING(summary))
        else:
            self.stdout.write(self.style.SUCCESS(summary))
