from django.core.management.base import BaseCommand, CommandError

from ledger_core.exceptions import InputError, NoAccountsInRange
from ledger_core.services.accounts import FsFilter
from ledger_core.services.trial_balance import build_trial_balance

ROW_FORMAT = "{:<12} {:<32} {:>16} {:>16} {:>16} {:>16}"


class Command(BaseCommand):
    help = "Build a trial balance synchronously and print rows and totals."

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument("--company", type=int, required=True,
                            help="Company id (0 = all companies).")
        parser.add_argument("--start-account", required=True)
        parser.add_argument("--end-account", required=True)
        parser.add_argument("--start-date", required=True, help="YYYY-MM-DD")
        parser.add_argument("--end-date", required=True, help="YYYY-MM-DD")
        parser.add_argument("--fs", default=FsFilter.ALL, choices=FsFilter.values)

    def handle(self, *args, **options):
        try:
            report = build_trial_balance(
                options["company"],
                options["start_account"],
                options["end_account"],
                options["start_date"],
                options["end_date"],
                fs=options["fs"],
            )
        except NoAccountsInRange as exc:
            raise CommandError(f"No accounts in range. {exc}")
        except InputError as exc:
            raise CommandError(str(exc))

        self.stdout.write(ROW_FORMAT.format(
            "Account", "Description", "Beginning", "Debit", "Credit", "Ending"))
        for row in report.rows:
            self.stdout.write(ROW_FORMAT.format(
                row.acct_code, row.acct_desc[:32], row.beginning, row.debit,
                row.credit, row.ending))

        totals = report.totals
        self.stdout.write(ROW_FORMAT.format(
            "", "TOTAL", totals.beginning, totals.debit, totals.credit, totals.ending))
        if totals.balanced:
            self.stdout.write(self.style.SUCCESS(f"{len(report.rows)} account(s), balanced"))
        else:
            self.stdout.write(self.style.ERROR(
                f"Totals out of balance by {totals.difference}"))
