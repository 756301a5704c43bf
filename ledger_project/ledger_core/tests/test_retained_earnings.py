import datetime
from decimal import Decimal

import pytest
from django.test import TestCase

from ledger_core.exceptions import InputError
from ledger_core.services.aggregator import BalanceAggregator
from ledger_core.services.baseline import LedgerBaseline
from ledger_core.services.retained_earnings import RetainedEarnings
from ledger_core.services.sources import PostingSource

from .helpers import make_company, post, snapshot

D = datetime.date


class RetainedEarningsTests(TestCase):
    def setUp(self):
        self.company = make_company()
        # Baseline block: codes >= 4031 count, below and non-numeric do not
        snapshot(self.company, "1001", "5000.00")
        snapshot(self.company, "4031", "-12000.00")
        snapshot(self.company, "5001", "-300.00")
        snapshot(self.company, "A-01", "-99.00")

        # 2025 income: revenue 1500 credit, expense 250 debit
        post(self.company, "general", D(2025, 4, 1),
             [("1201", "1500.00", "0"), ("5001", "0", "1500.00")])
        post(self.company, "disbursement", D(2025, 9, 1),
             [("6101", "250.00", "0"), ("1002", "0", "250.00")])
        # direct posting to the retained earnings account is not income
        post(self.company, "general", D(2025, 12, 31),
             [("4031", "99.00", "0"), ("1002", "0", "99.00")])
        # 2026 income
        post(self.company, "sales", D(2026, 2, 1),
             [("1001", "400.00", "0"), ("5001", "0", "400.00")])

        # another company's income never counts
        other = make_company("Other", "other")
        snapshot(other, "4031", "-777.00")
        post(other, "general", D(2025, 4, 1), [("5001", "0", "5000.00")])

    def retained(self):
        aggregator = BalanceAggregator(PostingSource(self.company.pk), ("1000", "1999"))
        return RetainedEarnings(aggregator, LedgerBaseline())

    def test_baseline_sum_covers_codes_at_or_above_threshold(self):
        self.assertEqual(self.retained().baseline_sum(), Decimal("-12300.00"))

    def test_net_income_excludes_the_retained_earnings_account(self):
        # report range (1000..1999) does not limit net income
        self.assertEqual(self.retained().net_income_for_year(2025), Decimal("-1250.00"))
        self.assertEqual(self.retained().net_income_for_year(2026), Decimal("-400.00"))

    def test_first_flow_year_constant_is_the_baseline_sum(self):
        self.assertEqual(self.retained().constant(2025), Decimal("-12300.00"))

    def test_roll_forward_adds_prior_year_income(self):
        retained = self.retained()
        self.assertEqual(
            retained.constant(2026),
            retained.constant(2025) + retained.net_income_for_year(2025),
        )
        self.assertEqual(retained.constant(2027), Decimal("-13950.00"))

    def test_constant_is_idempotent(self):
        first = self.retained().constant(2027)
        self.assertEqual(self.retained().constant(2027), first)
        retained = self.retained()
        self.assertEqual(retained.constant(2027), retained.constant(2027))

    def test_years_before_first_flow_year_are_rejected(self):
        with self.assertRaises(InputError):
            self.retained().constant(2024)

    def test_snapshot_used_before_first_flow_year(self):
        retained = self.retained()
        self.assertEqual(retained.constant_or_snapshot(2024, "-12000"), Decimal("-12000.00"))
        self.assertEqual(retained.constant_or_snapshot(2025, "-12000"), Decimal("-12300.00"))


@pytest.mark.django_db
def test_constant_is_logged(caplog):
    company = make_company()
    snapshot(company, "4031", "-10.00")
    retained = RetainedEarnings(
        BalanceAggregator(PostingSource(company.pk)), LedgerBaseline())
    with caplog.at_level("INFO", logger="ledger_core"):
        retained.constant(2025)
    assert "retained earnings constant" in caplog.text
    assert "year=2025" in caplog.text
