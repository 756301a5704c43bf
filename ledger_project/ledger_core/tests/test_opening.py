import datetime
from decimal import Decimal
from unittest import mock

from django.test import SimpleTestCase, TestCase

from ledger_core.services.aggregator import BalanceAggregator
from ledger_core.services.baseline import LedgerBaseline
from ledger_core.services.opening import (OpeningBalanceResolver,
                                          load_baseline_snapshot)
from ledger_core.services.sources import PostingSource

from .helpers import make_company, post, snapshot

D = datetime.date


class OpeningBalanceTests(TestCase):
    def setUp(self):
        self.company = make_company()
        self.baseline = LedgerBaseline()

        # Balance sheet account 1001: snapshot 500, movements around the cutover
        snapshot(self.company, "1001", "500.00")
        post(self.company, "general", D(2024, 12, 20), [("1001", "70.00", "0")])
        post(self.company, "receipts", D(2025, 1, 10), [("1001", "100.00", "0")])
        post(self.company, "disbursement", D(2025, 2, 14), [("1001", "0", "30.00")])
        post(self.company, "general", D(2025, 3, 1), [("1001", "1000.00", "0")])

        # P&L account 5001 (credit-normal revenue)
        snapshot(self.company, "5001", "-1200.00")
        post(self.company, "sales", D(2024, 6, 10), [("5001", "0", "300.00")])
        post(self.company, "sales", D(2024, 12, 5), [("5001", "0", "200.00")])
        post(self.company, "sales", D(2025, 1, 8), [("5001", "0", "50.00")])
        post(self.company, "sales", D(2025, 2, 8), [("5001", "0", "80.00")])

    def resolver(self):
        source = PostingSource(self.company.pk)
        return OpeningBalanceResolver(BalanceAggregator(source), self.baseline)

    # ---------- balance sheet ----------
    def test_bs_opening_on_fiscal_year_start_is_the_snapshot(self):
        # December 2024 postings are already inside the snapshot
        self.assertEqual(
            self.resolver().opening_balance("1001", False, D(2025, 1, 1)), Decimal("500.00"))

    def test_bs_opening_adds_movement_since_fiscal_year_start(self):
        # 500 + 100 - 30; the March 1 posting belongs to the period
        self.assertEqual(
            self.resolver().opening_balance("1001", False, D(2025, 3, 1)), Decimal("570.00"))

    def test_bs_opening_before_cutover_is_the_snapshot(self):
        self.assertEqual(
            self.resolver().opening_balance("1001", False, D(2024, 6, 1)), Decimal("500.00"))

    def test_missing_snapshot_defaults_to_zero(self):
        self.assertEqual(
            self.resolver().opening_balance("1999", False, D(2025, 1, 1)), Decimal("0.00"))

    # ---------- profit & loss ----------
    def test_pnl_opening_on_january_first_is_zero(self):
        for year in (2024, 2025, 2026):
            self.assertEqual(
                self.resolver().opening_balance("5001", True, D(year, 1, 1)),
                Decimal("0.00"),
            )

    def test_pnl_opening_is_year_to_date_movement(self):
        # Jan 8 and Feb 8 only; 2024 postings never leak into 2025
        self.assertEqual(
            self.resolver().opening_balance("5001", True, D(2025, 3, 1)), Decimal("-130.00"))

    def test_pnl_opening_later_in_january_uses_year_to_date(self):
        self.assertEqual(
            self.resolver().opening_balance("5001", True, D(2025, 1, 15)), Decimal("-50.00"))

    def test_pnl_opening_in_baseline_year_backs_out_postings_after_start(self):
        # snapshot(-1200) minus net(2024-12-01..2024-12-31) = -1200 - (-200)
        resolver = self.resolver()
        self.assertTrue(resolver.uses_baseline_backout(D(2024, 12, 1)))
        self.assertEqual(
            resolver.baseline_backout(D(2024, 12, 1)),
            {"5001": Decimal("-200.00"), "1001": Decimal("70.00")},
        )
        self.assertEqual(
            resolver.opening_balance("5001", True, D(2024, 12, 1)), Decimal("-1000.00"))

    def test_baseline_backout_not_used_in_january_or_after_cutover(self):
        resolver = self.resolver()
        self.assertFalse(resolver.uses_baseline_backout(D(2024, 1, 20)))
        self.assertFalse(resolver.uses_baseline_backout(D(2025, 6, 1)))
        self.assertFalse(resolver.uses_baseline_backout(D(2023, 6, 1)))
        # Jan 2024 (not Jan 1) falls back to the ordinary year-to-date rule
        self.assertEqual(
            resolver.opening_balance("5001", True, D(2024, 1, 20)), Decimal("0.00"))

    def test_alternate_baseline_is_honoured(self):
        baseline = LedgerBaseline(baseline_as_of=D(2025, 1, 31), first_flow_year=2025)
        resolver = OpeningBalanceResolver(
            BalanceAggregator(PostingSource(self.company.pk)), baseline)
        # fiscal year starts Feb 1: only the Feb 14 credit is pre-movement
        self.assertEqual(
            resolver.opening_balance("1001", False, D(2025, 3, 1)), Decimal("470.00"))

    def test_snapshot_is_company_scoped_and_trimmed(self):
        other = make_company("Other", "other")
        snapshot(other, "1001", "999.00")
        snapshot(self.company, " 1002 ", "12.00")
        loaded = load_baseline_snapshot(self.company.pk, ("1000", "1999"))
        self.assertEqual(loaded["1001"], Decimal("500.00"))
        self.assertEqual(loaded["1002"], Decimal("12.00"))
        self.assertNotIn("5001", loaded)
        self.assertEqual(load_baseline_snapshot(0)["1001"], Decimal("1499.00"))


class OpeningWindowQueryTests(SimpleTestCase):
    """Windows are only aggregated when needed, and only once."""

    def setUp(self):
        self.aggregator = mock.Mock(spec=BalanceAggregator)
        self.aggregator.net_by_account.return_value = {"5001": Decimal("-10.00")}
        self.resolver = OpeningBalanceResolver(
            self.aggregator, LedgerBaseline(), snapshot={"1001": Decimal("5.00")})

    def test_january_first_pnl_skips_the_query(self):
        self.assertEqual(
            self.resolver.opening_balance("5001", True, D(2025, 1, 1)), Decimal("0.00"))
        self.aggregator.net_by_account.assert_not_called()

    def test_bs_on_fiscal_year_start_skips_the_query(self):
        self.assertEqual(
            self.resolver.opening_balance("1001", False, D(2025, 1, 1)), Decimal("5.00"))
        self.aggregator.net_by_account.assert_not_called()

    def test_window_is_aggregated_once_per_run(self):
        for code in ("5001", "5002", "6001"):
            self.resolver.opening_balance(code, True, D(2025, 4, 1))
        self.aggregator.net_by_account.assert_called_once_with(D(2025, 1, 1), D(2025, 3, 31))

    def test_prefetch_only_loads_needed_windows(self):
        report = mock.Mock()
        self.resolver.prefetch(D(2025, 4, 1), include_bs=False, include_pnl=True,
                               report=report)
        self.aggregator.net_by_account.assert_called_once_with(D(2025, 1, 1), D(2025, 3, 31))
        report.assert_called_once_with(22, "Calculating P&L YTD pre-movements")
