import datetime
from decimal import Decimal

import pytest

from ledger_core.services.baseline import LedgerBaseline
from ledger_core.services.utils import (coerce_date, day_before, is_new_year,
                                        natural_sorted, numeric_prefix, q2)


def test_natural_order_numeric_prefix_then_lexical():
    assert natural_sorted(["2", "10", "1-A", "1", "A"]) == ["1", "1-A", "2", "10", "A"]


def test_natural_order_is_stable_for_identical_input():
    codes = ["A-01", "1010", "1001-01", "1001", "B"]
    assert natural_sorted(codes) == natural_sorted(list(reversed(codes)))
    assert natural_sorted(codes) == ["1001", "1001-01", "1010", "A-01", "B"]


@pytest.mark.parametrize(
    "code, expected",
    [("1001", 1001), ("1001-01", 1001), ("  4031 ", 4031), ("A-01", None), ("", None)],
)
def test_numeric_prefix(code, expected):
    assert numeric_prefix(code) == expected


def test_q2_rounds_half_up_to_cents():
    assert q2("1.005") == Decimal("1.01")
    assert q2(None) == Decimal("0.00")
    assert q2(Decimal("-2.345")) == Decimal("-2.35")
    with pytest.raises(ValueError):
        q2("abc")


def test_date_helpers():
    assert day_before(datetime.date(2025, 3, 1)) == datetime.date(2025, 2, 28)
    assert is_new_year(datetime.date(2025, 1, 1))
    assert not is_new_year(datetime.date(2025, 1, 2))
    assert coerce_date("2025-03-15") == datetime.date(2025, 3, 15)
    assert coerce_date(datetime.datetime(2025, 3, 15, 10, 30)) == datetime.date(2025, 3, 15)
    with pytest.raises(ValueError):
        coerce_date("15/03/2025")


class TestClassification:
    baseline = LedgerBaseline()

    def test_fs_tag_marks_income_statement(self):
        assert self.baseline.is_pnl("1001", "IS-REV")
        assert self.baseline.is_pnl("1001", "is-exp")

    def test_prefix_above_threshold_is_pnl(self):
        assert self.baseline.is_pnl("4032", "")
        assert self.baseline.is_pnl("5000-01", "BS")
        assert not self.baseline.is_pnl("4030", "BS")

    def test_retained_earnings_account_is_never_pnl(self):
        assert not self.baseline.is_pnl("4031", "IS")
        assert not self.baseline.is_pnl(" 4031 ", "")

    def test_fiscal_year_start_follows_baseline(self):
        assert self.baseline.fiscal_year_start == datetime.date(2025, 1, 1)
        other = LedgerBaseline(baseline_as_of=datetime.date(2023, 12, 31))
        assert other.fiscal_year_start == datetime.date(2024, 1, 1)

    def test_from_settings_reads_overrides(self, settings):
        settings.LEDGER_BASELINE = {
            "RE_CODE": "3900",
            "RE_THRESHOLD": 3900,
            "BASELINE_AS_OF": "2022-12-31",
            "FIRST_FLOW_YEAR": 2023,
        }
        baseline = LedgerBaseline.from_settings()
        assert baseline.re_code == "3900"
        assert baseline.re_threshold == 3900
        assert baseline.baseline_as_of == datetime.date(2022, 12, 31)
        assert baseline.first_flow_year == 2023
