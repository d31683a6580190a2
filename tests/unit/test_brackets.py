import math

import pytest
from pydantic import ValidationError

from taxplanner.models import TaxBracket
from taxplanner.tax.brackets import combined_marginal_rate, compute_bracket_tax, marginal_rate
from tests.fixtures.tax_tables import FEDERAL_BRACKETS

FLAT = (TaxBracket(min=0, max=math.inf, rate=0.15),)

THREE_TIER = (
    TaxBracket(min=0, max=50_000, rate=0.15),
    TaxBracket(min=50_000, max=100_000, rate=0.205),
    TaxBracket(min=100_000, max=math.inf, rate=0.26),
)


@pytest.mark.parametrize("income", [0, 1, 999.99, 50_000, 1_234_567.89])
def test_flat_schedule_is_proportional(income):
    assert compute_bracket_tax(income, FLAT) == income * 0.15


@pytest.mark.parametrize("income", [0, -1, -50_000])
def test_non_positive_income_has_no_tax(income):
    assert compute_bracket_tax(income, THREE_TIER) == 0


@pytest.mark.parametrize(
    "lower,higher",
    [(0, 1), (49_999, 50_000), (50_000, 50_001), (99_999, 100_001), (100_000, 10_000_000)],
)
def test_tax_is_monotonic(lower, higher):
    assert compute_bracket_tax(lower, THREE_TIER) <= compute_bracket_tax(higher, THREE_TIER)


def test_tax_at_bracket_edge_matches_truncated_schedule():
    edge = THREE_TIER[1].max
    assert compute_bracket_tax(edge, THREE_TIER) == compute_bracket_tax(edge, THREE_TIER[:2])


def test_three_tier_amounts():
    assert compute_bracket_tax(50_000, THREE_TIER) == pytest.approx(7_500)
    assert compute_bracket_tax(120_000, THREE_TIER) == pytest.approx(7_500 + 10_250 + 5_200)


def test_zero_width_bracket_is_skipped():
    brackets = (
        TaxBracket(min=0, max=100, rate=0.10),
        TaxBracket(min=100, max=100, rate=0.50),
        TaxBracket(min=100, max=math.inf, rate=0.20),
    )
    assert compute_bracket_tax(200, brackets) == pytest.approx(30)


def test_unbounded_bracket_handles_huge_income():
    assert compute_bracket_tax(1e12, THREE_TIER) > compute_bracket_tax(1e11, THREE_TIER)


@pytest.mark.parametrize("income,expected", [(49_999, 0.15), (50_000, 0.15), (50_001, 0.26), (0, 0.15)])
def test_marginal_rate_lookup(income, expected):
    assert marginal_rate(income, FEDERAL_BRACKETS) == expected


def test_marginal_rate_falls_back_to_last_bracket():
    bounded = (TaxBracket(min=0, max=100, rate=0.1), TaxBracket(min=100, max=200, rate=0.2))
    assert marginal_rate(500, bounded) == 0.2


def test_combined_marginal_rate_adds_both_schedules():
    provincial = (TaxBracket(min=0, max=40_000, rate=0.05), TaxBracket(min=40_000, max=math.inf, rate=0.10))
    assert combined_marginal_rate(45_000, FEDERAL_BRACKETS, provincial) == pytest.approx(0.25)
    assert combined_marginal_rate(60_000, FEDERAL_BRACKETS, provincial) == pytest.approx(0.36)


@pytest.mark.parametrize("raw", [None, "Infinity", "inf"])
def test_unbounded_max_normalizes_to_infinity(raw):
    assert TaxBracket(min=0, max=raw, rate=0.1).max == math.inf


def test_bracket_validation():
    with pytest.raises(ValidationError):
        TaxBracket(min=0, max=100, rate=1.5)
    with pytest.raises(ValidationError):
        TaxBracket(min=200, max=100, rate=0.1)
