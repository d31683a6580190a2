from __future__ import annotations

from typing import Sequence

from taxplanner.models import TaxBracket


def compute_bracket_tax(income: float, brackets: Sequence[TaxBracket]) -> float:
    if income <= 0:
        return 0.0
    tax, previous_max = 0.0, 0.0
    for bracket in brackets:
        if income <= previous_max:
            break
        amount = min(income, bracket.max) - previous_max
        if amount > 0:
            tax += amount * bracket.rate
        # advance even when nothing was taxed so zero-width brackets are skipped
        previous_max = bracket.max
    return max(0.0, tax)


def marginal_rate(income: float, brackets: Sequence[TaxBracket]) -> float:
    for bracket in brackets:
        if income <= bracket.max:
            return bracket.rate
    return brackets[-1].rate


def combined_marginal_rate(
    income: float,
    federal_brackets: Sequence[TaxBracket],
    provincial_brackets: Sequence[TaxBracket],
) -> float:
    return marginal_rate(income, federal_brackets) + marginal_rate(income, provincial_brackets)


def lowest_rate(brackets: Sequence[TaxBracket]) -> float:
    return brackets[0].rate


__all__ = [
    "combined_marginal_rate",
    "compute_bracket_tax",
    "lowest_rate",
    "marginal_rate",
]
