"""RRSP contribution optimizer.

The optimizer sweeps evenly spaced contribution amounts between zero and the
usable contribution ceiling, recomputes federal and provincial tax at each
point, and keeps the largest contribution whose incremental savings per dollar
still clear 90% of the filer's starting combined marginal rate.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from taxplanner.data import get_provincial_data
from taxplanner.models import FederalTaxData, ProvincialTaxData, TaxData
from taxplanner.tax.brackets import combined_marginal_rate
from taxplanner.tax.federal import compute_federal_tax_payable
from taxplanner.tax.provincial import compute_provincial_tax_payable

logger = logging.getLogger("taxplanner.rrsp")

INCOME_CAP_RATIO = 0.9
MIN_STEP = 1000
SWEEP_POINTS = 20
THRESHOLD_RATIO = 0.9

NO_BENEFIT_MESSAGE = (
    "Based on your income, RRSP contributions may not provide significant tax benefits this year."
)


@dataclass(frozen=True)
class RRSPScenario:
    contribution: float
    adjusted_income: float
    federal_tax: float
    provincial_tax: float
    total_tax: float
    tax_savings: float
    marginal_rate: float
    effective_rate: float


@dataclass(frozen=True)
class RRSPOptimizationResult:
    current_tax: float
    current_marginal_rate: float
    scenarios: tuple[RRSPScenario, ...]
    optimal_contribution: float
    optimal_savings: float
    recommendation: str


def _payable(income: float, federal: FederalTaxData, provincial: ProvincialTaxData) -> tuple[float, float]:
    return (
        compute_federal_tax_payable(income, federal),
        compute_provincial_tax_payable(income, provincial),
    )


def _scenario(
    gross_income: float,
    contribution: float,
    current_tax: float,
    federal: FederalTaxData,
    provincial: ProvincialTaxData,
) -> RRSPScenario:
    adjusted = gross_income - contribution
    federal_tax, provincial_tax = _payable(adjusted, federal, provincial)
    total = federal_tax + provincial_tax
    return RRSPScenario(
        contribution=contribution,
        adjusted_income=adjusted,
        federal_tax=federal_tax,
        provincial_tax=provincial_tax,
        total_tax=total,
        tax_savings=current_tax - total,
        marginal_rate=combined_marginal_rate(adjusted, federal.brackets, provincial.brackets),
        effective_rate=total / adjusted if adjusted > 0 else 0.0,
    )


def max_contribution_for(gross_income: float, contribution_room: float) -> float:
    return max(0.0, min(contribution_room, gross_income * INCOME_CAP_RATIO))


def sweep_step(max_contribution: float) -> int:
    return max(MIN_STEP, math.floor(max_contribution / SWEEP_POINTS))


def sample_contributions(max_contribution: float) -> list[float]:
    step = sweep_step(max_contribution)
    points: list[float] = []
    index = 0
    while index * step <= max_contribution:
        points.append(float(index * step))
        index += 1
    if max_contribution > 0 and points[-1] != max_contribution:
        points.append(max_contribution)
    return points


def select_optimal(scenarios: tuple[RRSPScenario, ...], current_marginal_rate: float) -> RRSPScenario:
    """Last scenario whose incremental savings rate clears the threshold.

    The scan does not stop at the first scenario below the threshold; a later
    scenario that clears it again still moves the pointer.
    """
    threshold = current_marginal_rate * THRESHOLD_RATIO
    optimal = scenarios[0]
    for previous, scenario in zip(scenarios, scenarios[1:]):
        added_contribution = scenario.contribution - previous.contribution
        added_savings = scenario.tax_savings - previous.tax_savings
        per_dollar = added_savings / added_contribution if added_contribution > 0 else 0.0
        if per_dollar >= threshold:
            optimal = scenario
    return optimal


def _dollars(amount: float) -> str:
    return f"${amount:,.2f}"


def build_recommendation(optimal: RRSPScenario, current_rate: float, room: float) -> str:
    if optimal.contribution == 0:
        return NO_BENEFIT_MESSAGE
    savings_percent = optimal.tax_savings / optimal.contribution * 100 if optimal.contribution > 0 else 0.0
    if optimal.marginal_rate < current_rate:
        rate_change = (current_rate - optimal.marginal_rate) * 100
        return (
            f"Contribute {_dollars(optimal.contribution)} to reduce your marginal rate by {rate_change:.1f}%. "
            f"Estimated tax savings: {_dollars(optimal.tax_savings)} ({savings_percent:.1f}% return). "
            f"Remaining room: {_dollars(room - optimal.contribution)}."
        )
    return (
        f"Consider contributing {_dollars(optimal.contribution)} for estimated tax savings of "
        f"{_dollars(optimal.tax_savings)} ({savings_percent:.1f}% return). "
        f"Remaining room: {_dollars(room - optimal.contribution)}."
    )


def optimize(
    gross_income: float,
    contribution_room: float,
    province: str,
    tax_data: TaxData,
) -> RRSPOptimizationResult:
    provincial = get_provincial_data(tax_data, province)
    federal = tax_data.federal
    room = max(0.0, contribution_room)

    current_federal, current_provincial = _payable(gross_income, federal, provincial)
    current_tax = current_federal + current_provincial
    current_rate = combined_marginal_rate(gross_income, federal.brackets, provincial.brackets)

    ceiling = max_contribution_for(gross_income, room)
    scenarios = tuple(
        _scenario(gross_income, contribution, current_tax, federal, provincial)
        for contribution in sample_contributions(ceiling)
    )
    optimal = select_optimal(scenarios, current_rate)
    logger.debug(
        "RRSP sweep province=%s points=%s ceiling=%.2f optimal=%.2f",
        province.upper(),
        len(scenarios),
        ceiling,
        optimal.contribution,
    )
    return RRSPOptimizationResult(
        current_tax=current_tax,
        current_marginal_rate=current_rate,
        scenarios=scenarios,
        optimal_contribution=optimal.contribution,
        optimal_savings=optimal.tax_savings,
        recommendation=build_recommendation(optimal, current_rate, room),
    )


def savings_for_contribution(
    gross_income: float,
    contribution: float,
    province: str,
    tax_data: TaxData,
) -> float:
    provincial = get_provincial_data(tax_data, province)
    federal = tax_data.federal
    before = sum(_payable(gross_income, federal, provincial))
    after = sum(_payable(gross_income - contribution, federal, provincial))
    return before - after


__all__ = [
    "NO_BENEFIT_MESSAGE",
    "RRSPOptimizationResult",
    "RRSPScenario",
    "build_recommendation",
    "max_contribution_for",
    "optimize",
    "sample_contributions",
    "savings_for_contribution",
    "select_optimal",
    "sweep_step",
]
