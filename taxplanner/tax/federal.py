from __future__ import annotations

from taxplanner.models import CPPParameters, EIParameters, FederalTaxData
from taxplanner.tax.brackets import compute_bracket_tax, lowest_rate


def compute_federal_tax(taxable_income: float, federal: FederalTaxData) -> float:
    return compute_bracket_tax(taxable_income, federal.brackets)


def compute_federal_credit(federal: FederalTaxData) -> float:
    """Basic personal amount converted at the lowest federal rate."""
    return federal.basic_personal_amount * lowest_rate(federal.brackets)


def compute_federal_tax_payable(
    taxable_income: float,
    federal: FederalTaxData,
    extra_credits: float = 0.0,
) -> float:
    gross = compute_federal_tax(taxable_income, federal)
    credits = compute_federal_credit(federal) + extra_credits
    return max(0.0, gross - credits)


def compute_cpp_contribution(
    pensionable_earnings: float,
    cpp: CPPParameters,
    is_self_employed: bool = False,
) -> float:
    """CPP on earnings up to the YMPE, above the basic exemption.

    Self-employed filers pay both the employee and employer share, so the
    rate and the ceiling are doubled.
    """
    earnings = min(pensionable_earnings, cpp.max_pensionable_earnings)
    contributory = max(0.0, earnings - cpp.exemption)
    multiplier = 2 if is_self_employed else 1
    return min(contributory * cpp.rate * multiplier, cpp.max_contribution * multiplier)


def compute_ei_premium(
    insurable_earnings: float,
    ei: EIParameters,
    is_self_employed: bool = False,
) -> float:
    if is_self_employed:
        return 0.0
    earnings = min(insurable_earnings, ei.max_insurable_earnings)
    return max(0.0, min(earnings * ei.rate, ei.max_premium))


__all__ = [
    "compute_cpp_contribution",
    "compute_ei_premium",
    "compute_federal_credit",
    "compute_federal_tax",
    "compute_federal_tax_payable",
]
