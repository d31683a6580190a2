from __future__ import annotations

from taxplanner.models import ProvincialTaxData, SurtaxSchedule
from taxplanner.tax.brackets import compute_bracket_tax, lowest_rate


def compute_surtax(tax: float, surtax: SurtaxSchedule) -> float:
    """Surtax staged on the bracket tax itself, not on income."""
    if tax > surtax.threshold2:
        return (tax - surtax.threshold2) * surtax.rate2 + (
            surtax.threshold2 - surtax.threshold1
        ) * surtax.rate1
    if tax > surtax.threshold1:
        return (tax - surtax.threshold1) * surtax.rate1
    return 0.0


def compute_provincial_tax(taxable_income: float, provincial: ProvincialTaxData) -> float:
    tax = compute_bracket_tax(taxable_income, provincial.brackets)
    if provincial.surtax is not None:
        tax += compute_surtax(tax, provincial.surtax)
    return max(0.0, tax)


def compute_provincial_credit(provincial: ProvincialTaxData) -> float:
    return provincial.basic_personal_amount * lowest_rate(provincial.brackets)


def compute_provincial_tax_payable(
    taxable_income: float,
    provincial: ProvincialTaxData,
    extra_credits: float = 0.0,
) -> float:
    gross = compute_provincial_tax(taxable_income, provincial)
    credits = compute_provincial_credit(provincial) + extra_credits
    return max(0.0, gross - credits)


__all__ = [
    "compute_provincial_credit",
    "compute_provincial_tax",
    "compute_provincial_tax_payable",
    "compute_surtax",
]
