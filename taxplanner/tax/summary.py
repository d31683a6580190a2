from __future__ import annotations

from dataclasses import dataclass

from taxplanner.data import get_provincial_data
from taxplanner.models import TaxData
from taxplanner.tax.brackets import combined_marginal_rate
from taxplanner.tax.federal import (
    compute_cpp_contribution,
    compute_ei_premium,
    compute_federal_tax_payable,
)
from taxplanner.tax.provincial import compute_provincial_tax_payable


@dataclass(frozen=True)
class TaxSummary:
    province_code: str
    total_income: float
    total_deductions: float
    taxable_income: float
    federal_tax: float
    provincial_tax: float
    total_tax: float
    cpp_contributions: float
    ei_premiums: float
    tax_withheld: float
    balance_owing: float
    marginal_rate: float
    effective_rate: float

    @property
    def is_refund(self) -> bool:
        return self.balance_owing < 0


def summarize(
    total_income: float,
    total_deductions: float,
    province: str,
    tax_data: TaxData,
    tax_withheld: float = 0.0,
    employment_income: float | None = None,
    self_employment_income: float = 0.0,
) -> TaxSummary:
    """Dashboard-level estimate for one filer.

    ``employment_income`` defaults to ``total_income`` for CPP/EI purposes.
    Self-employment earnings attract both CPP shares and no EI.
    """
    provincial = get_provincial_data(tax_data, province)
    federal = tax_data.federal

    taxable = max(0.0, total_income - total_deductions)
    federal_tax = compute_federal_tax_payable(taxable, federal)
    provincial_tax = compute_provincial_tax_payable(taxable, provincial)
    total_tax = federal_tax + provincial_tax

    employment = total_income if employment_income is None else employment_income
    cpp = compute_cpp_contribution(employment, federal.cpp)
    ei = compute_ei_premium(employment, federal.ei)
    if self_employment_income > 0:
        cpp += compute_cpp_contribution(self_employment_income, federal.cpp, is_self_employed=True)

    return TaxSummary(
        province_code=province.upper(),
        total_income=total_income,
        total_deductions=total_deductions,
        taxable_income=taxable,
        federal_tax=federal_tax,
        provincial_tax=provincial_tax,
        total_tax=total_tax,
        cpp_contributions=cpp,
        ei_premiums=ei,
        tax_withheld=tax_withheld,
        balance_owing=total_tax - tax_withheld,
        marginal_rate=combined_marginal_rate(taxable, federal.brackets, provincial.brackets),
        effective_rate=total_tax / taxable if taxable > 0 else 0.0,
    )


__all__ = ["TaxSummary", "summarize"]
