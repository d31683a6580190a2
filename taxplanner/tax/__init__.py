from taxplanner.tax.brackets import (
    combined_marginal_rate,
    compute_bracket_tax,
    marginal_rate,
)
from taxplanner.tax.federal import (
    compute_cpp_contribution,
    compute_ei_premium,
    compute_federal_credit,
    compute_federal_tax,
    compute_federal_tax_payable,
)
from taxplanner.tax.provincial import (
    compute_provincial_credit,
    compute_provincial_tax,
    compute_provincial_tax_payable,
    compute_surtax,
)

__all__ = [
    "combined_marginal_rate",
    "compute_bracket_tax",
    "compute_cpp_contribution",
    "compute_ei_premium",
    "compute_federal_credit",
    "compute_federal_tax",
    "compute_federal_tax_payable",
    "compute_provincial_credit",
    "compute_provincial_tax",
    "compute_provincial_tax_payable",
    "compute_surtax",
    "marginal_rate",
]
