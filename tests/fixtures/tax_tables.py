import math

from taxplanner.models import (
    CPPParameters,
    EIParameters,
    FederalTaxData,
    MileageRates,
    ProvincialTaxData,
    RRSPLimits,
    SurtaxSchedule,
    TaxBracket,
    TaxData,
)

INF = math.inf

FEDERAL_BRACKETS = (
    TaxBracket(min=0, max=50_000, rate=0.15),
    TaxBracket(min=50_000, max=INF, rate=0.26),
)

CPP = CPPParameters(
    max_pensionable_earnings=71_300.0,
    rate=0.0595,
    exemption=3_500.0,
    max_contribution=4_034.10,
)

EI = EIParameters(max_insurable_earnings=65_700.0, rate=0.0164, max_premium=1_077.48)

SURTAX = SurtaxSchedule(threshold1=5_000, rate1=0.20, threshold2=7_000, rate2=0.36)


def make_federal(bpa: float = 10_000.0) -> FederalTaxData:
    return FederalTaxData(brackets=FEDERAL_BRACKETS, basic_personal_amount=bpa, cpp=CPP, ei=EI)


def make_surtax_province() -> ProvincialTaxData:
    return ProvincialTaxData(
        brackets=(
            TaxBracket(min=0, max=40_000, rate=0.05),
            TaxBracket(min=40_000, max=INF, rate=0.10),
        ),
        basic_personal_amount=10_000.0,
        surtax=SURTAX,
    )


def make_flat_province() -> ProvincialTaxData:
    return ProvincialTaxData(
        brackets=(TaxBracket(min=0, max=INF, rate=0.10),),
        basic_personal_amount=20_000.0,
    )


def make_tax_data(year: int = 2025) -> TaxData:
    """Two-bracket federal schedule, a surtax province (ON) and a flat one (AB)."""
    return TaxData(
        year=year,
        federal=make_federal(),
        provinces={"ON": make_surtax_province(), "AB": make_flat_province()},
        rrsp=RRSPLimits(max_contribution=32_490.0, percentage_limit=0.18),
        mileage_rates=MileageRates(first_5000km=0.70, after_5000km=0.64),
        last_updated="2025-01-01",
        source="test fixture",
    )
