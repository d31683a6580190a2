from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _unbounded(value: Any) -> Any:
    if value is None:
        return math.inf
    if isinstance(value, str) and value.strip().lower() in {"infinity", "inf", "+inf"}:
        return math.inf
    return value


class _ReferenceModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class TaxBracket(_ReferenceModel):
    min: float = Field(ge=0)
    max: float = math.inf
    rate: float = Field(ge=0, le=1)

    _normalize_max = field_validator("max", mode="before")(_unbounded)

    @model_validator(mode="after")
    def _check_bounds(self) -> "TaxBracket":
        if self.max < self.min:
            raise ValueError(f"bracket max {self.max} is below min {self.min}")
        return self


class CPPParameters(_ReferenceModel):
    max_pensionable_earnings: float = Field(alias="maxPensionableEarnings")
    rate: float
    exemption: float
    max_contribution: float = Field(alias="maxContribution")


class EIParameters(_ReferenceModel):
    max_insurable_earnings: float = Field(alias="maxInsurableEarnings")
    rate: float
    max_premium: float = Field(alias="maxPremium")


class FederalTaxData(_ReferenceModel):
    brackets: tuple[TaxBracket, ...] = Field(min_length=1)
    basic_personal_amount: float = Field(ge=0, alias="basicPersonalAmount")
    cpp: CPPParameters
    ei: EIParameters


class SurtaxSchedule(_ReferenceModel):
    threshold1: float
    rate1: float
    threshold2: float
    rate2: float

    @model_validator(mode="after")
    def _check_thresholds(self) -> "SurtaxSchedule":
        if self.threshold1 >= self.threshold2:
            raise ValueError("surtax threshold1 must be below threshold2")
        return self


class ProvincialTaxData(_ReferenceModel):
    brackets: tuple[TaxBracket, ...] = Field(min_length=1)
    basic_personal_amount: float = Field(ge=0, alias="basicPersonalAmount")
    surtax: SurtaxSchedule | None = None


class RRSPLimits(_ReferenceModel):
    max_contribution: float = Field(alias="maxContribution")
    percentage_limit: float = Field(ge=0, le=1, alias="percentageLimit")


class MileageRates(_ReferenceModel):
    first_5000km: float = Field(alias="first5000km")
    after_5000km: float = Field(alias="after5000km")


class TaxData(_ReferenceModel):
    year: int
    federal: FederalTaxData
    provinces: dict[str, ProvincialTaxData]
    rrsp: RRSPLimits
    mileage_rates: MileageRates = Field(alias="mileageRates")
    last_updated: str = Field(default="", alias="lastUpdated")
    source: str = ""

    @field_validator("provinces", mode="after")
    @classmethod
    def _upper_codes(cls, value: dict[str, ProvincialTaxData]) -> dict[str, ProvincialTaxData]:
        return {code.upper(): data for code, data in value.items()}


__all__ = [
    "CPPParameters",
    "EIParameters",
    "FederalTaxData",
    "MileageRates",
    "ProvincialTaxData",
    "RRSPLimits",
    "SurtaxSchedule",
    "TaxBracket",
    "TaxData",
]
