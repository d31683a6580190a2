from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from taxplanner.data import UnknownProvinceError
from taxplanner.data.provinces import PROVINCES, ProvinceInfo

SMALL_SUPPLIER_THRESHOLD = 30_000.0
SMALL_SUPPLIER_WARNING = 25_000.0

ThresholdStatus = Literal["under", "near", "over"]


@dataclass(frozen=True)
class SalesTaxEstimate:
    province_code: str
    tax_name: str
    rate: float
    revenues: float
    collected: float
    input_tax_credits: float
    net_owing: float
    is_refund: bool
    threshold_status: ThresholdStatus


def _province_info(province: str) -> ProvinceInfo:
    code = (province or "").upper()
    try:
        return PROVINCES[code]
    except KeyError as exc:
        raise UnknownProvinceError(f"No sales tax data for province: {code}") from exc


def sales_tax_rate(province: str) -> tuple[str, float]:
    info = _province_info(province)
    if info.hst_rate:
        return "HST", info.hst_rate
    return "GST", info.gst_rate


def small_supplier_status(revenues: float) -> ThresholdStatus:
    if revenues >= SMALL_SUPPLIER_THRESHOLD:
        return "over"
    if revenues >= SMALL_SUPPLIER_WARNING:
        return "near"
    return "under"


def estimate_remittance(
    province: str,
    revenues: float,
    collected: float,
    input_tax_credits: float,
) -> SalesTaxEstimate:
    info = _province_info(province)
    tax_name, rate = sales_tax_rate(info.code)
    net = collected - input_tax_credits
    return SalesTaxEstimate(
        province_code=info.code,
        tax_name=tax_name,
        rate=rate,
        revenues=revenues,
        collected=collected,
        input_tax_credits=input_tax_credits,
        net_owing=net,
        is_refund=net < 0,
        threshold_status=small_supplier_status(revenues),
    )


__all__ = [
    "SMALL_SUPPLIER_THRESHOLD",
    "SalesTaxEstimate",
    "estimate_remittance",
    "sales_tax_rate",
    "small_supplier_status",
]
