from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProvinceInfo:
    code: str
    name: str
    gst_rate: float
    hst_rate: float | None = None
    pst_rate: float | None = None


PROVINCES: dict[str, ProvinceInfo] = {
    info.code: info
    for info in (
        ProvinceInfo("AB", "Alberta", 0.05),
        ProvinceInfo("BC", "British Columbia", 0.05, pst_rate=0.07),
        ProvinceInfo("MB", "Manitoba", 0.05, pst_rate=0.07),
        ProvinceInfo("NB", "New Brunswick", 0.05, hst_rate=0.15),
        ProvinceInfo("NL", "Newfoundland and Labrador", 0.05, hst_rate=0.15),
        ProvinceInfo("NS", "Nova Scotia", 0.05, hst_rate=0.15),
        ProvinceInfo("NT", "Northwest Territories", 0.05),
        ProvinceInfo("NU", "Nunavut", 0.05),
        ProvinceInfo("ON", "Ontario", 0.05, hst_rate=0.13),
        ProvinceInfo("PE", "Prince Edward Island", 0.05, hst_rate=0.15),
        ProvinceInfo("QC", "Quebec", 0.05, pst_rate=0.09975),
        ProvinceInfo("SK", "Saskatchewan", 0.05, pst_rate=0.06),
        ProvinceInfo("YT", "Yukon", 0.05),
    )
}


def province_name(code: str) -> str:
    info = PROVINCES.get((code or "").upper())
    return info.name if info else code
