"""Per-year tax reference data.

Each supported year ships as a complete, explicit record. A JSON file named
``<year>.json`` under ``TAX_DATA_DIR`` replaces the built-in record for that
year; it is validated against :class:`taxplanner.models.TaxData` and is never
merged with another year.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Mapping

from taxplanner.config import get_settings
from taxplanner.data.y2024 import TAX_DATA_2024
from taxplanner.data.y2025 import TAX_DATA_2025
from taxplanner.models import ProvincialTaxData, TaxData

logger = logging.getLogger("taxplanner.data")

_BUILTIN: Mapping[int, TaxData] = {
    2024: TAX_DATA_2024,
    2025: TAX_DATA_2025,
}


class UnknownProvinceError(KeyError):
    pass


class UnsupportedTaxYearError(ValueError):
    pass


def supported_years() -> tuple[int, ...]:
    return tuple(sorted(_BUILTIN))


def _override_path(year: int, data_dir: str | None) -> Path | None:
    if not data_dir:
        return None
    path = Path(data_dir) / f"{year}.json"
    return path if path.is_file() else None


def load_tax_data_file(path: Path) -> TaxData:
    return TaxData.model_validate_json(path.read_text(encoding="utf-8"))


@lru_cache(maxsize=None)
def _load(year: int, data_dir: str | None) -> TaxData:
    override = _override_path(year, data_dir)
    if override is not None:
        data = load_tax_data_file(override)
        if data.year != year:
            raise UnsupportedTaxYearError(
                f"Tax data file {override} declares year {data.year}, expected {year}"
            )
        logger.info("Loaded tax data for %s from %s", year, override)
        return data
    try:
        data = _BUILTIN[year]
    except KeyError as exc:
        raise UnsupportedTaxYearError(f"Unsupported tax year {year}") from exc
    logger.debug("Using built-in tax data for %s", year)
    return data


def get_tax_data(year: int | None = None) -> TaxData:
    settings = get_settings()
    return _load(int(year if year is not None else settings.tax_year), settings.tax_data_dir)


def clear_cache() -> None:
    _load.cache_clear()


def get_provincial_data(tax_data: TaxData, province: str) -> ProvincialTaxData:
    code = (province or "").upper()
    try:
        return tax_data.provinces[code]
    except KeyError as exc:
        raise UnknownProvinceError(f"No tax data for province: {code}") from exc


def list_provinces(tax_data: TaxData) -> list[str]:
    return sorted(tax_data.provinces)


__all__ = [
    "UnknownProvinceError",
    "UnsupportedTaxYearError",
    "clear_cache",
    "get_provincial_data",
    "get_tax_data",
    "list_provinces",
    "load_tax_data_file",
    "supported_years",
]
