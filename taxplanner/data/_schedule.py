from __future__ import annotations

import math
from typing import Iterable

from taxplanner.models import ProvincialTaxData, SurtaxSchedule, TaxBracket


def schedule(*steps: tuple[float | None, float]) -> tuple[TaxBracket, ...]:
    """Build contiguous brackets from ``(up_to, rate)`` pairs; ``None`` is unbounded."""
    brackets: list[TaxBracket] = []
    lower = 0.0
    for up_to, rate in steps:
        upper = math.inf if up_to is None else float(up_to)
        brackets.append(TaxBracket(min=lower, max=upper, rate=rate))
        lower = upper
    return tuple(brackets)


def province(
    steps: Iterable[tuple[float | None, float]],
    bpa: float,
    surtax: tuple[float, float, float, float] | None = None,
) -> ProvincialTaxData:
    return ProvincialTaxData(
        brackets=schedule(*steps),
        basic_personal_amount=bpa,
        surtax=(
            None
            if surtax is None
            else SurtaxSchedule(
                threshold1=surtax[0], rate1=surtax[1], threshold2=surtax[2], rate2=surtax[3]
            )
        ),
    )
