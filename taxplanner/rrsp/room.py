from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from taxplanner.models import RRSPLimits


class RRSPRoom(BaseModel):
    """Contribution room as reported on the notice of assessment."""

    contribution_room: float = Field(0.0, ge=0)
    contributions_made: float = Field(0.0, ge=0)
    previous_year_unused: float = Field(0.0, ge=0)

    model_config = ConfigDict(frozen=True)

    @property
    def remaining(self) -> float:
        return self.contribution_room + self.previous_year_unused - self.contributions_made

    def after_contribution(self, amount: float) -> "RRSPRoom":
        return self.model_copy(update={"contributions_made": self.contributions_made + amount})


def deduction_limit(earned_income: float, limits: RRSPLimits) -> float:
    """New room earned this year: the lesser of the dollar cap and the percentage of earned income."""
    return max(0.0, min(limits.max_contribution, earned_income * limits.percentage_limit))


__all__ = ["RRSPRoom", "deduction_limit"]
