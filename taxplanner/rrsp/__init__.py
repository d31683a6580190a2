from taxplanner.rrsp.optimizer import (
    RRSPOptimizationResult,
    RRSPScenario,
    optimize,
    savings_for_contribution,
)
from taxplanner.rrsp.room import RRSPRoom, deduction_limit

__all__ = [
    "RRSPOptimizationResult",
    "RRSPRoom",
    "RRSPScenario",
    "deduction_limit",
    "optimize",
    "savings_for_contribution",
]
