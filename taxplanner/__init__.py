"""Canadian personal income-tax estimator and RRSP contribution planner."""

__version__ = "0.1.0"
