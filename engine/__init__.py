"""
Cashflow engine — deterministic schedule, valuation, event injection, Monte Carlo runner.
"""

from .cashflow import BaseSchedule, build_schedule, level_payment
from .valuation import (
    BaseCaseMetrics,
    annualize_monthly_rate,
    bisect_root,
    discounted_payback,
    evaluate_base_case,
    irr_monthly,
    npv,
)
from .events import PathEvents, apply_default, apply_delay, simulate_path
from .runner import (
    MonteCarloResult,
    SimulationResult,
    run_monte_carlo,
    simulate_credit_decision,
)

__all__ = [
    "BaseSchedule",
    "build_schedule",
    "level_payment",
    "BaseCaseMetrics",
    "annualize_monthly_rate",
    "bisect_root",
    "discounted_payback",
    "evaluate_base_case",
    "irr_monthly",
    "npv",
    "PathEvents",
    "apply_default",
    "apply_delay",
    "simulate_path",
    "MonteCarloResult",
    "SimulationResult",
    "run_monte_carlo",
    "simulate_credit_decision",
]
