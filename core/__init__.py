"""
Core package — schema definitions, configuration, and shared utilities.
No business logic lives here.
"""

from .schema import AmortizationMethod, INPUT_FIELDS, MIN_ITERATIONS
from .config import LoanTerms, RiskParameters, SimulationInputs
from .utils import (
    annual_percent_to_monthly_rate,
    annual_to_monthly_hazard,
    clamp,
    format_currency,
    format_pct,
)

__all__ = [
    "AmortizationMethod",
    "INPUT_FIELDS",
    "MIN_ITERATIONS",
    "LoanTerms",
    "RiskParameters",
    "SimulationInputs",
    "annual_percent_to_monthly_rate",
    "annual_to_monthly_hazard",
    "clamp",
    "format_currency",
    "format_pct",
]
