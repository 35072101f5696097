from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple, Union


class AmortizationMethod(str, Enum):
    """Amortization methods supported by the schedule builder."""

    PRICE = "PRICE"  # constant installment
    SAC = "SAC"  # constant amortization

    @classmethod
    def parse(cls, value: Union[str, "AmortizationMethod"]) -> "AmortizationMethod":
        if isinstance(value, cls):
            return value
        tag = str(value).strip().upper()
        return cls.PRICE if tag == cls.PRICE.value else cls.SAC


# Field names of the raw parameter set handed over by the input form.
# The loader reads ONLY these keys.
INPUT_FIELDS: Tuple[str, ...] = (
    "principal",
    "term_months",
    "rate_annual",
    "amort_type",
    "grace_months",
    "discount_annual",
    "pd_annual",
    "lgd_pct",
    "delay_prob_pct",
    "delay_months",
    "iterations",
    "seed",
)

DEFAULT_PARAMETERS: Dict[str, object] = {
    "principal": 1_000_000.0,
    "term_months": 36,
    "rate_annual": 18.0,
    "amort_type": "PRICE",
    "grace_months": 0,
    "discount_annual": 15.0,
    "pd_annual": 3.0,
    "lgd_pct": 45.0,
    "delay_prob_pct": 5.0,
    "delay_months": 1,
    "iterations": 5000,
    "seed": "",
}

# Monte Carlo
MIN_ITERATIONS: int = 100

# IRR bracket search (monthly rates)
IRR_LOWER_BOUND: float = -0.99
IRR_UPPER_BOUND: float = 10.0
IRR_EXPANSION_FACTOR: float = 1.5
IRR_MAX_EXPANSIONS: int = 40
IRR_UPPER_CAP: float = 1e6
IRR_MAX_ITERATIONS: int = 80
IRR_TOLERANCE: float = 1e-9

# Percentile levels reported by the Monte Carlo summary
REPORTED_PERCENTILES: Tuple[float, float, float] = (0.05, 0.50, 0.95)
