"""
Simulation inputs — loan terms, risk parameters, and the discount rate.
All inputs are immutable once built; one set per simulation request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .schema import AmortizationMethod
from .utils import annual_percent_to_monthly_rate, annual_to_monthly_hazard, clamp


@dataclass(frozen=True)
class LoanTerms:
    principal: float
    term_months: int
    rate_annual_pct: float
    amortization: AmortizationMethod = AmortizationMethod.PRICE
    grace_months: int = 0

    def __post_init__(self):
        object.__setattr__(self, "amortization", AmortizationMethod.parse(self.amortization))

    @property
    def rate_monthly(self) -> float:
        return annual_percent_to_monthly_rate(self.rate_annual_pct)


@dataclass(frozen=True)
class RiskParameters:
    """
    Risk drivers for the Monte Carlo pass.

    Percent fields are stored as entered; the fraction properties clamp them to [0, 1].
    seed=None means a non-deterministic run.
    """

    pd_annual_pct: float = 0.0
    lgd_pct: float = 0.0
    delay_prob_pct: float = 0.0
    delay_months: int = 0
    iterations: int = 1000
    seed: Optional[int] = None

    @property
    def pd_annual(self) -> float:
        return clamp(self.pd_annual_pct / 100.0, 0.0, 1.0)

    @property
    def pd_monthly(self) -> float:
        return float(annual_to_monthly_hazard(self.pd_annual))

    @property
    def lgd(self) -> float:
        return clamp(self.lgd_pct / 100.0, 0.0, 1.0)

    @property
    def delay_prob(self) -> float:
        return clamp(self.delay_prob_pct / 100.0, 0.0, 1.0)


@dataclass(frozen=True)
class SimulationInputs:
    loan: LoanTerms
    risk: RiskParameters
    discount_annual_pct: float

    @property
    def discount_monthly(self) -> float:
        return annual_percent_to_monthly_rate(self.discount_annual_pct)
