"""
Valuation of a cashflow vector — NPV, IRR, discounted payback.

IRR is found by bracketing bisection on NPV(r) = 0. The root-finder takes any
scalar function; nothing in it is loan-specific.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Sequence, Union

import numpy as np

from core.schema import (
    IRR_EXPANSION_FACTOR,
    IRR_LOWER_BOUND,
    IRR_MAX_EXPANSIONS,
    IRR_MAX_ITERATIONS,
    IRR_TOLERANCE,
    IRR_UPPER_BOUND,
    IRR_UPPER_CAP,
)

logger = logging.getLogger(__name__)

Cashflows = Union[Sequence[float], np.ndarray]


def npv(rate_monthly: float, cashflows: Cashflows) -> float:
    """
    Σ cf[t] / (1 + r)^t over all months.

    r = -1 is not special-cased (division by zero is the caller's problem).
    Zero flows contribute nothing and are skipped, so extreme rates give ±inf
    instead of nan.
    """
    cf = np.asarray(cashflows, dtype=float)
    t = np.nonzero(cf)[0]
    if len(t) == 0:
        return 0.0
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        discount = np.power(1.0 + rate_monthly, t.astype(float))
        return float(np.sum(cf[t] / discount))


def bisect_root(
    func: Callable[[float], float],
    lo: float,
    hi: float,
    *,
    expansion_factor: float = IRR_EXPANSION_FACTOR,
    max_expansions: int = IRR_MAX_EXPANSIONS,
    hi_cap: float = IRR_UPPER_CAP,
    max_iterations: int = IRR_MAX_ITERATIONS,
    tol: float = IRR_TOLERANCE,
) -> float:
    """
    Root of func on [lo, hi] by bisection.

    If func does not change sign over the bracket, hi is grown geometrically
    (up to max_expansions times, stopping once it passes hi_cap). Returns nan when
    no sign change is found. Stops early once |func(mid)| < tol; otherwise returns
    the midpoint of the final bracket.
    """
    f_lo = func(lo)
    f_hi = func(hi)

    tries = 0
    while f_lo * f_hi > 0 and tries < max_expansions:
        hi *= expansion_factor
        f_hi = func(hi)
        tries += 1
        if hi > hi_cap:
            break

    if f_lo * f_hi > 0:
        logger.debug(f"No sign change on [{lo}, {hi}] after {tries} expansions.")
        return float("nan")

    for _ in range(max_iterations):
        mid = (lo + hi) / 2.0
        f_mid = func(mid)
        if abs(f_mid) < tol:
            return mid
        if f_lo * f_mid <= 0:
            hi = mid
            f_hi = f_mid
        else:
            lo = mid
            f_lo = f_mid
    return (lo + hi) / 2.0


def irr_monthly(cashflows: Cashflows) -> float:
    """Monthly IRR, or nan when no root is bracketed (IRR undefined)."""
    cf = np.asarray(cashflows, dtype=float)
    return bisect_root(lambda r: npv(r, cf), IRR_LOWER_BOUND, IRR_UPPER_BOUND)


def annualize_monthly_rate(rate_monthly: float) -> float:
    if not math.isfinite(rate_monthly):
        return float("nan")
    return (1.0 + rate_monthly) ** 12 - 1.0


def discounted_payback(rate_monthly: float, cashflows: Cashflows) -> Union[int, float]:
    """
    First month at which the cumulative discounted cashflow turns non-negative.
    Month 0 is the disbursement. Returns inf when the loan never pays back.
    """
    cf = np.asarray(cashflows, dtype=float)
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        pv = cf / np.power(1.0 + rate_monthly, np.arange(len(cf), dtype=float))
    recovered = np.nonzero(np.cumsum(pv) >= 0)[0]
    if len(recovered) == 0:
        return math.inf
    return int(recovered[0])


@dataclass(frozen=True)
class BaseCaseMetrics:
    """Deterministic valuation of the base schedule."""
    npv: float
    irr_monthly: float  # nan when undefined
    irr_annual: float  # nan when undefined
    discounted_payback_months: Union[int, float]  # inf when never

    @property
    def irr_defined(self) -> bool:
        return math.isfinite(self.irr_annual)

    @property
    def pays_back(self) -> bool:
        return math.isfinite(self.discounted_payback_months)


def evaluate_base_case(cashflows: Cashflows, discount_monthly: float) -> BaseCaseMetrics:
    irr_m = irr_monthly(cashflows)
    return BaseCaseMetrics(
        npv=npv(discount_monthly, cashflows),
        irr_monthly=irr_m,
        irr_annual=annualize_monthly_rate(irr_m),
        discounted_payback_months=discounted_payback(discount_monthly, cashflows),
    )
