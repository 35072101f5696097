"""
Path-level event simulation — random draws that perturb the base schedule.

Two passes per Monte Carlo path, always in this order:
  1. Delay:   each positive installment may slip by a fixed number of months
  2. Default: the first month whose draw falls under the monthly hazard ends the loan

Delay runs first, so a slipped installment can still be captured (or erased)
by a later default. Both passes work on copies; the base schedule is never touched.

Modeling simplifications:
  - Installments slip independently of each other
  - An installment pushed past the horizon is lost (not reinvested, not refunded)
  - Recovery = (1 - LGD) x balance owed when the default month began, paid in that month
  - At most one default per path (first passage)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from distributions.prng import UniformSource


@dataclass
class PathEvents:
    """Result of simulating one Monte Carlo path."""
    cashflows: np.ndarray
    delayed_months: List[int] = field(default_factory=list)
    dropped_amount: float = 0.0  # delayed past the horizon
    default_month: Optional[int] = None
    recovery_amount: float = 0.0

    @property
    def did_default(self) -> bool:
        return self.default_month is not None

    @property
    def was_delayed(self) -> bool:
        return len(self.delayed_months) > 0


def _delay_pass(
    cashflows: np.ndarray,
    delay_prob: float,
    delay_months: int,
    rng: UniformSource,
) -> Tuple[np.ndarray, List[int], float]:
    cf = np.array(cashflows, dtype=float, copy=True)
    delayed: List[int] = []
    dropped = 0.0
    if delay_months <= 0 or delay_prob <= 0:
        return cf, delayed, dropped

    n = len(cf) - 1
    for t in range(1, n + 1):
        if cf[t] <= 0:
            continue
        if rng.random() < delay_prob:
            amount = cf[t]
            cf[t] = 0.0
            target = t + delay_months
            if target <= n:
                cf[target] += amount
            else:
                dropped += amount
            delayed.append(t)
    return cf, delayed, dropped


def _default_pass(
    cashflows: np.ndarray,
    outstanding: np.ndarray,
    pd_monthly: float,
    lgd: float,
    rng: UniformSource,
) -> Tuple[np.ndarray, Optional[int], float]:
    cf = np.array(cashflows, dtype=float, copy=True)
    n = len(cf) - 1
    for t in range(1, n + 1):
        if rng.random() < pd_monthly:
            recovery = (1.0 - lgd) * float(outstanding[t - 1])
            cf[t] = recovery
            cf[t + 1:] = 0.0
            return cf, t, recovery
    return cf, None, 0.0


def apply_delay(
    cashflows: np.ndarray,
    delay_prob: float,
    delay_months: int,
    rng: UniformSource,
) -> np.ndarray:
    """
    Slip each positive installment by delay_months with probability delay_prob.

    One draw per positive month 1..N; no draws at all when delay_months <= 0 or
    delay_prob <= 0. Installments landing past month N are dropped.
    """
    cf, _, _ = _delay_pass(cashflows, delay_prob, delay_months, rng)
    return cf


def apply_default(
    cashflows: np.ndarray,
    outstanding: np.ndarray,
    pd_monthly: float,
    lgd: float,
    rng: UniformSource,
) -> np.ndarray:
    """
    Scan months 1..N; at the first draw below pd_monthly replace that month's flow
    with the recovery on outstanding[t-1] and zero everything after it.
    """
    cf, _, _ = _default_pass(cashflows, outstanding, pd_monthly, lgd, rng)
    return cf


def simulate_path(
    *,
    cashflows: np.ndarray,
    outstanding: np.ndarray,
    delay_prob: float,
    delay_months: int,
    pd_monthly: float,
    lgd: float,
    rng: UniformSource,
) -> PathEvents:
    """
    Delay pass, then default pass, on one copy of the base cashflows.

    Parameters
    ----------
    cashflows : np.ndarray
        Base schedule (length N+1), not modified
    outstanding : np.ndarray
        Balance series of the base schedule (exposure at default)
    delay_prob : float
        Per-installment delay probability in [0, 1]
    delay_months : int
        Slip length in months
    pd_monthly : float
        Monthly default hazard, already converted from annual PD
    lgd : float
        Loss given default in [0, 1]
    rng : UniformSource
        Uniform source with random() -> [0, 1)
    """
    cf, delayed, dropped = _delay_pass(cashflows, delay_prob, delay_months, rng)
    cf, default_month, recovery = _default_pass(cf, outstanding, pd_monthly, lgd, rng)
    return PathEvents(
        cashflows=cf,
        delayed_months=delayed,
        dropped_amount=dropped,
        default_month=default_month,
        recovery_amount=recovery,
    )
