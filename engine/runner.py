"""
Simulation runner — base-case valuation plus the Monte Carlo risk pass.

Flow per request:
  1. Convert annual percentages to monthly rates
  2. Build the base schedule (PRICE/SAC with grace)
  3. Value the base schedule: NPV, IRR, discounted payback
  4. For each iteration: delay pass -> default pass -> NPV at the discount rate
  5. Summarize the NPV sample: P(NPV < 0), P05/P50/P95

One PRNG stream per request, consumed sequentially; the same seed replays the run.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np
import pandas as pd

from core.config import RiskParameters, SimulationInputs
from distributions.prng import UniformSource, make_rng
from pm.metrics import compute_sample_metrics

from .cashflow import BaseSchedule, build_schedule
from .events import simulate_path
from .valuation import BaseCaseMetrics, evaluate_base_case, npv

logger = logging.getLogger(__name__)


@dataclass
class MonteCarloResult:
    """Monte Carlo outputs. npvs keeps generation order (for charting)."""
    prob_negative_npv: float
    p5: float
    p50: float
    p95: float
    npvs: np.ndarray
    mean_npv: float
    std_npv: float
    prob_default: float
    prob_delay: float

    @property
    def iterations(self) -> int:
        return len(self.npvs)

    def to_series(self) -> pd.Series:
        return pd.Series(self.npvs, name="npv").rename_axis("iteration")


@dataclass
class SimulationResult:
    base: BaseCaseMetrics
    mc: MonteCarloResult
    schedule: BaseSchedule
    inputs: SimulationInputs

    def to_dict(self) -> Dict:
        """Plain-Python view for a UI: undefined IRR / never-paying-back become None."""
        irr = self.base.irr_annual
        dpb = self.base.discounted_payback_months
        return {
            "base": {
                "npv": float(self.base.npv),
                "irr_annual": float(irr) if math.isfinite(irr) else None,
                "discounted_payback_months": int(dpb) if math.isfinite(dpb) else None,
            },
            "mc": {
                "prob_negative_npv": self.mc.prob_negative_npv,
                "p5": self.mc.p5,
                "p50": self.mc.p50,
                "p95": self.mc.p95,
                "mean_npv": self.mc.mean_npv,
                "prob_default": self.mc.prob_default,
                "prob_delay": self.mc.prob_delay,
                "npvs": self.mc.npvs.tolist(),
            },
        }


def run_monte_carlo(
    schedule: BaseSchedule,
    risk: RiskParameters,
    discount_monthly: float,
    rng: UniformSource,
    iterations: Optional[int] = None,
) -> MonteCarloResult:
    """
    Perturb the base schedule `iterations` times and value each path.

    Parameters
    ----------
    schedule : BaseSchedule
        Base cashflows and balance series, read-only
    risk : RiskParameters
        PD / LGD / delay settings
    discount_monthly : float
        Monthly discount rate for path NPVs
    rng : UniformSource
        Consumed sequentially, delay draws before default draws within each path
    iterations : int, optional
        Overrides risk.iterations. Must be >= 1.
    """
    n_iter = int(risk.iterations if iterations is None else iterations)
    if n_iter < 1:
        raise ValueError(f"iterations must be >= 1, got {n_iter}.")

    pd_monthly = risk.pd_monthly
    lgd = risk.lgd
    delay_prob = risk.delay_prob
    delay_months = int(risk.delay_months)

    npvs = np.zeros(n_iter, dtype=float)
    n_default = 0
    n_delay = 0

    for k in range(n_iter):
        path = simulate_path(
            cashflows=schedule.cashflows,
            outstanding=schedule.outstanding,
            delay_prob=delay_prob,
            delay_months=delay_months,
            pd_monthly=pd_monthly,
            lgd=lgd,
            rng=rng,
        )
        npvs[k] = npv(discount_monthly, path.cashflows)
        n_default += path.did_default
        n_delay += path.was_delayed

    stats = compute_sample_metrics(npvs)
    logger.debug(
        f"MC done: P(NPV<0)={stats['prob_negative_npv']:.4f}, "
        f"P05={stats['p05']:.2f}, P50={stats['p50']:.2f}, P95={stats['p95']:.2f}"
    )

    return MonteCarloResult(
        prob_negative_npv=stats["prob_negative_npv"],
        p5=stats["p05"],
        p50=stats["p50"],
        p95=stats["p95"],
        npvs=npvs,
        mean_npv=stats["mean_npv"],
        std_npv=stats["std_npv"],
        prob_default=n_default / n_iter,
        prob_delay=n_delay / n_iter,
    )


def simulate_credit_decision(
    inputs: SimulationInputs,
    *,
    rng: Optional[UniformSource] = None,
) -> SimulationResult:
    """
    Full evaluation of one loan: base-case metrics plus the Monte Carlo risk profile.

    rng defaults to a generator built from inputs.risk.seed (None -> non-deterministic).
    """
    loan = inputs.loan
    risk = inputs.risk
    if risk.iterations < 1:
        raise ValueError(f"iterations must be >= 1, got {risk.iterations}.")

    rate_monthly = loan.rate_monthly
    discount_monthly = inputs.discount_monthly

    schedule = build_schedule(
        loan.principal,
        loan.term_months,
        rate_monthly,
        loan.amortization,
        loan.grace_months,
    )
    base = evaluate_base_case(schedule.cashflows, discount_monthly)

    if rng is None:
        rng = make_rng(risk.seed)

    logger.info(
        f"Simulating {schedule.amortization.value} loan: principal={loan.principal:,.2f}, "
        f"term={loan.term_months}m, grace={schedule.grace_months}m, "
        f"iterations={risk.iterations}, seed={risk.seed}"
    )
    mc = run_monte_carlo(schedule, risk, discount_monthly, rng)

    return SimulationResult(base=base, mc=mc, schedule=schedule, inputs=inputs)
