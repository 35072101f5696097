"""
Credit decision support — display-ready figures and risk flags.

Translates a simulation result into answers a credit committee can act on:
  Q1: "Does the loan create value at our cost of funds?" → base NPV, IRR vs discount rate
  Q2: "How often do we lose money?"                      → P(NPV < 0)
  Q3: "How bad is the bad case?"                        → P05 NPV
  Q4: "When do we get our money back?"                  → discounted payback
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Union

import pandas as pd

from core.utils import format_currency, format_pct

if TYPE_CHECKING:
    from engine.runner import SimulationResult

UNDEFINED = "undefined"
NEVER = "never"


@dataclass
class DecisionReport:
    """Structured credit decision output."""
    loan_name: str

    # Base case
    base_npv: float
    irr_annual: float  # nan when undefined
    discount_annual: float
    discounted_payback_months: Union[int, float]  # inf when never

    # Monte Carlo
    prob_negative_npv: float
    p5_npv: float
    p50_npv: float
    p95_npv: float
    mean_npv: float
    prob_default: float
    iterations: int

    flags: List[str] = field(default_factory=list)

    @property
    def irr_text(self) -> str:
        return format_pct(self.irr_annual) if math.isfinite(self.irr_annual) else UNDEFINED

    @property
    def payback_text(self) -> str:
        if math.isfinite(self.discounted_payback_months):
            return f"{int(self.discounted_payback_months)}"
        return NEVER

    def to_dataframe(self, currency: str = "R$") -> pd.DataFrame:
        """Convert to a display-friendly table."""
        rows = [
            {"Metric": "Loan", "Value": self.loan_name, "Unit": ""},
            {"Metric": "Base NPV", "Value": format_currency(self.base_npv, currency), "Unit": ""},
            {"Metric": "IRR (annual)", "Value": self.irr_text, "Unit": ""},
            {"Metric": "Discount Rate", "Value": format_pct(self.discount_annual), "Unit": ""},
            {"Metric": "Discounted Payback", "Value": self.payback_text, "Unit": "months"},
            {"Metric": "P(NPV < 0)", "Value": format_pct(self.prob_negative_npv), "Unit": ""},
            {"Metric": "P05 NPV", "Value": format_currency(self.p5_npv, currency), "Unit": ""},
            {"Metric": "P50 NPV", "Value": format_currency(self.p50_npv, currency), "Unit": ""},
            {"Metric": "P95 NPV", "Value": format_currency(self.p95_npv, currency), "Unit": ""},
            {"Metric": "Mean NPV", "Value": format_currency(self.mean_npv, currency), "Unit": ""},
            {"Metric": "P(Default)", "Value": format_pct(self.prob_default), "Unit": ""},
            {"Metric": "Iterations", "Value": f"{self.iterations}", "Unit": "paths"},
        ]
        if self.flags:
            rows.append({"Metric": "FLAGS", "Value": " | ".join(self.flags), "Unit": ""})
        return pd.DataFrame(rows)


def generate_decision_report(
    result: "SimulationResult",
    *,
    loan_name: str = "Unnamed Loan",
    max_prob_negative: float = 0.10,
) -> DecisionReport:
    """
    Build a DecisionReport from a simulation result.

    Parameters
    ----------
    result : SimulationResult
        Output of engine.runner.simulate_credit_decision()
    loan_name : str
        Identifier for the report
    max_prob_negative : float
        P(NPV < 0) above this raises HIGH_LOSS_PROBABILITY
    """
    base = result.base
    mc = result.mc
    discount_annual = result.inputs.discount_annual_pct / 100.0

    flags = []
    if base.npv < 0:
        flags.append("NEGATIVE_BASE_NPV: loan destroys value even without defaults")
    if not math.isfinite(base.irr_annual):
        flags.append("IRR_UNDEFINED: no rate sets NPV to zero")
    elif base.irr_annual < discount_annual:
        flags.append("IRR_BELOW_DISCOUNT: contract yield under cost of funds")
    if not math.isfinite(base.discounted_payback_months):
        flags.append("NO_PAYBACK: discounted cashflows never recover the principal")
    if mc.prob_negative_npv > max_prob_negative:
        flags.append(f"HIGH_LOSS_PROBABILITY: {mc.prob_negative_npv:.0%} chance NPV < 0")
    if mc.p5 < 0:
        flags.append("TAIL_LOSS: 5th percentile NPV is negative")

    return DecisionReport(
        loan_name=loan_name,
        base_npv=base.npv,
        irr_annual=base.irr_annual,
        discount_annual=discount_annual,
        discounted_payback_months=base.discounted_payback_months,
        prob_negative_npv=mc.prob_negative_npv,
        p5_npv=mc.p5,
        p50_npv=mc.p50,
        p95_npv=mc.p95,
        mean_npv=mc.mean_npv,
        prob_default=mc.prob_default,
        iterations=mc.iterations,
        flags=flags,
    )
