"""
Deterministic cashflow computation — the lender's base schedule.

Conventions:
  1. Month 0 is the disbursement (negative), months 1..N are receipts
  2. Grace months pay interest only; amortization starts after grace
  3. PRICE = constant installment, SAC = constant amortization
  4. Balance at index t is what remains owed after month t's payment
     (so index t-1 is the exposure when month t begins)
  5. Balances are floored at zero
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from core.schema import AmortizationMethod
from core.utils import clamp


def level_payment(balance: float, monthly_rate: float, n_months: int) -> float:
    """Standard fully-amortizing level payment (PMT) with near-zero rate guard."""
    if n_months <= 0:
        return float(balance)
    if abs(monthly_rate) < 1e-12:
        return float(balance) / n_months
    return float(balance) * (monthly_rate * (1 + monthly_rate) ** n_months) / (
        (1 + monthly_rate) ** n_months - 1
    )


@dataclass(frozen=True)
class BaseSchedule:
    """
    Base (no-event) schedule. Every array has length term_months + 1.

    cashflows:   lender's view, index 0 = -principal
    outstanding: balance after each month's payment, index 0 = principal
    interest:    interest component of each receipt
    principal:   amortization component of each receipt
    """

    cashflows: np.ndarray
    outstanding: np.ndarray
    interest: np.ndarray
    principal: np.ndarray
    rate_monthly: float
    grace_months: int
    amortization: AmortizationMethod

    @property
    def term_months(self) -> int:
        return len(self.cashflows) - 1

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame({
            "Period": np.arange(self.term_months + 1),
            "Cashflow": self.cashflows,
            "Interest": self.interest,
            "Principal": self.principal,
            "Balance": self.outstanding,
        })


def build_schedule(
    principal: float,
    term_months: int,
    rate_monthly: float,
    amortization: AmortizationMethod | str = AmortizationMethod.PRICE,
    grace_months: int = 0,
) -> BaseSchedule:
    """
    Build the base monthly cashflow vector and the outstanding-balance series in one pass.

    Parameters
    ----------
    principal : float
        Amount disbursed at month 0 (> 0)
    term_months : int
        Loan term including grace (>= 1)
    rate_monthly : float
        Monthly effective contract rate
    amortization : AmortizationMethod or str
        PRICE or SAC; any other tag builds as SAC
    grace_months : int
        Interest-only months, clamped to [0, term_months]. When grace consumes the
        whole term no principal is ever repaid and the balance stays at principal.
    """
    n = int(term_months)
    if n < 1:
        raise ValueError(f"term_months must be >= 1, got {term_months}.")
    if not principal > 0:
        raise ValueError(f"principal must be positive, got {principal}.")

    method = AmortizationMethod.parse(amortization)
    g = int(clamp(int(grace_months), 0, n))
    amort_months = n - g
    i = float(rate_monthly)

    cashflows = np.zeros(n + 1, dtype=float)
    outstanding_by_month = np.zeros(n + 1, dtype=float)
    interest_by_month = np.zeros(n + 1, dtype=float)
    principal_by_month = np.zeros(n + 1, dtype=float)

    cashflows[0] = -float(principal)
    outstanding = float(principal)
    outstanding_by_month[0] = outstanding

    # Grace: interest only
    for m in range(1, g + 1):
        interest = outstanding * i
        cashflows[m] = interest
        interest_by_month[m] = interest
        outstanding_by_month[m] = outstanding

    if amort_months > 0:
        if method is AmortizationMethod.PRICE:
            pmt = level_payment(outstanding, i, amort_months)
        else:
            amort_const = outstanding / amort_months

        for m in range(g + 1, n + 1):
            interest = outstanding * i
            if method is AmortizationMethod.PRICE:
                amort = pmt - interest
                payment = pmt
            else:
                amort = amort_const
                payment = amort_const + interest
            outstanding = max(0.0, outstanding - amort)

            cashflows[m] = payment
            interest_by_month[m] = interest
            principal_by_month[m] = amort
            outstanding_by_month[m] = outstanding

    return BaseSchedule(
        cashflows=cashflows,
        outstanding=outstanding_by_month,
        interest=interest_by_month,
        principal=principal_by_month,
        rate_monthly=i,
        grace_months=g,
        amortization=method,
    )
