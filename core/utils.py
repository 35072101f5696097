from __future__ import annotations

import math
from typing import Union

import numpy as np

ArrayOrFloat = Union[float, np.ndarray]


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def annual_percent_to_monthly_rate(pct_annual: float) -> float:
    """Compound-equivalent monthly rate of an annual percentage: (1 + a)^(1/12) - 1."""
    return (1.0 + pct_annual / 100.0) ** (1.0 / 12.0) - 1.0


def annual_to_monthly_hazard(annual_rate: ArrayOrFloat) -> ArrayOrFloat:
    """Convert annualized hazard to a simple monthly probability via 1-(1-r)^(1/12)."""
    annual_rate = np.clip(annual_rate, 0.0, 1.0)
    return 1.0 - np.power((1.0 - annual_rate), 1.0 / 12.0)


def format_currency(x: float, symbol: str = "R$") -> str:
    """pt-BR currency display without decimals, e.g. R$ 1.234.567 ('—' when not finite)."""
    if x is None or not math.isfinite(x):
        return "—"
    body = f"{abs(x):,.0f}".replace(",", ".")
    sign = "-" if round(x) < 0 else ""
    return f"{sign}{symbol} {body}"


def format_pct(x: float, decimals: int = 2) -> str:
    """Fraction as percent text, e.g. 0.1234 -> '12.34%' ('—' when not finite)."""
    if x is None or not math.isfinite(x):
        return "—"
    return f"{x * 100:.{decimals}f}%"
