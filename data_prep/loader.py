"""
Parse the raw parameter set coming from the input form into SimulationInputs.

Form values arrive as text or numbers. Coercion rules:
  - blank / missing fields take DEFAULT_PARAMETERS
  - grace is clamped to [0, term]
  - PD, LGD and delay probability are clamped to [0, 100] percent
  - delay length is floored at 0, iterations floored and raised to MIN_ITERATIONS
  - seed: blank -> non-deterministic, non-numeric -> 0
"""

from __future__ import annotations

import logging
import math
from typing import Mapping

import pandas as pd

from core.config import LoanTerms, RiskParameters, SimulationInputs
from core.schema import DEFAULT_PARAMETERS, INPUT_FIELDS, MIN_ITERATIONS, AmortizationMethod
from core.utils import clamp
from distributions.prng import parse_seed

logger = logging.getLogger(__name__)


def select_fields(raw: Mapping) -> dict:
    """Keep only known input fields, filling blanks and missing keys with defaults."""
    out = {}
    for key in INPUT_FIELDS:
        value = raw.get(key) if raw is not None else None
        if value is None or (isinstance(value, str) and value.strip() == "" and key != "seed"):
            value = DEFAULT_PARAMETERS[key]
        out[key] = value
    return out


def to_number(value: object, field_name: str) -> float:
    """Coerce a form value to float; raises ValueError when it is not a finite number."""
    number = pd.to_numeric(str(value).strip(), errors="coerce")
    if pd.isna(number) or not math.isfinite(float(number)):
        raise ValueError(f"Field '{field_name}' is not a valid number: {value!r}.")
    return float(number)


def _clamped(value: float, lo: float, hi: float, field_name: str) -> float:
    out = clamp(value, lo, hi)
    if out != value:
        logger.warning(f"{field_name}={value} outside [{lo}, {hi}]; clamped to {out}.")
    return out


def parse_parameters(raw: Mapping) -> SimulationInputs:
    """
    Build SimulationInputs from a raw form mapping.

    Raises ValueError for unparsable numbers, non-positive principal, or term < 1.
    """
    fields = select_fields(raw)

    principal = to_number(fields["principal"], "principal")
    if principal <= 0:
        raise ValueError(f"principal must be positive, got {principal}.")

    term_months = int(math.floor(to_number(fields["term_months"], "term_months")))
    if term_months < 1:
        raise ValueError(f"term_months must be >= 1, got {term_months}.")

    grace = int(math.floor(to_number(fields["grace_months"], "grace_months")))
    grace = int(_clamped(grace, 0, term_months, "grace_months"))

    loan = LoanTerms(
        principal=principal,
        term_months=term_months,
        rate_annual_pct=to_number(fields["rate_annual"], "rate_annual"),
        amortization=AmortizationMethod.parse(fields["amort_type"]),
        grace_months=grace,
    )

    iterations = int(math.floor(to_number(fields["iterations"], "iterations")))
    if iterations < MIN_ITERATIONS:
        logger.warning(f"iterations={iterations} below minimum; raised to {MIN_ITERATIONS}.")
        iterations = MIN_ITERATIONS

    delay_months = int(math.floor(to_number(fields["delay_months"], "delay_months")))
    if delay_months < 0:
        logger.warning(f"delay_months={delay_months} is negative; delays disabled.")
        delay_months = 0

    risk = RiskParameters(
        pd_annual_pct=_clamped(to_number(fields["pd_annual"], "pd_annual"), 0.0, 100.0, "pd_annual"),
        lgd_pct=_clamped(to_number(fields["lgd_pct"], "lgd_pct"), 0.0, 100.0, "lgd_pct"),
        delay_prob_pct=_clamped(
            to_number(fields["delay_prob_pct"], "delay_prob_pct"), 0.0, 100.0, "delay_prob_pct"
        ),
        delay_months=delay_months,
        iterations=iterations,
        seed=parse_seed(fields["seed"]),
    )

    return SimulationInputs(
        loan=loan,
        risk=risk,
        discount_annual_pct=to_number(fields["discount_annual"], "discount_annual"),
    )
