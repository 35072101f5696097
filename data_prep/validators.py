"""
Pre-flight validation of a raw parameter set before it enters the engine.

Catches problems early:
- Missing or non-numeric fields
- Non-positive principal or term
- Rates at or below -100% (discount factor would divide by zero)
- Percentages and counts the loader would silently clamp
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Mapping

import pandas as pd

from core.schema import INPUT_FIELDS, MIN_ITERATIONS, AmortizationMethod


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for a parameter set."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  ✗ {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not lines:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def _numeric(value: object) -> float:
    if value is None:
        return math.nan
    number = pd.to_numeric(str(value).strip(), errors="coerce")
    return float(number) if not pd.isna(number) else math.nan


def _blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def validate_parameters(raw: Mapping) -> ValidationResult:
    """
    Run all validation checks on a raw parameter mapping.
    Returns a ValidationResult with errors (blocking) and warnings (informational).
    Missing or blank fields are warnings: the loader fills them with defaults.
    """
    result = ValidationResult()

    missing = [k for k in INPUT_FIELDS if k != "seed" and _blank(raw.get(k))]
    if missing:
        result.warnings.append(f"Missing fields will use defaults: {missing}")

    numeric_fields = [k for k in INPUT_FIELDS if k not in ("amort_type", "seed")]
    values = {k: _numeric(raw[k]) for k in numeric_fields if k not in missing}
    for k, v in values.items():
        if math.isnan(v) or math.isinf(v):
            result.errors.append(f"Field '{k}' is not a valid number: {raw[k]!r}.")

    def ok(key: str) -> bool:
        return key in values and math.isfinite(values[key])

    # --- Loan terms ---
    if ok("principal") and values["principal"] <= 0:
        result.errors.append("principal must be positive.")

    if ok("term_months"):
        term = values["term_months"]
        if term < 1:
            result.errors.append("term_months must be at least 1.")
        elif term != math.floor(term):
            result.warnings.append(f"term_months={term} is not whole; it will be floored.")

        if ok("grace_months"):
            grace = values["grace_months"]
            if grace < 0 or grace > term:
                result.warnings.append(f"grace_months={grace} outside [0, {term}]; it will be clamped.")
            elif grace == term:
                result.warnings.append("Grace covers the whole term: principal is never repaid.")

    if "amort_type" not in missing:
        tag = str(raw["amort_type"]).strip().upper()
        if tag not in {m.value for m in AmortizationMethod}:
            result.warnings.append(f"Unknown amort_type {raw['amort_type']!r}; SAC will be used.")

    for key in ("rate_annual", "discount_annual"):
        if ok(key) and values[key] <= -100:
            result.errors.append(f"{key} must be greater than -100%.")

    # --- Risk ---
    for key in ("pd_annual", "lgd_pct", "delay_prob_pct"):
        if ok(key) and not (0 <= values[key] <= 100):
            result.warnings.append(f"{key}={values[key]} outside [0, 100]; it will be clamped.")

    if ok("delay_months") and values["delay_months"] < 0:
        result.warnings.append("delay_months is negative; delays are disabled.")

    if ok("iterations") and values["iterations"] < MIN_ITERATIONS:
        result.warnings.append(
            f"iterations={values['iterations']} below minimum; {MIN_ITERATIONS} will be used."
        )

    seed = raw.get("seed")
    if seed is not None and str(seed).strip() != "" and not math.isfinite(_numeric(seed)):
        result.warnings.append(f"Seed {seed!r} is not numeric; 0 will be used.")

    return result
