"""
Statistics over the Monte Carlo NPV sample.

Percentiles interpolate linearly between order statistics:
  index = (n - 1) * p, weighted between floor(index) and ceil(index).
"""

from __future__ import annotations

import math
from typing import Dict, Sequence, Tuple

import numpy as np

from core.schema import REPORTED_PERCENTILES


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """p in [0, 1] of an ascending sequence; nan when empty."""
    n = len(sorted_values)
    if n == 0:
        return float("nan")
    idx = (n - 1) * p
    lo = math.floor(idx)
    hi = math.ceil(idx)
    if lo == hi:
        return float(sorted_values[lo])
    w = idx - lo
    return float(sorted_values[lo]) * (1 - w) + float(sorted_values[hi]) * w


def compute_sample_metrics(
    npvs: np.ndarray,
    *,
    percentiles: Tuple[float, ...] = REPORTED_PERCENTILES,
) -> Dict[str, float]:
    """
    Probability of loss, mean/std and percentiles of an NPV sample.

    The sample is sorted on a copy; the caller's generation order is untouched.
    Percentile keys are 'p05', 'p50', 'p95', ...
    """
    values = np.asarray(npvs, dtype=float)
    n = len(values)
    if n == 0:
        raise ValueError("No NPV samples to summarize.")

    ordered = np.sort(values)
    out = {
        "prob_negative_npv": float(np.count_nonzero(values < 0)) / n,
        "mean_npv": float(np.mean(values)),
        "std_npv": float(np.std(values)),
        "min_npv": float(ordered[0]),
        "max_npv": float(ordered[-1]),
    }
    for p in percentiles:
        out[f"p{int(round(p * 100)):02d}"] = percentile(ordered, p)
    return out
