"""
Aggregate the Monte Carlo NPV sample into a distribution summary.

Instead of: "NPV = 12,400" (one number, no context)
The credit committee gets: "NPV: mean=9,800, P05=-310,000, P50=14,100, P95=15,200"
"""

from __future__ import annotations

from typing import Dict, Tuple

import numpy as np
import pandas as pd

from .metrics import compute_sample_metrics


def aggregate_npv_sample(
    npvs: np.ndarray,
    *,
    percentiles: Tuple[float, ...] = (0.01, 0.05, 0.25, 0.50, 0.75, 0.95, 0.99),
) -> Dict[str, object]:
    """
    Summarize an NPV sample.

    Returns
    -------
    Dict with:
      "summary_table":    One row (Metric=NPV) with mean/std/min/percentiles/max/P(NPV<0)
      "npv_distribution": The sample in generation order (for histograms)
      "n_paths":          Sample size
    """
    values = np.asarray(npvs, dtype=float)
    stats = compute_sample_metrics(values, percentiles=percentiles)

    row = {
        "Metric": "NPV",
        "Mean": stats["mean_npv"],
        "Std Dev": stats["std_npv"],
        "Min": stats["min_npv"],
    }
    for p in percentiles:
        label = f"p{int(round(p * 100)):02d}"
        row[label.upper()] = stats[label]
    row["Max"] = stats["max_npv"]
    row["P(NPV<0)"] = stats["prob_negative_npv"]

    return {
        "summary_table": pd.DataFrame([row]),
        "npv_distribution": values,
        "n_paths": len(values),
    }
