"""
Credit committee outputs — sample metrics, aggregation, and decision support.
"""

from .metrics import compute_sample_metrics, percentile
from .aggregator import aggregate_npv_sample
from .decisions import DecisionReport, generate_decision_report

__all__ = [
    "compute_sample_metrics",
    "percentile",
    "aggregate_npv_sample",
    "DecisionReport",
    "generate_decision_report",
]
