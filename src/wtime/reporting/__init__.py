"""Worked-time reporting.

Key components
--------------
Aggregator        Sums closed check-in/check-out intervals since an instant
SummaryReporter   Day and week totals, last-session length
WorkSummary       Result of ``SummaryReporter.summary()``
"""

from .aggregator import Aggregator, closed_intervals, sum_closed_intervals
from .summary import SummaryReporter, WorkSummary

__all__ = [
    "Aggregator",
    "SummaryReporter",
    "WorkSummary",
    "closed_intervals",
    "sum_closed_intervals",
]
