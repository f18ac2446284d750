"""
IRT (Item Response Theory) module.

This module provides:
- Rasch model estimation by MML-EM
- EAP ability scoring per response pattern
- Diagnostic utilities for model validation
"""

from irt_sim.irt.diagnostics import (
    ItemFitComparison,
    compute_item_fit_comparison,
)
from irt_sim.irt.estimation import (
    IRTEstimationResult,
    RaschEstimator,
    score_patterns,
)

__all__ = [
    "IRTEstimationResult",
    "ItemFitComparison",
    "RaschEstimator",
    "compute_item_fit_comparison",
    "score_patterns",
]
