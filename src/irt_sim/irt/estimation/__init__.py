"""
Rasch model estimation module.

This module provides infrastructure for estimating the Rasch model
using Marginal Maximum Likelihood via the EM algorithm.

Key components:
- EstimationConfig: Configuration for estimation
- RaschEstimator: MML-EM estimator
- IRTEstimationResult: Output from estimation
- score_patterns: EAP ability scoring per response pattern
"""

from irt_sim.irt.estimation.abilities import (
    AbilityEstimates,
    PatternScore,
    PatternScoreTable,
    estimate_abilities_eap,
    score_patterns,
)
from irt_sim.irt.estimation.config import EstimationConfig
from irt_sim.irt.estimation.data_models import IRTEstimationResult
from irt_sim.irt.estimation.enums import ConvergenceStatus
from irt_sim.irt.estimation.estimator import RaschEstimator

__all__ = [
    "AbilityEstimates",
    "ConvergenceStatus",
    "EstimationConfig",
    "IRTEstimationResult",
    "PatternScore",
    "PatternScoreTable",
    "RaschEstimator",
    "estimate_abilities_eap",
    "score_patterns",
]
