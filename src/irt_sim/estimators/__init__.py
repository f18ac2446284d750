"""
Pluggable parameter estimators.

Every estimator is a callable taking a ResponseMatrix and returning
ParameterEstimates, so the simulation and comparison logic does not depend
on which fitting backend produced the estimates.
"""

from irt_sim.estimators.base import Estimator, check_degenerate
from irt_sim.estimators.mixed_effects import (
    MixedModelConfig,
    MixedModelEstimator,
    MixedModelFit,
    fit_glmm,
    fit_mixed_model,
    mixed_model_estimator,
)
from irt_sim.estimators.rasch import RaschFit, fit_irt, fit_rasch_model

__all__ = [
    "Estimator",
    "MixedModelConfig",
    "MixedModelEstimator",
    "MixedModelFit",
    "RaschFit",
    "check_degenerate",
    "fit_glmm",
    "fit_irt",
    "fit_mixed_model",
    "fit_rasch_model",
    "mixed_model_estimator",
]
