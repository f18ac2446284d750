"""
Core shared types and utilities.

This module provides the value objects, random number helpers and error
types shared by the data generating model, the estimators and the
evaluation layer.
"""

from irt_sim.core.data_models import (
    ParameterEstimates,
    ResponseMatrix,
    TrueParameters,
)
from irt_sim.core.exceptions import (
    ConvergenceError,
    DegenerateDataError,
    EstimationError,
    ReplicationFailedError,
)
from irt_sim.core.utils import get_rng, logistic

__all__ = [
    "ConvergenceError",
    "DegenerateDataError",
    "EstimationError",
    "ParameterEstimates",
    "ReplicationFailedError",
    "ResponseMatrix",
    "TrueParameters",
    "get_rng",
    "logistic",
]
