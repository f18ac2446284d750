"""
Comparator: correlation and mean squared error between parameter vectors.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

from irt_sim.core.data_models import ParameterEstimates, TrueParameters
from irt_sim.evaluation.data_models import Comparison, ParameterComparison


def _validate_pair(
    estimate: ArrayLike, reference: ArrayLike
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    a = np.asarray(estimate, dtype=np.float64)
    b = np.asarray(reference, dtype=np.float64)
    if a.ndim != 1 or b.ndim != 1:
        raise ValueError(
            f"Expected 1D vectors, got shapes {a.shape} and {b.shape}"
        )
    if a.shape != b.shape:
        raise ValueError(
            f"Vectors must have equal length, got {len(a)} and {len(b)}"
        )
    if len(a) == 0:
        raise ValueError("Cannot compare empty vectors")
    return a, b


def pearson_correlation(estimate: ArrayLike, reference: ArrayLike) -> float:
    """Pearson correlation between two equal-length vectors.

    Returns nan when either vector has zero variance.
    """
    a, b = _validate_pair(estimate, reference)
    a_centered = a - a.mean()
    b_centered = b - b.mean()

    denominator = np.sqrt(np.sum(a_centered**2) * np.sum(b_centered**2))
    if denominator == 0.0:
        return float("nan")

    r = float(np.sum(a_centered * b_centered) / denominator)
    return float(np.clip(r, -1.0, 1.0))


def mean_squared_error(estimate: ArrayLike, reference: ArrayLike) -> float:
    """Mean squared difference between two equal-length vectors."""
    a, b = _validate_pair(estimate, reference)
    return float(np.mean((a - b) ** 2))


def compare(
    estimate: ArrayLike,
    reference: ArrayLike,
    center: bool = False,
) -> Comparison:
    """
    Compare an estimate vector with a reference vector.

    Args:
        estimate: Estimated values.
        reference: Ground truth, or another estimator's values.
        center: Subtract each vector's mean before computing MSE and bias.
            Correlation is unaffected.

    Returns:
        Comparison with correlation, MSE and mean bias.
    """
    a, b = _validate_pair(estimate, reference)
    if center:
        a = a - a.mean()
        b = b - b.mean()

    return Comparison(
        correlation=pearson_correlation(a, b),
        mse=mean_squared_error(a, b),
        bias=float(np.mean(a - b)),
        n=len(a),
    )


def compare_estimates(
    estimates: ParameterEstimates,
    reference: TrueParameters | ParameterEstimates,
    center: bool = False,
) -> ParameterComparison:
    """Compare abilities and difficulties against a reference."""
    return ParameterComparison(
        ability=compare(estimates.abilities, reference.abilities, center),
        difficulty=compare(
            estimates.difficulties, reference.difficulties, center
        ),
    )
