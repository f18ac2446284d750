"""
Core utility functions shared across modules.

This module provides foundational utilities used by both the data
generating model and the IRT estimators.
"""

import numpy as np
from numpy.random import Generator
from numpy.typing import ArrayLike, NDArray
from scipy.special import expit


def get_rng(seed: int | np.random.SeedSequence | None = None) -> Generator:
    """
    Create a numpy random Generator with optional seed.

    Args:
        seed: Random seed or SeedSequence for reproducibility.
            If None, uses entropy.

    Returns:
        A numpy random Generator instance.
    """
    return np.random.default_rng(seed)


def spawn_seeds(base_seed: int, n: int) -> list[np.random.SeedSequence]:
    """Derive n independent child seed sequences from a base seed."""
    return np.random.SeedSequence(base_seed).spawn(n)


def logistic(x: ArrayLike) -> NDArray[np.float64]:
    """
    Standard logistic function 1 / (1 + exp(-x)).

    Numerically stable for large |x|.

    Args:
        x: Scalar or array of logits.

    Returns:
        Array of probabilities in (0, 1) with the same shape as x.
    """
    result: NDArray[np.float64] = np.asarray(
        expit(np.asarray(x, dtype=np.float64)), dtype=np.float64
    )
    return result
