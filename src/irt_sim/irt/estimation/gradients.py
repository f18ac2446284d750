"""
Expected complete-data log-likelihood for the Rasch M-step.

Given E-step posteriors w[i, q], the sufficient statistics are
    n[q]    = sum_i w[i, q]            expected subjects at node q
    r[j, q] = sum_i w[i, q] * x[i, j]  expected endorsements of item j at q

and the expected log-likelihood is
    ELL = sum_j sum_q r[j, q] log P[j, q] + (n[q] - r[j, q]) log(1 - P[j, q])
with P[j, q] = logistic(a * (theta_q - b_j)).

The parameter vector is the item difficulties b, followed by the common
discrimination a when it is estimated.
"""

import numpy as np
from numpy.typing import NDArray
from scipy.special import expit


def expected_counts(
    responses: NDArray[np.int8],
    posteriors: NDArray[np.float64],
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Compute expected node counts and expected endorsements.

    Args:
        responses: Binary responses, shape (n_subjects, n_items).
        posteriors: Posterior weights, shape (n_subjects, n_quadrature).

    Returns:
        Tuple (n_q, r_jq) with shapes (n_quadrature,) and
        (n_items, n_quadrature).
    """
    n_q = posteriors.sum(axis=0)
    r_jq = responses.astype(np.float64).T @ posteriors
    return n_q, r_jq


def _unpack(
    params: NDArray[np.float64],
    fixed_discrimination: float | None,
) -> tuple[NDArray[np.float64], float]:
    if fixed_discrimination is None:
        return params[:-1], float(params[-1])
    return params, fixed_discrimination


def rasch_negative_expected_log_likelihood(
    params: NDArray[np.float64],
    theta: NDArray[np.float64],
    n_q: NDArray[np.float64],
    r_jq: NDArray[np.float64],
    fixed_discrimination: float | None,
) -> float:
    """
    Negative expected complete-data log-likelihood.

    Args:
        params: Difficulties, plus the discrimination as the last element
            when fixed_discrimination is None.
        theta: Quadrature points, shape (n_quadrature,).
        n_q: Expected subjects per node, shape (n_quadrature,).
        r_jq: Expected endorsements, shape (n_items, n_quadrature).
        fixed_discrimination: Fixed common discrimination, or None.

    Returns:
        Scalar negative ELL.
    """
    b, a = _unpack(params, fixed_discrimination)
    z = a * (theta[np.newaxis, :] - b[:, np.newaxis])

    # log P = -log(1 + e^-z), log(1 - P) = -log(1 + e^z)
    log_p = -np.logaddexp(0.0, -z)
    log_q = -np.logaddexp(0.0, z)

    ell = np.sum(r_jq * log_p + (n_q[np.newaxis, :] - r_jq) * log_q)
    return float(-ell)


def rasch_negative_expected_log_likelihood_gradient(
    params: NDArray[np.float64],
    theta: NDArray[np.float64],
    n_q: NDArray[np.float64],
    r_jq: NDArray[np.float64],
    fixed_discrimination: float | None,
) -> NDArray[np.float64]:
    """
    Gradient of the negative expected log-likelihood.

    dELL/dz = r - n * P, with dz/db_j = -a and dz/da = theta_q - b_j.

    Returns:
        Gradient with the same shape as params.
    """
    b, a = _unpack(params, fixed_discrimination)
    centered = theta[np.newaxis, :] - b[:, np.newaxis]
    probs = expit(a * centered)

    residual = r_jq - n_q[np.newaxis, :] * probs
    grad_b = a * residual.sum(axis=1)

    if fixed_discrimination is None:
        grad_a = -np.sum(residual * centered)
        result: NDArray[np.float64] = np.append(grad_b, grad_a)
        return result

    return grad_b
