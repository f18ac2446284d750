"""
Rasch estimator using the MML-EM algorithm.

Implements the one-parameter logistic model with Marginal Maximum
Likelihood via EM over a Gauss-Hermite quadrature of the ability prior.
"""

import logging

import numpy as np
from numpy.typing import NDArray
from scipy.optimize import minimize
from scipy.special import logit

from irt_sim.core.data_models import ResponseMatrix
from irt_sim.irt.estimation.config import EstimationConfig
from irt_sim.irt.estimation.data_models import (
    EStepResult,
    IRTEstimationResult,
)
from irt_sim.irt.estimation.enums import ConvergenceStatus
from irt_sim.irt.estimation.gradients import (
    expected_counts,
    rasch_negative_expected_log_likelihood,
    rasch_negative_expected_log_likelihood_gradient,
)
from irt_sim.irt.estimation.quadrature import (
    GaussHermiteQuadrature,
    get_quadrature,
)

logger = logging.getLogger(__name__)


def compute_log_likelihood_matrix(
    responses: NDArray[np.int8],
    difficulties: NDArray[np.float64],
    discrimination: float,
    quadrature: GaussHermiteQuadrature,
) -> NDArray[np.float64]:
    """
    Log joint density of each response row at each quadrature point.

    Args:
        responses: Binary responses, shape (n_rows, n_items).
        difficulties: Item difficulties, shape (n_items,).
        discrimination: Common discrimination.
        quadrature: Quadrature points and weights of the ability prior.

    Returns:
        Array of shape (n_rows, n_quadrature) holding
        log P(responses | theta_q) + log P(theta_q).
    """
    z = discrimination * (
        quadrature.points[np.newaxis, :] - difficulties[:, np.newaxis]
    )
    log_p = -np.logaddexp(0.0, -z)  # (n_items, n_quadrature)
    log_q = -np.logaddexp(0.0, z)

    x = responses.astype(np.float64)
    log_lik = x @ log_p + (1.0 - x) @ log_q
    log_lik += quadrature.log_weights[np.newaxis, :]
    return log_lik


def normalize_posteriors(
    log_lik: NDArray[np.float64],
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Normalize a log joint density matrix into posteriors with log-sum-exp.

    Returns:
        Tuple (posteriors, log_marginal) with shapes (n_rows, n_quadrature)
        and (n_rows,).
    """
    max_log_lik = np.max(log_lik, axis=1, keepdims=True)
    posteriors = np.exp(log_lik - max_log_lik)
    row_sums = posteriors.sum(axis=1, keepdims=True)
    posteriors = posteriors / (row_sums + 1e-300)

    log_marginal = max_log_lik[:, 0] + np.log(row_sums[:, 0] + 1e-300)
    return posteriors, log_marginal


class RaschEstimator:
    """
    Rasch model estimator using MML-EM.

    The probability model:
        P(X_ij = 1 | theta_i) = logistic(a * (theta_i - b_j))

    with theta ~ N(0, 1) integrated out by quadrature. The discrimination a
    is fixed at 1 for the Rasch model, or estimated as one common value.

    Uses L-BFGS-B for the M-step with analytical gradients.
    """

    def __init__(self, config: EstimationConfig | None = None):
        """Initialize Rasch estimator."""
        self.config = config or EstimationConfig()
        self._quadrature = get_quadrature(self.config.quadrature)

    @property
    def quadrature(self) -> GaussHermiteQuadrature:
        """Access quadrature points and weights."""
        return self._quadrature

    @property
    def estimates_discrimination(self) -> bool:
        return self.config.fixed_discrimination is None

    def _check_convergence(self, current_ll: float, prev_ll: float) -> bool:
        """
        Check if EM has converged based on log-likelihood change.

        Args:
            current_ll: Current log-likelihood.
            prev_ll: Previous log-likelihood.

        Returns:
            True if converged.
        """
        if prev_ll == -np.inf:
            return False

        abs_change = abs(current_ll - prev_ll)
        return bool(abs_change < self.config.convergence.em_tolerance)

    def _split(
        self, params: NDArray[np.float64]
    ) -> tuple[NDArray[np.float64], float]:
        if self.config.fixed_discrimination is None:
            return params[:-1], float(params[-1])
        return params, self.config.fixed_discrimination

    def _e_step(
        self,
        data: ResponseMatrix,
        params: NDArray[np.float64],
    ) -> EStepResult:
        """
        E-step: compute posterior distribution over abilities.

        For each subject, compute:
            P(theta_q | responses) ∝ P(responses | theta_q) * P(theta_q)

        where P(theta_q) is the quadrature weight (prior).

        Args:
            data: Response matrix.
            params: Current parameter vector.

        Returns:
            EStepResult with posteriors and marginal log-likelihood.
        """
        difficulties, discrimination = self._split(params)
        log_lik = compute_log_likelihood_matrix(
            data.responses, difficulties, discrimination, self._quadrature
        )
        posteriors, log_marginal = normalize_posteriors(log_lik)

        return EStepResult(
            posteriors=posteriors, log_likelihood=float(np.sum(log_marginal))
        )

    def _m_step(
        self,
        data: ResponseMatrix,
        posteriors: NDArray[np.float64],
        current: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        """
        M-step: maximize the expected log-likelihood given posteriors.

        All items are optimized jointly so a common discrimination can be
        updated alongside the difficulties.

        Args:
            data: Response matrix.
            posteriors: Posterior weights from E-step.
            current: Current parameter vector.

        Returns:
            Updated parameter vector.
        """
        n_q, r_jq = expected_counts(data.responses, posteriors)

        bounds = [self.config.bounds.difficulty] * data.n_items
        if self.estimates_discrimination:
            bounds.append(self.config.bounds.discrimination)

        result = minimize(
            fun=rasch_negative_expected_log_likelihood,
            x0=current,
            args=(
                self._quadrature.points,
                n_q,
                r_jq,
                self.config.fixed_discrimination,
            ),
            method="L-BFGS-B",
            jac=rasch_negative_expected_log_likelihood_gradient,
            bounds=bounds,
            options={
                "maxiter": self.config.convergence.max_lbfgs_iterations,
                "ftol": self.config.convergence.lbfgs_tolerance,
            },
        )
        new_params: NDArray[np.float64] = np.asarray(result.x, np.float64)
        return new_params

    def _initialize(self, data: ResponseMatrix) -> NDArray[np.float64]:
        """
        Initialize difficulties from smoothed item endorsement proportions.

        b_j = -logit(p_j), the difficulty at which an average subject
        endorses with the observed proportion.
        """
        props = (data.item_scores + 0.5) / (data.n_subjects + 1.0)
        low, high = self.config.bounds.difficulty
        difficulties = np.clip(-logit(props), low, high)

        if self.estimates_discrimination:
            return np.append(difficulties, 1.0)
        return difficulties.astype(np.float64)

    def fit(self, data: ResponseMatrix) -> IRTEstimationResult:
        """
        Fit the Rasch model to response data using MML-EM.

        Args:
            data: Binary response matrix.

        Returns:
            IRTEstimationResult with estimated parameters and fit statistics.
        """
        params = self._initialize(data)

        prev_ll = -np.inf
        convergence_status = ConvergenceStatus.MAX_ITERATIONS
        n_iterations = self.config.convergence.max_em_iterations

        for iteration in range(self.config.convergence.max_em_iterations):
            e_result = self._e_step(data, params)
            logger.debug(
                f"Iteration {iteration + 1}: "
                f"LL = {e_result.log_likelihood:.4f}"
            )

            if not np.isfinite(e_result.log_likelihood):
                convergence_status = ConvergenceStatus.FAILED
                n_iterations = iteration + 1
                break

            if self._check_convergence(e_result.log_likelihood, prev_ll):
                convergence_status = ConvergenceStatus.CONVERGED
                n_iterations = iteration + 1
                break

            prev_ll = e_result.log_likelihood
            params = self._m_step(data, e_result.posteriors, params)

        difficulties, discrimination = self._split(params)

        return IRTEstimationResult(
            difficulties=tuple(float(b) for b in difficulties),
            discrimination=float(discrimination),
            log_likelihood=e_result.log_likelihood,
            n_iterations=n_iterations,
            convergence_status=convergence_status,
            model_version=self.config.model_version,
        )

