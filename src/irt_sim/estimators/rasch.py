"""
Rasch estimator capability: MML difficulties plus pattern-scored abilities.
"""

import logging
from dataclasses import dataclass

from irt_sim.core.data_models import ParameterEstimates, ResponseMatrix
from irt_sim.core.exceptions import ConvergenceError
from irt_sim.estimators.base import check_degenerate
from irt_sim.irt.estimation import (
    EstimationConfig,
    IRTEstimationResult,
    PatternScoreTable,
    RaschEstimator,
    score_patterns,
)

logger = logging.getLogger(__name__)

RASCH_METHOD = "rasch_mml"


@dataclass(frozen=True)
class RaschFit:
    """Fitted Rasch model together with its pattern score table."""

    model: IRTEstimationResult
    scores: PatternScoreTable
    estimates: ParameterEstimates


def fit_rasch_model(
    data: ResponseMatrix,
    config: EstimationConfig | None = None,
) -> RaschFit:
    """
    Fit the Rasch model and score every subject by response pattern.

    Args:
        data: Binary response matrix.
        config: Estimation configuration. Uses defaults if None.

    Returns:
        RaschFit with the fitted model, score table and estimates.

    Raises:
        DegenerateDataError: If an item has no response variance.
        ConvergenceError: If EM did not converge.
    """
    config = config or EstimationConfig()
    check_degenerate(data)

    model = RaschEstimator(config).fit(data)
    if not model.converged:
        raise ConvergenceError(
            RASCH_METHOD,
            f"EM stopped with status {model.convergence_status.value} "
            f"after {model.n_iterations} iterations",
        )
    logger.debug(
        "Rasch fit converged in %d iterations (LL=%.4f)",
        model.n_iterations,
        model.log_likelihood,
    )

    scores = score_patterns(data, model, config)
    estimates = ParameterEstimates(
        abilities=scores.score(data),
        difficulties=model.difficulty_array(),
        method=RASCH_METHOD,
    )
    return RaschFit(model=model, scores=scores, estimates=estimates)


def fit_irt(
    data: ResponseMatrix,
    config: EstimationConfig | None = None,
) -> ParameterEstimates:
    """Estimate difficulties and abilities with the Rasch MML estimator."""
    return fit_rasch_model(data, config).estimates
