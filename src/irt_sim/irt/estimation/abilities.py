"""
Ability scoring for a fitted Rasch model.

Abilities are not parameters of the marginal model. They are recovered
after fitting as Expected A Posteriori (EAP) scores, computed once per
distinct response pattern. Subjects sharing a pattern share a score.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from irt_sim.core.data_models import ResponseMatrix
from irt_sim.irt.estimation.config import EstimationConfig
from irt_sim.irt.estimation.data_models import IRTEstimationResult
from irt_sim.irt.estimation.estimator import (
    compute_log_likelihood_matrix,
    normalize_posteriors,
)
from irt_sim.irt.estimation.quadrature import get_quadrature

Pattern = tuple[bool, ...]


@dataclass(frozen=True)
class AbilityEstimates:
    """
    Ability estimates for a set of response rows.

    Attributes:
        eap: Expected A Posteriori (posterior mean) estimates, shape (n_rows,).
        se: Standard errors (posterior standard deviation), shape (n_rows,).
    """

    eap: NDArray[np.float64]
    se: NDArray[np.float64]

    @property
    def n_rows(self) -> int:
        return len(self.eap)


@dataclass(frozen=True)
class PatternScore:
    eap: float
    se: float
    count: int


@dataclass(frozen=True)
class PatternScoreTable(Mapping[Pattern, PatternScore]):
    """
    Mapping from a response pattern to its posterior ability score.

    Keys are tuples of booleans, one per item, in item order.
    """

    scores: dict[Pattern, PatternScore]
    n_items: int

    def __getitem__(self, pattern: Pattern) -> PatternScore:
        return self.scores[pattern]

    def __iter__(self) -> Iterator[Pattern]:
        return iter(self.scores)

    def __len__(self) -> int:
        return len(self.scores)

    def score(self, data: ResponseMatrix) -> NDArray[np.float64]:
        """
        Assign each subject the EAP score of its response pattern.

        Raises:
            ValueError: If the item count differs from the table.
            KeyError: If a subject's pattern is not in the table.
        """
        if data.n_items != self.n_items:
            raise ValueError(
                f"Table scores {self.n_items} items, data has {data.n_items}"
            )
        return np.array(
            [self.scores[pattern].eap for pattern in data.patterns()],
            dtype=np.float64,
        )

    def standard_errors(self, data: ResponseMatrix) -> NDArray[np.float64]:
        """Posterior SD of each subject's pattern."""
        return np.array(
            [self.scores[pattern].se for pattern in data.patterns()],
            dtype=np.float64,
        )


def estimate_abilities_eap(
    responses: NDArray[np.int8],
    model: IRTEstimationResult,
    config: EstimationConfig | None = None,
) -> AbilityEstimates:
    """
    Estimate abilities using Expected A Posteriori (EAP) method.

    EAP estimates are the posterior mean of ability given the responses
    and estimated item parameters:
        θ_EAP = E[θ | responses] = Σ_q θ_q * P(θ_q | responses)

    Standard errors are the posterior standard deviation:
        SE = sqrt(E[θ² | responses] - (E[θ | responses])²)

    Args:
        responses: Binary response rows, shape (n_rows, n_items).
        model: Fitted Rasch model.
        config: Estimation configuration. Uses defaults if None.

    Returns:
        AbilityEstimates with EAP estimates and standard errors.
    """
    if config is None:
        config = EstimationConfig()

    quadrature = get_quadrature(config.quadrature)
    theta = quadrature.points

    log_lik = compute_log_likelihood_matrix(
        responses,
        model.difficulty_array(),
        model.discrimination,
        quadrature,
    )
    posteriors, _ = normalize_posteriors(log_lik)

    eap = posteriors @ theta

    # E[θ²] - E[θ]²
    variance = posteriors @ theta**2 - eap**2
    variance = np.maximum(variance, 0.0)
    se = np.sqrt(variance)

    return AbilityEstimates(eap=eap, se=se)


def score_patterns(
    data: ResponseMatrix,
    model: IRTEstimationResult,
    config: EstimationConfig | None = None,
) -> PatternScoreTable:
    """
    Build the pattern score table for the observed response patterns.

    Each distinct pattern is scored once, so identical patterns receive
    identical scores.

    Args:
        data: Response matrix the model was fitted to.
        model: Fitted Rasch model.
        config: Estimation configuration. Uses defaults if None.

    Returns:
        PatternScoreTable covering every observed pattern.
    """
    unique_rows, counts = np.unique(
        data.responses, axis=0, return_counts=True
    )
    estimates = estimate_abilities_eap(unique_rows, model, config)

    scores = {
        tuple(bool(x) for x in row): PatternScore(
            eap=float(eap), se=float(se), count=int(count)
        )
        for row, eap, se, count in zip(
            unique_rows, estimates.eap, estimates.se, counts, strict=True
        )
    }
    return PatternScoreTable(scores=scores, n_items=data.n_items)
