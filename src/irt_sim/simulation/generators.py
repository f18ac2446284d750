"""
Data generating model for the one-parameter logistic (Rasch) model.

For every (subject i, item j) pair:
    P(endorse = 1) = logistic(theta_i - delta_j)
and responses are independent Bernoulli draws.
"""

import logging

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray

from irt_sim.core.data_models import ResponseMatrix, TrueParameters
from irt_sim.core.utils import get_rng, logistic
from irt_sim.simulation.config import SimulationConfig
from irt_sim.simulation.data_models import GeneratedData
from irt_sim.simulation.sampling import draw_sample

logger = logging.getLogger(__name__)


def response_probabilities(
    abilities: NDArray[np.float64],
    difficulties: NDArray[np.float64],
) -> NDArray[np.float64]:
    """
    Compute endorsement probabilities for every subject x item pair.

    Args:
        abilities: Subject abilities, shape (n_subjects,).
        difficulties: Item difficulties, shape (n_items,).

    Returns:
        Array of shape (n_subjects, n_items) with
        P[i, j] = logistic(abilities[i] - difficulties[j]).
    """
    abilities = np.asarray(abilities, dtype=np.float64)
    difficulties = np.asarray(difficulties, dtype=np.float64)
    return logistic(abilities[:, np.newaxis] - difficulties[np.newaxis, :])


def generate_responses(
    true_parameters: TrueParameters,
    rng: Generator,
) -> ResponseMatrix:
    """
    Draw a binary response matrix from the Rasch model.

    Args:
        true_parameters: Ground-truth abilities and difficulties.
        rng: Random number generator.

    Returns:
        ResponseMatrix of shape (n_subjects, n_items).
    """
    probs = response_probabilities(
        true_parameters.abilities, true_parameters.difficulties
    )
    responses = rng.binomial(1, probs).astype(np.int8)
    return ResponseMatrix(responses=responses)


def draw_true_parameters(
    config: SimulationConfig,
    rng: Generator,
) -> TrueParameters:
    """
    Draw true abilities and difficulties from their configured distributions.

    Args:
        config: Simulation configuration.
        rng: Random number generator.

    Returns:
        TrueParameters with n_subjects abilities and n_items difficulties.
    """
    abilities = draw_sample(
        n=config.n_subjects,
        distribution_name=config.ability.distribution,
        distribution_params=dict(config.ability.params),
        rng=rng,
    )
    difficulties = draw_sample(
        n=config.n_items,
        distribution_name=config.difficulty.distribution,
        distribution_params=dict(config.difficulty.params),
        rng=rng,
    )
    return TrueParameters(abilities=abilities, difficulties=difficulties)


def generate_dataset(
    config: SimulationConfig,
    rng: Generator | None = None,
) -> GeneratedData:
    """
    Generate one simulated dataset.

    This is the main entry point of the data generating model:
        1. Draw true abilities and difficulties
        2. Draw responses from the Rasch model

    Args:
        config: Simulation configuration.
        rng: Random number generator. Seeded from config.random_seed if None.

    Returns:
        GeneratedData with the true parameters and the response matrix.
    """
    if rng is None:
        rng = get_rng(config.random_seed)

    true_parameters = draw_true_parameters(config, rng)
    responses = generate_responses(true_parameters, rng)

    data = GeneratedData(true_parameters=true_parameters, responses=responses)
    logger.debug(
        "Generated %d subjects x %d items (endorsement rate %.3f)",
        config.n_subjects,
        config.n_items,
        data.endorsement_rate,
    )
    return data
