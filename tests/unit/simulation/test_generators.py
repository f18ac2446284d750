"""Tests for the data generating model."""

import numpy as np
import pytest

from irt_sim.core.data_models import TrueParameters
from irt_sim.simulation.config import DistributionConfig, SimulationConfig
from irt_sim.simulation.generators import (
    draw_true_parameters,
    generate_dataset,
    generate_responses,
    response_probabilities,
)


@pytest.fixture
def config() -> SimulationConfig:
    return SimulationConfig(n_subjects=40, n_items=8, random_seed=5)


class TestResponseProbabilities:
    def test_shape(self) -> None:
        probs = response_probabilities(np.zeros(5), np.zeros(3))
        assert probs.shape == (5, 3)

    def test_half_when_ability_equals_difficulty(self) -> None:
        theta = np.array([-1.0, 0.5, 2.0])
        probs = response_probabilities(theta, theta)
        np.testing.assert_allclose(np.diag(probs), 0.5)

    def test_increasing_in_ability(self) -> None:
        probs = response_probabilities(
            np.array([-1.0, 0.0, 1.0]), np.array([0.3])
        )
        assert (np.diff(probs[:, 0]) > 0).all()

    def test_decreasing_in_difficulty(self) -> None:
        probs = response_probabilities(
            np.array([0.0]), np.array([-1.0, 0.0, 1.0])
        )
        assert (np.diff(probs[0]) < 0).all()


class TestGenerateResponses:
    def test_shape_and_values(self) -> None:
        params = TrueParameters(
            abilities=np.zeros(30), difficulties=np.zeros(6)
        )
        data = generate_responses(params, np.random.default_rng(0))

        assert data.responses.shape == (30, 6)
        assert data.responses.dtype == np.int8
        assert set(np.unique(data.responses)) <= {0, 1}

    def test_extreme_parameters(self) -> None:
        params = TrueParameters(
            abilities=np.array([-40.0, 40.0]),
            difficulties=np.array([0.0, 0.0, 0.0]),
        )
        data = generate_responses(params, np.random.default_rng(0))

        np.testing.assert_array_equal(data.responses[0], 0)
        np.testing.assert_array_equal(data.responses[1], 1)

    def test_endorsement_rate_matches_probability(self) -> None:
        params = TrueParameters(
            abilities=np.zeros(4000), difficulties=np.array([0.0, 1.0])
        )
        data = generate_responses(params, np.random.default_rng(1))
        rates = data.responses.mean(axis=0)

        np.testing.assert_allclose(rates, [0.5, 1 / (1 + np.e)], atol=0.03)


class TestDrawTrueParameters:
    def test_sizes(self, config: SimulationConfig) -> None:
        params = draw_true_parameters(config, np.random.default_rng(0))
        assert params.n_subjects == 40
        assert params.n_items == 8

    def test_configured_distribution(self) -> None:
        config = SimulationConfig(
            n_subjects=200,
            n_items=50,
            random_seed=0,
            difficulty=DistributionConfig(
                distribution="uniform", params={"low": 2.0, "high": 3.0}
            ),
        )
        params = draw_true_parameters(config, np.random.default_rng(0))

        assert (params.difficulties >= 2.0).all()
        assert (params.difficulties <= 3.0).all()

    def test_unknown_distribution(self) -> None:
        config = SimulationConfig(
            n_subjects=10,
            n_items=5,
            random_seed=0,
            ability=DistributionConfig(distribution="cauchy", params={}),
        )
        with pytest.raises(ValueError, match="not registered"):
            draw_true_parameters(config, np.random.default_rng(0))


class TestGenerateDataset:
    def test_seeded_from_config(self, config: SimulationConfig) -> None:
        a = generate_dataset(config)
        b = generate_dataset(config)

        np.testing.assert_array_equal(a.responses.responses, b.responses.responses)
        np.testing.assert_array_equal(
            a.true_parameters.abilities, b.true_parameters.abilities
        )

    def test_explicit_rng(self, config: SimulationConfig) -> None:
        a = generate_dataset(config, np.random.default_rng(1))
        b = generate_dataset(config, np.random.default_rng(2))

        assert not np.array_equal(
            a.true_parameters.difficulties, b.true_parameters.difficulties
        )

    def test_endorsement_rate(self, config: SimulationConfig) -> None:
        data = generate_dataset(config)
        assert 0.0 < data.endorsement_rate < 1.0
