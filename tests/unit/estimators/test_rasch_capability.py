"""Tests for the Rasch estimator capability."""

import numpy as np
import pytest

from irt_sim.core.data_models import ResponseMatrix, TrueParameters
from irt_sim.core.exceptions import ConvergenceError, DegenerateDataError
from irt_sim.estimators.base import check_degenerate
from irt_sim.estimators.rasch import RASCH_METHOD, fit_irt, fit_rasch_model
from irt_sim.irt.estimation.config import ConvergenceConfig, EstimationConfig
from irt_sim.simulation.generators import generate_responses


@pytest.fixture(scope="module")
def data() -> ResponseMatrix:
    rng = np.random.default_rng(21)
    params = TrueParameters(
        abilities=rng.normal(size=120), difficulties=rng.normal(size=10)
    )
    return generate_responses(params, rng)


class TestCheckDegenerate:
    def test_accepts_varied_data(self, data: ResponseMatrix) -> None:
        check_degenerate(data)

    def test_constant_item(self) -> None:
        responses = np.array([[1, 0, 1], [1, 1, 0], [1, 0, 0]], dtype=np.int8)
        with pytest.raises(DegenerateDataError, match=r"items \[0\]") as info:
            check_degenerate(ResponseMatrix(responses=responses))
        assert info.value.item_indices == (0,)

    def test_constant_subject_allowed_by_default(self) -> None:
        responses = np.array([[1, 1], [1, 0], [0, 1]], dtype=np.int8)
        check_degenerate(ResponseMatrix(responses=responses))

    def test_constant_subject_rejected_when_disallowed(self) -> None:
        responses = np.array([[1, 1], [1, 0], [0, 1]], dtype=np.int8)
        with pytest.raises(DegenerateDataError, match=r"subjects \[0\]"):
            check_degenerate(
                ResponseMatrix(responses=responses),
                allow_constant_subjects=False,
            )


class TestFitIrt:
    def test_shapes_and_method(self, data: ResponseMatrix) -> None:
        estimates = fit_irt(data)

        assert estimates.abilities.shape == (120,)
        assert estimates.difficulties.shape == (10,)
        assert estimates.method == RASCH_METHOD
        assert np.all(np.isfinite(estimates.abilities))

    def test_identical_patterns_get_identical_abilities(
        self, data: ResponseMatrix
    ) -> None:
        estimates = fit_irt(data)
        patterns = data.patterns()

        by_pattern: dict[tuple[bool, ...], float] = {}
        for pattern, ability in zip(
            patterns, estimates.abilities, strict=True
        ):
            if pattern in by_pattern:
                assert ability == by_pattern[pattern]
            by_pattern[pattern] = ability

    def test_fit_exposes_model_and_scores(self, data: ResponseMatrix) -> None:
        fit = fit_rasch_model(data)

        assert fit.model.converged
        assert len(fit.scores) == len(set(data.patterns()))
        np.testing.assert_array_equal(
            fit.estimates.difficulties, fit.model.difficulty_array()
        )

    def test_degenerate_item(self, data: ResponseMatrix) -> None:
        responses = data.responses.copy()
        responses[:, 3] = 1
        with pytest.raises(DegenerateDataError, match=r"items \[3\]"):
            fit_irt(ResponseMatrix(responses=responses))

    def test_not_converged(self, data: ResponseMatrix) -> None:
        config = EstimationConfig(
            convergence=ConvergenceConfig(max_em_iterations=1)
        )
        with pytest.raises(ConvergenceError, match="rasch_mml failed"):
            fit_irt(data, config)
