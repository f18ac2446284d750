"""Tests for item fit diagnostics."""

import numpy as np
import pytest

from irt_sim.core.data_models import ResponseMatrix
from irt_sim.irt.diagnostics import compute_item_fit_comparison
from irt_sim.irt.estimation.data_models import IRTEstimationResult
from irt_sim.irt.estimation.enums import ConvergenceStatus


def _model(difficulties: tuple[float, ...]) -> IRTEstimationResult:
    return IRTEstimationResult(
        difficulties=difficulties,
        discrimination=1.0,
        log_likelihood=0.0,
        n_iterations=1,
        convergence_status=ConvergenceStatus.CONVERGED,
        model_version="test",
    )


class TestItemFitComparison:
    def test_proportions(self) -> None:
        data = ResponseMatrix(
            responses=np.array([[1, 0], [1, 1], [0, 0], [1, 0]], dtype=np.int8)
        )
        result = compute_item_fit_comparison(
            data, _model((0.0, 0.0)), np.zeros(4)
        )

        np.testing.assert_array_equal(result.item_id, [0, 1])
        np.testing.assert_allclose(result.empirical_prob, [0.75, 0.25])
        np.testing.assert_allclose(result.model_prob, [0.5, 0.5])
        np.testing.assert_allclose(result.difference, [0.25, -0.25])
        assert result.max_abs_difference == pytest.approx(0.25)

    def test_ability_length_mismatch(self) -> None:
        data = ResponseMatrix(responses=np.zeros((3, 2), dtype=np.int8))
        with pytest.raises(ValueError, match="Expected 3 abilities"):
            compute_item_fit_comparison(data, _model((0.0, 0.0)), np.zeros(2))
