"""Tests for replication data models."""

import numpy as np
import pytest

from irt_sim.core.data_models import ParameterEstimates, TrueParameters
from irt_sim.core.exceptions import ConvergenceError
from irt_sim.evaluation.data_models import (
    ReplicationAccumulator,
    ReplicationResult,
    RunStatus,
)


@pytest.fixture
def truth() -> TrueParameters:
    return TrueParameters(
        abilities=np.array([-1.0, 0.0, 1.0]),
        difficulties=np.array([0.0, 1.0]),
    )


def _result(run_index: int, shift: float) -> ReplicationResult:
    return ReplicationResult(
        run_index=run_index,
        estimates=ParameterEstimates(
            abilities=np.array([-1.0, 0.0, 1.0]) + shift,
            difficulties=np.array([0.0, 1.0]) - shift,
            method="test",
        ),
    )


class TestReplicationResult:
    def test_failed(self) -> None:
        result = ReplicationResult(
            run_index=2,
            estimates=None,
            error=ConvergenceError("x", "y"),
        )
        assert result.failed
        assert not _result(0, 0.0).failed


class TestReplicationAccumulator:
    def test_status_transitions(self, truth: TrueParameters) -> None:
        accumulator = ReplicationAccumulator(
            true_parameters=truth, n_requested=1
        )
        assert accumulator.status is RunStatus.RUNNING

        accumulator.add(_result(0, 0.0))
        summary = accumulator.finish()

        assert summary.status is RunStatus.DONE
        assert accumulator.status is RunStatus.DONE

    def test_add_after_finish(self, truth: TrueParameters) -> None:
        accumulator = ReplicationAccumulator(
            true_parameters=truth, n_requested=1
        )
        accumulator.finish()
        with pytest.raises(RuntimeError, match="finished study"):
            accumulator.add(_result(0, 0.0))

    def test_summary_statistics(self, truth: TrueParameters) -> None:
        accumulator = ReplicationAccumulator(
            true_parameters=truth, n_requested=3
        )
        accumulator.add(_result(0, 0.5))
        accumulator.add(_result(1, -0.5))
        accumulator.add(_result(2, 0.3))
        summary = accumulator.finish()

        assert summary.ability_matrix.shape == (3, 3)
        assert summary.difficulty_matrix.shape == (3, 2)
        assert summary.n_completed == 3
        np.testing.assert_allclose(summary.ability_bias, 0.1)
        np.testing.assert_allclose(summary.difficulty_bias, -0.1)
        np.testing.assert_allclose(
            summary.sd_abilities, np.std([0.5, -0.5, 0.3], ddof=1)
        )
        np.testing.assert_allclose(
            summary.difficulty_rmse, np.sqrt((0.25 + 0.25 + 0.09) / 3)
        )

    def test_single_replication_has_zero_spread(
        self, truth: TrueParameters
    ) -> None:
        accumulator = ReplicationAccumulator(
            true_parameters=truth, n_requested=1
        )
        accumulator.add(_result(0, 0.2))
        summary = accumulator.finish()

        np.testing.assert_array_equal(summary.sd_abilities, 0.0)
        np.testing.assert_allclose(summary.mean_abilities, [-0.8, 0.2, 1.2])

    def test_failed_results_are_skipped(self, truth: TrueParameters) -> None:
        accumulator = ReplicationAccumulator(
            true_parameters=truth, n_requested=2
        )
        accumulator.add(_result(0, 0.0))
        accumulator.add(
            ReplicationResult(run_index=1, estimates=None, attempts=3)
        )
        summary = accumulator.finish()

        assert summary.n_completed == 1
        assert summary.skipped_runs == (1,)
        assert summary.total_attempts == 4
        assert summary.n_requested == 2

    def test_all_skipped_keeps_shape(self, truth: TrueParameters) -> None:
        accumulator = ReplicationAccumulator(
            true_parameters=truth, n_requested=1
        )
        accumulator.add(ReplicationResult(run_index=0, estimates=None))
        summary = accumulator.finish()

        assert summary.ability_matrix.shape == (0, 3)
        assert summary.difficulty_matrix.shape == (0, 2)
