"""
Data models for estimator evaluation and replication studies.
"""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict

from irt_sim.core.data_models import ParameterEstimates, TrueParameters
from irt_sim.core.exceptions import EstimationError


class FailurePolicy(str, Enum):
    """What the replication driver does when a replication's fit fails."""

    ABORT = "abort"
    SKIP = "skip"
    REDRAW = "redraw"


class RunStatus(str, Enum):
    RUNNING = "running"
    DONE = "done"


@dataclass(frozen=True)
class Comparison:
    """Agreement between an estimate vector and a reference vector."""

    correlation: float
    mse: float
    bias: float
    n: int

    @property
    def rmse(self) -> float:
        return float(np.sqrt(self.mse))


@dataclass(frozen=True)
class ParameterComparison:
    """Comparisons for the ability and the difficulty vectors."""

    ability: Comparison
    difficulty: Comparison


class ComparisonReport(BaseModel):
    """Result of a single simulate-and-compare run."""

    model_config = ConfigDict(frozen=True)

    n_subjects: int
    n_items: int
    seed: int
    rasch_vs_truth: ParameterComparison
    glmm_vs_truth: ParameterComparison
    rasch_vs_glmm: ParameterComparison
    rasch_discrimination: float
    rasch_log_likelihood: float
    rasch_iterations: int
    n_distinct_patterns: int
    max_item_fit_difference: float


@dataclass(frozen=True)
class ReplicationResult:
    """Result from a single replication.

    Attributes:
        run_index: 0-based replication index.
        estimates: Parameter estimates, or None if the replication failed.
        attempts: Number of data draws used (more than 1 only when redrawing).
        error: The last estimation error when the replication failed.
    """

    run_index: int
    estimates: ParameterEstimates | None
    attempts: int = 1
    error: EstimationError | None = None

    @property
    def failed(self) -> bool:
        return self.estimates is None


@dataclass(frozen=True)
class ReplicationSummary:
    """
    Terminal state of a replication study.

    Attributes:
        status: Always RunStatus.DONE for a finished study.
        true_parameters: Parameters held fixed across replications.
        ability_matrix: Estimated abilities, shape (n_completed, n_subjects).
        difficulty_matrix: Estimated difficulties, shape (n_completed, n_items).
        n_requested: Number of replications requested.
        skipped_runs: Indices of replications dropped under the skip policy.
        total_attempts: Data draws used across all replications.
    """

    status: RunStatus
    true_parameters: TrueParameters
    ability_matrix: NDArray[np.float64]
    difficulty_matrix: NDArray[np.float64]
    n_requested: int
    skipped_runs: tuple[int, ...] = ()
    total_attempts: int = 0

    @property
    def n_completed(self) -> int:
        return self.ability_matrix.shape[0]

    @property
    def mean_abilities(self) -> NDArray[np.float64]:
        result: NDArray[np.float64] = self.ability_matrix.mean(axis=0)
        return result

    @property
    def mean_difficulties(self) -> NDArray[np.float64]:
        result: NDArray[np.float64] = self.difficulty_matrix.mean(axis=0)
        return result

    @property
    def sd_abilities(self) -> NDArray[np.float64]:
        """Across-replication SD per subject (0 with one replication)."""
        ddof = 1 if self.n_completed > 1 else 0
        result: NDArray[np.float64] = self.ability_matrix.std(
            axis=0, ddof=ddof
        )
        return result

    @property
    def sd_difficulties(self) -> NDArray[np.float64]:
        ddof = 1 if self.n_completed > 1 else 0
        result: NDArray[np.float64] = self.difficulty_matrix.std(
            axis=0, ddof=ddof
        )
        return result

    @property
    def ability_bias(self) -> NDArray[np.float64]:
        return self.mean_abilities - self.true_parameters.abilities

    @property
    def difficulty_bias(self) -> NDArray[np.float64]:
        return self.mean_difficulties - self.true_parameters.difficulties

    @property
    def ability_rmse(self) -> NDArray[np.float64]:
        """Root mean squared error per subject across replications."""
        errors = self.ability_matrix - self.true_parameters.abilities
        result: NDArray[np.float64] = np.sqrt(np.mean(errors**2, axis=0))
        return result

    @property
    def difficulty_rmse(self) -> NDArray[np.float64]:
        errors = self.difficulty_matrix - self.true_parameters.difficulties
        result: NDArray[np.float64] = np.sqrt(np.mean(errors**2, axis=0))
        return result


@dataclass
class ReplicationAccumulator:
    """
    Running state of a replication study.

    Collects completed replications until finish() seals the study into a
    ReplicationSummary.
    """

    true_parameters: TrueParameters
    n_requested: int
    status: RunStatus = RunStatus.RUNNING
    abilities: list[NDArray[np.float64]] = field(default_factory=list)
    difficulties: list[NDArray[np.float64]] = field(default_factory=list)
    skipped_runs: list[int] = field(default_factory=list)
    total_attempts: int = 0

    def add(self, result: ReplicationResult) -> None:
        if self.status is RunStatus.DONE:
            raise RuntimeError("Cannot add results to a finished study")

        self.total_attempts += result.attempts
        if result.estimates is None:
            self.skipped_runs.append(result.run_index)
            return
        self.abilities.append(result.estimates.abilities)
        self.difficulties.append(result.estimates.difficulties)

    def finish(self) -> ReplicationSummary:
        self.status = RunStatus.DONE
        n_completed = len(self.abilities)

        return ReplicationSummary(
            status=self.status,
            true_parameters=self.true_parameters,
            ability_matrix=np.array(self.abilities, dtype=np.float64).reshape(
                n_completed, self.true_parameters.n_subjects
            ),
            difficulty_matrix=np.array(
                self.difficulties, dtype=np.float64
            ).reshape(n_completed, self.true_parameters.n_items),
            n_requested=self.n_requested,
            skipped_runs=tuple(self.skipped_runs),
            total_attempts=self.total_attempts,
        )
