"""
Replication driver for estimator recovery studies.

True parameters are held fixed while the response data is redrawn for
every replication, so the spread of the estimates reflects sampling
variability of the data alone.
"""

import logging
from collections.abc import Iterator
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass

import numpy as np

from irt_sim.core.data_models import TrueParameters
from irt_sim.core.exceptions import EstimationError, ReplicationFailedError
from irt_sim.core.utils import get_rng
from irt_sim.estimators.base import Estimator
from irt_sim.estimators.rasch import fit_irt
from irt_sim.evaluation.data_models import (
    FailurePolicy,
    ReplicationAccumulator,
    ReplicationResult,
    ReplicationSummary,
)
from irt_sim.simulation.config import SimulationConfig
from irt_sim.simulation.generators import (
    draw_true_parameters,
    generate_responses,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _ReplicationTask:
    run_index: int
    seed: np.random.SeedSequence
    true_parameters: TrueParameters
    estimator: Estimator
    failure_policy: FailurePolicy
    max_attempts: int


def _run_single(task: _ReplicationTask) -> ReplicationResult:
    """
    Generate data for one replication and fit the estimator to it.

    The first attempt draws from the replication's own seed. Under the
    redraw policy, later attempts draw from child seeds of it.

    Estimation errors are returned on the result, not raised, so the
    caller applies the failure policy in run-index order.
    """
    seeds = [task.seed]
    if task.failure_policy is FailurePolicy.REDRAW:
        seeds.extend(task.seed.spawn(task.max_attempts - 1))

    error: EstimationError | None = None
    for attempt, seed in enumerate(seeds, start=1):
        responses = generate_responses(task.true_parameters, get_rng(seed))
        try:
            estimates = task.estimator(responses)
        except EstimationError as exc:
            error = exc
            if attempt < len(seeds):
                logger.warning(
                    "Replication %d attempt %d failed (%s), redrawing",
                    task.run_index,
                    attempt,
                    exc,
                )
            continue

        logger.debug(
            "Replication %d finished after %d attempt(s)",
            task.run_index,
            attempt,
        )
        return ReplicationResult(
            run_index=task.run_index, estimates=estimates, attempts=attempt
        )

    return ReplicationResult(
        run_index=task.run_index,
        estimates=None,
        attempts=len(seeds),
        error=error,
    )


def _apply_policy(
    result: ReplicationResult, failure_policy: FailurePolicy
) -> ReplicationResult:
    if not result.failed:
        return result

    if failure_policy is FailurePolicy.SKIP:
        logger.warning(
            "Skipping replication %d: %s", result.run_index, result.error
        )
        return result

    raise ReplicationFailedError(
        result.run_index, str(result.error)
    ) from result.error


def run_replications(
    true_parameters: TrueParameters,
    n_replications: int,
    base_seed: int,
    estimator: Estimator = fit_irt,
    failure_policy: FailurePolicy | str = FailurePolicy.ABORT,
    max_attempts: int = 5,
    n_workers: int = 1,
) -> Iterator[ReplicationResult]:
    """
    Run repeated simulate-and-estimate replications.

    For each replication:
    1. Draw a fresh response matrix from the fixed true parameters
    2. Fit the estimator
    3. Yield the result, applying the failure policy on error

    Uses SeedSequence to derive independent seeds per replication, so
    serial and parallel runs produce identical results for a base seed.

    Args:
        true_parameters: Ground truth held fixed across replications.
        n_replications: Number of replications.
        base_seed: Base random seed.
        estimator: Callable fitting a ResponseMatrix. Must be picklable
            when n_workers > 1.
        failure_policy: abort, skip or redraw.
        max_attempts: Data draws per replication under the redraw policy.
        n_workers: Number of worker processes. 1 runs serially.

    Yields:
        ReplicationResult for each replication, in run-index order. Under
        the skip policy failed replications are yielded with estimates None.

    Raises:
        ReplicationFailedError: If a replication fails under the abort
            policy, or exhausts its attempts under the redraw policy.
    """
    if n_replications < 1:
        raise ValueError(f"n_replications must be >= 1, got {n_replications}")
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
    if n_workers < 1:
        raise ValueError(f"n_workers must be >= 1, got {n_workers}")

    failure_policy = FailurePolicy(failure_policy)
    root_seq = np.random.SeedSequence(base_seed)
    tasks = [
        _ReplicationTask(
            run_index=i,
            seed=seed,
            true_parameters=true_parameters,
            estimator=estimator,
            failure_policy=failure_policy,
            max_attempts=max_attempts,
        )
        for i, seed in enumerate(root_seq.spawn(n_replications))
    ]

    if n_workers == 1:
        for task in tasks:
            yield _apply_policy(_run_single(task), failure_policy)
        return

    executor = ProcessPoolExecutor(max_workers=n_workers)
    try:
        for result in executor.map(_run_single, tasks):
            yield _apply_policy(result, failure_policy)
    finally:
        executor.shutdown(wait=True, cancel_futures=True)


def collect_replications(
    true_parameters: TrueParameters,
    n_replications: int,
    base_seed: int,
    estimator: Estimator = fit_irt,
    failure_policy: FailurePolicy | str = FailurePolicy.ABORT,
    max_attempts: int = 5,
    n_workers: int = 1,
) -> ReplicationSummary:
    """
    Run all replications and summarize the estimates.

    Arguments are as for run_replications.

    Returns:
        ReplicationSummary with the estimate matrices, skipped runs and
        status DONE.
    """
    accumulator = ReplicationAccumulator(
        true_parameters=true_parameters, n_requested=n_replications
    )
    for result in run_replications(
        true_parameters=true_parameters,
        n_replications=n_replications,
        base_seed=base_seed,
        estimator=estimator,
        failure_policy=failure_policy,
        max_attempts=max_attempts,
        n_workers=n_workers,
    ):
        accumulator.add(result)

    summary = accumulator.finish()
    logger.info(
        "Completed %d of %d replications (%d skipped)",
        summary.n_completed,
        summary.n_requested,
        len(summary.skipped_runs),
    )
    return summary


def run_replications_from_config(
    config: SimulationConfig,
    estimator: Estimator = fit_irt,
    n_workers: int = 1,
) -> ReplicationSummary:
    """
    Draw true parameters from a config and run its replication study.

    Uses SeedSequence to derive independent seeds for the true parameters
    and for the replications.

    Args:
        config: Simulation configuration.
        estimator: Callable fitting a ResponseMatrix.
        n_workers: Number of worker processes.

    Returns:
        ReplicationSummary for config.n_replications replications.
    """
    root_seq = np.random.SeedSequence(config.random_seed)
    params_seq, replication_seq = root_seq.spawn(2)

    true_parameters = draw_true_parameters(config, get_rng(params_seq))

    replication_seed = int(replication_seq.generate_state(1)[0])
    return collect_replications(
        true_parameters=true_parameters,
        n_replications=config.n_replications,
        base_seed=replication_seed,
        estimator=estimator,
        failure_policy=config.failure_policy,
        max_attempts=config.max_attempts,
        n_workers=n_workers,
    )
