"""
Evaluation of estimators against simulated ground truth.

Compares parameter estimates with the true parameters, runs replication
studies and sweeps estimation error over sample sizes.
"""

from irt_sim.evaluation.consistency import SizePoint, run_size_sweep
from irt_sim.evaluation.data_models import (
    Comparison,
    ComparisonReport,
    FailurePolicy,
    ParameterComparison,
    ReplicationAccumulator,
    ReplicationResult,
    ReplicationSummary,
    RunStatus,
)
from irt_sim.evaluation.experiment import run_comparison
from irt_sim.evaluation.metrics import (
    compare,
    compare_estimates,
    mean_squared_error,
    pearson_correlation,
)
from irt_sim.evaluation.runner import (
    collect_replications,
    run_replications,
    run_replications_from_config,
)

__all__ = [
    "Comparison",
    "ComparisonReport",
    "FailurePolicy",
    "ParameterComparison",
    "ReplicationAccumulator",
    "ReplicationResult",
    "ReplicationSummary",
    "RunStatus",
    "SizePoint",
    "collect_replications",
    "compare",
    "compare_estimates",
    "mean_squared_error",
    "pearson_correlation",
    "run_comparison",
    "run_replications",
    "run_replications_from_config",
    "run_size_sweep",
]
