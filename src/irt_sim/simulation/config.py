from dataclasses import dataclass, field

from omegaconf import MISSING

FAILURE_POLICIES = ("abort", "skip", "redraw")


@dataclass
class DistributionConfig:
    """Configuration for a single parameter's marginal distribution.

    Attributes:
        distribution: Distribution type ("normal", "truncated_normal", "uniform", ...)
        params: Distribution parameters (mean, std, lower, upper, etc.)
    """

    distribution: str = MISSING
    params: dict[str, float | None] = MISSING


def _default_ability() -> DistributionConfig:
    return DistributionConfig(
        distribution="normal", params={"mean": 0.0, "std": 1.0}
    )


def _default_difficulty() -> DistributionConfig:
    return DistributionConfig(
        distribution="normal", params={"mean": 0.0, "std": 1.0}
    )


@dataclass
class SimulationConfig:
    """Complete configuration for a simulation study.

    Attributes:
        n_subjects: Number of subjects (rows of the response matrix).
        n_items: Number of items (columns of the response matrix).
        n_replications: Number of replications for the replication driver.
        random_seed: Base seed. True parameters and every replication
            derive their streams from it.
        ability: Marginal distribution of true abilities.
        difficulty: Marginal distribution of true difficulties.
        failure_policy: What the replication driver does when a fit fails
            ("abort", "skip" or "redraw").
        max_attempts: Attempts per replication under the "redraw" policy.
    """

    n_subjects: int
    n_items: int
    n_replications: int = 100

    # Reproducibility
    random_seed: int = MISSING

    ability: DistributionConfig = field(default_factory=_default_ability)
    difficulty: DistributionConfig = field(
        default_factory=_default_difficulty
    )

    failure_policy: str = "abort"
    max_attempts: int = 5

    def __post_init__(self) -> None:
        if self.n_subjects <= 1:
            raise ValueError("Must have at least 2 subjects")
        if self.n_items <= 1:
            raise ValueError("Must have at least 2 items")
        if self.n_replications < 1:
            raise ValueError("Must have at least 1 replication")
        if self.failure_policy not in FAILURE_POLICIES:
            raise ValueError(
                f"failure_policy must be one of {FAILURE_POLICIES}, "
                f"got {self.failure_policy!r}"
            )
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
