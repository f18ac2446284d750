"""
Configuration dataclasses for Rasch model estimation.

This module defines the configuration parameters for:
- Quadrature settings (Gauss-Hermite integration)
- Convergence criteria for the EM algorithm
- Parameter bounds for the M-step optimizer
- Overall estimation settings
"""

from dataclasses import dataclass, field

import toml

from irt_sim.core.paths import get_project_root_dir

# Default parameter bounds
DEFAULT_DIFFICULTY_BOUNDS = (-10.0, 10.0)
DEFAULT_DISCRIMINATION_BOUNDS = (0.05, 5.0)

# Default convergence settings
DEFAULT_MAX_EM_ITERATIONS = 500
DEFAULT_EM_TOLERANCE = 1e-5
DEFAULT_MAX_LBFGS_ITERATIONS = 100
DEFAULT_LBFGS_TOLERANCE = 1e-9

# Default quadrature settings
DEFAULT_QUADRATURE_POINTS = 41

# Rasch model: discrimination fixed at 1
DEFAULT_FIXED_DISCRIMINATION = 1.0


def _get_project_version() -> str:
    root_dir = get_project_root_dir()
    with open(root_dir / "pyproject.toml") as f:
        data = toml.load(f)

    version = data.get("project", {}).get("version")

    if not version:
        raise ValueError("Version not found in pyproject.toml")

    assert isinstance(version, str)
    return version


@dataclass(frozen=True)
class QuadratureConfig:
    """
    Configuration for Gauss-Hermite quadrature.

    Attributes:
        n_points: Number of quadrature points. Standard in IRT software
            is 41 points.
        mean: Mean of the ability distribution (typically 0).
        std: Standard deviation of the ability distribution (typically 1).
    """

    n_points: int = DEFAULT_QUADRATURE_POINTS
    mean: float = 0.0
    std: float = 1.0

    def __post_init__(self) -> None:
        if self.n_points < 2:
            raise ValueError(f"n_points must be >= 2, got {self.n_points}")
        if self.std <= 0:
            raise ValueError(f"std must be > 0, got {self.std}")


@dataclass(frozen=True)
class ConvergenceConfig:
    """
    Configuration for EM algorithm convergence.

    Attributes:
        max_em_iterations: Maximum number of EM iterations.
        em_tolerance: EM stops when |LL_new - LL_old| < tolerance.
        max_lbfgs_iterations: Maximum iterations for L-BFGS-B in M-step.
        lbfgs_tolerance: Convergence tolerance for L-BFGS-B optimizer.
    """

    max_em_iterations: int = DEFAULT_MAX_EM_ITERATIONS
    em_tolerance: float = DEFAULT_EM_TOLERANCE
    max_lbfgs_iterations: int = DEFAULT_MAX_LBFGS_ITERATIONS
    lbfgs_tolerance: float = DEFAULT_LBFGS_TOLERANCE

    def __post_init__(self) -> None:
        if self.max_em_iterations < 1:
            raise ValueError(
                f"max_em_iterations must be >= 1, got {self.max_em_iterations}"
            )
        if self.max_lbfgs_iterations < 1:
            raise ValueError(
                "max_lbfgs_iterations must be >= 1, "
                f"got {self.max_lbfgs_iterations}"
            )
        if self.em_tolerance <= 0:
            raise ValueError(
                f"em_tolerance must be > 0, got {self.em_tolerance}"
            )


@dataclass(frozen=True)
class ParameterBounds:
    """
    Bounds for item parameters during optimization.

    Attributes:
        difficulty: (min, max) bounds for item difficulties.
        discrimination: (min, max) bounds for the common discrimination.
    """

    difficulty: tuple[float, float] = DEFAULT_DIFFICULTY_BOUNDS
    discrimination: tuple[float, float] = DEFAULT_DISCRIMINATION_BOUNDS


@dataclass(frozen=True)
class EstimationConfig:
    """
    Master configuration for Rasch model estimation.

    Attributes:
        quadrature: Settings for Gauss-Hermite quadrature.
        convergence: Convergence criteria for EM algorithm.
        bounds: Parameter bounds for optimization.
        fixed_discrimination: Common discrimination held fixed during
            estimation. None estimates one common discrimination for all
            items.
        model_version: Version string for reproducibility tracking.
    """

    quadrature: QuadratureConfig = QuadratureConfig()
    convergence: ConvergenceConfig = ConvergenceConfig()
    bounds: ParameterBounds = ParameterBounds()
    fixed_discrimination: float | None = DEFAULT_FIXED_DISCRIMINATION
    model_version: str = field(default_factory=_get_project_version)

    def __post_init__(self) -> None:
        if self.fixed_discrimination is not None:
            if self.fixed_discrimination <= 0:
                raise ValueError(
                    "fixed_discrimination must be > 0, "
                    f"got {self.fixed_discrimination}"
                )
