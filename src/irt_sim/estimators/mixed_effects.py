"""
Mixed-effects estimator capability.

Fits the Rasch model as a binomial GLMM:
    endorse ~ 0 + item + (1 | subj)
with a logit link. Items are fixed effects with the intercept suppressed,
so every item has its own coefficient. Subjects are a random intercept.

The model is fit by variational Bayes. The posterior mean of an item
coefficient is its endorsement propensity, so difficulty = -coefficient.
Abilities are the posterior means of the subject random effects.
"""

import logging
import warnings
from dataclasses import dataclass

import numpy as np
import pandas as pd
from statsmodels.genmod.bayes_mixed_glm import BinomialBayesMixedGLM
from statsmodels.tools.sm_exceptions import ConvergenceWarning

from irt_sim.core.data import from_long_format, to_long_format
from irt_sim.core.data_models import ParameterEstimates, ResponseMatrix
from irt_sim.core.exceptions import ConvergenceError
from irt_sim.estimators.base import Estimator, check_degenerate

logger = logging.getLogger(__name__)

MIXED_METHOD = "glmm"

FIXED_EFFECTS_FORMULA = "endorse ~ 0 + C(item)"
RANDOM_EFFECTS_FORMULAS = {"subj": "0 + C(subj)"}

FATAL_WARNINGS = (RuntimeWarning, ConvergenceWarning)


@dataclass(frozen=True)
class MixedModelConfig:
    """
    Configuration for the binomial mixed model fit.

    Attributes:
        fe_prior_sd: Prior standard deviation of the item fixed effects.
        vc_prior_sd: Prior standard deviation of the log random-effect SD.
        method: scipy.optimize method used for the variational fit.
        min_random_effect_sd: Smallest subject random-effect SD accepted.
            A smaller fitted SD means the subject effects collapsed.
    """

    fe_prior_sd: float = 2.0
    vc_prior_sd: float = 1.0
    method: str = "BFGS"
    min_random_effect_sd: float = 0.05

    def __post_init__(self) -> None:
        if self.fe_prior_sd <= 0:
            raise ValueError(
                f"fe_prior_sd must be > 0, got {self.fe_prior_sd}"
            )
        if self.vc_prior_sd <= 0:
            raise ValueError(
                f"vc_prior_sd must be > 0, got {self.vc_prior_sd}"
            )
        if self.min_random_effect_sd < 0:
            raise ValueError(
                "min_random_effect_sd must be >= 0, "
                f"got {self.min_random_effect_sd}"
            )


@dataclass(frozen=True)
class MixedModelFit:
    """Mixed model estimates together with the fitted subject SD."""

    estimates: ParameterEstimates
    random_effect_sd: float


def _raise_on_fatal_warnings(caught: list[warnings.WarningMessage]) -> None:
    for warning in caught:
        message = str(warning.message)
        if (
            issubclass(warning.category, FATAL_WARNINGS)
            or "converge" in message.lower()
        ):
            raise ConvergenceError(MIXED_METHOD, message)
        logger.warning("Mixed model fit warning: %s", message)


def fit_glmm(
    table: pd.DataFrame,
    config: MixedModelConfig | None = None,
) -> MixedModelFit:
    """
    Fit the binomial GLMM and keep the subject random-effect SD.

    Args:
        table: Long-format responses with columns subj, item, endorse.
            subj and item are categoricals (see to_long_format).
        config: Mixed model configuration. Uses defaults if None.

    Returns:
        MixedModelFit with estimates ordered by item and subject category.

    Raises:
        DegenerateDataError: If an item has no response variance.
        ConvergenceError: If the fit warned about convergence or numerical
            trouble, produced non-finite estimates, or the subject
            random-effect SD collapsed.
    """
    config = config or MixedModelConfig()

    data = from_long_format(table)
    check_degenerate(data)

    model = BinomialBayesMixedGLM.from_formula(
        FIXED_EFFECTS_FORMULA,
        RANDOM_EFFECTS_FORMULAS,
        table,
        vcp_p=config.vc_prior_sd,
        fe_p=config.fe_prior_sd,
    )

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        result = model.fit_vb(fit_method=config.method)
    _raise_on_fatal_warnings(caught)

    coefficients = np.asarray(result.fe_mean, dtype=np.float64)
    effects = np.asarray(result.vc_mean, dtype=np.float64)

    if len(coefficients) != data.n_items or len(effects) != data.n_subjects:
        raise ValueError(
            f"Expected {data.n_items} item and {data.n_subjects} subject "
            f"effects, got {len(coefficients)} and {len(effects)}"
        )
    if not (np.all(np.isfinite(coefficients)) and np.all(np.isfinite(effects))):
        raise ConvergenceError(MIXED_METHOD, "non-finite estimates")

    random_effect_sd = float(np.exp(result.vcp_mean[0]))
    if not random_effect_sd >= config.min_random_effect_sd:
        raise ConvergenceError(
            MIXED_METHOD,
            f"random-effect SD collapsed to {random_effect_sd:.3g} "
            f"(minimum {config.min_random_effect_sd})",
        )
    logger.debug("Mixed model fit: random intercept SD = %.4f", random_effect_sd)

    estimates = ParameterEstimates(
        abilities=effects,
        difficulties=-coefficients,
        method=MIXED_METHOD,
    )
    return MixedModelFit(estimates=estimates, random_effect_sd=random_effect_sd)


def fit_mixed_model(
    table: pd.DataFrame,
    config: MixedModelConfig | None = None,
) -> ParameterEstimates:
    """Estimate difficulties and abilities with a binomial GLMM."""
    return fit_glmm(table, config).estimates


@dataclass(frozen=True)
class MixedModelEstimator:
    """
    Adapts fit_mixed_model to the ResponseMatrix estimator interface.

    Instances are picklable, so they can be sent to worker processes.
    """

    config: MixedModelConfig = MixedModelConfig()

    def __call__(self, data: ResponseMatrix) -> ParameterEstimates:
        return fit_mixed_model(to_long_format(data), self.config)


def mixed_model_estimator(config: MixedModelConfig | None = None) -> Estimator:
    """Build a mixed model estimator with the given configuration."""
    return MixedModelEstimator(config or MixedModelConfig())
