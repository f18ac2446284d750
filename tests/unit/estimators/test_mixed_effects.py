"""Tests for the mixed-effects estimator capability."""

import pickle
import warnings

import numpy as np
import pytest
from statsmodels.genmod.bayes_mixed_glm import BinomialBayesMixedGLM
from statsmodels.tools.sm_exceptions import ConvergenceWarning

from irt_sim.core.data import to_long_format
from irt_sim.core.data_models import ResponseMatrix, TrueParameters
from irt_sim.core.exceptions import ConvergenceError, DegenerateDataError
from irt_sim.estimators.mixed_effects import (
    MIXED_METHOD,
    MixedModelConfig,
    MixedModelEstimator,
    fit_glmm,
    fit_mixed_model,
    mixed_model_estimator,
)
from irt_sim.simulation.generators import generate_responses


@pytest.fixture(scope="module")
def data() -> ResponseMatrix:
    rng = np.random.default_rng(8)
    params = TrueParameters(
        abilities=rng.normal(size=80),
        difficulties=np.linspace(-1.0, 1.0, 6),
    )
    return generate_responses(params, rng)


class TestMixedModelConfig:
    def test_defaults(self) -> None:
        config = MixedModelConfig()
        assert config.fe_prior_sd == 2.0
        assert config.method == "BFGS"

    def test_invalid_prior(self) -> None:
        with pytest.raises(ValueError, match="fe_prior_sd must be > 0"):
            MixedModelConfig(fe_prior_sd=0.0)
        with pytest.raises(ValueError, match="vc_prior_sd must be > 0"):
            MixedModelConfig(vc_prior_sd=-1.0)
        with pytest.raises(ValueError, match="min_random_effect_sd"):
            MixedModelConfig(min_random_effect_sd=-0.1)


class TestFitMixedModel:
    def test_shapes_and_method(self, data: ResponseMatrix) -> None:
        estimates = fit_mixed_model(to_long_format(data))

        assert estimates.abilities.shape == (80,)
        assert estimates.difficulties.shape == (6,)
        assert estimates.method == MIXED_METHOD
        assert np.all(np.isfinite(estimates.abilities))

    def test_difficulty_sign(self, data: ResponseMatrix) -> None:
        """Harder items (fewer endorsements) get larger difficulties."""
        estimates = fit_mixed_model(to_long_format(data))

        hardest = int(np.argmin(data.item_scores))
        easiest = int(np.argmax(data.item_scores))
        assert estimates.difficulties[hardest] > estimates.difficulties[easiest]

    def test_abilities_follow_scores(self, data: ResponseMatrix) -> None:
        estimates = fit_mixed_model(to_long_format(data))

        low = int(np.argmin(data.subject_scores))
        high = int(np.argmax(data.subject_scores))
        assert estimates.abilities[high] > estimates.abilities[low]

    def test_random_effect_sd_reported(self, data: ResponseMatrix) -> None:
        fit = fit_glmm(to_long_format(data))

        assert fit.random_effect_sd > 0.3
        assert np.std(fit.estimates.abilities) > 0.1

    def test_rejects_degenerate_item(self, data: ResponseMatrix) -> None:
        responses = data.responses.copy()
        responses[:, 0] = 1
        table = to_long_format(ResponseMatrix(responses=responses))

        with pytest.raises(DegenerateDataError, match=r"items \[0\]"):
            fit_mixed_model(table)

    def test_collapsed_random_effect_sd(self, data: ResponseMatrix) -> None:
        config = MixedModelConfig(min_random_effect_sd=100.0)

        with pytest.raises(ConvergenceError, match="random-effect SD"):
            fit_mixed_model(to_long_format(data), config)

    @pytest.mark.parametrize(
        ("message", "category"),
        [
            ("invalid value encountered in sqrt", RuntimeWarning),
            ("optimizer stopped early", ConvergenceWarning),
            ("VB fitting did not converge", UserWarning),
        ],
    )
    def test_fit_warnings_raise(
        self,
        data: ResponseMatrix,
        monkeypatch: pytest.MonkeyPatch,
        message: str,
        category: type[Warning],
    ) -> None:
        original = BinomialBayesMixedGLM.fit_vb

        def fit_vb_with_warning(model, *args, **kwargs):
            warnings.warn(message, category)
            return original(model, *args, **kwargs)

        monkeypatch.setattr(
            BinomialBayesMixedGLM, "fit_vb", fit_vb_with_warning
        )

        with pytest.raises(ConvergenceError, match=message):
            fit_mixed_model(to_long_format(data))


class TestMixedModelEstimator:
    def test_callable_on_matrix(self, data: ResponseMatrix) -> None:
        estimator = mixed_model_estimator()
        estimates = estimator(data)

        assert estimates.method == MIXED_METHOD
        assert estimates.n_subjects == data.n_subjects

    def test_rejects_degenerate_item(self, data: ResponseMatrix) -> None:
        responses = data.responses.copy()
        responses[:, 0] = 0
        with pytest.raises(DegenerateDataError):
            MixedModelEstimator()(ResponseMatrix(responses=responses))

    def test_picklable(self) -> None:
        estimator = MixedModelEstimator(MixedModelConfig(fe_prior_sd=3.0))
        restored = pickle.loads(pickle.dumps(estimator))
        assert restored == estimator
