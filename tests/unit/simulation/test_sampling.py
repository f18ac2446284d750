"""Tests for the distribution registry."""

import numpy as np
import pytest

from irt_sim.simulation.sampling import draw_sample, registry


class TestRegistry:
    def test_registered_names(self) -> None:
        assert registry.names == [
            "normal",
            "skew_normal",
            "student_t",
            "truncated_normal",
            "uniform",
        ]

    def test_unknown(self) -> None:
        with pytest.raises(ValueError, match="Sampler gamma not registered"):
            registry.get_sampler("gamma", {})


class TestDrawSample:
    def test_normal_moments(self) -> None:
        x = draw_sample(
            20000, "normal", {"mean": 1.0, "std": 2.0}, np.random.default_rng(0)
        )
        assert x.shape == (20000,)
        np.testing.assert_allclose(x.mean(), 1.0, atol=0.05)
        np.testing.assert_allclose(x.std(), 2.0, atol=0.05)

    def test_truncated_normal_bounds(self) -> None:
        x = draw_sample(
            5000,
            "truncated_normal",
            {"mean": 0.0, "std": 1.0, "lower": -0.5, "upper": 1.0},
            np.random.default_rng(0),
        )
        assert (x >= -0.5).all()
        assert (x <= 1.0).all()

    def test_uniform_bounds(self) -> None:
        x = draw_sample(
            1000, "uniform", {"low": -3.0, "high": -1.0}, np.random.default_rng(0)
        )
        assert (x >= -3.0).all()
        assert (x <= -1.0).all()

    def test_skew_normal_is_right_skewed(self) -> None:
        x = draw_sample(
            20000, "skew_normal", {"a": 5.0}, np.random.default_rng(0)
        )
        assert np.mean(x) > np.median(x)

    def test_reproducible(self) -> None:
        a = draw_sample(10, "student_t", {"df": 4.0}, np.random.default_rng(3))
        b = draw_sample(10, "student_t", {"df": 4.0}, np.random.default_rng(3))
        np.testing.assert_array_equal(a, b)

    def test_defaults_to_standard_normal(self) -> None:
        x = draw_sample(10, rng=np.random.default_rng(0))
        assert x.shape == (10,)
