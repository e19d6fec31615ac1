import numpy as np
import pandas as pd
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from fdiff.diagnostics import adf_test, reconstruction_error, weight_summary
from fdiff.fracdiff import frac_diff


class TestWeightSummary:
    def test_first_difference(self):
        summary = weight_summary(1.0, 5)
        assert_array_equal(summary["weights"], [1.0, -1.0])
        assert summary["num_weights"] == 2
        assert summary["weight_sum"] == 0.0
        assert summary["last_weight"] == -1.0

    def test_cumulative_sum(self):
        summary = weight_summary(-1.0, 8)
        assert summary["num_weights"] == 8
        assert summary["weight_sum"] == 8.0

    def test_capped(self):
        summary = weight_summary(0.5, 20, use_n_weights=2)
        assert summary["num_weights"] == 3
        assert summary["last_weight"] == -0.125


class TestReconstructionError:
    def test_double_precision_round_trip(self, demo_series):
        result = reconstruction_error(demo_series, 0.5, dtype=np.float64)
        assert result["max_abs_error"] < 1e-9
        assert result["mean_abs_error"] <= result["max_abs_error"]
        assert result["series_sum"] == 50.0
        assert isinstance(result["reconstructed"], np.ndarray)

    def test_single_precision_round_trip(self, demo_series):
        result = reconstruction_error(demo_series, 0.5)
        assert result["max_abs_error"] < 1e-3

    def test_pandas_series(self, price_series):
        result = reconstruction_error(price_series, 0.35, dtype=np.float64)
        assert isinstance(result["reconstructed"], pd.Series)
        assert result["reconstructed"].index.equals(price_series.index)
        assert_allclose(result["reconstructed"].values, price_series.values, rtol=1e-9)

    def test_threshold_adds_error(self, random_walk):
        exact = reconstruction_error(random_walk, 0.4, dtype=np.float64)
        truncated = reconstruction_error(random_walk, 0.4, threshold=1e-2, dtype=np.float64)
        assert truncated["max_abs_error"] > exact["max_abs_error"]

    def test_dataframe_rejected(self, price_series):
        with pytest.raises(ValueError, match="single series"):
            reconstruction_error(price_series.to_frame(), 0.4)


class TestAdfTest:
    def test_result_keys(self):
        rng = np.random.default_rng(7)
        result = adf_test(rng.normal(0.0, 1.0, 300))
        expected_keys = {
            "adf_statistic",
            "p_value",
            "lags_used",
            "num_observations",
            "critical_1%",
            "critical_5%",
            "critical_10%",
            "is_stationary",
        }
        assert set(result) == expected_keys

    def test_white_noise_is_stationary(self):
        rng = np.random.default_rng(7)
        result = adf_test(rng.normal(0.0, 1.0, 500))
        assert result["is_stationary"]
        assert result["p_value"] < 0.05

    def test_first_difference_of_random_walk(self, random_walk):
        differenced = frac_diff(random_walk, 1.0, dtype=np.float64)
        # the oldest value is carried through undifferenced
        result = adf_test(differenced[:-1])
        assert result["is_stationary"]

    def test_ignores_missing_values(self):
        rng = np.random.default_rng(7)
        values = rng.normal(0.0, 1.0, 100)
        values[::10] = np.nan
        result = adf_test(pd.Series(values))
        assert result["num_observations"] + result["lags_used"] + 1 == 90

    def test_too_short(self):
        with pytest.raises(ValueError, match="too short"):
            adf_test(np.arange(10.0))
