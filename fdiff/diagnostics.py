"""
Diagnostics for fractionally differenced series.

Helpers to inspect a weight sequence, check how well integration undoes
differencing, and test the result for stationarity. Picking d is left to
the caller.
"""

from typing import Any, Dict, Optional, Sequence, Union
import pandas as pd
import numpy as np
from statsmodels.tsa.stattools import adfuller

from fdiff.fracdiff import frac_diff, frac_integrate
from fdiff.weights import DEFAULT_DTYPE, DTypeLike, generate_weights


def weight_summary(
    diff_order: float,
    length: int,
    threshold: float = 0.0,
    use_n_weights: int = 0,
    dtype: DTypeLike = DEFAULT_DTYPE,
) -> Dict[str, Any]:
    """
    Summarize the weight sequence for a set of parameters.

    Returns
    -------
    dict
        - 'weights': The generated weights (np.ndarray, lag order)
        - 'num_weights': Number of weights kept
        - 'weight_sum': Sum of the weights
        - 'last_weight': Weight at the largest lag that was kept

    Notes
    -----
    The sum of the full weight sequence tends to 0 for d > 0 as length
    grows, but for short sequences it is generally far from any round
    number.

    Examples
    --------
    >>> summary = weight_summary(0.5, length=20)
    >>> summary['num_weights']
    20
    """
    weights = generate_weights(diff_order, length, threshold, use_n_weights, dtype)

    return {
        "weights": weights,
        "num_weights": len(weights),
        "weight_sum": float(weights.sum()),
        "last_weight": float(weights[-1]),
    }


def reconstruction_error(
    series: Union[Sequence[float], np.ndarray, pd.Series],
    diff_order: float,
    threshold: float = 0.0,
    dtype: DTypeLike = DEFAULT_DTYPE,
) -> Dict[str, Any]:
    """
    Difference a series, integrate it back, and measure the error.

    Parameters
    ----------
    series : array-like or pd.Series
        Observations ordered most-recent-first.
    diff_order : float
        The fractional order (d) to round-trip.
    threshold : float, default=0.0
        Weight truncation threshold used in both directions.
    dtype : numpy floating dtype, default=DEFAULT_DTYPE
        Working precision.

    Returns
    -------
    dict
        - 'reconstructed': Series after differencing then integrating,
          same kind as the input
        - 'max_abs_error': Largest absolute deviation from the input
        - 'mean_abs_error': Mean absolute deviation from the input
        - 'series_sum': Sum of the input (its full d=-1 integral)

    Notes
    -----
    With threshold = 0 the error is floating-point noise only. A positive
    threshold truncates the two weight sequences differently and the error
    grows accordingly.
    """
    if isinstance(series, pd.DataFrame):
        raise ValueError("reconstruction_error expects a single series")

    differenced = frac_diff(series, diff_order, threshold, 0, dtype)
    reconstructed = frac_integrate(differenced, diff_order, threshold, dtype)

    original = np.asarray(series, dtype=np.float64)
    errors = np.abs(np.asarray(reconstructed, dtype=np.float64) - original)

    return {
        "reconstructed": reconstructed,
        "max_abs_error": float(errors.max()),
        "mean_abs_error": float(errors.mean()),
        "series_sum": float(original.sum()),
    }


def adf_test(
    series: Union[Sequence[float], np.ndarray, pd.Series],
    max_lag: Optional[int] = None,
    regression: str = "c",
    autolag: Optional[str] = "AIC",
) -> Dict[str, float]:
    """
    Test a differenced series for a unit root with statsmodels' adfuller.

    Non-finite values are dropped first. ``max_lag``, ``regression`` and
    ``autolag`` are passed straight through to adfuller.

    Returns
    -------
    dict
        'adf_statistic', 'p_value', 'lags_used', 'num_observations',
        'critical_1%', 'critical_5%', 'critical_10%', and 'is_stationary'
        (p_value < 0.05).

    Raises
    ------
    ValueError
        If fewer than 20 finite observations remain.
    """
    values = np.asarray(series, dtype=np.float64)
    clean_values = values[np.isfinite(values)]

    if len(clean_values) < 20:
        raise ValueError(
            f"Series too short for ADF test: {len(clean_values)} observations"
        )

    # adfuller regresses each value on the ones before it in array order, so
    # the most-recent-first layout must be flipped to oldest-first
    adf_result = adfuller(
        clean_values[::-1],
        maxlag=max_lag,
        regression=regression,
        autolag=autolag,
    )

    return {
        "adf_statistic": adf_result[0],
        "p_value": adf_result[1],
        "lags_used": adf_result[2],
        "num_observations": adf_result[3],
        "critical_1%": adf_result[4]["1%"],
        "critical_5%": adf_result[4]["5%"],
        "critical_10%": adf_result[4]["10%"],
        "is_stationary": adf_result[1] < 0.05,
    }
