"""
Fractional differencing and integration of time series.

Series are ordered most-recent-first: index 0 is the latest observation and
index len-1 the oldest. Each output value is the weighted sum of the
observation itself and every older one, using the weights from
generate_weights(). Near the oldest end there is less history than weights,
so the sum simply stops at the last observation. Output length always equals
input length, and the oldest value is returned unchanged.

Because the same boundary truncation applies in both directions,
frac_integrate() with order d undoes frac_diff() with order d up to
floating-point noise.
"""

from typing import Sequence, Union
import pandas as pd
import numpy as np
from loguru import logger

from fdiff.weights import DEFAULT_DTYPE, DTypeLike, _as_float_dtype, generate_weights

SeriesLike = Union[Sequence[float], np.ndarray, pd.Series, pd.DataFrame]


def _as_values(values, dtype: np.dtype, name: str = "series") -> np.ndarray:
    """Convert one series to a validated 1D array of the working dtype."""
    try:
        source = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as err:
        raise ValueError(f"{name} must contain only numbers: {err}") from err

    if source.ndim != 1:
        raise ValueError(f"{name} must be one-dimensional, got shape {source.shape}")
    if source.size == 0:
        raise ValueError(f"{name} must not be empty")
    if not np.all(np.isfinite(source)):
        raise ValueError(f"{name} contains values that are not finite")

    with np.errstate(over="ignore", invalid="ignore"):
        array = source.astype(dtype, copy=False)
    if not np.all(np.isfinite(array)):
        bad = int(np.flatnonzero(~np.isfinite(array))[0])
        raise OverflowError(
            f"{name} value at position {bad} overflowed {np.dtype(dtype)}"
        )

    return array


def _apply_weights(values: np.ndarray, weights: np.ndarray) -> np.ndarray:
    """
    Causal convolution truncated at the end of the data.

    output[i] = sum over j in [i, n) of values[j] * weights[j - i]
    """
    num_obs = values.shape[0]
    num_weights = weights.shape[0]
    output = np.zeros(num_obs, dtype=values.dtype)

    with np.errstate(over="ignore", invalid="ignore"):
        for idx in range(num_obs):
            span = min(num_weights, num_obs - idx)
            output[idx] = np.dot(values[idx : idx + span], weights[:span])

    if not np.all(np.isfinite(output)):
        bad = int(np.flatnonzero(~np.isfinite(output))[0])
        raise OverflowError(
            f"fractional difference overflowed {values.dtype} at position {bad}"
        )

    return output


def frac_diff(
    series: SeriesLike,
    diff_order: float,
    threshold: float = 0.0,
    use_n_weights: int = 0,
    dtype: DTypeLike = DEFAULT_DTYPE,
) -> Union[np.ndarray, pd.Series, pd.DataFrame]:
    """
    Apply fractional differencing of order d to a series.

    Parameters
    ----------
    series : array-like, pd.Series or pd.DataFrame
        Observations ordered most-recent-first. If DataFrame, each column
        is differenced independently.
    diff_order : float
        The fractional order (d).
        - d = 1: Ordinary differencing, series[i] - series[i+1]
        - 0 < d < 1: Fractional differencing (preserves some memory)
        - d < 0: Fractional integration (d = -1 is a reverse cumulative sum)
    threshold : float, default=0.0
        Weight magnitude at or below which weight generation stops.
        0 keeps every weight.
    use_n_weights : int, default=0
        Cap on the number of weights after w_0. 0 means unbounded.
        A capped filter is not a true fractional difference and is not
        inverted by negating d; see frac_diff_windowed().
    dtype : numpy floating dtype, default=DEFAULT_DTYPE
        Working precision for weights and sums.

    Returns
    -------
    np.ndarray, pd.Series or pd.DataFrame
        Same length and kind as the input. pandas inputs keep their index,
        name and columns.

    Raises
    ------
    ValueError
        If the series is empty, not one-dimensional, non-numeric or contains
        non-finite values, or if a weight parameter is invalid.
    OverflowError
        If an input value, a weight or an output value is not representable
        in ``dtype``.

    Examples
    --------
    >>> frac_diff([2, 1, 3, 5], diff_order=1.0)
    array([ 1., -2., -2.,  5.], dtype=float32)
    >>> frac_diff([2, 1, 3, 5], diff_order=-1.0)
    array([11.,  9.,  8.,  5.], dtype=float32)
    """
    float_dtype = _as_float_dtype(dtype)

    if isinstance(series, pd.DataFrame):
        if series.empty:
            raise ValueError("series must not be empty")

        weights = generate_weights(
            diff_order, series.shape[0], threshold, use_n_weights, float_dtype
        )
        columns = []
        for pos, col in enumerate(series.columns):
            logger.debug("differencing column {} with d={}", col, diff_order)
            values = _as_values(series.iloc[:, pos], float_dtype, name=f"column {col!r}")
            columns.append(_apply_weights(values, weights))

        return pd.DataFrame(
            np.column_stack(columns), index=series.index, columns=series.columns
        )

    values = _as_values(series, float_dtype)
    weights = generate_weights(
        diff_order, values.shape[0], threshold, use_n_weights, float_dtype
    )
    logger.debug(
        "applying {} weights to {} observations", len(weights), values.shape[0]
    )
    output = _apply_weights(values, weights)

    if isinstance(series, pd.Series):
        return pd.Series(output, index=series.index, name=series.name)
    return output


def frac_integrate(
    series: SeriesLike,
    diff_order: float,
    threshold: float = 0.0,
    dtype: DTypeLike = DEFAULT_DTYPE,
) -> Union[np.ndarray, pd.Series, pd.DataFrame]:
    """
    Undo a fractional difference of order d.

    Equivalent to frac_diff(series, -diff_order). With threshold = 0 this
    reconstructs the series that was passed to frac_diff(), up to
    floating-point noise.

    Examples
    --------
    >>> fd = frac_diff(prices, diff_order=0.4)
    >>> restored = frac_integrate(fd, diff_order=0.4)
    """
    if not np.isfinite(diff_order):
        raise ValueError(f"diff_order must be finite, got {diff_order}")
    return frac_diff(series, -diff_order, threshold, 0, dtype)


def frac_diff_windowed(
    series: SeriesLike,
    diff_order: float,
    n_weights: int,
    threshold: float = 0.0,
    dtype: DTypeLike = DEFAULT_DTYPE,
) -> Union[np.ndarray, pd.Series, pd.DataFrame]:
    """
    Apply a fixed-window filter built from fractional differencing weights.

    Only w_0 .. w_{n_weights} are used, so each output value looks back at
    most n_weights observations. This trades exactness for a short memory:
    the result is not a true fractional difference, has a different
    frequency response, and is not inverted by frac_integrate().

    Parameters
    ----------
    series : array-like, pd.Series or pd.DataFrame
        Observations ordered most-recent-first.
    diff_order : float
        The fractional order (d).
    n_weights : int
        Number of weights after w_0. Must be >= 1.
    threshold : float, default=0.0
        Weight magnitude at or below which weight generation stops early.
    dtype : numpy floating dtype, default=DEFAULT_DTYPE
        Working precision.
    """
    if n_weights < 1:
        raise ValueError(f"n_weights must be >= 1, got {n_weights}")
    return frac_diff(series, diff_order, threshold, n_weights, dtype)
