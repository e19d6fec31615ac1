"""
Weight computation for fractional differencing.

This module provides functions to compute the weight sequence used in
fractional differencing and integration. The weights are derived from the
binomial series expansion of the backshift operator (1-B)^d.

Weights are returned in lag order: w[0] applies to the observation itself,
w[k] to the observation k steps in the past.
"""

from typing import Union
import numpy as np
from loguru import logger

# Single precision matches the speed/precision tradeoff of the reference
# routine. Pass dtype=np.float64 for tighter round trips.
DEFAULT_DTYPE = np.float32

DTypeLike = Union[type, np.dtype, str]


def _as_float_dtype(dtype: DTypeLike) -> np.dtype:
    float_dtype = np.dtype(dtype)
    if not np.issubdtype(float_dtype, np.floating):
        raise ValueError(f"dtype must be a floating type, got {float_dtype}")
    return float_dtype


def _check_weight_params(
    diff_order: float,
    length: int,
    threshold: float,
    use_n_weights: int,
) -> None:
    if not np.isfinite(diff_order):
        raise ValueError(f"diff_order must be finite, got {diff_order}")
    if length <= 0:
        raise ValueError(f"length must be positive, got {length}")
    if np.isnan(threshold) or threshold < 0:
        raise ValueError(f"threshold must be >= 0, got {threshold}")
    if use_n_weights < 0:
        raise ValueError(f"use_n_weights must be >= 0, got {use_n_weights}")


def generate_weights(
    diff_order: float,
    length: int,
    threshold: float = 0.0,
    use_n_weights: int = 0,
    dtype: DTypeLike = DEFAULT_DTYPE,
    padded: bool = False,
) -> np.ndarray:
    """
    Generate fractional differencing weights up to a maximum length.

    Computes w_k for k = 0, 1, ... using the iterative formula
    w_k = -w_{k-1} * (d - k + 1) / k, stopping at the first of:

    - k reaches ``length``;
    - |w_k| <= threshold (w_k is not kept);
    - more than ``use_n_weights`` weights would follow w_0.

    Parameters
    ----------
    diff_order : float
        The fractional order (d). Any finite real number.
        - d = 1.0: First difference
        - d = -1.0: Cumulative sum
        - -d: Inverts a prior application of d
    length : int
        Maximum number of weights, normally the series length.
    threshold : float, default=0.0
        Stop once a weight's magnitude falls to or below this value.
        0 disables magnitude truncation.
    use_n_weights : int, default=0
        Maximum number of weights after w_0. 0 means unbounded.
    dtype : numpy floating dtype, default=DEFAULT_DTYPE
        Precision used for the recurrence.
    padded : bool, default=False
        If True, return an array of exactly ``length`` entries with the
        entries past the last generated weight set to zero.

    Returns
    -------
    np.ndarray
        1D weight array in lag order. w[0] == 1 always.

    Raises
    ------
    ValueError
        If length <= 0, threshold < 0, use_n_weights < 0, diff_order is
        not finite, or dtype is not a floating type.
    OverflowError
        If a weight is not representable in ``dtype``.

    Notes
    -----
    For non-negative integer d the recurrence produces an exact zero at
    k = d + 1, so with threshold = 0 generation stops there. d = 1 gives
    [1, -1].

    The count guard stops at k > use_n_weights, not k >= use_n_weights:
    use_n_weights = m keeps w_0 .. w_m, i.e. m weights after w_0.

    A weight that a guard discards is never checked for overflow, so
    OverflowError only reports weights that would end up in the result.

    Examples
    --------
    >>> generate_weights(0.5, length=4)
    array([ 1.    , -0.5   , -0.125 , -0.0625], dtype=float32)
    >>> generate_weights(1.0, length=10)
    array([ 1., -1.], dtype=float32)
    """
    _check_weight_params(diff_order, length, threshold, use_n_weights)
    float_type = _as_float_dtype(dtype).type

    order = float_type(diff_order)
    one = float_type(1)
    weights = np.zeros(length, dtype=float_type)
    weights[0] = 1
    num_weights = 1
    lag = 1

    with np.errstate(over="ignore", invalid="ignore"):
        while lag < length:
            # Iterative formula: w_k = -w_{k-1} * (d - k + 1) / k
            k = float_type(lag)
            next_weight = (-weights[num_weights - 1] * (order - k + one)) / k
            logger.trace("lag={} weight={}", lag, next_weight)

            if float(abs(next_weight)) <= threshold:
                break
            if use_n_weights > 0 and lag > use_n_weights:
                break
            # only weights that are kept must fit in the dtype
            if not np.isfinite(next_weight):
                raise OverflowError(
                    f"weight at lag {lag} overflowed {np.dtype(float_type)} "
                    f"for diff_order={diff_order}"
                )

            weights[num_weights] = next_weight
            num_weights += 1
            lag += 1

    logger.debug(
        "generated {} of {} weights for d={}", num_weights, length, diff_order
    )

    if padded:
        return weights
    return weights[:num_weights].copy()


def get_weight_count(
    diff_order: float,
    length: int,
    threshold: float = 0.0,
    use_n_weights: int = 0,
    dtype: DTypeLike = DEFAULT_DTYPE,
) -> int:
    """
    Get the number of weights generate_weights() keeps for these parameters.

    This is the effective memory of the filter: each output value looks at
    most this many observations back, including itself. Pass the same dtype
    used for differencing, since the threshold guard compares rounded weights.

    Examples
    --------
    >>> get_weight_count(1.0, length=100)
    2
    >>> get_weight_count(0.5, length=100, use_n_weights=5)
    6
    """
    weights = generate_weights(diff_order, length, threshold, use_n_weights, dtype)
    return len(weights)


def get_weight_convergence(
    diff_order: float,
    num_lags: int = 100,
    dtype: DTypeLike = np.float64,
) -> np.ndarray:
    """
    Get the untruncated weight sequence to analyze convergence properties.

    Unlike generate_weights(), no threshold or cap is applied and exact
    zeros are kept, so the result always has ``num_lags`` entries.

    Parameters
    ----------
    diff_order : float
        The fractional order (d).
    num_lags : int, default=100
        Number of lags to compute.
    dtype : numpy floating dtype, default=np.float64
        Precision used for the recurrence.

    Returns
    -------
    np.ndarray
        1D array of weights (w_0, w_1, ..., w_{num_lags-1}).
    """
    if num_lags <= 0:
        raise ValueError(f"num_lags must be positive, got {num_lags}")
    float_type = _as_float_dtype(dtype).type

    order = float_type(diff_order)
    one = float_type(1)
    weights = np.zeros(num_lags, dtype=float_type)
    weights[0] = 1
    with np.errstate(over="ignore", invalid="ignore"):
        for lag in range(1, num_lags):
            k = float_type(lag)
            weights[lag] = (-weights[lag - 1] * (order - k + one)) / k

    return weights
