"""
Fractional differencing and integration of time series.

Fractional differencing generalizes ordinary differencing to a real order d.
The result can be stationary while keeping more long-memory structure than
a first difference. Fractional integration (order -d) undoes it.

Key Concepts:
- **Weights**: Binomial expansion coefficients of (1-B)^d
- **Causal convolution**: Each value is combined with older values only
- **Windowed filter**: A capped weight sequence, cheaper but not invertible

Series are ordered most-recent-first throughout the package.

Logging goes through loguru and is disabled by default; call
``logger.enable("fdiff")`` to see it.
"""

from loguru import logger

from fdiff.weights import (
    DEFAULT_DTYPE,
    generate_weights,
    get_weight_count,
    get_weight_convergence,
)
from fdiff.fracdiff import (
    frac_diff,
    frac_integrate,
    frac_diff_windowed,
)
from fdiff.diagnostics import (
    adf_test,
    reconstruction_error,
    weight_summary,
)

logger.disable("fdiff")

__version__ = "0.1.0"

__all__ = [
    # Weight computation
    "DEFAULT_DTYPE",
    "generate_weights",
    "get_weight_count",
    "get_weight_convergence",
    # Fractional differencing
    "frac_diff",
    "frac_integrate",
    "frac_diff_windowed",
    # Diagnostics
    "adf_test",
    "reconstruction_error",
    "weight_summary",
]
