import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def short_series():
    """Ten observations, most recent first."""
    return [2.0, 1.0, 3.0, 5.0, 6.0, 0.0, -1.0, 2.0, 2.0, 5.0]


@pytest.fixture
def demo_series(short_series):
    return short_series * 2


@pytest.fixture
def random_walk():
    rng = np.random.default_rng(42)
    return np.cumsum(rng.normal(0.0, 1.0, 200)) + 100.0


@pytest.fixture
def price_series(random_walk):
    index = pd.date_range("2023-01-01", periods=len(random_walk), freq="D")[::-1]
    return pd.Series(random_walk, index=index, name="close")
