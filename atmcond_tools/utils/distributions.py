"""
# Parameter Distributions

This module provides the SciPy distributions used to map unit-uniform
samples onto physical parameter values, along with the inverse-CDF transform
that applies them column by column.

## Functions

- `get_scipy_normal`: Create a validated SciPy normal distribution
- `get_scipy_uniform`: Create a validated SciPy uniform distribution
- `check_unit_interval`: Reject samples outside [0, 1]
- `inverse_transform`: Map a unit sample matrix onto a parameter DataFrame

## Example Usage

```python
from atmcond_tools.utils.distributions import get_scipy_normal, inverse_transform
import numpy as np

# Windspeed with mean 3 m/s and standard deviation 0.5 m/s
windspeed = get_scipy_normal(loc=3.0, scale=0.5)
windspeed.ppf([0.025, 0.5, 0.975])

# Transform a whole design
params = inverse_transform(
    np.random.default_rng(42).random((8, 1)),
    {'windspeed': windspeed},
    names=['windspeed']
)
```
"""

from scipy.stats import (
    norm,
    uniform
)
import numpy as np
import pandas as pd


def _check_finite(**params):
    for name, value in params.items():
        if not np.isfinite(value):
            raise ValueError(f"Distribution parameter '{name}' must be finite, got {value}")


def get_scipy_normal(loc=0.0, scale=1.0):
    """
    Create a SciPy normal distribution.

    Args:
        loc (float, optional): Mean of the distribution. Defaults to 0.0.
        scale (float, optional): Standard deviation. Defaults to 1.0.

    Returns:
        scipy.stats.norm: Configured normal distribution.

    Raises:
        ValueError: If either parameter is not finite or scale is not positive.

    Example:
        ```python
        dist = get_scipy_normal(loc=0.7, scale=0.007)
        dist.ppf(0.5)  # 0.7
        ```
    """
    _check_finite(loc=loc, scale=scale)
    if scale <= 0:
        raise ValueError(f"Normal standard deviation must be positive, got {scale}")
    return norm(loc=loc, scale=scale)


def get_scipy_uniform(a=0.0, b=1.0):
    """
    Create a SciPy uniform distribution over [a, b].

    Args:
        a (float, optional): Lower bound of the interval. Defaults to 0.0.
        b (float, optional): Upper bound of the interval. Defaults to 1.0.

    Returns:
        scipy.stats.uniform: Configured uniform distribution.

    Raises:
        ValueError: If either bound is not finite or b is not above a.

    Note:
        SciPy's uniform distribution is parameterized as uniform(loc, scale)
        where scale = b - a, so we transform the [a, b] interface accordingly.
    """
    _check_finite(a=a, b=b)
    if b <= a:
        raise ValueError(f"Uniform upper bound must exceed lower bound, got [{a}, {b}]")
    return uniform(loc=a, scale=b - a)


def check_unit_interval(samples: np.ndarray) -> np.ndarray:
    """
    Ensure every sample lies in the closed unit interval.

    Args:
        samples (np.ndarray): Array of unit-uniform draws.

    Returns:
        np.ndarray: The same samples as a float array.

    Raises:
        ValueError: If any value is NaN or falls outside [0, 1].
    """
    samples = np.asarray(samples, dtype=float)
    bad = ~((samples >= 0.0) & (samples <= 1.0))  # NaN compares False
    if bad.any():
        raise ValueError(
            f"{int(bad.sum())} sample value(s) lie outside [0, 1]; "
            "inverse-CDF transform is undefined there"
        )
    return samples


def inverse_transform(
    samples: np.ndarray,
    space: dict,
    names: list[str]
) -> pd.DataFrame:
    """
    Apply each parameter's quantile function to its column of unit samples.

    Args:
        samples (np.ndarray): Unit-uniform matrix with shape (N, D).
        space (dict): Mapping from parameter name to a frozen SciPy
            distribution (anything exposing `ppf`).
        names (list[str]): Parameter names in column order of `samples`.

    Returns:
        pd.DataFrame: Transformed parameters with one column per name.

    Raises:
        ValueError: If the sample matrix does not have one column per name,
            any sample lies outside [0, 1], or a name has no distribution.
    """
    samples = check_unit_interval(samples)
    if samples.ndim != 2 or samples.shape[1] != len(names):
        raise ValueError(
            f"Expected a sample matrix with {len(names)} columns, got shape {samples.shape}"
        )

    missing = [name for name in names if name not in space]
    if missing:
        raise ValueError(f"No distribution defined for parameter(s): {missing}")

    return pd.DataFrame({
        name: space[name].ppf(samples[:, i])
        for i, name in enumerate(names)
    })
