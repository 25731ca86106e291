"""
# Influence Policies

Policies deciding whether a sensitivity index is reported as influential.
A policy takes the lower and upper confidence bounds of a set of indices and
returns one boolean per index. Policies only read the bounds, so they can be
swapped without touching index estimation.

## Functions

- `ci_excludes_zero`: Influential iff the confidence interval excludes zero
- `get_policy`: Look up a policy by name

## Example Usage

```python
from atmcond_tools.utils.significance import get_policy

policy = get_policy("ci_excludes_zero")
policy([0.1, -0.02], [0.3, 0.05])  # array([ True, False])
```
"""

import numpy as np
from typing import Callable


InfluencePolicy = Callable[[np.ndarray, np.ndarray], np.ndarray]
"""Type alias for a policy mapping (ci_min, ci_max) to influence flags."""


def ci_excludes_zero(ci_min, ci_max) -> np.ndarray:
    """
    Flag indices whose confidence interval lies entirely on one side of zero.

    Args:
        ci_min (array-like): Lower confidence bounds.
        ci_max (array-like): Upper confidence bounds.

    Returns:
        np.ndarray: Boolean array, True where ci_min > 0 or ci_max < 0.

    Note:
        This is a reporting convention, not a hypothesis test with a
        controlled error rate. NaN bounds are never influential.
    """
    ci_min = np.asarray(ci_min, dtype=float)
    ci_max = np.asarray(ci_max, dtype=float)
    return (ci_min > 0) | (ci_max < 0)


POLICIES: dict[str, InfluencePolicy] = {
    "ci_excludes_zero": ci_excludes_zero,
}


def get_policy(name: str) -> InfluencePolicy:
    """
    Look up an influence policy by name.

    Raises:
        ValueError: If the name is not registered in POLICIES.
    """
    policy = POLICIES.get(name.lower())
    if policy is None:
        raise ValueError(f"Unknown influence policy: {name}")
    return policy
