"""
# Utilities

This module provides utility functions and classes for probability
distributions, influence policies and results management in the
atmcond_tools package.

## Components

- **distributions**: SciPy distributions and the inverse-CDF transform
- **significance**: Policies flagging influential indices
- **results**: Index tables and CSV persistence

## Example Usage

```python
from atmcond_tools.utils.distributions import get_scipy_normal, inverse_transform
from atmcond_tools.utils.significance import ci_excludes_zero
from atmcond_tools.utils.results import index_table

windspeed = get_scipy_normal(loc=3.0, scale=0.5)
table = index_table(['windspeed'], [0.8], [0.05], policy=ci_excludes_zero)
```
"""
