"""
# Configuration Management

This module provides configuration classes for parameter spaces and the
reference scenarios used throughout the atmcond_tools package.

## Components

- **SpaceConfig**: Configuration for parameter sampling spaces and distributions
- **Scenarios**: Fixed parameter order and the two reference scenarios

## Example Usage

```python
from atmcond_tools.config import SpaceConfig, DISTRIBUTIONS, default_scenarios

# Create parameter space configuration
space_config = SpaceConfig.from_dict(
    mapping=DISTRIBUTIONS,
    data={
        'windspeed': ['normal', [3.0, 0.5]],
        'height': ['uniform', [3.5, 5.5]]
    }
)

# Reference scenarios keyed by name
scenarios = default_scenarios()
```
"""

from .space import *
from .scenario import *
