"""
# Sampling

This module provides the unit-hypercube designs consumed by the sensitivity
analysis.

## Components

- `Sampler`: Seeded generator of base matrices with selectable engine
- `DesignMatrix`: Immutable pair of base matrices A and B with the
  cross-sampled evaluation layout

## Example Usage

```python
from atmcond_tools.sampling import Sampler

design = Sampler(["windspeed", "height", "kd", "ko"], seed=42).sample(1000)
design.num_evaluations()        # 10000
X = design.cross_sample()       # (10000, 4), values in [0, 1]
```
"""

from .design import *
