"""
# Sensitivity Analysis

This module provides variance-based sensitivity analysis of the atmospheric
conductance model over the reference vegetation scenarios.

## Components

- `SensitivityAnalysis`: Sampling, transform, evaluation and Sobol estimation
- `SensitivityAnalysisConfig`: Settings for a run, loadable from JSON
- `SensitivityAnalysisProblem`: SALib problem definition

## Example Usage

```python
from atmcond_tools.sa import SensitivityAnalysis, SensitivityAnalysisConfig
from atmcond_tools import AtmosphericConductanceModel

# Load configuration
sa_config = SensitivityAnalysisConfig.from_json('sa_config.json')

# Setup sensitivity analysis
sa = SensitivityAnalysis(
    model=AtmosphericConductanceModel(),
    config=sa_config
)

# Run analysis, saving tables and plots
results = sa.run('results/')

# Get sensitivity indices
first_order = results['scenario_a'].first_order
total_order = results['scenario_a'].total_order
second_order = results['scenario_a'].second_order
```
"""

from .sa import *
from .config import *
