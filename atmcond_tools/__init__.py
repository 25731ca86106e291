"""
# Atmospheric Conductance Tools

A toolkit for variance-based sensitivity analysis of the atmospheric
conductance model, providing functionality for:

- **Model Interface**: Abstract base class and the closed-form conductance model
- **Sampling**: Seeded unit-hypercube design matrices for Sobol estimation
- **Sensitivity Analysis**: First, total and second-order Sobol indices via SALib
- **Configuration Management**: Parameter spaces, scenarios and analysis settings
- **Results Analysis**: Index tables with confidence intervals and influence flags

## Main Components

- `Model`: Base class for model execution
- `AtmosphericConductanceModel`: Concrete conductance model
- `sampling`: Design matrix sampler
- `sa`: Sensitivity analysis pipeline
- `config`: Parameter spaces and reference scenarios
- `utils`: Distributions, results and significance policies

## Example Usage

```python
from atmcond_tools import AtmosphericConductanceModel
from atmcond_tools.sa import SensitivityAnalysis, SensitivityAnalysisConfig

config = SensitivityAnalysisConfig(samples=1000, seed=42)
sa = SensitivityAnalysis(AtmosphericConductanceModel(), config)
results = sa.run("results/")

results["scenario_a"].total_order
```
"""

from .model import *
