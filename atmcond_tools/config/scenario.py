"""
# Scenario Definitions

Parameter order and the two reference vegetation scenarios analysed by the
package. Windspeed is in m/s and vegetation height in m; the displacement
(`kd`) and roughness (`ko`) scalars are dimensionless fractions of height.

- `scenario_a`: short vegetation (3.5 to 5.5 m) under stronger wind
- `scenario_b`: tall vegetation (9.5 to 10.5 m) under lighter wind
"""

from .space import SpaceConfig, DISTRIBUTIONS


PARAMETER_NAMES: tuple[str, ...] = ("windspeed", "height", "kd", "ko")
"""Fixed column order of every design matrix and parameter table."""

SCENARIOS: dict[str, dict] = {
    "scenario_a": {
        "windspeed": ["normal", [3.00, 0.50]],
        "height": ["uniform", [3.5, 5.5]],
        "kd": ["normal", [0.7, 0.007]],
        "ko": ["normal", [0.1, 0.001]],
    },
    "scenario_b": {
        "windspeed": ["normal", [2.50, 0.30]],
        "height": ["uniform", [9.5, 10.5]],
        "kd": ["normal", [0.7, 0.007]],
        "ko": ["normal", [0.1, 0.001]],
    },
}


def default_scenarios() -> dict[str, SpaceConfig]:
    """Build fresh SpaceConfig instances for the reference scenarios."""
    return {
        name: SpaceConfig.from_dict(DISTRIBUTIONS, data)
        for name, data in SCENARIOS.items()
    }
