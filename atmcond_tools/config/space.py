"""
# Parameter Space Configuration

This module provides configuration classes for defining the probability
distribution of each model parameter within a scenario.

## Classes

- `SampleSpace`: Container for a distribution factory and its parameters
- `SpaceConfig`: Configuration for multiple parameter sampling spaces

## Example Usage

```python
from atmcond_tools.config.space import SpaceConfig, DISTRIBUTIONS

space_config = SpaceConfig.from_dict(DISTRIBUTIONS, {
    'windspeed': ['normal', [3.0, 0.5]],
    'height': ['uniform', [3.5, 5.5]]
})

# Frozen SciPy distributions ready for inverse-CDF sampling
search_space = space_config.get_search_space()
```
"""

from atmcond_tools.utils.distributions import (
    get_scipy_normal,
    get_scipy_uniform
)
from typing import Callable
from inspect import signature

from dataclasses import dataclass


DISTRIBUTIONS: dict[str, Callable] = {
    "normal": get_scipy_normal,
    "uniform": get_scipy_uniform
}
"""Supported distribution kinds mapped to their SciPy factories."""


@dataclass
class SampleSpace:
    """
    Container for a distribution factory and its parameters.

    Attributes:
        kind (str): Name of the distribution (e.g. 'normal').
        distribution (Callable): Factory returning a frozen SciPy distribution.
        parameters (tuple[float]): Positional arguments for the factory.

    Example:
        ```python
        space = SampleSpace('uniform', get_scipy_uniform, (3.5, 5.5))
        dist_fn, params = space.unpack()
        dist = dist_fn(*params)
        ```
    """
    kind: str
    distribution: Callable
    parameters: tuple[float]

    def unpack(self):
        """
        Unpack the distribution and parameters.

        Returns:
            tuple: (distribution_factory, parameters_tuple) ready for instantiation.
        """
        return (self.distribution, self.parameters)

    def to_list(self):
        """Serializable [kind, parameters] pair, the inverse of `from_dict` input."""
        return [self.kind, list(self.parameters)]


class SpaceConfig(dict[str, SampleSpace]):
    """
    Configuration for multiple parameter sampling spaces.

    Keys are parameter names and values are SampleSpace instances. Insertion
    order is preserved but carries no meaning; the sampler's parameter order
    decides column order.

    Example:
        ```python
        space_config = SpaceConfig.from_dict(DISTRIBUTIONS, {
            'kd': ['normal', [0.7, 0.007]],
            'ko': ['normal', [0.1, 0.001]]
        })
        space_config.to_dict()
        # {'kd': ['normal', [0.7, 0.007]], 'ko': ['normal', [0.1, 0.001]]}
        ```
    """

    @classmethod
    def from_dict(cls, mapping: dict[str, Callable], data: dict):
        """
        Create a SpaceConfig from a distribution mapping and configuration data.

        Args:
            mapping (dict[str, Callable]): Dictionary mapping distribution names
                to factories returning frozen SciPy distributions.
            data (dict): Keys are parameter names and values are lists of
                [distribution_name, parameters].

        Returns:
            SpaceConfig: Configured instance with parameter spaces.

        Raises:
            ValueError: If a distribution type is not found in mapping, the
                entry is malformed, or the parameters do not fit the factory.

        Note:
            Parameters are validated eagerly by building each distribution
            once, so a malformed configuration fails before any sampling.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Space must map parameter names to entries, got {data!r}")

        space_config = {}
        for k, v in data.items():
            if not isinstance(v, (list, tuple)) or len(v) != 2:
                raise ValueError(f"Malformed space entry for '{k}': {v}")
            if not isinstance(v[1], (list, tuple)):
                raise ValueError(f"Parameters for '{k}' must be a list, got {v[1]!r}")
            dist_type = str(v[0]).lower()
            try:
                params = tuple(float(p) for p in v[1])
            except (TypeError, ValueError) as err:
                raise ValueError(f"Non-numeric parameters for '{k}': {v[1]!r}") from err
            if dist_type not in mapping:
                raise ValueError(f"Unknown distribution type: {dist_type}")

            expected = len(signature(mapping[dist_type]).parameters)
            if len(params) != expected:
                raise ValueError(
                    f"Distribution '{dist_type}' for '{k}' takes {expected} "
                    f"parameters, got {len(params)}"
                )
            mapping[dist_type](*params)

            space_config[k] = SampleSpace(
                kind=dist_type,
                distribution=mapping[dist_type],
                parameters=params
            )
        return cls(space_config)

    def to_dict(self):
        """
        Convert the space back to its `from_dict` representation.

        Returns:
            dict: Parameter name to [distribution_name, parameters] lists.
        """
        return {k: v.to_list() for k, v in self.items()}

    def get_search_space(self):
        """
        Instantiate the configured distributions.

        Returns:
            dict[str, rv_frozen]: Parameter names mapped to frozen SciPy
                distributions exposing `ppf`.
        """
        space = {}
        for param_name, samplespace in self.items():
            sampler, parameters = samplespace.unpack()
            space[param_name] = sampler(*parameters)

        return space
