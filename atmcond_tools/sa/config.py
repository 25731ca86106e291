"""Configuration classes for sensitivity analysis settings.

This module provides configuration classes for managing sensitivity analysis
parameters including problem definitions, scenarios and execution settings.
It supports serialization to and from JSON format for easy persistence and
loading of sensitivity analysis configurations.

The module includes the problem definition class for SALib compatibility and
the configuration used by the Sobol sensitivity analysis pipeline.

Typical usage example:

    from atmcond_tools.sa import SensitivityAnalysisConfig

    config = SensitivityAnalysisConfig.from_json("sa_config.json")
    config.samples = 4096
    config.to_json("updated_sa_config.json")
"""

from dataclasses import dataclass, asdict, field
from ..config.space import SpaceConfig, DISTRIBUTIONS
from ..config.scenario import PARAMETER_NAMES, default_scenarios
from ..sampling.design import ENGINES
from ..utils.significance import POLICIES
import numbers
import json


NAN_POLICIES = ("raise", "propagate", "zero")


def _is_real(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_int(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


@dataclass
class SensitivityAnalysisProblem:
    """Problem definition for sensitivity analysis using SALib.

    The Sobol analysis only reads the parameter names and their count; the
    bounds describe the unit hypercube because distributions are applied by
    the package before the model runs.

    Attributes:
        num_vars (int): Number of variables (parameters) in the problem.
        names (list[str]): Parameter names in design column order.
        bounds (list[list[float]]): [min, max] bounds for each parameter.

    Example:
        ```python
        problem = SensitivityAnalysisProblem.unit(["windspeed", "height"])
        problem.to_dict()
        # {'num_vars': 2, 'names': [...], 'bounds': [[0.0, 1.0], [0.0, 1.0]]}
        ```
    """

    num_vars: int
    names: list[str]
    bounds: list[list[float]]

    @classmethod
    def unit(cls, names):
        """Problem over the unit hypercube for the given parameter names."""
        names = list(names)
        return cls(
            num_vars=len(names),
            names=names,
            bounds=[[0.0, 1.0] for _ in names]
        )

    def to_dict(self):
        """Convert the problem definition to a dictionary format.

        Returns:
            dict: Dictionary with keys 'num_vars', 'names', and 'bounds'
                suitable for SALib functions.
        """
        return asdict(self)


@dataclass
class SensitivityAnalysisConfig:
    """Configuration class for sensitivity analysis execution settings.

    Attributes:
        samples (int): Number of base rows N in each design matrix. The model
            runs N * (2D + 2) times per scenario with second-order indices.
        seed (int): Seed for the sampler and the bootstrap.
        num_resamples (int): Bootstrap resamples for confidence intervals.
        conf_level (float): Confidence level of the intervals, in (0, 1).
        calc_second_order (bool): Whether to compute second-order indices.
        engine (str): Sampling engine, one of 'random', 'sobol', 'latin',
            'halton'.
        nan_policy (str): What to do with non-finite model outputs: 'raise',
            'propagate' (warn and report NaN indices) or 'zero' (warn and replace
            with 0).
        zm_add (float): Windspeed measurement height above vegetation (m).
        policy (str): Name of the influence policy used in the tables.
        names (list[str]): Parameter names in design column order.
        scenarios (dict[str, SpaceConfig]): Scenario name to parameter space.

    Example:
        ```python
        config = SensitivityAnalysisConfig(samples=1024, engine="sobol")
        config.validate()
        config.to_json("sa_config.json")
        ```
    """

    samples: int = 1000
    seed: int = 42
    num_resamples: int = 100
    conf_level: float = 0.95
    calc_second_order: bool = True
    engine: str = "random"
    nan_policy: str = "raise"
    zm_add: float = 2.0
    policy: str = "ci_excludes_zero"
    names: list[str] = field(default_factory=lambda: list(PARAMETER_NAMES))
    scenarios: dict[str, SpaceConfig] = field(default_factory=default_scenarios)

    def validate(self):
        """Check the configuration before any sampling happens.

        Raises:
            ValueError: On a value of the wrong type, a non-positive sample
                or resample count, a negative seed, a confidence level
                outside (0, 1), an unknown engine, NaN policy or influence
                policy, no scenarios, or a scenario that does not define
                every parameter.
        """
        if not (_is_int(self.samples) and self.samples > 0):
            raise ValueError(f"samples must be a positive integer, got {self.samples!r}")
        if not (_is_int(self.seed) and self.seed >= 0):
            raise ValueError(f"seed must be a non-negative integer, got {self.seed!r}")
        if not (_is_int(self.num_resamples) and self.num_resamples > 0):
            raise ValueError(f"num_resamples must be a positive integer, got {self.num_resamples!r}")
        if not (_is_real(self.conf_level) and 0 < self.conf_level < 1):
            raise ValueError(f"conf_level must lie in (0, 1), got {self.conf_level!r}")
        if not _is_real(self.zm_add):
            raise ValueError(f"zm_add must be a number, got {self.zm_add!r}")
        if not isinstance(self.calc_second_order, bool):
            raise ValueError(f"calc_second_order must be a boolean, got {self.calc_second_order!r}")
        if self.engine not in ENGINES:
            raise ValueError(f"Unknown sampling engine: {self.engine!r}")
        if self.nan_policy not in NAN_POLICIES:
            raise ValueError(f"Unknown nan_policy: {self.nan_policy!r}")
        if not isinstance(self.policy, str) or self.policy.lower() not in POLICIES:
            raise ValueError(f"Unknown influence policy: {self.policy!r}")
        if not self.names:
            raise ValueError("At least one parameter name is required")
        if not self.scenarios:
            raise ValueError("At least one scenario is required")

        for name, space in self.scenarios.items():
            missing = [p for p in self.names if p not in space]
            if missing:
                raise ValueError(f"Scenario '{name}' has no distribution for {missing}")

    @classmethod
    def from_json(cls, infile: str):
        """Create a SensitivityAnalysisConfig instance from a JSON file.

        Keys missing from the file keep their defaults. Scenarios are given
        as `{"scenario": {"param": ["normal", [mean, sd]], ...}}`.

        Args:
            infile (str): Path to the JSON configuration file.

        Returns:
            SensitivityAnalysisConfig: A validated configuration.

        Raises:
            FileNotFoundError: If the specified file does not exist.
            json.JSONDecodeError: If the file contains invalid JSON.
            TypeError: If the file holds unknown keys.
            ValueError: If any setting or distribution is invalid.

        Example:
            ```python
            config = SensitivityAnalysisConfig.from_json("sa_config.json")
            print(f"Running SA with {config.samples} samples")
            ```
        """

        with open(infile, "r") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"{infile} must hold a JSON object")

        # Convert nested dictionaries to proper config instances
        if "scenarios" in data:
            if not isinstance(data["scenarios"], dict):
                raise ValueError("scenarios must map names to parameter spaces")
            data["scenarios"] = {
                name: SpaceConfig.from_dict(DISTRIBUTIONS, space)
                for name, space in data["scenarios"].items()
            }
        config = cls(**data)
        config.validate()
        return config

    def to_dict(self):
        """Convert the configuration to a JSON-serializable dictionary."""
        data = {k: v for k, v in self.__dict__.items() if k != "scenarios"}
        data["names"] = list(self.names)
        data["scenarios"] = {
            name: space.to_dict() for name, space in self.scenarios.items()
        }
        return data

    def to_json(self, outfile: str):
        """Serialize the configuration to a JSON file.

        Args:
            outfile (str): Path to the output file.

        Raises:
            FileExistsError: If the specified file already exists.

        Note:
            The file is opened in exclusive creation mode ("+x") to prevent
            accidental overwrites.
        """
        with open(outfile, "+x") as f:
            json.dump(self.to_dict(), f, indent=4)
