"""
# Model Interface and Atmospheric Conductance Implementation

This module provides the abstract model interface used by the sensitivity
analysis and its concrete implementation for atmospheric conductance, the
rate of turbulent exchange between a vegetation surface and the atmosphere.

## Classes

- `Model`: Abstract base class defining the interface for all models
- `AtmosphericConductanceModel`: Closed-form conductance model

## Functions

- `atmospheric_conductance`: Vectorised conductance formula

## Example Usage

```python
from atmcond_tools import AtmosphericConductanceModel, atmospheric_conductance
import pandas as pd

# Single evaluation (mm/s)
atmospheric_conductance(v=3.0, h=4.5, kd=0.7, ko=0.1)  # ~119.1

# Evaluate a parameter table
X = pd.DataFrame({
    'windspeed': [3.0, 2.5],
    'height': [4.5, 10.0],
    'kd': [0.7, 0.7],
    'ko': [0.1, 0.1]
})
model = AtmosphericConductanceModel(run_kwargs={'zm_add': 2.0})
evaluated = model.evaluate(X)  # X plus a 'conductance' column
```
"""

# Basic data utils
import pandas as pd
import numpy as np
from typing import Callable
from numpy.typing import ArrayLike
from abc import abstractmethod, ABC
from functools import partial


def atmospheric_conductance(v, h, zm_add=2.0, kd=0.7, ko=0.1):
    """
    Compute atmospheric conductance from windspeed and vegetation height.

    Args:
        v (ArrayLike): Windspeed measured at `zm_add` above the vegetation (m/s).
        h (ArrayLike): Vegetation height (m).
        zm_add (ArrayLike, optional): Height of the windspeed measurement
            above the vegetation (m). Defaults to 2.0.
        kd (ArrayLike, optional): Displacement scalar. Defaults to 0.7.
        ko (ArrayLike, optional): Roughness scalar. Defaults to 0.1.

    Returns:
        float | np.ndarray: Atmospheric conductance in mm/s. Scalar inputs
            return a float, array inputs broadcast to an array.

    Formula:
        zd = max(kd * h, 0), zo = ko * h, zm = h + zm_add

        Ca = 1000 * v / (6.25 * ln((zm - zd) / zo)^2) when zo > 0, else 0

    Note:
        - A non-positive roughness length (zo <= 0) gives exactly 0.
        - The displacement height is clamped at 0 from below only. When
          zd >= zm the logarithm is undefined and the result is NaN (or 0
          when zd == zm); no exception is raised.
        - Windspeed and height pass through unclamped.
    """
    v, h, zm_add, kd, ko = np.broadcast_arrays(
        *(np.asarray(x, dtype=float) for x in (v, h, zm_add, kd, ko))
    )

    zd = np.maximum(kd * h, 0.0)
    zo = ko * h
    zm = h + zm_add

    # Domain warnings are expected for zo <= 0 and zd >= zm
    with np.errstate(divide="ignore", invalid="ignore"):
        ca = np.where(
            zo > 0,
            v / (6.25 * np.log((zm - zd) / zo) ** 2),
            0.0
        )

    # m/s to mm/s
    ca = ca * 1000

    if ca.ndim == 0:
        return float(ca)
    return ca


class Model(ABC):
    """
    Abstract base class for models analysed by the package.

    A model maps a table of parameter samples (one row per sample, one column
    per parameter) onto one scalar output per row.

    Attributes:
        run_kwargs (dict): Keyword arguments passed to model execution methods.
        output_name (str): Name of the column appended by `evaluate`.

    Example:
        ```python
        class MyModel(Model):
            output_name = 'y'

            @staticmethod
            def run(X=None, **kwargs):
                return X['a'].to_numpy() * 2
        ```
    """
    output_name: str = "output"

    def __init__(
            self,
            run_kwargs: dict = None,
    ):
        """
        Initialize the Model instance.

        Args:
            run_kwargs (dict, optional): Keyword arguments for model execution.
                Defaults to an empty dict.
        """
        self.run_kwargs = run_kwargs if run_kwargs is not None else {}

    @staticmethod
    @abstractmethod
    def run(X: pd.DataFrame = None, *args, **kwargs) -> ArrayLike:
        """
        Execute the model over every row of a parameter table.

        Args:
            X (pd.DataFrame, optional): Parameter samples, one column per parameter.
            *args: Variable length argument list for additional model inputs.
            **kwargs: Arbitrary keyword arguments for model configuration.

        Returns:
            ArrayLike: One output per row of X, in row order.
        """
        pass

    def get_objective(
        self,
        **overrides
    ) -> Callable:
        """
        Create a partial function for model execution with predefined kwargs.

        Args:
            **overrides: Run keywords that take precedence over `run_kwargs`
                for this objective only.

        Returns:
            Callable: Partial function with run_kwargs applied to the run method.

        Example:
            ```python
            model = AtmosphericConductanceModel(run_kwargs={'zm_add': 2.0})
            objective = model.get_objective()
            y = objective(X=params)  # zm_add is automatically passed
            ```
        """
        return partial(
            self.run,
            **{**self.run_kwargs, **overrides}
        )

    def evaluate(self, X: pd.DataFrame, **overrides) -> pd.DataFrame:
        """
        Run the model and append its output to a copy of the parameters.

        Args:
            X (pd.DataFrame): Parameter samples.
            **overrides: Run keywords replacing `run_kwargs` for this call.

        Returns:
            pd.DataFrame: Copy of X with an `output_name` column added.
        """
        evaluated = X.copy()
        evaluated[self.output_name] = np.asarray(self.get_objective(**overrides)(X=X), dtype=float)
        return evaluated


class AtmosphericConductanceModel(Model):
    """
    Atmospheric conductance model over windspeed, height, kd and ko.

    Parameter columns are mapped onto the arguments of
    `atmospheric_conductance` through `PARAMETER_MAP`. The measurement
    height offset is a fixed run keyword (`zm_add`, default 2.0 m).

    Example:
        ```python
        model = AtmosphericConductanceModel()
        y = model.run(X=params)                # np.ndarray in mm/s
        table = model.evaluate(params)         # params + 'conductance'
        ```
    """
    output_name: str = "conductance"

    PARAMETER_MAP: dict[str, str] = {
        "windspeed": "v",
        "height": "h",
        "kd": "kd",
        "ko": "ko",
    }

    @staticmethod
    def run(X: pd.DataFrame = None, zm_add: float = 2.0, **kwargs) -> np.ndarray:
        """
        Evaluate conductance for every row of X.

        Args:
            X (pd.DataFrame): Must hold 'windspeed' and 'height' columns;
                'kd' and 'ko' are optional and fall back to the formula defaults.
            zm_add (float, optional): Measurement height above vegetation (m).
                Defaults to 2.0.
            **kwargs: Ignored; accepted so shared run kwargs can be passed through.

        Returns:
            np.ndarray: Conductance in mm/s, one value per row.

        Raises:
            ValueError: If X lacks a windspeed or height column.
        """
        missing = [c for c in ("windspeed", "height") if c not in X.columns]
        if missing:
            raise ValueError(f"Parameter table is missing column(s): {missing}")

        args = {
            arg: X[col].to_numpy(dtype=float)
            for col, arg in AtmosphericConductanceModel.PARAMETER_MAP.items()
            if col in X.columns
        }
        return np.atleast_1d(atmospheric_conductance(zm_add=zm_add, **args))
