"""
# Results Management

This module provides data structures for storing, reporting and saving the
Sobol indices computed by the sensitivity analysis.

## Functions

- `index_table`: Build a sorted index table with confidence bounds and flags
- `pair_table`: Same for second-order indices over unordered parameter pairs

## Classes

- `SobolResults`: First, total and second-order tables for one scenario
- `StatsResults`: Collection of named DataFrames saved as CSV files

## Example Usage

```python
from atmcond_tools.utils.results import index_table
from atmcond_tools.utils.significance import ci_excludes_zero

table = index_table(
    names=['windspeed', 'height'],
    estimates=[0.8, 0.15],
    conf=[0.05, 0.2],
    policy=ci_excludes_zero
)
#    parameter  index  ci_min  ci_max  influential
# 0  windspeed   0.80    0.75    0.85         True
# 1     height   0.15   -0.05    0.35        False
```
"""

from dataclasses import dataclass, field
from itertools import combinations
import pandas as pd
import numpy as np
import os

from .significance import InfluencePolicy, ci_excludes_zero


TABLE_COLUMNS = ["parameter", "index", "ci_min", "ci_max", "influential"]


def index_table(
    names: list[str],
    estimates,
    conf,
    policy: InfluencePolicy = ci_excludes_zero
) -> pd.DataFrame:
    """
    Build a reporting table for one order of Sobol indices.

    Args:
        names (list[str]): Row labels, one per index.
        estimates (array-like): Index estimates.
        conf (array-like): Half-widths of the bootstrap confidence interval.
        policy (InfluencePolicy, optional): Decides the `influential` column.
            Defaults to `ci_excludes_zero`.

    Returns:
        pd.DataFrame: Columns parameter, index, ci_min, ci_max, influential,
            sorted by descending index (NaN estimates last).
    """
    estimates = np.asarray(estimates, dtype=float)
    conf = np.asarray(conf, dtype=float)

    ci_min = estimates - conf
    ci_max = estimates + conf

    table = pd.DataFrame({
        "parameter": list(names),
        "index": estimates,
        "ci_min": ci_min,
        "ci_max": ci_max,
        "influential": np.asarray(policy(ci_min, ci_max), dtype=bool),
    }, columns=TABLE_COLUMNS)

    return table.sort_values(
        "index", ascending=False, na_position="last", kind="stable"
    ).reset_index(drop=True)


def pair_table(
    names: list[str],
    estimates,
    conf,
    policy: InfluencePolicy = ci_excludes_zero
) -> pd.DataFrame:
    """
    Build a reporting table for second-order indices.

    Args:
        names (list[str]): Parameter names, D of them.
        estimates (array-like): D x D matrix of second-order indices; only the
            upper triangle (j < k) is read.
        conf (array-like): D x D matrix of confidence half-widths.
        policy (InfluencePolicy, optional): Decides the `influential` column.

    Returns:
        pd.DataFrame: One row per unordered pair labelled "a:b", sorted by
            descending index.
    """
    estimates = np.asarray(estimates, dtype=float)
    conf = np.asarray(conf, dtype=float)

    pairs = list(combinations(range(len(names)), 2))
    return index_table(
        [f"{names[j]}:{names[k]}" for j, k in pairs],
        [estimates[j, k] for j, k in pairs],
        [conf[j, k] for j, k in pairs],
        policy=policy
    )


@dataclass
class SobolResults:
    """
    Sobol index tables for a single scenario.

    Attributes:
        scenario (str): Scenario name.
        first_order (pd.DataFrame): First-order index table.
        total_order (pd.DataFrame): Total-effect index table.
        second_order (pd.DataFrame | None): Second-order index table, None
            when second-order indices were not computed.
        raw (dict): The unmodified SALib result arrays (S1, ST, S2 and their
            `_conf` half-widths).

    Example:
        ```python
        res = results['scenario_a']
        res.top_parameter()           # 'windspeed'
        res.save('/results/scenario_a/')
        ```
    """
    scenario: str
    first_order: pd.DataFrame
    total_order: pd.DataFrame
    second_order: pd.DataFrame | None = None
    raw: dict = field(default_factory=dict, repr=False)

    def tables(self) -> dict[str, pd.DataFrame]:
        """Index tables keyed by order name, skipping missing ones."""
        tables = {
            "first_order": self.first_order,
            "total_order": self.total_order,
            "second_order": self.second_order,
        }
        return {k: v for k, v in tables.items() if v is not None}

    def top_parameter(self) -> str:
        """Name of the parameter with the largest total-effect index."""
        return self.total_order["parameter"].iloc[0]

    def to_frame(self) -> pd.DataFrame:
        """
        Stack all tables into one long DataFrame.

        Returns:
            pd.DataFrame: Table columns plus `scenario` and `order` columns.
        """
        frames = [
            table.assign(scenario=self.scenario, order=order)
            for order, table in self.tables().items()
        ]
        return pd.concat(frames, ignore_index=True)[
            ["scenario", "order"] + TABLE_COLUMNS
        ]

    def save(self, directory: str):
        """
        Save each index table to `<order>.csv` in the given directory.

        Args:
            directory (str): Destination directory; created if needed.
        """
        os.makedirs(directory, exist_ok=True)
        StatsResults(self.tables()).save(directory)


class StatsResults(dict[str, pd.DataFrame]):
    """
    Collection of named DataFrames saved together.

    Example:
        ```python
        stats = StatsResults({
            'evaluations': evaluated_df,
            'design_A': design_a_df
        })
        stats.save('/results/')  # evaluations.csv, design_A.csv
        ```
    """

    def save(self, directory: str):
        """
        Save all DataFrames to CSV files in the specified directory.

        Each DataFrame is saved as `<key>.csv` without row indices. The
        directory must already exist and existing files are overwritten.

        Args:
            directory (str): Path to the directory where CSV files will be saved.
        """
        [
            data.to_csv(
                os.path.join(directory, f"{stat}.csv"),
                index=False
            ) for stat, data in self.items()
        ]
