"""Sensitivity analysis implementation using Sobol indices.

This module runs variance-based global sensitivity analysis of a model over
one or more parameter scenarios using the SALib library. It computes
first-order, total-order and second-order Sobol indices with bootstrap
confidence intervals and reports them as sorted tables with an influence
flag.

The pipeline for a run is:
    1. Draw one shared unit-hypercube design (base matrices A and B)
    2. Per scenario, map the cross-sampled design through the inverse CDFs
    3. Evaluate the model on every row
    4. Estimate Sobol indices from the outputs with SALib

References:
    - Saltelli, A., et al. (2010). Variance based sensitivity analysis of
      model output. Design and estimator for the total sensitivity index
    - Sobol, I.M. (2001). Global sensitivity indices for nonlinear mathematical models

Typical usage example:

    from atmcond_tools import AtmosphericConductanceModel
    from atmcond_tools.sa import SensitivityAnalysis, SensitivityAnalysisConfig

    config = SensitivityAnalysisConfig(samples=1000, seed=42)
    sa = SensitivityAnalysis(AtmosphericConductanceModel(), config)
    results = sa.run("output_directory")
"""

# Model and config
from ..model import Model
from .config import SensitivityAnalysisConfig, SensitivityAnalysisProblem
from ..config.space import SpaceConfig
from ..sampling.design import Sampler, DesignMatrix
from ..utils.distributions import inverse_transform
from ..utils.results import SobolResults, StatsResults, index_table, pair_table
from ..utils.significance import InfluencePolicy, get_policy

# SALib
from SALib.analyze import sobol as asobol

# Plotting
import matplotlib.pyplot as plt
from scipy.stats import gaussian_kde

# Logging
import logging

# Data and saving
import numpy as np
import pandas as pd
import os


class SensitivityAnalysis:
    """Global sensitivity analysis using Sobol indices.

    Attributes:
        model (Model): The model to analyze. It is never modified.
        run_kwargs (dict): Keywords used for every model evaluation: the
            model's own `run_kwargs` with `zm_add` taken from the config.
        config (SensitivityAnalysisConfig): Validated analysis settings.
        policy (InfluencePolicy): Decides the `influential` column of every
            index table.

    Example:
        ```python
        sa = SensitivityAnalysis(AtmosphericConductanceModel(), config)
        results = sa.run()
        results["scenario_a"].total_order
        ```
    """

    def __init__(
        self,
        model: Model,
        config: SensitivityAnalysisConfig,
        policy: InfluencePolicy = None
    ):
        """Initialize the SensitivityAnalysis with model and configuration.

        Args:
            model (Model): The model instance to perform sensitivity analysis on.
            config (SensitivityAnalysisConfig): Analysis settings. Validated here.
            policy (InfluencePolicy, optional): Influence policy overriding the
                one named in the configuration.

        Raises:
            ValueError: If the configuration is invalid.
        """
        config.validate()
        self.model = model
        self.config = config
        self.policy = policy if policy is not None else get_policy(config.policy)
        self.run_kwargs = {**model.run_kwargs, "zm_add": config.zm_add}

    def _get_samples(self) -> DesignMatrix:
        """Draw the design matrix shared by every scenario."""
        logging.info("Retrieving base samples.")
        sampler = Sampler(
            self.config.names,
            seed=self.config.seed,
            engine=self.config.engine
        )
        return sampler.sample(self.config.samples)

    def _transform(self, design: DesignMatrix, space: SpaceConfig) -> pd.DataFrame:
        """Map the cross-sampled design onto one scenario's parameter values."""
        return inverse_transform(
            design.cross_sample(self.config.calc_second_order),
            space.get_search_space(),
            names=list(design.names)
        )

    def _check_outputs(self, outputs, expected: int) -> np.ndarray:
        """Apply the length precondition and the configured NaN policy.

        Args:
            outputs (array-like): Model outputs in design evaluation order.
            expected (int): Row count implied by the design.

        Returns:
            np.ndarray: Outputs ready for SALib.

        Raises:
            ValueError: If the length is wrong, or outputs are non-finite
                under the 'raise' policy.
        """
        outputs = np.asarray(outputs, dtype=float).ravel()
        if outputs.size != expected:
            raise ValueError(
                f"Model produced {outputs.size} outputs but the design requires {expected}"
            )

        bad = ~np.isfinite(outputs)
        if bad.any():
            msg = f"{int(bad.sum())} of {outputs.size} model outputs are not finite"
            match self.config.nan_policy:
                case "raise":
                    raise ValueError(msg)
                case "zero":
                    logging.warning(f"{msg}; replacing them with 0.")
                    outputs = np.nan_to_num(outputs, nan=0.0, posinf=0.0, neginf=0.0)
                case _:
                    logging.warning(f"{msg}; every index will be NaN.")

        return outputs

    def analyze(
        self,
        design: DesignMatrix,
        outputs,
        scenario: str = "scenario"
    ) -> SobolResults:
        """Compute Sobol indices from model outputs.

        Args:
            design (DesignMatrix): The design the outputs were produced from.
            outputs (array-like): One model output per cross-sampled row, in
                the design's evaluation order.
            scenario (str, optional): Label stored on the results.

        Returns:
            SobolResults: Sorted index tables and the raw SALib arrays.

        Raises:
            ValueError: If the outputs do not match the design's row count,
                or contain non-finite values under the 'raise' policy.
        """
        calc_second_order = self.config.calc_second_order
        outputs = self._check_outputs(
            outputs,
            design.num_evaluations(calc_second_order)
        )

        names = list(design.names)
        keys = ["S1", "S1_conf", "ST", "ST_conf"]
        if calc_second_order:
            keys += ["S2", "S2_conf"]

        # Non-finite outputs under 'propagate' invalidate every estimate
        if not np.isfinite(outputs).all():
            d = design.d
            raw = {k: np.full((d, d) if k.startswith("S2") else d, np.nan) for k in keys}
        else:
            problem = SensitivityAnalysisProblem.unit(design.names)

            logging.info(f"Analyzing Sobol indices for {scenario}.")
            si = asobol.analyze(
                problem.to_dict(),
                outputs,
                calc_second_order=calc_second_order,
                num_resamples=self.config.num_resamples,
                conf_level=self.config.conf_level,
                print_to_console=False,
                seed=self.config.seed,
            )
            raw = {k: np.asarray(si[k], dtype=float) for k in keys}

        return SobolResults(
            scenario=scenario,
            first_order=index_table(names, raw["S1"], raw["S1_conf"], self.policy),
            total_order=index_table(names, raw["ST"], raw["ST_conf"], self.policy),
            second_order=pair_table(
                names, raw["S2"], raw["S2_conf"], self.policy
            ) if calc_second_order else None,
            raw=raw,
        )

    def run_scenario(
        self,
        design: DesignMatrix,
        name: str,
        space: SpaceConfig
    ) -> tuple[pd.DataFrame, SobolResults]:
        """Transform, evaluate and analyze a single scenario.

        Args:
            design (DesignMatrix): Shared design.
            name (str): Scenario name.
            space (SpaceConfig): The scenario's parameter distributions.

        Returns:
            tuple: (evaluations, results) where evaluations holds the
                transformed parameters plus the model output column.
        """
        logging.info(f"Transforming samples for {name}.")
        params = self._transform(design, space)

        logging.info(f"Running model on {len(params)} samples for {name}.")
        evaluations = self.model.evaluate(params, **self.run_kwargs)

        results = self.analyze(
            design,
            evaluations[self.model.output_name].to_numpy(),
            scenario=name
        )
        return evaluations, results

    def run(self, out_dir: str = None) -> dict[str, SobolResults]:
        """Execute the complete sensitivity analysis workflow.

        Args:
            out_dir (str, optional): Directory for results. When given,
                'plots' and 'sa_results' subdirectories are created holding
                the PNG plots, the design matrices, each scenario's
                evaluations and its index tables as CSV. Defaults to None,
                in which case nothing is written.

        Returns:
            dict[str, SobolResults]: Results keyed by scenario name.

        Note:
            Scenarios run in configuration order. Any error aborts the run
            and nothing is saved for the failing scenario or those after it.
        """
        design = self._get_samples()

        evaluations = {}
        results = {}
        for name, space in self.config.scenarios.items():
            evaluations[name], results[name] = self.run_scenario(design, name, space)

        if out_dir is not None:
            plt_dir = os.path.join(out_dir, "plots")
            res_dir = os.path.join(out_dir, "sa_results")

            logging.info(f"Plots will be saved in: {plt_dir}")
            logging.info(f"Results will be saved in: {res_dir}")

            os.makedirs(plt_dir, exist_ok=True)
            os.makedirs(res_dir, exist_ok=True)

            self.save(design, evaluations, results, res_dir)
            self.plot(design, evaluations, results, plt_dir)

        return results

    def save(
        self,
        design: DesignMatrix,
        evaluations: dict[str, pd.DataFrame],
        results: dict[str, SobolResults],
        res_dir: str
    ):
        """Save the design, evaluations and index tables as CSV files.

        Layout:
        - {res_dir}/design_A.csv, {res_dir}/design_B.csv
        - {res_dir}/{scenario}/evaluations.csv
        - {res_dir}/{scenario}/first_order.csv, total_order.csv, second_order.csv
        - {res_dir}/summary.csv
        """
        logging.info("Saving results.")
        names = list(design.names)
        StatsResults({
            "design_A": pd.DataFrame(design.A, columns=names),
            "design_B": pd.DataFrame(design.B, columns=names),
            "summary": self.summary(results),
        }).save(res_dir)

        for name, res in results.items():
            scenario_dir = os.path.join(res_dir, name)
            res.save(scenario_dir)
            StatsResults({"evaluations": evaluations[name]}).save(scenario_dir)

    @staticmethod
    def summary(results: dict[str, SobolResults]) -> pd.DataFrame:
        """Stack every scenario's tables into one reporting DataFrame."""
        return pd.concat(
            [res.to_frame() for res in results.values()],
            ignore_index=True
        )

    def plot(
        self,
        design: DesignMatrix,
        evaluations: dict[str, pd.DataFrame],
        results: dict[str, SobolResults],
        plt_dir: str
    ):
        """Create descriptive plots of the samples, outputs and indices.

        Creates:
        - raw_samples.png: histograms of the unit-uniform base matrix A
        - {scenario}_parameters.png: histograms of transformed parameters
        - {scenario}_output_density.png: kernel density of the model output
        - {scenario}_output_vs_{param}.png: output against the parameter
          with the largest total-effect index
        - {scenario}_indices.png: first and total-order indices with
          confidence intervals
        """
        logging.info("Creating plots.")
        names = list(design.names)
        output = self.model.output_name

        fig, axes = plt.subplots(1, len(names), figsize=(4 * len(names), 4))
        for i, (ax, name) in enumerate(zip(np.atleast_1d(axes), names)):
            ax.hist(design.A[:, i], bins=30, color="grey", edgecolor="white")
            ax.set_title(f'Unit samples: {name}')
            ax.set_xlabel('u')
        np.atleast_1d(axes)[0].set_ylabel('Count')
        plt.tight_layout()
        plt.savefig(f"{plt_dir}/raw_samples.png")
        plt.close(fig)

        for scenario, table in evaluations.items():
            fig, axes = plt.subplots(1, len(names), figsize=(4 * len(names), 4))
            for ax, name in zip(np.atleast_1d(axes), names):
                ax.hist(table[name], bins=30, edgecolor="white")
                ax.set_title(f'{scenario}: {name}')
                ax.set_xlabel(name)
            plt.tight_layout()
            plt.savefig(f"{plt_dir}/{scenario}_parameters.png")
            plt.close(fig)

            y = table[output].to_numpy()
            y = y[np.isfinite(y)]
            fig = plt.figure(figsize=(10, 6))
            if y.size > 1 and np.ptp(y) > 0:
                grid = np.linspace(y.min(), y.max(), 200)
                plt.plot(grid, gaussian_kde(y)(grid))
            plt.title(f'Density of {output} ({scenario})')
            plt.xlabel(f'{output} (mm/s)')
            plt.ylabel('Density')
            plt.grid(True)
            plt.tight_layout()
            plt.savefig(f"{plt_dir}/{scenario}_output_density.png")
            plt.close(fig)

            top = results[scenario].top_parameter()
            fig = plt.figure(figsize=(10, 6))
            plt.scatter(table[top], table[output], s=4, alpha=0.5)
            plt.title(f'{output} vs {top} ({scenario})')
            plt.xlabel(top)
            plt.ylabel(f'{output} (mm/s)')
            plt.grid(True)
            plt.tight_layout()
            plt.savefig(f"{plt_dir}/{scenario}_output_vs_{top}.png")
            plt.close(fig)

            fig, axes = plt.subplots(2, 1, figsize=(10, 8), sharex=True)
            for ax, (order, tbl) in zip(axes, [
                ("First-Order", results[scenario].first_order),
                ("Total-Order", results[scenario].total_order),
            ]):
                tbl = tbl.set_index("parameter").loc[names]
                err = np.vstack([
                    tbl["index"] - tbl["ci_min"],
                    tbl["ci_max"] - tbl["index"]
                ])
                ax.bar(names, tbl["index"], yerr=err, capsize=4)
                ax.set_title(f'{order} Sobol Indices for {scenario}')
                ax.set_ylabel('Sobol Index')
                ax.grid(True)
            plt.tight_layout()
            plt.savefig(f"{plt_dir}/{scenario}_indices.png")
            plt.close(fig)
