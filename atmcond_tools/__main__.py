"""
Run the atmospheric conductance sensitivity analysis.

Usage:
    python -m atmcond_tools --out results/
    python -m atmcond_tools --config sa_config.json --samples 2000 --seed 7
"""

import argparse
import logging

import pandas as pd

from atmcond_tools import AtmosphericConductanceModel
from atmcond_tools.sa import SensitivityAnalysis, SensitivityAnalysisConfig


def parse_args(argv=None):
    ap = argparse.ArgumentParser(
        prog="atmcond_tools",
        description="Sobol sensitivity analysis of atmospheric conductance."
    )
    ap.add_argument('--config', default=None, help='JSON configuration file (defaults are used otherwise)')
    ap.add_argument('--out', default=None, help='Directory for CSV tables and plots (nothing is written otherwise)')
    ap.add_argument('--samples', type=int, default=None, help='Base sample count N')
    ap.add_argument('--seed', type=int, default=None, help='Random seed')
    ap.add_argument('--quiet', action='store_true', help='Only log warnings')
    return ap.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s"
    )

    if args.config:
        config = SensitivityAnalysisConfig.from_json(args.config)
    else:
        config = SensitivityAnalysisConfig()
    if args.samples is not None:
        config.samples = args.samples
    if args.seed is not None:
        config.seed = args.seed

    sa = SensitivityAnalysis(AtmosphericConductanceModel(), config)
    results = sa.run(args.out)

    with pd.option_context("display.width", 120, "display.max_rows", None):
        for name, res in results.items():
            for order, table in res.tables().items():
                print(f"\n{name} - {order}")
                print(table.to_string(index=False, float_format="{:.4f}".format))

    return results


if __name__ == '__main__':
    main()
