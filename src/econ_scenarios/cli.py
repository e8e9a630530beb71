"""
Command-line interface.

Usage
-----
    econ-scenarios calibrate vasicek1f rates.csv --column rate
    econ-scenarios calibrate iln spx.csv --column close --date-column date --prices
    econ-scenarios simulate vasicek2f --preset cas_rates_vas2f --years 10 --trials 500 --seed 1
    econ-scenarios simulate rsln params.json --years 5 --trials 100 --detail -o out.csv

Invalid input and unreadable data exit with status 2 after logging the error.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import pandas as pd

from econ_scenarios import __version__
from econ_scenarios.calibration.calibrator import Calibrator, ModelFamily
from econ_scenarios.calibration.equity import calibrate_iln_from_prices
from econ_scenarios.config.settings import SETTINGS
from econ_scenarios.data.loader import DataLoadError, load_series
from econ_scenarios.models.errors import InvalidInput
from econ_scenarios.models.params import PARAMS_BY_MODEL, PRESETS, ParameterSet, params_from_dict
from econ_scenarios.simulation.equity import EquitySimulator
from econ_scenarios.simulation.short_rate import ShortRateSimulator

logger = logging.getLogger(__name__)

#: Exit status for invalid input or unreadable data
EXIT_INVALID_INPUT = 2

SHORT_RATE_MODELS = ("vasicek1f", "vasicek2f", "cir1f")
EQUITY_MODELS = ("iln", "rsln")


# =============================================================================
# Parser
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with calibrate and simulate subcommands."""
    parser = argparse.ArgumentParser(
        prog="econ-scenarios",
        description="Calibrate and simulate economic scenarios",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    calibrate = subparsers.add_parser("calibrate", help="Fit a model to a historical series")
    calibrate.add_argument("model", choices=[m.value for m in ModelFamily])
    calibrate.add_argument("csv", type=Path, help="CSV file with a header row")
    calibrate.add_argument("--column", required=True, help="Column with the observations")
    calibrate.add_argument("--date-column", help="Column parsed as dates")
    calibrate.add_argument(
        "--dt", type=float, default=SETTINGS.calibration.dt, help="Observation step in years"
    )
    calibrate.add_argument("--shift", type=float, help="Level shift (cir1f only)")
    calibrate.add_argument(
        "--prices",
        action="store_true",
        help="Column holds prices; use month-end log-returns (iln only, needs --date-column)",
    )
    calibrate.add_argument(
        "--diagnostics", action="store_true", help="Include regression diagnostics"
    )

    simulate = subparsers.add_parser("simulate", help="Simulate scenarios from parameters")
    simulate.add_argument("model", choices=sorted(PARAMS_BY_MODEL))
    simulate.add_argument("params", nargs="?", type=Path, help="Parameter JSON file")
    simulate.add_argument("--preset", choices=sorted(PRESETS), help="Use a named preset")
    simulate.add_argument(
        "--years", type=float, default=SETTINGS.simulation.horizon_years, help="Horizon"
    )
    simulate.add_argument(
        "--trials", type=int, default=SETTINGS.simulation.n_trials, help="Number of trials"
    )
    simulate.add_argument("--seed", type=int, help="Run seed")
    simulate.add_argument(
        "--detail", action="store_true", help="Include the regime state (rsln only)"
    )
    simulate.add_argument("-o", "--output", type=Path, help="CSV output (default stdout)")

    return parser


# =============================================================================
# Commands
# =============================================================================


def _run_calibrate(args: argparse.Namespace) -> dict:
    if args.prices:
        if args.model != ModelFamily.ILN.value:
            raise InvalidInput("CRITICAL: --prices only applies to iln")
        if args.date_column is None:
            raise InvalidInput("CRITICAL: --prices needs --date-column")
        prices = load_series(args.csv, args.column, date_column=args.date_column)
        params = calibrate_iln_from_prices(prices)
        return {"model": ModelFamily.ILN.value, "params": params.to_dict()}

    series = load_series(args.csv, args.column, date_column=args.date_column)
    result = Calibrator(dt=args.dt).calibrate(args.model, series, shift=args.shift)
    if args.diagnostics:
        return result.to_dict()
    return {"model": result.model.value, "params": result.params.to_dict()}


def _load_params(args: argparse.Namespace) -> ParameterSet:
    if args.preset is not None:
        if args.params is not None:
            raise InvalidInput("CRITICAL: pass either a parameter file or --preset, not both")
        model, params = PRESETS[args.preset]
        if model != args.model:
            raise InvalidInput(f"CRITICAL: preset '{args.preset}' is a {model} parameter set")
        return params

    if args.params is None:
        raise InvalidInput("CRITICAL: a parameter file or --preset is required")
    try:
        with open(args.params) as f:
            data = json.load(f)
    except OSError as e:
        raise DataLoadError(f"CRITICAL: cannot read parameters from {args.params}: {e}") from e
    except json.JSONDecodeError as e:
        raise DataLoadError(f"CRITICAL: {args.params} is not valid JSON: {e}") from e

    # Accept the calibrate command's output as well as a bare parameter object
    if isinstance(data, dict) and "params" in data:
        data = data["params"]
    if not isinstance(data, dict):
        raise InvalidInput(f"CRITICAL: parameters in {args.params} must be a JSON object")
    return params_from_dict(args.model, data)


def _run_simulate(args: argparse.Namespace) -> pd.DataFrame:
    params = _load_params(args)
    if args.detail and args.model != "rsln":
        raise InvalidInput("CRITICAL: --detail only applies to rsln")

    if args.model in SHORT_RATE_MODELS:
        table = ShortRateSimulator().simulate(params, args.years, args.trials, seed=args.seed)
        return table.to_frame()

    scenarios = EquitySimulator().simulate(
        params, args.years, args.trials, seed=args.seed, detail=args.detail
    )
    return scenarios.to_frame()


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the ``econ-scenarios`` console script.

    Returns
    -------
    int
        0 on success, 2 on invalid input or unreadable data
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "calibrate":
            print(json.dumps(_run_calibrate(args), indent=2))
        else:
            frame = _run_simulate(args)
            if args.output is not None:
                frame.to_csv(args.output, index=False)
                logger.info(f"Wrote {len(frame)} records to {args.output}")
            else:
                frame.to_csv(sys.stdout, index=False)
    except (InvalidInput, DataLoadError) as e:
        logger.error(str(e))
        return EXIT_INVALID_INPUT

    return 0


if __name__ == "__main__":
    sys.exit(main())
