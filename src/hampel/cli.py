"""Command line entry point: Hampel filter columns of a CSV file."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import numpy as np
import pandas as pd

from hampel.config import (
    DEFAULT_SETTINGS,
    NON_FINITE_POLICIES,
    REPLACEMENT_MODES,
    SUPPORTED_DTYPES,
    FilterSettings,
)
from hampel.pipeline import filter_dataframe

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hampel-filter",
        description="Replace outliers in CSV columns with a sequential Hampel filter.",
    )
    parser.add_argument("input", type=Path, help="CSV file to read")
    parser.add_argument(
        "-c",
        "--column",
        action="append",
        required=True,
        help="Column to filter (repeat for several columns)",
    )
    parser.add_argument(
        "-w", "--window-size", type=int, default=DEFAULT_SETTINGS.window_size
    )
    parser.add_argument(
        "--init-value",
        type=float,
        default=DEFAULT_SETTINGS.init_value,
        help="Value the window is filled with before the first sample",
    )
    parser.add_argument(
        "-k",
        "--n-sigma",
        type=float,
        default=DEFAULT_SETTINGS.n_sigma,
        help="Threshold in units of the robust sigma",
    )
    parser.add_argument(
        "--dtype",
        choices=[np.dtype(t).name for t in SUPPORTED_DTYPES],
        default=DEFAULT_SETTINGS.dtype,
    )
    parser.add_argument(
        "--replacement", choices=REPLACEMENT_MODES, default=DEFAULT_SETTINGS.replacement
    )
    parser.add_argument(
        "--non-finite", choices=NON_FINITE_POLICIES, default=DEFAULT_SETTINGS.non_finite
    )
    parser.add_argument(
        "-o", "--output", type=Path, default=None, help="Output CSV (stdout if omitted)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = FilterSettings(
            window_size=args.window_size,
            init_value=args.init_value,
            n_sigma=args.n_sigma,
            dtype=args.dtype,
            replacement=args.replacement,
            non_finite=args.non_finite,
        )
        data = pd.read_csv(args.input)
        result = filter_dataframe(data, args.column, settings)
    except (OSError, ValueError, KeyError) as err:
        LOGGER.error(f"hampel-filter failed: {err}")
        return 2

    if args.output is None:
        result.to_csv(sys.stdout, index=False)
    else:
        result.to_csv(args.output, index=False)
        LOGGER.info(f"Saved filtered data to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
