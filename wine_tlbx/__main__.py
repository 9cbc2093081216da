"""Command-line entry point: ``python -m wine_tlbx`` / ``wine-tlbx``."""

import argparse
import logging
import sys
from collections.abc import Iterable
from pathlib import Path

from wine_tlbx.analysis.subset_selection import STRATEGIES
from wine_tlbx.config import AnalysisConfig
from wine_tlbx.errors import WineToolboxError
from wine_tlbx.pipeline import format_color_report, format_structure_report, run_pipeline


logger = logging.getLogger("wine_tlbx")


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="wine-tlbx",
        description="Subset selection, ridge/lasso and PCA on the red and white Wine Quality tables.",
    )
    p.add_argument("--data-dir", type=Path, default=None, help="Directory with winequality-{red,white}.csv")
    p.add_argument("--trials", type=int, default=30, help="Random train/test splits per evaluation")
    p.add_argument("--cv-folds", type=int, default=10, help="Folds of the penalty cross-validation")
    p.add_argument("--seed", type=int, default=0, help="Seed for splits and fold assignment")
    p.add_argument("--output-dir", type=Path, default=None, help="Save figures as PNG into this directory")
    p.add_argument(
        "--skip-exhaustive",
        action="store_true",
        help="Run only forward and backward search (exhaustive search fits 2^11 models per run)",
    )
    p.add_argument(
        "--no-pc-regression",
        action="store_true",
        help="Skip subset selection on principal-component scores",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return p


def main(argv: Iterable[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s: %(message)s")

    strategies = tuple(s for s in STRATEGIES if not (args.skip_exhaustive and s == "exhaustive"))
    try:
        config = AnalysisConfig(
            data_dir=args.data_dir,
            n_trials=args.trials,
            cv_folds=args.cv_folds,
            random_state=args.seed,
            strategies=strategies,
            run_pc_regression=not args.no_pc_regression,
            output_dir=args.output_dir,
        )
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        result = run_pipeline(config)
    except WineToolboxError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1

    for report in result.reports.values():
        print(format_color_report(report))
    print(format_structure_report(result.structure))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
