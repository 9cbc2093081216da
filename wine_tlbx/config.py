"""Run configuration of the analysis pipeline."""

from dataclasses import dataclass, field
from pathlib import Path

from wine_tlbx.analysis.regularization import PENALTIES, Penalty
from wine_tlbx.analysis.subset_selection import STRATEGIES, Strategy
from wine_tlbx.data.outliers import DEFAULT_THRESHOLDS, OutlierThresholds
from wine_tlbx.data.wine_columns import WineColor


@dataclass(frozen=True)
class AnalysisConfig:
    """Knobs of one pipeline run.

    Attributes:
        data_dir: Directory holding ``winequality-red.csv`` and ``winequality-white.csv``
            (``None`` uses the project's ``_data`` directory).
        n_trials: Random half/half splits for every resampled evaluation.
        cv_folds: Folds of the penalty cross-validation.
        n_lambdas: Size of the penalty grid.
        lambda_min_ratio: Smallest grid penalty as a fraction of the largest.
        random_state: Seed of every random split and fold assignment.
        strategies: Subset-search strategies to run.
        penalties: Penalized regressions to run.
        thresholds: Outlier bounds per colour.
        run_pc_regression: Also rerun selection on principal-component scores.
        output_dir: If set, figures are written there as PNG.
    """

    data_dir: Path | None = None
    n_trials: int = 30
    cv_folds: int = 10
    n_lambdas: int = 100
    lambda_min_ratio: float = 1e-4
    random_state: int | None = 0
    strategies: tuple[Strategy, ...] = STRATEGIES
    penalties: tuple[Penalty, ...] = PENALTIES
    thresholds: dict[WineColor, OutlierThresholds] = field(default_factory=lambda: dict(DEFAULT_THRESHOLDS))
    run_pc_regression: bool = True
    output_dir: Path | None = None

    def __post_init__(self) -> None:
        if self.n_trials < 1:
            raise ValueError("n_trials must be >= 1")
        if self.cv_folds < 2:
            raise ValueError("cv_folds must be >= 2")
        if self.n_lambdas < 2:
            raise ValueError("n_lambdas must be >= 2")
        if not 0.0 < self.lambda_min_ratio < 1.0:
            raise ValueError("lambda_min_ratio must lie in (0, 1)")
        unknown_penalties = [p for p in self.penalties if p not in PENALTIES]
        if not self.penalties or unknown_penalties:
            raise ValueError(f"Unknown or empty penalties {list(self.penalties)}; choose from {PENALTIES}")
        if not self.strategies:
            raise ValueError("At least one subset-search strategy is required.")
        unknown = [s for s in self.strategies if s not in STRATEGIES]
        if unknown:
            raise ValueError(f"Unknown strategies {unknown}; choose from {STRATEGIES}")
