"""Shared plotting configuration (style, palettes, font sizes)."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import matplotlib as mpl
import plotly.io as pio
import seaborn as sns


_RC_KEYS = (
    "axes.titlesize",
    "axes.labelsize",
    "xtick.labelsize",
    "ytick.labelsize",
    "figure.dpi",
    "axes.prop_cycle",
    "font.family",
)


@dataclass
class PlottingConfig:
    """Plotting style shared by every figure of the toolbox.

    ``wine_palette`` fixes the colour of each wine type so red and white
    keep their colours across matplotlib, seaborn and plotly figures;
    ``strategy_palette`` does the same for the subset-search strategies.
    """

    style: str = "whitegrid"
    palette: str | list[str] = "tab10"
    wine_palette: dict[str, str] = field(default_factory=lambda: {"red": "#8c1c13", "white": "#d4b483"})
    strategy_palette: dict[str, str] = field(
        default_factory=lambda: {"exhaustive": "#1f77b4", "forward": "#2ca02c", "backward": "#ff7f0e"},
    )
    heatmap_cmap: str = "Blues"
    diverging_cmap: str = "coolwarm"
    font_family: str = "DejaVu Sans"
    font_scale: float = 1.0
    title_size: int = 14
    label_size: int = 12
    tick_size: int = 10
    figure_dpi: int = 100
    context: str = "notebook"
    plotly_template: str = "plotly_white"
    seaborn_kwargs: dict[str, Any] = field(default_factory=dict)

    def _rc(self) -> dict[str, Any]:
        return {
            "axes.titlesize": self.title_size,
            "axes.labelsize": self.label_size,
            "xtick.labelsize": self.tick_size,
            "ytick.labelsize": self.tick_size,
            "figure.dpi": self.figure_dpi,
            "axes.prop_cycle": mpl.cycler(color=sns.color_palette(self.palette)),
            "font.family": [self.font_family],
        }

    def apply_global(self) -> None:
        """Apply the style globally (no automatic restore); use :meth:`apply` for a temporary style."""
        sns.set_theme(
            style=self.style,
            palette=sns.color_palette(self.palette),
            context=self.context,
            font_scale=self.font_scale,
            **self.seaborn_kwargs,
        )
        mpl.rcParams.update(self._rc())
        pio.templates.default = self.plotly_template

    @contextmanager
    def apply(self) -> Generator[None]:
        """Apply the style within a context, restoring the previous rcParams and plotly template afterwards."""
        prev = {k: mpl.rcParams[k] for k in _RC_KEYS}
        prev_template = pio.templates.default
        self.apply_global()
        try:
            yield
        finally:
            pio.templates.default = prev_template
            mpl.rcParams.update(prev)

    def wine_color(self, wine_type: str) -> str:
        """Colour of one wine type (falls back to grey for unknown labels)."""
        return self.wine_palette.get(str(wine_type), "#7f7f7f")


# Default configuration used across plotting functions
DEFAULT_PLOT_CFG = PlottingConfig()


__all__ = ["DEFAULT_PLOT_CFG", "PlottingConfig"]
