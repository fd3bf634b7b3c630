from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import plotly.express as px
import plotly.graph_objects as go

from de_browser.core.chart import ChartRenderer, ChartSettings
from de_browser.core.filter_state import BASE_MEAN, LOG2_FOLD_CHANGE
from de_browser.core.records import Record
from de_browser.core.selection import AxisMapping, BrushExtent

logger = logging.getLogger(__name__)

HIGHLIGHT_COLORS: List[str] = list(px.colors.qualitative.D3)

UP_COLOR = "red"
DOWN_COLOR = "blue"
NOT_SIGNIFICANT_COLOR = "lightgray"

POINTS_TRACE = "points"
HIGHLIGHT_TRACE = "highlighted"
DENSITY_TRACE = "density"


def _identity(v: float) -> float:
    return v


# dimension -> (axis title, attribute, to-axis, from-axis)
_AXES: Dict[str, Tuple[str, str, Callable[[np.ndarray], np.ndarray], Callable[[float], float]]] = {
    BASE_MEAN: ("log10(Base Mean)", "base_mean", np.log10, lambda v: 10 ** v),
    LOG2_FOLD_CHANGE: ("log2(Fold Change)", "log2_fold_change", _identity, _identity),
}


class ScatterChartRenderer(ChartRenderer):
    """
    Plotly MA-style chart: x = log10(baseMean), y = log2FoldChange by default.

    Modes:
    - "scatter": every point drawn, significant ones coloured up/down
    - "hex": 2-D density of every point, with only significant or
      highlighted points drawn on top

    `figure` is the current plotly figure; `revision` increments whenever
    draw() or update_points() changes it, so a UI can skip unchanged ticks.
    """

    def __init__(self, mapping: AxisMapping = AxisMapping(), height: int = 500) -> None:
        self.mapping = mapping
        self.height = height
        self.settings = ChartSettings()
        self.records: List[Record] = []
        self.figure: go.Figure = self.empty_figure("No dataset loaded")
        self.revision = 0

    # ------------------------------------------------------------------
    # ChartRenderer
    # ------------------------------------------------------------------
    def configure(self, settings: ChartSettings) -> None:
        self.settings = settings

    def draw(self, records: Sequence[Record]) -> None:
        self.records = list(records)
        self.revision += 1

        if not self.records:
            self.figure = self.empty_figure("No data to show")
            return

        x, y = self._coordinates(self.records)
        x_title = _AXES[self.mapping.x][0]
        y_title = _AXES[self.mapping.y][0]

        fig = go.Figure()
        if self.settings.plot_mode == "hex":
            fig.add_trace(
                go.Histogram2d(
                    x=x,
                    y=y,
                    name=DENSITY_TRACE,
                    colorscale="Greys",
                    showscale=False,
                    nbinsx=60,
                    nbinsy=60,
                    hoverinfo="skip",
                )
            )

        fig.add_trace(
            go.Scattergl(
                x=x,
                y=y,
                mode="markers",
                name=POINTS_TRACE,
                customdata=[r.symbol for r in self.records],
                hovertemplate="%{customdata}<br>%{x:.2f}, %{y:.2f}<extra></extra>",
                marker=dict(size=5),
            )
        )
        fig.add_trace(
            go.Scattergl(
                x=[],
                y=[],
                mode="markers+text",
                name=HIGHLIGHT_TRACE,
                textposition="top center",
                marker=dict(size=9, line=dict(width=1, color="black")),
                hoverinfo="text",
            )
        )

        fig.update_layout(
            height=self.height,
            margin=dict(t=10, r=30, b=30, l=40),
            xaxis_title=x_title,
            yaxis_title=y_title,
            dragmode="select",
            showlegend=False,
            # keep zoom when only points are restyled
            uirevision=self.revision,
        )

        self.figure = fig
        self._style_points()

        logger.debug(
            "Chart drawn",
            extra={"n_points": len(self.records), "plot_mode": self.settings.plot_mode},
        )

    def update_points(self) -> None:
        if not self.records:
            return
        self._style_points()
        self.revision += 1

    # ------------------------------------------------------------------
    # Brush
    # ------------------------------------------------------------------
    def extent_from_selection(self, selected_data: Optional[Dict[str, Any]]) -> Optional[BrushExtent]:
        """
        Convert plotly box-select `selectedData` to a data-space extent.
        A cleared selection (None, or no box range) gives None.
        """
        if not selected_data:
            return None
        box = selected_data.get("range")
        if not box or "x" not in box or "y" not in box:
            return None

        from_x = _AXES[self.mapping.x][3]
        from_y = _AXES[self.mapping.y][3]
        (x0, x1), (y0, y1) = box["x"], box["y"]
        return BrushExtent.from_corners(
            (from_x(float(x0)), from_y(float(y0))),
            (from_x(float(x1)), from_y(float(y1))),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _coordinates(self, records: Sequence[Record]) -> Tuple[np.ndarray, np.ndarray]:
        def axis(name: str) -> np.ndarray:
            _, attr, to_axis, _ = _AXES[name]
            values = np.fromiter((getattr(r, attr) for r in records), dtype=float, count=len(records))
            return to_axis(values)

        return axis(self.mapping.x), axis(self.mapping.y)

    def _style_points(self) -> None:
        s = self.settings
        significant = [s.cutoff(r) for r in self.records]
        ranks = [s.highlight(r) for r in self.records]

        colors = [
            (UP_COLOR if r.log2_fold_change > 0 else DOWN_COLOR) if sig else NOT_SIGNIFICANT_COLOR
            for r, sig in zip(self.records, significant)
        ]
        if s.plot_mode == "hex":
            opacity = [s.alpha if (sig or rank > -1) else 0.0 for sig, rank in zip(significant, ranks)]
        else:
            opacity = [s.alpha] * len(self.records)

        # lowest rank last so the first searched gene ends up on top
        highlighted = sorted((i for i, rank in enumerate(ranks) if rank > -1), key=lambda i: -ranks[i])
        x, y = self._coordinates([self.records[i] for i in highlighted])

        self.figure.update_traces(
            marker=dict(color=colors, opacity=opacity),
            selector=dict(name=POINTS_TRACE),
        )
        self.figure.update_traces(
            x=x,
            y=y,
            text=[self.records[i].symbol for i in highlighted],
            marker=dict(color=[HIGHLIGHT_COLORS[ranks[i] % len(HIGHLIGHT_COLORS)] for i in highlighted]),
            selector=dict(name=HIGHLIGHT_TRACE),
        )

    @staticmethod
    def empty_figure(message: str) -> go.Figure:
        """
        Standardised 'no data' figure.
        """
        fig = go.Figure()
        fig.update_layout(
            title=message,
            xaxis={"visible": False},
            yaxis={"visible": False},
        )
        return fig
