from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc

from de_browser.ui.ids import IDs
from de_browser.ui.layout.build_controls_panel import build_controls_panel
from de_browser.ui.layout.build_grid_panel import build_grid_panel
from de_browser.ui.layout.build_navbar import build_navbar
from de_browser.ui.layout.build_plot_panel import build_plot_panel

if TYPE_CHECKING:
    from de_browser.ui.config import AppConfig


def build_layout(ctx: AppConfig) -> dbc.Container:
    navbar = build_navbar(list(ctx.datasets.keys()), ctx.global_config, ctx.default_dataset)

    return dbc.Container(
        fluid=True,
        className="scb-root",
        children=[
            navbar,
            dcc.Store(id=IDs.Store.DATASET_VERSION, data=0),
            dcc.Store(id=IDs.Store.CHART_REVISION, data=-1),
            dbc.Row(
                [
                    dbc.Col(
                        build_controls_panel(ctx.global_config.thresholds),
                        md=3,
                        className="mt-3",
                    ),
                    dbc.Col(
                        [build_plot_panel(), build_grid_panel()],
                        md=9,
                        className="mt-3",
                    ),
                ]
            ),
        ],
    )
