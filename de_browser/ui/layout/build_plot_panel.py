from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from de_browser.ui.ids import IDs

TICK_MS = 50


def build_plot_panel() -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader(
                html.Div(
                    [
                        html.Strong("Plot"),
                        html.Small(id=IDs.Control.STATUS_BAR, className="ms-3 text-muted"),
                    ],
                    className="d-flex align-items-center",
                ),
                className="p-2",
            ),
            dbc.CardBody(
                [
                    dcc.Graph(
                        id=IDs.Control.MAIN_GRAPH,
                        style={"height": "520px"},
                        config={"responsive": True, "displaylogo": False},
                    ),
                    # drives the render scheduler's timers
                    dcc.Interval(id=IDs.Control.RENDER_TICK, interval=TICK_MS),
                ],
                className="scb-main-body",
            ),
        ],
        id=IDs.Control.CHART_CARD,
        className="scb-maincard",
    )
