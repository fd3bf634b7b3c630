from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from de_browser.core.thresholds import ThresholdSettings
from de_browser.ui.ids import IDs


def build_controls_panel(defaults: ThresholdSettings) -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader("Thresholds", className="fw-semibold"),
            dbc.CardBody(
                [
                    dcc.Upload(
                        id=IDs.Control.UPLOAD,
                        children=html.Div(["Drop a results table here or ", html.A("select a file")]),
                        className="scb-upload mb-3",
                        style={
                            "borderWidth": "1px",
                            "borderStyle": "dashed",
                            "borderRadius": "5px",
                            "textAlign": "center",
                            "padding": "10px",
                        },
                    ),
                    html.Label("FDR cutoff", className="form-label"),
                    dcc.Slider(
                        id=IDs.Control.LOG_P_CUT,
                        min=-5,
                        max=0,
                        step=1,
                        value=defaults.log_p_cut,
                        marks={i: f"1e{i}" for i in range(-5, 1)},
                        className="mb-3",
                    ),
                    html.Label("|log2 fold change| above", className="form-label"),
                    dcc.Slider(
                        id=IDs.Control.FC_CUT,
                        min=0,
                        max=5,
                        step=1,
                        value=defaults.fold_change_cut,
                        className="mb-3",
                    ),
                    html.Label("Opacity", className="form-label"),
                    dcc.Slider(
                        id=IDs.Control.ALPHA,
                        min=0,
                        max=1,
                        step=0.01,
                        value=defaults.alpha,
                        marks=None,
                        tooltip={"placement": "bottom"},
                        className="mb-3",
                    ),
                    dbc.RadioItems(
                        id=IDs.Control.PLOT_MODE,
                        options=[
                            {"label": "Density", "value": "hex"},
                            {"label": "Scatter", "value": "scatter"},
                        ],
                        value=defaults.plot_mode,
                        inline=True,
                        className="mb-3",
                    ),
                    html.Div(id=IDs.Control.UP_DOWN, className="text-muted mb-3"),
                    html.Hr(),
                    html.Label("Highlight genes", className="form-label"),
                    dbc.InputGroup(
                        [
                            dbc.Input(
                                id=IDs.Control.GENE_INPUT,
                                placeholder="TP53; BRCA1 ...",
                                debounce=True,
                            ),
                            dbc.Button("Add", id=IDs.Control.GENE_ADD_BTN, color="primary"),
                        ],
                        className="mb-2",
                    ),
                    html.Div(
                        [
                            html.Div(id=IDs.Control.GENE_LIST, className="flex-grow-1"),
                            dcc.Clipboard(id=IDs.Control.GENE_COPY, title="Copy gene list"),
                        ],
                        className="d-flex align-items-start",
                    ),
                ]
            ),
        ],
        className="scb-sidebar",
    )
