from __future__ import annotations

from typing import List, Optional

import dash_bootstrap_components as dbc
from dash import dcc, html

from de_browser.config.model import GlobalConfig
from de_browser.ui.helpers import dataset_options
from de_browser.ui.ids import IDs


def build_navbar(
    dataset_names: List[str],
    global_config: GlobalConfig,
    default_name: Optional[str],
) -> dbc.Navbar:
    return dbc.Navbar(
        dbc.Container(
            fluid=True,
            children=[
                html.Div(
                    [
                        html.H2(global_config.ui_title, className="mb-0"),
                        html.Small(
                            "Differential expression explorer",
                            className="text-muted",
                        ),
                    ],
                    className="d-flex flex-column justify-content-center",
                ),
                html.Div(
                    [
                        html.Div("Active Dataset", className="navbar-dataset-title"),
                        dcc.Dropdown(
                            id=IDs.Control.DATASET_SELECT,
                            options=dataset_options(dataset_names),
                            value=default_name,
                            clearable=False,
                            style={"minWidth": "260px"},
                        ),
                    ],
                    className="ms-auto",
                ),
            ],
        ),
        className="mb-2",
    )
