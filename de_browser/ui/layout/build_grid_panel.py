from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dash_table

from de_browser.core.columns import MEASURED_COLUMNS
from de_browser.ui.helpers import table_columns, table_sort
from de_browser.ui.ids import IDs


def build_grid_panel() -> dbc.Card:
    columns, hidden = table_columns(MEASURED_COLUMNS)
    return dbc.Card(
        [
            dbc.CardHeader("Selection", className="fw-semibold"),
            dbc.CardBody(
                dash_table.DataTable(
                    id=IDs.Control.RESULTS_GRID,
                    columns=columns,
                    hidden_columns=hidden,
                    data=[],
                    page_size=25,
                    sort_action="native",
                    sort_by=table_sort(MEASURED_COLUMNS),
                    filter_action="native",
                    export_format="csv",
                    style_table={"overflowX": "auto"},
                    style_cell={"fontSize": "0.85rem"},
                )
            ),
        ],
        className="mt-3",
    )
