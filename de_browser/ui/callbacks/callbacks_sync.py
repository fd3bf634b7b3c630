from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

import dash
from dash import Input, Output

from de_browser.ui.helpers import table_columns, table_rows
from de_browser.ui.ids import IDs

if TYPE_CHECKING:
    from de_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def sync_from_selection(
    ctx: AppConfig,
    triggered_id: Optional[str],
    selected_data: Optional[Dict[str, Any]],
) -> None:
    """Box-select end (or clear) on the chart -> filter ranges."""
    if triggered_id != IDs.Control.MAIN_GRAPH:
        return
    extent = ctx.renderer.extent_from_selection(selected_data)
    ctx.state.on_brush_end(extent)


def register_sync_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    @app.callback(
        Output(IDs.Control.RESULTS_GRID, "data"),
        Output(IDs.Control.RESULTS_GRID, "columns"),
        Output(IDs.Control.RESULTS_GRID, "hidden_columns"),
        Input(IDs.Control.MAIN_GRAPH, "selectedData"),
        Input(IDs.Store.DATASET_VERSION, "data"),
    )
    def update_grid(selected_data, _version):
        sync_from_selection(ctx, dash.ctx.triggered_id, selected_data)
        columns, hidden = table_columns(ctx.state.columns)
        return table_rows(ctx.state.rows), columns, hidden
