from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import dash
from dash import Input, Output, State

from de_browser.core.state import ExplorerState
from de_browser.ui.helpers import gene_list_children, up_down_text
from de_browser.ui.ids import IDs

if TYPE_CHECKING:
    from de_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

_SLIDERS = (IDs.Control.LOG_P_CUT, IDs.Control.FC_CUT, IDs.Control.ALPHA)


def apply_threshold_inputs(
    state: ExplorerState,
    triggered_id: Optional[str],
    log_p_cut: Optional[float],
    fold_change_cut: Optional[float],
    alpha: Optional[float],
    plot_mode: Optional[str],
) -> None:
    if triggered_id == IDs.Control.PLOT_MODE and plot_mode:
        state.set_plot_mode(plot_mode)
    elif triggered_id in _SLIDERS:
        state.set_thresholds(
            log_p_cut=log_p_cut,
            fold_change_cut=fold_change_cut,
            alpha=alpha,
        )


def apply_gene_inputs(
    state: ExplorerState,
    triggered_id: Optional[str],
    gene_text: Optional[str],
    active_cell: Optional[Dict[str, Any]],
    viewport_rows: Optional[List[Dict[str, Any]]],
) -> None:
    """
    Add genes from the search box, or the symbol of a clicked grid cell.
    Both restyle the points.
    """
    if triggered_id in (IDs.Control.GENE_ADD_BTN, IDs.Control.GENE_INPUT):
        state.paste_symbols(gene_text or "")
    elif triggered_id == IDs.Control.RESULTS_GRID and active_cell:
        if active_cell.get("column_id") != "symbol" or not viewport_rows:
            return
        row_idx = active_cell.get("row")
        if row_idx is None or not 0 <= row_idx < len(viewport_rows):
            return
        symbol = viewport_rows[row_idx].get("symbol")
        if symbol:
            state.paste_symbols(str(symbol))


def register_controls_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Sliders / plot mode -> thresholds
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.UP_DOWN, "children"),
        Input(IDs.Control.LOG_P_CUT, "value"),
        Input(IDs.Control.FC_CUT, "value"),
        Input(IDs.Control.ALPHA, "value"),
        Input(IDs.Control.PLOT_MODE, "value"),
        Input(IDs.Store.DATASET_VERSION, "data"),
    )
    def update_thresholds(log_p_cut, fold_change_cut, alpha, plot_mode, _version):
        apply_threshold_inputs(
            ctx.state,
            dash.ctx.triggered_id,
            log_p_cut,
            fold_change_cut,
            alpha,
            plot_mode,
        )
        return up_down_text(ctx.state.up_down)

    # ---------------------------------------------------------
    # Gene search / grid symbol click -> gene list
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.GENE_LIST, "children"),
        Input(IDs.Control.GENE_ADD_BTN, "n_clicks"),
        Input(IDs.Control.GENE_INPUT, "n_submit"),
        Input(IDs.Control.RESULTS_GRID, "active_cell"),
        Input(IDs.Store.DATASET_VERSION, "data"),
        State(IDs.Control.GENE_INPUT, "value"),
        State(IDs.Control.RESULTS_GRID, "derived_viewport_data"),
    )
    def update_gene_list(_clicks, _submits, active_cell, _version, gene_text, viewport_rows):
        apply_gene_inputs(
            ctx.state,
            dash.ctx.triggered_id,
            gene_text,
            active_cell,
            viewport_rows,
        )
        return gene_list_children(ctx.state.gene_list)

    @app.callback(
        Output(IDs.Control.GENE_COPY, "content"),
        Input(IDs.Control.GENE_COPY, "n_clicks"),
        prevent_initial_call=True,
    )
    def copy_gene_list(_clicks):
        return ctx.state.gene_list.as_text()
