from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Tuple

import dash
from dash import Input, Output, State

from de_browser.ui.ids import IDs

if TYPE_CHECKING:
    from de_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

CARD_CLASS = "scb-maincard"


def render_tick(ctx: AppConfig, last_revision: Optional[int]) -> Tuple[Any, str, Any]:
    """
    Run due scheduler timers; hand back the figure only if the renderer
    changed it since `last_revision`.
    """
    ctx.state.timers.run_due()

    card_class = f"{CARD_CLASS} dirty" if ctx.state.dirty else CARD_CLASS
    revision = ctx.renderer.revision
    if revision == last_revision:
        return dash.no_update, card_class, dash.no_update
    return ctx.renderer.figure, card_class, revision


def register_render_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    @app.callback(
        Output(IDs.Control.MAIN_GRAPH, "figure"),
        Output(IDs.Control.CHART_CARD, "className"),
        Output(IDs.Store.CHART_REVISION, "data"),
        Input(IDs.Control.RENDER_TICK, "n_intervals"),
        State(IDs.Store.CHART_REVISION, "data"),
    )
    def tick(_n_intervals, last_revision):
        try:
            return render_tick(ctx, last_revision)
        except Exception:
            logger.exception("Error while rendering chart")
            return dash.no_update, CARD_CLASS, dash.no_update
