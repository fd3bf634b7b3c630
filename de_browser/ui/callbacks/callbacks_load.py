from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import dash
from dash import Input, Output, State

from de_browser.core.exceptions import DeBrowserError
from de_browser.services.dataset_service import resource_from_upload
from de_browser.ui.ids import IDs

if TYPE_CHECKING:
    from de_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadResult:
    loaded: bool
    message: str
    gene_text: Optional[str] = None


def load_from_inputs(
    ctx: AppConfig,
    triggered_id: Optional[str],
    dataset_name: Optional[str],
    upload_contents: Optional[str],
    upload_filename: Optional[str],
) -> LoadResult:
    """
    Load either the dropped file (when the upload fired) or the selected
    configured dataset into the explorer state. Failures leave the state
    untouched and come back as a status message.
    """
    try:
        if triggered_id == IDs.Control.UPLOAD and upload_contents:
            resource = resource_from_upload(upload_contents, upload_filename)
        elif dataset_name:
            resource = ctx.datasets[dataset_name]
        else:
            return LoadResult(False, "No dataset selected.")
        dataset = ctx.state.load(resource)
    except KeyError:
        logger.error("Unknown dataset selected", extra={"dataset": dataset_name})
        return LoadResult(False, f"Unknown dataset '{dataset_name}'.")
    except DeBrowserError as e:
        logger.error(
            "Dataset load failed",
            extra={"dataset": dataset_name, "upload": upload_filename, "error": str(e)},
        )
        return LoadResult(False, str(e))

    return LoadResult(
        True,
        f"{dataset.name}: {len(dataset)} features",
        resource.default_symbols,
    )


def register_load_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    @app.callback(
        Output(IDs.Store.DATASET_VERSION, "data"),
        Output(IDs.Control.STATUS_BAR, "children"),
        Output(IDs.Control.GENE_INPUT, "value"),
        Input(IDs.Control.DATASET_SELECT, "value"),
        Input(IDs.Control.UPLOAD, "contents"),
        State(IDs.Control.UPLOAD, "filename"),
        State(IDs.Store.DATASET_VERSION, "data"),
    )
    def load_dataset(dataset_name, upload_contents, upload_filename, version):
        result = load_from_inputs(
            ctx,
            dash.ctx.triggered_id,
            dataset_name,
            upload_contents,
            upload_filename,
        )
        if not result.loaded:
            return dash.no_update, result.message, dash.no_update
        return (version or 0) + 1, result.message, result.gene_text
