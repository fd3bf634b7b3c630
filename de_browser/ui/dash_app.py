from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import dash_bootstrap_components as dbc
from dash import Dash

from de_browser.config.loader import load_dataset_registry
from de_browser.config.model import GlobalConfig
from de_browser.core.scheduler import TimerQueue
from de_browser.core.state import ExplorerState
from de_browser.services.dataset_service import DatasetManager
from de_browser.ui.callbacks.callbacks_controls import register_controls_callbacks
from de_browser.ui.callbacks.callbacks_load import register_load_callbacks
from de_browser.ui.callbacks.callbacks_render import register_render_callbacks
from de_browser.ui.callbacks.callbacks_sync import register_sync_callbacks
from de_browser.ui.config import AppConfig
from de_browser.ui.layout.build_layout import build_layout
from de_browser.views.scatter_chart import ScatterChartRenderer

logger = logging.getLogger(__name__)


def _choose_default_dataset(global_config: GlobalConfig, datasets: DatasetManager) -> Optional[str]:
    names = sorted(datasets.keys())
    if not names:
        return None
    if global_config.default_dataset in datasets:
        return global_config.default_dataset
    return names[0]


def build_app_config(config_root: Path | str = Path("config")) -> AppConfig:
    config_root = Path(config_root)

    # 1) Load config
    global_config, cfg_by_name = load_dataset_registry(config_root)

    # 2) Services
    datasets = DatasetManager(cfg_by_name, data_root=global_config.data_root)

    # 3) Chart + state container
    renderer = ScatterChartRenderer(mapping=global_config.axis_mapping)
    state = ExplorerState(
        renderer,
        timers=TimerQueue(),
        thresholds=global_config.thresholds,
        mapping=global_config.axis_mapping,
        quiet_interval=global_config.quiet_interval,
    )

    ctx = AppConfig(
        config_root=config_root,
        global_config=global_config,
        datasets=datasets,
        state=state,
        renderer=renderer,
        default_dataset=_choose_default_dataset(global_config, datasets),
    )
    ctx.validate()
    return ctx


def create_dash_app(config_root: Path | str = Path("config")) -> Dash:
    ctx = build_app_config(config_root)

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        assets_folder=str(Path(__file__).parent / "assets"),
    )
    app.title = ctx.global_config.ui_title
    app.layout = build_layout(ctx)

    register_load_callbacks(app, ctx)
    register_controls_callbacks(app, ctx)
    register_sync_callbacks(app, ctx)
    register_render_callbacks(app, ctx)

    logger.info(
        "Dash app created",
        extra={"config_root": str(config_root), "n_datasets": len(ctx.datasets)},
    )
    return app
