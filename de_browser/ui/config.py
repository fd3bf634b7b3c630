from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from de_browser.config.model import GlobalConfig
from de_browser.core.state import ExplorerState
from de_browser.services.dataset_service import DatasetManager
from de_browser.views.scatter_chart import ScatterChartRenderer


@dataclass
class AppConfig:
    """
    Shared objects for the Dash app, passed into layout + callback
    registration instead of module-level globals.
    """
    config_root: Path
    global_config: GlobalConfig
    datasets: DatasetManager
    state: ExplorerState
    renderer: ScatterChartRenderer
    default_dataset: Optional[str] = None

    def validate(self) -> None:
        if self.state.renderer is not self.renderer:
            raise RuntimeError("AppConfig.state must drive AppConfig.renderer.")
