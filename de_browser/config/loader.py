from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from de_browser.config.model import DatasetConfig, GlobalConfig
from de_browser.core.exceptions import ConfigError
from de_browser.core.selection import AxisMapping
from de_browser.core.thresholds import ThresholdSettings

logger = logging.getLogger(__name__)

GLOBAL_FILE = "global.json"
DATASETS_DIR = "datasets"


def _parse_thresholds(raw: Dict[str, Any]) -> ThresholdSettings:
    try:
        return ThresholdSettings().updated(
            log_p_cut=raw.get("log_p_cut"),
            fold_change_cut=raw.get("fold_change_cut"),
            alpha=raw.get("alpha"),
            plot_mode=raw.get("plot_mode"),
        )
    except ValueError as e:
        raise ConfigError(f"Invalid thresholds in {GLOBAL_FILE}: {e}") from e


def _parse_axis_mapping(raw: Dict[str, Any]) -> AxisMapping:
    try:
        return AxisMapping(**raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid axis_mapping in {GLOBAL_FILE}: {e}") from e


def _resolve_data_root(root: Path, value: Optional[str]) -> Optional[Path]:
    """Relative data_root values are taken relative to the config directory."""
    if value is None:
        return None
    data_root = Path(value)
    return data_root if data_root.is_absolute() else (root / data_root).resolve()


def _read_global(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        raise ConfigError(f"No {GLOBAL_FILE} at {path}")
    try:
        raw = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ConfigError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must hold a JSON object")
    return raw


def _read_dataset_configs(datasets_dir: Path) -> List[DatasetConfig]:
    """
    One DatasetConfig per datasets/*.json, in filename order. A file that
    cannot be parsed or names no table is logged and skipped; the rest of
    the registry still loads.
    """
    if not datasets_dir.is_dir():
        logger.warning("No datasets directory", extra={"datasets_dir": str(datasets_dir)})
        return []

    configs: List[DatasetConfig] = []
    for idx, cfg_path in enumerate(sorted(datasets_dir.glob("*.json"))):
        try:
            raw = json.loads(cfg_path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.error(
                "Skipping unreadable dataset config",
                extra={"config_file": cfg_path.name, "error": str(e)},
            )
            continue
        if not isinstance(raw, dict) or "file" not in raw:
            logger.error(
                "Skipping dataset config without a 'file' entry",
                extra={"config_file": cfg_path.name},
            )
            continue
        configs.append(DatasetConfig.from_raw(raw, source_path=cfg_path, index=idx))

    logger.debug(
        "Dataset configs read",
        extra={"datasets_dir": str(datasets_dir), "n_configs": len(configs)},
    )
    return configs


def load_global_config(root: Path) -> GlobalConfig:
    """
    Read a config directory laid out as

        root/global.json          UI title, defaults, thresholds, data_root
        root/datasets/*.json      one entry per DE results table

    Raises:
        ConfigError: global.json missing or malformed, or invalid settings in it
    """
    root = Path(root)
    logger.info("Loading config", extra={"config_root": str(root)})

    raw = _read_global(root / GLOBAL_FILE)

    return GlobalConfig(
        ui_title=raw.get("ui_title", "DE Browser"),
        default_dataset=raw.get("default_dataset"),
        quiet_interval_ms=int(raw.get("quiet_interval_ms", 100)),
        thresholds=_parse_thresholds(raw.get("thresholds", {})),
        axis_mapping=_parse_axis_mapping(raw.get("axis_mapping", {})),
        data_root=_resolve_data_root(root, raw.get("data_root")),
        datasets=_read_dataset_configs(root / DATASETS_DIR),
    )


def load_dataset_registry(path: Path) -> Tuple[GlobalConfig, Dict[str, DatasetConfig]]:
    """
    Global config plus dataset name -> DatasetConfig. No tables are read.

    Raises:
        ConfigError: two dataset configs share a name
    """
    global_config = load_global_config(path)

    cfg_by_name: Dict[str, DatasetConfig] = {}
    for ds_cfg in global_config.datasets:
        if ds_cfg.name in cfg_by_name:
            raise ConfigError(
                f"Dataset name '{ds_cfg.name}' used by both "
                f"{cfg_by_name[ds_cfg.name].source_path.name} and {ds_cfg.source_path.name}"
            )
        cfg_by_name[ds_cfg.name] = ds_cfg

    if not cfg_by_name:
        logger.warning("No datasets configured", extra={"config_root": str(path)})

    logger.info(
        "Dataset registry loaded",
        extra={"n_datasets": len(cfg_by_name), "dataset_names": sorted(cfg_by_name)},
    )
    return global_config, cfg_by_name
