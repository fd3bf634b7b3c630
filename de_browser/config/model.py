from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from de_browser.core.selection import AxisMapping
from de_browser.core.thresholds import ThresholdSettings


@dataclass
class DatasetConfig:
    """
    Parsed config entry for a single DE results table.
    """
    raw: Dict[str, Any]
    source_path: Path
    index: int

    @property
    def name(self) -> str:
        return self.raw.get("name", f"Dataset {self.index}")

    @property
    def path(self) -> Path:
        return Path(self.raw["file"])

    @property
    def gene(self) -> str:
        """Symbols highlighted right after load (older configs call it 'symbols')."""
        return self.raw.get("gene") or self.raw.get("symbols") or ""

    @classmethod
    def from_raw(cls, raw: Dict[str, Any], source_path: Path, index: int) -> DatasetConfig:
        return cls(raw=raw, source_path=source_path, index=index)


@dataclass
class GlobalConfig:
    ui_title: str = "DE Browser"
    default_dataset: Optional[str] = None
    quiet_interval_ms: int = 100
    thresholds: ThresholdSettings = field(default_factory=ThresholdSettings)
    axis_mapping: AxisMapping = field(default_factory=AxisMapping)
    data_root: Optional[Path] = None
    datasets: List[DatasetConfig] = field(default_factory=list)

    @property
    def quiet_interval(self) -> float:
        return self.quiet_interval_ms / 1000.0
