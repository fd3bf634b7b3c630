from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from .records import Record
from .thresholds import CutoffPredicate, Highlighter


def _never(record: Record) -> bool:
    return False


def _no_highlight(record: Record) -> int:
    return -1


@dataclass(frozen=True)
class ChartSettings:
    """
    Everything the chart needs to style points, pushed before each draw
    or points update.

    - plot_mode: "hex" or "scatter"
    - alpha: point opacity
    - cutoff: significance predicate per record
    - highlight: highlight rank per record (-1 = not highlighted)
    """
    plot_mode: str = "hex"
    alpha: float = 0.8
    cutoff: CutoffPredicate = _never
    highlight: Highlighter = _no_highlight


class ChartRenderer(ABC):
    """
    Capability interface the core drives; the concrete chart lives in
    de_browser.views.

    Contract:
    - configure(settings) may be called any number of times and is cheap
    - draw(records) rebuilds the whole chart for the given records
    - update_points() restyles the already drawn points with the latest
      settings, without rebuilding axes or layout
    """

    @abstractmethod
    def configure(self, settings: ChartSettings) -> None:
        raise NotImplementedError()

    @abstractmethod
    def draw(self, records: Sequence[Record]) -> None:
        raise NotImplementedError()

    @abstractmethod
    def update_points(self) -> None:
        raise NotImplementedError()
