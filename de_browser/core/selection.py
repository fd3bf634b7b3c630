from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .filter_engine import FilterEngine
from .filter_state import BASE_MEAN, DIMENSION_NAMES, LOG2_FOLD_CHANGE, FilterState
from .records import Record

logger = logging.getLogger(__name__)

RowsListener = Callable[[List[Record]], None]


@dataclass(frozen=True)
class AxisMapping:
    """Which filter dimension each chart axis drives."""
    x: str = BASE_MEAN
    y: str = LOG2_FOLD_CHANGE

    def __post_init__(self) -> None:
        for axis, name in (("x", self.x), ("y", self.y)):
            if name not in DIMENSION_NAMES:
                raise ValueError(f"Axis '{axis}' mapped to unknown dimension '{name}'")
        if self.x == self.y:
            raise ValueError("x and y must map to different dimensions")


@dataclass(frozen=True)
class BrushExtent:
    """
    A non-empty brush rectangle in data coordinates, lo <= hi on both axes.
    A cleared brush is represented by None, not by an extent.
    """
    x0: float
    y0: float
    x1: float
    y1: float

    @classmethod
    def from_corners(cls, corner0: Sequence[float], corner1: Sequence[float]) -> BrushExtent:
        (ax, ay), (bx, by) = corner0, corner1
        return cls(
            x0=min(ax, bx),
            y0=min(ay, by),
            x1=max(ax, bx),
            y1=max(ay, by),
        )


class SelectionSync:
    """
    Keeps the chart brush and the FilterEngine ranges in step.

    Every sync republishes the full visible record set (ordered by
    log2FoldChange, descending) to `on_rows` and keeps it in `rows`.
    """

    def __init__(
        self,
        engine: FilterEngine,
        mapping: AxisMapping = AxisMapping(),
        on_rows: Optional[RowsListener] = None,
    ) -> None:
        self.engine = engine
        self.mapping = mapping
        self._on_rows = on_rows
        self.rows: List[Record] = []

    def sync(self, extent: Optional[BrushExtent]) -> List[Record]:
        if extent is None:
            self.engine.reset()
        else:
            self.engine.set_range(self.mapping.x, (extent.x0, extent.x1))
            self.engine.set_range(self.mapping.y, (extent.y0, extent.y1))

        self.rows = self.engine.visible_records(limit=None, order_by=LOG2_FOLD_CHANGE)
        logger.debug(
            "Brush synced",
            extra={
                "cleared": extent is None,
                "filter_state": self.engine.filter_state().to_dict(),
                "n_visible": len(self.rows),
            },
        )
        if self._on_rows is not None:
            self._on_rows(self.rows)
        return self.rows

    def filter_state(self) -> FilterState:
        return self.engine.filter_state()
