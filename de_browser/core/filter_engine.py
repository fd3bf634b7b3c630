from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional

import numpy as np

from .dataset import Dataset
from .filter_state import (
    BASE_MEAN,
    DEFAULT_RANGES,
    DIMENSION_NAMES,
    LOG2_FOLD_CHANGE,
    FilterState,
    Range,
)
from .records import Record

logger = logging.getLogger(__name__)


class Dimension:
    """
    A numeric projection of the Dataset plus its active inclusive range.

    The projection is sorted once at construction; a range query is two
    binary searches into that index, so O(log n + k) for k matches.
    """

    def __init__(self, name: str, values: np.ndarray, default_range: Range) -> None:
        self.name = name
        self._values = values
        self._order = np.argsort(values, kind="stable")
        self._sorted = values[self._order]
        self.default_range = default_range
        self._range = default_range

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def range(self) -> Range:
        return self._range

    def set_range(self, lo: float, hi: float) -> None:
        lo, hi = float(lo), float(hi)
        if math.isnan(lo) or math.isnan(hi):
            raise ValueError(f"Range bounds for '{self.name}' must not be NaN")
        if lo > hi:
            lo, hi = hi, lo
        self._range = (lo, hi)

    def reset(self) -> None:
        self._range = self.default_range

    def _bounds(self) -> tuple[int, int]:
        lo, hi = self._range
        start = int(np.searchsorted(self._sorted, lo, side="left"))
        stop = int(np.searchsorted(self._sorted, hi, side="right"))
        return start, stop

    def count(self) -> int:
        start, stop = self._bounds()
        return stop - start

    def matching_indices(self) -> np.ndarray:
        """Dataset positions inside the active range, in projection order."""
        start, stop = self._bounds()
        return self._order[start:stop]

    def contains(self, indices: np.ndarray) -> np.ndarray:
        lo, hi = self._range
        v = self._values[indices]
        return (v >= lo) & (v <= hi)


class FilterEngine:
    """
    Indexed range filters over baseMean and log2FoldChange.

    Built once per Dataset; a new load builds a new engine. The visible
    set is the AND of both dimensions' ranges.
    """

    def __init__(self, dataset: Dataset) -> None:
        self.dataset = dataset
        self._dimensions: Dict[str, Dimension] = {
            name: Dimension(name, dataset.column(name), DEFAULT_RANGES[name])
            for name in DIMENSION_NAMES
        }
        logger.debug(
            "Built filter engine",
            extra={"dataset": dataset.name, "n_records": len(dataset)},
        )

    def dimension(self, name: str) -> Dimension:
        try:
            return self._dimensions[name]
        except KeyError:
            raise KeyError(f"Unknown dimension '{name}'")

    def set_range(self, name: str, range_: Range) -> None:
        """Replace one dimension's range; the other keeps its own."""
        lo, hi = range_
        self.dimension(name).set_range(lo, hi)

    def reset(self) -> None:
        for dim in self._dimensions.values():
            dim.reset()

    def filter_state(self) -> FilterState:
        return FilterState(
            base_mean=self._dimensions[BASE_MEAN].range,
            log2_fold_change=self._dimensions[LOG2_FOLD_CHANGE].range,
        )

    def apply(self, state: FilterState) -> None:
        for name in DIMENSION_NAMES:
            self.set_range(name, state.range_for(name))

    def visible_indices(self) -> np.ndarray:
        """Dataset positions passing both ranges, ascending."""
        dims = sorted(self._dimensions.values(), key=lambda d: d.count())
        driver, others = dims[0], dims[1:]

        candidates = driver.matching_indices()
        for other in others:
            candidates = candidates[other.contains(candidates)]
        return np.sort(candidates)

    def visible_records(
        self,
        limit: Optional[float] = None,
        order_by: str = LOG2_FOLD_CHANGE,
    ) -> List[Record]:
        """
        Records inside both ranges, ordered by `order_by` descending (ties
        keep dataset order).

        :param limit: top-N cap; None or math.inf returns every match
        :param order_by: dimension name used for ordering
        """
        indices = self.visible_indices()
        values = self.dimension(order_by).values[indices]
        # lexsort: last key is primary
        indices = indices[np.lexsort((indices, -values))]

        if limit is not None and not math.isinf(limit):
            indices = indices[: max(int(limit), 0)]

        records = self.dataset.records
        return [records[i] for i in indices]

    def count(self) -> int:
        return int(self.visible_indices().size)
