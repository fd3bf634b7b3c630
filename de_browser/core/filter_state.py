from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Tuple

BASE_MEAN = "baseMean"
LOG2_FOLD_CHANGE = "log2FoldChange"
DIMENSION_NAMES = (BASE_MEAN, LOG2_FOLD_CHANGE)

Range = Tuple[float, float]

DEFAULT_RANGES: Dict[str, Range] = {
    BASE_MEAN: (0.01, math.inf),
    LOG2_FOLD_CHANGE: (-math.inf, math.inf),
}


@dataclass(frozen=True)
class FilterState:
    """
    Snapshot of the active range on both filter dimensions.

    Fields:

    - base_mean: inclusive [lo, hi] on baseMean
    - log2_fold_change: inclusive [lo, hi] on log2FoldChange

    A record is visible when it lies inside both ranges.
    """
    base_mean: Range = DEFAULT_RANGES[BASE_MEAN]
    log2_fold_change: Range = DEFAULT_RANGES[LOG2_FOLD_CHANGE]

    def range_for(self, name: str) -> Range:
        if name == BASE_MEAN:
            return self.base_mean
        if name == LOG2_FOLD_CHANGE:
            return self.log2_fold_change
        raise KeyError(f"Unknown dimension '{name}'")

    @property
    def is_default(self) -> bool:
        return self == FilterState()

    def to_dict(self) -> Dict[str, Any]:
        # JSON has no infinity, None stands for an open bound
        def encode(r: Range) -> list:
            return [None if math.isinf(v) else v for v in r]

        return {
            BASE_MEAN: encode(self.base_mean),
            LOG2_FOLD_CHANGE: encode(self.log2_fold_change),
        }
