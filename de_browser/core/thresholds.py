"""
Significance / highlight predicates evaluated for every point on every
redraw. Everything here is pure; the closures capture their parameters
at creation time so later changes to the settings never leak into an
already configured chart.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, Sequence, Tuple

from .records import Record

PLOT_MODES = ("hex", "scatter")

CutoffPredicate = Callable[[Record], bool]
Highlighter = Callable[[Record], int]


@dataclass(frozen=True)
class ThresholdSettings:
    """
    Reactive inputs of the threshold sliders.

    - log_p_cut: FDR cutoff on a log10 scale (slider -5..0)
    - fold_change_cut: |log2FoldChange| must be strictly above this
    - alpha: point opacity
    - plot_mode: "hex" (density + significant points) or "scatter"
    """
    log_p_cut: float = -1.0
    fold_change_cut: float = 0.0
    alpha: float = 0.8
    plot_mode: str = "hex"

    @property
    def p_adj_cut(self) -> float:
        return p_adj_cut_from_log(self.log_p_cut)

    def updated(self, **changes) -> ThresholdSettings:
        changes = {k: v for k, v in changes.items() if v is not None}
        if "plot_mode" in changes and changes["plot_mode"] not in PLOT_MODES:
            raise ValueError(f"Unknown plot mode '{changes['plot_mode']}'")
        return replace(self, **changes)


def p_adj_cut_from_log(log_cut: float) -> float:
    return 10 ** float(log_cut)


def cutoff(record: Record, p_adj_cut: float, fold_change_cut: float) -> bool:
    """True when the record is significant and changed enough. NaN padj never passes."""
    return record.padj <= p_adj_cut and abs(record.log2_fold_change) > fold_change_cut


def highlight_rank(record: Record, searched_symbols: Sequence[str]) -> int:
    """
    Position in `searched_symbols` of the first of the record's symbols
    that was searched for, -1 when none were.
    """
    for symbol in record.symbols:
        try:
            return searched_symbols.index(symbol)
        except ValueError:
            continue
    return -1


def make_cutoff(settings: ThresholdSettings) -> CutoffPredicate:
    p_adj_cut = settings.p_adj_cut
    fold_change_cut = settings.fold_change_cut

    def check(record: Record) -> bool:
        return cutoff(record, p_adj_cut, fold_change_cut)

    return check


def make_highlighter(searched_symbols: Iterable[str]) -> Highlighter:
    symbols = list(searched_symbols)
    # first occurrence wins, matching list.index
    position: Dict[str, int] = {}
    for i, s in enumerate(symbols):
        position.setdefault(s, i)

    def rank(record: Record) -> int:
        for s in record.symbols:
            if s in position:
                return position[s]
        return -1

    return rank


def up_down_counts(records: Iterable[Record], predicate: CutoffPredicate) -> Tuple[int, int]:
    """(up, down) among records passing `predicate`; down is everything not up."""
    passing = [r for r in records if predicate(r)]
    up = sum(1 for r in passing if r.log2_fold_change > 0)
    return up, len(passing) - up
