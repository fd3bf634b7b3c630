from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .exceptions import NoFeaturesFound

logger = logging.getLogger(__name__)

# Rows at or below this are "not expressed" and never enter a Dataset.
MIN_BASE_MEAN = 0.001

# Source column aliases, first hit wins (DESeq2 names first, then edgeR).
PVALUE_KEYS = ("pvalue", "PValue")
PADJ_KEYS = ("padj", "FDR")
BASE_MEAN_KEYS = ("baseMean", "logCPM")
LOG2FC_KEYS = ("log2FoldChange", "logFC")

MEASURED_FIELDS = ("feature", "symbol", "baseMean", "log2FoldChange", "pvalue", "padj")

_CONSUMED_KEYS = frozenset(
    MEASURED_FIELDS + ("symbols",) + PVALUE_KEYS + PADJ_KEYS + BASE_MEAN_KEYS + LOG2FC_KEYS
)


@dataclass(frozen=True)
class Record:
    """
    One normalised differential-expression row.

    Fields:

    - feature: source feature id (e.g. Ensembl id)
    - symbol: primary display symbol, falls back to feature
    - symbols: every symbol split out of the ';' delimited symbol field
    - base_mean: mean expression, always > MIN_BASE_MEAN
    - log2_fold_change: effect size, 0 when the source has none
    - pvalue / padj: NaN when the source has none
    - extra: any other source columns, untouched
    """
    feature: str
    symbol: str
    symbols: Tuple[str, ...]
    base_mean: float
    log2_fold_change: float
    pvalue: float = math.nan
    padj: float = math.nan
    extra: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def to_row(self) -> Dict[str, Any]:
        """Flat row in source naming, as shown by the results grid."""
        row: Dict[str, Any] = {
            "feature": self.feature,
            "symbol": self.symbol,
            "baseMean": self.base_mean,
            "log2FoldChange": self.log2_fold_change,
            "pvalue": self.pvalue,
            "padj": self.padj,
        }
        row.update(self.extra)
        return row


def _as_number(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def first_numeric(row: Mapping[str, Any], keys: Sequence[str], default: float = math.nan) -> float:
    """
    Return the first value under `keys` that parses as a non-NaN number,
    else `default`.
    """
    for key in keys:
        number = _as_number(row.get(key))
        if not math.isnan(number):
            return number
    return default


def split_symbols(text: str) -> Tuple[str, ...]:
    return tuple(s.strip() for s in text.split(";") if s.strip())


def normalize_row(row: Mapping[str, Any]) -> Record:
    feature = _as_text(row.get("feature"))
    symbol_field = _as_text(row.get("symbol"))
    symbol = symbol_field or feature

    return Record(
        feature=feature,
        symbol=symbol,
        symbols=split_symbols(symbol_field) if symbol_field else split_symbols(symbol),
        base_mean=first_numeric(row, BASE_MEAN_KEYS, MIN_BASE_MEAN),
        log2_fold_change=first_numeric(row, LOG2FC_KEYS, 0.0),
        pvalue=first_numeric(row, PVALUE_KEYS),
        padj=first_numeric(row, PADJ_KEYS),
        extra={k: v for k, v in row.items() if k not in _CONSUMED_KEYS},
    )


def normalize_rows(rows: Iterable[Mapping[str, Any]], name: str = "dataset") -> List[Record]:
    """
    Map heterogeneous DESeq2/edgeR-style rows onto Records and drop the
    ones at or below MIN_BASE_MEAN.

    Raises:
        NoFeaturesFound: if nothing survives; callers keep their old state.
    """
    records: List[Record] = []
    n_rows = 0
    for row in rows:
        n_rows += 1
        record = normalize_row(row)
        if record.base_mean > MIN_BASE_MEAN:
            records.append(record)

    if not records:
        logger.error(
            "No features survived normalization",
            extra={"dataset": name, "n_rows": n_rows},
        )
        raise NoFeaturesFound(name)

    logger.info(
        "Normalized dataset rows",
        extra={"dataset": name, "n_rows": n_rows, "n_kept": len(records)},
    )
    return records


def extra_field_names(records: Sequence[Record], sample: Optional[int] = 1) -> List[str]:
    """
    Names of pass-through columns, in source order.
    Only the first `sample` records are inspected (None = all).
    """
    names: Dict[str, None] = {}
    for record in records[:sample] if sample is not None else records:
        for key in record.extra:
            names.setdefault(key, None)
    return list(names)
