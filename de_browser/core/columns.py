from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence


@dataclass(frozen=True)
class ColumnDescriptor:
    """One results-grid column. Extra source columns start hidden."""
    name: str
    display_name: Optional[str] = None
    type: str = "text"
    visible: bool = True
    sort: Optional[str] = None

    @property
    def label(self) -> str:
        return self.display_name or self.name


MEASURED_COLUMNS: List[ColumnDescriptor] = [
    ColumnDescriptor("feature"),
    ColumnDescriptor("symbol"),
    ColumnDescriptor("baseMean", "Base Mean", type="numeric"),
    ColumnDescriptor("log2FoldChange", "Log2 Fold Change", type="numeric"),
    ColumnDescriptor("pvalue", "P-Value", type="numeric"),
    ColumnDescriptor("padj", "FDR", type="numeric", sort="asc"),
]


def column_descriptors(extra_fields: Sequence[str]) -> List[ColumnDescriptor]:
    measured = {c.name for c in MEASURED_COLUMNS}
    extras = [ColumnDescriptor(name, visible=False) for name in extra_fields if name not in measured]
    return list(MEASURED_COLUMNS) + extras
