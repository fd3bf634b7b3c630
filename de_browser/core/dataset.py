from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, List, Mapping, Sequence, Tuple

import numpy as np

from .records import Record, extra_field_names, normalize_rows


@dataclass(frozen=True)
class DatasetResource:
    """
    What the loader hands to the core: a name, the raw rows (any superset
    of columns) and the default gene text to highlight once loaded.
    """
    name: str
    rows: Sequence[Mapping[str, Any]]
    default_symbols: str = ""


class Dataset:
    """
    Immutable, ordered collection of normalised Records for one load.

    A new Dataset is built for every load; nothing is appended in place.
    """

    def __init__(self, name: str, records: Sequence[Record]) -> None:
        self.name = name
        self._records: Tuple[Record, ...] = tuple(records)
        self._extra_fields: List[str] = extra_field_names(self._records)

    @classmethod
    def from_resource(cls, resource: DatasetResource) -> "Dataset":
        """
        Raises:
            NoFeaturesFound: if no row passes normalization
        """
        return cls(resource.name, normalize_rows(resource.rows, resource.name))

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __getitem__(self, index: int) -> Record:
        return self._records[index]

    @property
    def records(self) -> Tuple[Record, ...]:
        return self._records

    @property
    def extra_fields(self) -> List[str]:
        return list(self._extra_fields)

    def column(self, name: str) -> np.ndarray:
        """Numeric projection of one measured field as a float array."""
        attr = {
            "baseMean": "base_mean",
            "log2FoldChange": "log2_fold_change",
            "pvalue": "pvalue",
            "padj": "padj",
        }[name]
        return np.fromiter((getattr(r, attr) for r in self._records), dtype=float, count=len(self._records))
