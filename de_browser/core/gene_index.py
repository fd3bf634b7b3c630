from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from .records import Record

logger = logging.getLogger(__name__)

_TOKEN_SPLIT = re.compile(r"[\s;]+")


class GeneEntry:
    """
    A unique symbol and how many records carry it.

    Compared by identity: a GeneList holds the index's own entries.
    """

    __slots__ = ("symbol", "count")

    def __init__(self, symbol: str, count: int = 0) -> None:
        self.symbol = symbol
        self.count = count

    def __repr__(self) -> str:
        return f"GeneEntry({self.symbol!r}, count={self.count})"


class GeneIndex(Mapping[str, GeneEntry]):
    """
    Read-only symbol -> GeneEntry mapping for one Dataset, sorted by symbol.
    """

    def __init__(self, entries: Dict[str, GeneEntry]) -> None:
        self._entries = entries

    @classmethod
    def build(cls, records: Iterable[Record]) -> GeneIndex:
        counts: Dict[str, int] = {}
        for record in records:
            for symbol in dict.fromkeys(record.symbols):
                counts[symbol] = counts.get(symbol, 0) + 1

        entries = {s: GeneEntry(s, counts[s]) for s in sorted(counts)}
        logger.info("Built gene index", extra={"n_symbols": len(entries)})
        return cls(entries)

    def __getitem__(self, symbol: str) -> GeneEntry:
        return self._entries[symbol]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def resolve(self, text: str) -> List[GeneEntry]:
        """Entries for each known token in `text`, in token order; unknown tokens dropped."""
        return [self._entries[t] for t in split_tokens(text) if t in self._entries]


def split_tokens(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return [t for t in _TOKEN_SPLIT.split(text) if t]


class GeneList:
    """
    Ordered, duplicate-free list of searched GeneEntries.

    Grows only through add_symbols; emptied by reset() on a new load.
    """

    def __init__(self, index: Optional[GeneIndex] = None) -> None:
        self._index = index if index is not None else GeneIndex({})
        self._entries: List[GeneEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[GeneEntry]:
        return iter(self._entries)

    def __contains__(self, entry: object) -> bool:
        return any(e is entry for e in self._entries)

    def reset(self, index: GeneIndex) -> None:
        """Point at a new Dataset's index and drop all entries."""
        self._index = index
        self._entries = []

    def add_symbols(self, text: str) -> None:
        for entry in self._index.resolve(text):
            if entry not in self:
                self._entries.append(entry)

    def symbols(self) -> List[str]:
        return [e.symbol for e in self._entries]

    def as_text(self) -> str:
        """Space separated symbols, the clipboard payload."""
        return " ".join(self.symbols())
