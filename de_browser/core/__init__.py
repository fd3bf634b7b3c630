"""
Core domain layer: record normalisation, filter engine, gene index,
threshold predicates, brush sync, render scheduling and the state
container tying them together.
"""

from .dataset import Dataset, DatasetResource
from .filter_engine import FilterEngine
from .filter_state import FilterState
from .gene_index import GeneEntry, GeneIndex, GeneList
from .scheduler import Debouncer, RenderScheduler, TimerQueue
from .selection import AxisMapping, BrushExtent, SelectionSync
from .state import ExplorerState

__all__ = [
    "Dataset",
    "DatasetResource",
    "FilterEngine",
    "FilterState",
    "GeneEntry",
    "GeneIndex",
    "GeneList",
    "Debouncer",
    "RenderScheduler",
    "TimerQueue",
    "AxisMapping",
    "BrushExtent",
    "SelectionSync",
    "ExplorerState",
]
