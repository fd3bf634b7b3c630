from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .chart import ChartRenderer, ChartSettings
from .columns import MEASURED_COLUMNS, ColumnDescriptor, column_descriptors
from .dataset import Dataset, DatasetResource
from .filter_engine import FilterEngine
from .filter_state import BASE_MEAN, LOG2_FOLD_CHANGE, FilterState, Range
from .gene_index import GeneIndex, GeneList
from .records import Record
from .scheduler import QUIET_INTERVAL, RenderScheduler, TimerQueue
from .selection import AxisMapping, BrushExtent, SelectionSync
from .thresholds import ThresholdSettings, make_cutoff, make_highlighter, up_down_counts

logger = logging.getLogger(__name__)


class ExplorerState:
    """
    Owns everything that changes while exploring one DE table: the loaded
    Dataset, its filter engine and gene index, the searched gene list, the
    threshold settings and the rows published to the grid.

    Collaborators read the public attributes; all mutations go through the
    methods below so a test can drive the whole pipeline without a UI.
    """

    def __init__(
        self,
        renderer: ChartRenderer,
        timers: Optional[TimerQueue] = None,
        thresholds: ThresholdSettings = ThresholdSettings(),
        mapping: AxisMapping = AxisMapping(),
        quiet_interval: float = QUIET_INTERVAL,
    ) -> None:
        self.renderer = renderer
        self.timers = timers if timers is not None else TimerQueue()
        self.thresholds = thresholds
        self.mapping = mapping

        self.dataset: Optional[Dataset] = None
        self.engine: Optional[FilterEngine] = None
        self.selection: Optional[SelectionSync] = None
        self.gene_index = GeneIndex({})
        self.gene_list = GeneList(self.gene_index)

        # what the chart draws (default-filtered at load) and what the grid shows
        self.plot_records: List[Record] = []
        self.rows: List[Record] = []
        self.columns: List[ColumnDescriptor] = list(MEASURED_COLUMNS)
        self.up_down: Tuple[int, int] = (0, 0)

        self.scheduler = RenderScheduler(
            self.timers,
            draw=self.renderer.draw,
            update=self.renderer.update_points,
            quiet_interval=quiet_interval,
        )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    @property
    def loaded(self) -> bool:
        return self.dataset is not None

    def load(self, resource: DatasetResource) -> Dataset:
        """
        Replace the current dataset wholesale.

        Raises:
            NoFeaturesFound: nothing survived normalization; the previous
            dataset, filters and gene index stay as they were
        """
        dataset = Dataset.from_resource(resource)
        engine = FilterEngine(dataset)
        gene_index = GeneIndex.build(dataset)

        self.dataset = dataset
        self.engine = engine
        self.gene_index = gene_index
        self.selection = SelectionSync(engine, self.mapping, on_rows=self._publish_rows)

        self.plot_records = engine.visible_records(order_by=BASE_MEAN)
        self.rows = list(self.plot_records)
        self.columns = column_descriptors(dataset.extra_fields)

        self.gene_list.reset(gene_index)
        self.gene_list.add_symbols(resource.default_symbols)

        logger.info(
            "Dataset loaded",
            extra={
                "dataset": dataset.name,
                "n_records": len(dataset),
                "n_plotted": len(self.plot_records),
                "n_symbols": len(gene_index),
            },
        )
        self.draw()
        return dataset

    # ------------------------------------------------------------------
    # Chart scheduling
    # ------------------------------------------------------------------
    @property
    def dirty(self) -> bool:
        return self.scheduler.dirty

    def chart_settings(self) -> ChartSettings:
        return ChartSettings(
            plot_mode=self.thresholds.plot_mode,
            alpha=self.thresholds.alpha,
            cutoff=make_cutoff(self.thresholds),
            highlight=make_highlighter(self.gene_list.symbols()),
        )

    def _setup(self) -> None:
        settings = self.chart_settings()
        self.up_down = up_down_counts(self.plot_records, settings.cutoff)
        self.renderer.configure(settings)

    def draw(self) -> None:
        self._setup()
        self.scheduler.request_redraw(self.plot_records)

    def update(self) -> None:
        self._setup()
        self.scheduler.request_update()

    # ------------------------------------------------------------------
    # Reactive inputs
    # ------------------------------------------------------------------
    def set_thresholds(
        self,
        log_p_cut: Optional[float] = None,
        fold_change_cut: Optional[float] = None,
        alpha: Optional[float] = None,
    ) -> None:
        self.thresholds = self.thresholds.updated(
            log_p_cut=log_p_cut,
            fold_change_cut=fold_change_cut,
            alpha=alpha,
        )
        self.update()

    def set_plot_mode(self, plot_mode: str) -> None:
        if plot_mode == self.thresholds.plot_mode:
            return
        self.thresholds = self.thresholds.updated(plot_mode=plot_mode)
        self.draw()

    def add_symbols(self, text: str) -> None:
        self.gene_list.add_symbols(text)

    def paste_symbols(self, text: str) -> None:
        """Add symbols picked from the grid and restyle the points."""
        self.add_symbols(text)
        self.update()

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------
    def on_brush_end(self, extent: Optional[BrushExtent]) -> List[Record]:
        if self.selection is None:
            return []
        return self.selection.sync(extent)

    def set_range(self, name: str, range_: Range) -> List[Record]:
        if self.engine is None:
            return []
        self.engine.set_range(name, range_)
        self._publish_rows(self.engine.visible_records(order_by=LOG2_FOLD_CHANGE))
        return self.rows

    def filter_state(self) -> FilterState:
        if self.engine is None:
            return FilterState()
        return self.engine.filter_state()

    def visible_records(self, limit: Optional[float] = None, order_by: str = LOG2_FOLD_CHANGE) -> List[Record]:
        if self.engine is None:
            return []
        return self.engine.visible_records(limit=limit, order_by=order_by)

    def _publish_rows(self, rows: List[Record]) -> None:
        self.rows = rows
