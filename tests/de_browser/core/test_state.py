from __future__ import annotations

import pytest

from de_browser.core.chart import ChartRenderer, ChartSettings
from de_browser.core.dataset import DatasetResource
from de_browser.core.exceptions import NoFeaturesFound
from de_browser.core.filter_state import BASE_MEAN, LOG2_FOLD_CHANGE, FilterState
from de_browser.core.scheduler import TimerQueue
from de_browser.core.selection import BrushExtent
from de_browser.core.state import ExplorerState


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingRenderer(ChartRenderer):
    def __init__(self) -> None:
        self.settings = ChartSettings()
        self.calls = []

    def configure(self, settings: ChartSettings) -> None:
        self.settings = settings

    def draw(self, records) -> None:
        self.calls.append(("draw", [r.feature for r in records]))

    def update_points(self) -> None:
        self.calls.append(("update",))


def _make_rows():
    return [
        {"feature": "f1", "symbol": "TP53", "baseMean": "5", "log2FoldChange": "2", "padj": "0.01", "lfcSE": 0.2},
        {"feature": "f2", "symbol": "TP53;MYC", "baseMean": 50, "log2FoldChange": -1.5, "padj": 0.001, "lfcSE": 0.1},
        {"feature": "f3", "symbol": "TP53", "baseMean": 0.005, "log2FoldChange": 0.1, "padj": 0.5, "lfcSE": 0.3},
        {"feature": "f4", "symbol": "EGFR", "baseMean": 8, "log2FoldChange": 0.2, "padj": 0.9, "lfcSE": 0.4},
        {"feature": "dropped", "symbol": "KRAS", "baseMean": 0, "log2FoldChange": 4, "padj": 0.01},
    ]


def _make_state():
    clock = FakeClock()
    renderer = RecordingRenderer()
    state = ExplorerState(renderer, timers=TimerQueue(clock=clock), quiet_interval=0.1)
    return clock, renderer, state


def _settle(clock: FakeClock, state: ExplorerState) -> None:
    clock.advance(0.2)
    state.timers.run_due()


def test_load_builds_dataset_index_and_schedules_one_draw():
    clock, renderer, state = _make_state()

    state.load(DatasetResource(name="ds", rows=_make_rows(), default_symbols="MYC BRCA1"))

    assert len(state.dataset) == 4
    assert all(r.base_mean > 0.001 for r in state.dataset)
    assert state.gene_index["TP53"].count == 3
    assert "KRAS" not in state.gene_index
    assert state.gene_list.symbols() == ["MYC"]
    assert state.filter_state() == FilterState()
    # default ranges hide f3 (baseMean below 0.01)
    assert {r.feature for r in state.rows} == {"f1", "f2", "f4"}
    assert [c.name for c in state.columns if not c.visible] == ["lfcSE"]
    assert state.up_down == (1, 1)

    assert state.dirty
    assert renderer.calls == []
    _settle(clock, state)
    assert renderer.calls == [("draw", ["f2", "f4", "f1"])]
    assert not state.dirty


def test_failed_load_keeps_previous_state():
    clock, renderer, state = _make_state()
    state.load(DatasetResource(name="good", rows=_make_rows(), default_symbols="TP53"))
    state.on_brush_end(BrushExtent.from_corners((0, -2), (10, 2)))
    before = (state.dataset, state.engine, state.gene_index, state.filter_state(), list(state.rows))

    with pytest.raises(NoFeaturesFound):
        state.load(DatasetResource(name="bad", rows=[{"feature": "x", "baseMean": 0}]))

    after = (state.dataset, state.engine, state.gene_index, state.filter_state(), list(state.rows))
    assert after == before
    assert state.gene_list.symbols() == ["TP53"]


def test_brush_scenario_filters_rows():
    clock, renderer, state = _make_state()
    state.load(DatasetResource(name="ds", rows=_make_rows()))

    rows = state.on_brush_end(BrushExtent.from_corners((0, -2), (10, 2)))

    assert state.filter_state() == FilterState(base_mean=(0.0, 10.0), log2_fold_change=(-2.0, 2.0))
    assert {r.feature for r in rows} == {"f1", "f3", "f4"}
    assert state.rows == rows

    state.on_brush_end(None)
    assert state.filter_state().is_default


def test_set_range_republishes_rows():
    clock, renderer, state = _make_state()
    state.load(DatasetResource(name="ds", rows=_make_rows()))

    rows = state.set_range(LOG2_FOLD_CHANGE, (0, 10))

    assert [r.feature for r in rows] == ["f1", "f4"]
    assert state.filter_state().range_for(BASE_MEAN) == (0.01, float("inf"))


def test_new_load_resets_filters_and_gene_list():
    clock, renderer, state = _make_state()
    state.load(DatasetResource(name="one", rows=_make_rows(), default_symbols="TP53"))
    state.on_brush_end(BrushExtent.from_corners((1, 1), (2, 2)))
    state.add_symbols("EGFR")

    state.load(DatasetResource(name="two", rows=_make_rows()))

    assert state.filter_state().is_default
    assert state.gene_list.symbols() == []
    assert state.dataset.name == "two"


def test_threshold_changes_schedule_points_update_only():
    clock, renderer, state = _make_state()
    state.load(DatasetResource(name="ds", rows=_make_rows()))
    _settle(clock, state)
    renderer.calls.clear()

    for fc in (0, 1, 2, 3):
        state.set_thresholds(fold_change_cut=fc)
    state.set_thresholds(alpha=0.3)

    _settle(clock, state)
    assert renderer.calls == [("update",)]
    assert renderer.settings.alpha == 0.3
    assert state.thresholds.fold_change_cut == 3
    assert state.up_down == (0, 0)


def test_plot_mode_change_schedules_redraw():
    clock, renderer, state = _make_state()
    state.load(DatasetResource(name="ds", rows=_make_rows()))
    _settle(clock, state)
    renderer.calls.clear()

    state.set_plot_mode("scatter")
    state.set_plot_mode("scatter")
    _settle(clock, state)

    assert [c[0] for c in renderer.calls] == ["draw"]
    assert renderer.settings.plot_mode == "scatter"


def test_paste_symbols_updates_highlighting():
    clock, renderer, state = _make_state()
    state.load(DatasetResource(name="ds", rows=_make_rows()))
    _settle(clock, state)
    renderer.calls.clear()

    state.paste_symbols("EGFR;TP53")
    _settle(clock, state)

    assert renderer.calls == [("update",)]
    record = next(r for r in state.dataset if r.feature == "f2")
    assert renderer.settings.highlight(record) == 1


def test_operations_before_load_are_no_ops():
    clock, renderer, state = _make_state()

    assert state.on_brush_end(None) == []
    assert state.set_range(BASE_MEAN, (0, 1)) == []
    assert state.visible_records() == []
    assert state.filter_state().is_default
