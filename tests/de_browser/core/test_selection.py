from __future__ import annotations

import pytest

from de_browser.core.dataset import Dataset, DatasetResource
from de_browser.core.filter_engine import FilterEngine
from de_browser.core.filter_state import BASE_MEAN, LOG2_FOLD_CHANGE, FilterState
from de_browser.core.selection import AxisMapping, BrushExtent, SelectionSync


def _make_engine() -> FilterEngine:
    rows = [
        {"feature": "in1", "baseMean": 5.0, "log2FoldChange": 1.0},
        {"feature": "in2", "baseMean": 10.0, "log2FoldChange": -2.0},
        {"feature": "hi_fc", "baseMean": 5.0, "log2FoldChange": 3.0},
        {"feature": "hi_bm", "baseMean": 20.0, "log2FoldChange": 0.0},
        {"feature": "low", "baseMean": 0.005, "log2FoldChange": 0.0},
    ]
    return FilterEngine(Dataset.from_resource(DatasetResource(name="sel", rows=rows)))


def test_brush_rectangle_sets_both_ranges():
    engine = _make_engine()
    sync = SelectionSync(engine)

    rows = sync.sync(BrushExtent.from_corners((0, -2), (10, 2)))

    assert engine.dimension(BASE_MEAN).range == (0.0, 10.0)
    assert engine.dimension(LOG2_FOLD_CHANGE).range == (-2.0, 2.0)
    assert {r.feature for r in rows} == {"in1", "in2", "low"}


def test_cleared_brush_resets_to_defaults_from_any_state():
    engine = _make_engine()
    sync = SelectionSync(engine)
    sync.sync(BrushExtent.from_corners((1, 1), (2, 2)))

    sync.sync(None)
    assert engine.filter_state() == FilterState()

    rows = sync.sync(None)
    assert engine.filter_state() == FilterState()
    assert {r.feature for r in rows} == {"in1", "in2", "hi_fc", "hi_bm"}


def test_sync_is_idempotent_and_publishes_rows():
    published = []
    engine = _make_engine()
    sync = SelectionSync(engine, on_rows=published.append)
    extent = BrushExtent.from_corners((0, -5), (10, 5))

    first = sync.sync(extent)
    state_after_first = engine.filter_state()
    second = sync.sync(extent)

    assert engine.filter_state() == state_after_first
    assert [r.feature for r in first] == [r.feature for r in second]
    assert len(published) == 2
    assert published[-1] == sync.rows
    # ordered by log2FoldChange, descending
    assert [r.feature for r in second] == ["hi_fc", "in1", "low", "in2"]


def test_swapped_axis_mapping():
    engine = _make_engine()
    sync = SelectionSync(engine, mapping=AxisMapping(x=LOG2_FOLD_CHANGE, y=BASE_MEAN))

    sync.sync(BrushExtent.from_corners((-2, 0), (2, 10)))

    assert engine.dimension(LOG2_FOLD_CHANGE).range == (-2.0, 2.0)
    assert engine.dimension(BASE_MEAN).range == (0.0, 10.0)


def test_brush_corners_are_normalised():
    extent = BrushExtent.from_corners((10, 2), (0, -2))
    assert (extent.x0, extent.y0, extent.x1, extent.y1) == (0, -2, 10, 2)


@pytest.mark.parametrize("x, y", [("pvalue", BASE_MEAN), (BASE_MEAN, BASE_MEAN)])
def test_invalid_axis_mapping(x, y):
    with pytest.raises(ValueError):
        AxisMapping(x=x, y=y)
