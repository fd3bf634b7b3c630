from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Sequence, Tuple

import dash_bootstrap_components as dbc
from dash import html

from de_browser.core.columns import ColumnDescriptor
from de_browser.core.gene_index import GeneList
from de_browser.core.records import Record


def _json_safe(value: Any) -> Any:
    # DataTable cannot show NaN/inf; an empty cell reads better
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return None
    return value


def table_rows(records: Iterable[Record]) -> List[Dict[str, Any]]:
    return [{k: _json_safe(v) for k, v in r.to_row().items()} for r in records]


def table_columns(columns: Sequence[ColumnDescriptor]) -> Tuple[List[dict], List[str]]:
    """DataTable `columns` plus the ids that start hidden."""
    table_cols = [
        {
            "name": c.label,
            "id": c.name,
            "type": c.type,
            "hideable": True,
        }
        for c in columns
    ]
    hidden = [c.name for c in columns if not c.visible]
    return table_cols, hidden


def table_sort(columns: Sequence[ColumnDescriptor]) -> List[dict]:
    return [
        {"column_id": c.name, "direction": c.sort}
        for c in columns
        if c.sort is not None
    ]


def gene_list_children(gene_list: GeneList) -> List[Any]:
    if not len(gene_list):
        return [html.Small("No genes highlighted", className="text-muted")]
    return [
        dbc.Badge(
            f"{entry.symbol} ({entry.count})",
            color="secondary",
            className="me-1 mb-1",
        )
        for entry in gene_list
    ]


def up_down_text(counts: Tuple[int, int]) -> str:
    up, down = counts
    return f"{up} up · {down} down"


def dataset_options(names: Iterable[str]) -> List[dict]:
    return [{"label": n, "value": n} for n in sorted(names)]
